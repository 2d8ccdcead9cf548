"""
Application configuration.

Grading policies and logging options are read from the environment
(prefix ``EXAM_GRADER_``) or a local ``.env`` file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_prefix="EXAM_GRADER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Exam Grader"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or text
    LOG_FILE: Optional[str] = None

    # Grading policies
    CASE_STUDY_CREDIT_POLICY: str = "full"  # full or any
    SHORT_ANSWER_MATCH_POLICY: str = "exact"  # exact, contains or keywords

    # Submissions (percentage needed to pass)
    DEFAULT_PASSING_SCORE: float = Field(default=70.0, ge=0.0, le=100.0)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()
