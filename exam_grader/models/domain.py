"""
Domain models for exam grading.

Exams and questions as the submission workflow hands them over, and the
graded records it stores afterwards.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from ..core.config import get_settings


class ExamQuestion(BaseModel):
    """A question row as stored with an exam"""
    id: str = Field(..., description="Question identifier")
    question_type: str = Field(..., description="Type tag, e.g. 'single-choice'")
    marks: float = Field(0.0, ge=0.0, description="Marks allotted to the question")
    question_data: Union[Dict[str, Any], str] = Field(
        default_factory=dict,
        description="Question definition (object or stored JSON string)"
    )
    question_text: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        """Database ids are often integers"""
        return str(v) if v is not None else v


class Exam(BaseModel):
    """An exam and its questions"""
    id: str
    title: str = ""
    passing_score: float = Field(
        default_factory=lambda: get_settings().DEFAULT_PASSING_SCORE,
        ge=0.0,
        le=100.0,
        description="Percentage needed to pass"
    )
    questions: List[ExamQuestion] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if v is not None else v

    @field_validator("questions")
    @classmethod
    def unique_question_ids(cls, v: List[ExamQuestion]) -> List[ExamQuestion]:
        """Answers are keyed by question id, so ids must be unique"""
        seen = set()
        for question in v:
            if question.id in seen:
                raise ValueError(f"Duplicate question id '{question.id}'")
            seen.add(question.id)
        return v


class GradedAnswer(BaseModel):
    """Stored grading outcome for a single answer"""
    question_id: str
    question_type: str
    is_correct: bool
    points_earned: float = Field(..., ge=0.0)
    max_points: float = Field(..., ge=0.0)
    formatted_answer: Dict[str, Any]
    error: Optional[str] = None


class SubmissionResult(BaseModel):
    """Grading outcome for a whole submission"""
    exam_id: str
    total_questions: int
    answered: int
    unanswered: int
    correct_answers: int
    obtained_marks: float
    total_marks: float
    percentage: float
    passed: bool
    grade: str  # PASS or FAIL
    answers: List[GradedAnswer] = Field(default_factory=list)
