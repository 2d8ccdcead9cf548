"""
Structured logging for the grading engine.

Modules log through a context adapter, so every record carries the
component that wrote it plus per-call fields (question type, points, exam
id). Student answers end up in those fields, and some of them are long
(submitted code, essays), so values are shortened before they are written.
"""

import sys
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .config import Settings, get_settings

# Parent of every logger in the package
PACKAGE_LOGGER = "exam_grader"

# Longest string value written for a context field
MAX_VALUE_LENGTH = 300

# Context fields written in full
_UNSHORTENED = frozenset({"traceback"})


def shorten(value: Any, limit: int = MAX_VALUE_LENGTH) -> Any:
    """Cut long strings, recursing into lists and dicts."""
    if isinstance(value, str) and len(value) > limit:
        return f"{value[:limit]}... [{len(value)} chars]"
    if isinstance(value, dict):
        return {k: shorten(v, limit) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [shorten(v, limit) for v in value]
    return value


def _context_of(record: logging.LogRecord) -> Dict[str, Any]:
    context = getattr(record, "extra_data", None) or {}
    return {
        key: value if key in _UNSHORTENED else shorten(value)
        for key, value in context.items()
    }


class StructuredFormatter(logging.Formatter):
    """JSON formatter: one object per record, context under ``context``"""

    def __init__(self, environment: Optional[str] = None):
        super().__init__()
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        if self.environment:
            log_data["environment"] = self.environment

        context = _context_of(record)
        if context:
            log_data["context"] = context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Answers are arbitrary JSON; anything else is written with str()
        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter, context appended as key=value pairs"""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context_of(record)
        context.pop("traceback", None)
        if context:
            line += " | " + " ".join(f"{key}={value}" for key, value in context.items())
        return line


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Configure the package logger from settings.

    Handlers are attached to the ``exam_grader`` logger only, so an
    application embedding the engine keeps control of the root logger.

    Returns:
        The configured package logger
    """
    settings = settings or get_settings()
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    if settings.LOG_FORMAT == "json":
        formatter: logging.Formatter = StructuredFormatter(settings.ENVIRONMENT)
    else:
        formatter = TextFormatter()

    handlers: list = [logging.StreamHandler(sys.stderr)]
    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        package_logger.addHandler(handler)

    package_logger.setLevel(log_level)
    package_logger.propagate = False
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """Logger with permanent context, accepting ``extra_data=`` per call"""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra_data = kwargs.pop("extra_data", {})
        kwargs.setdefault("extra", {})["extra_data"] = {**self.extra, **extra_data}
        return msg, kwargs


def get_context_logger(name: str, **context) -> LoggerAdapter:
    """
    Get a logger that stamps ``context`` on every record.

    Example:
        >>> logger = get_context_logger(__name__, component="dispatcher")
        >>> logger.info("Answer evaluated", extra_data={"question_type": "code"})
    """
    return LoggerAdapter(get_logger(name), context)
