"""Domain models package"""

from .domain import (
    ExamQuestion,
    Exam,
    GradedAnswer,
    SubmissionResult,
)

__all__ = [
    "ExamQuestion",
    "Exam",
    "GradedAnswer",
    "SubmissionResult",
]
