"""Service layer"""

from .grading_service import GradingService, get_grading_service
from .marks import exam_total_marks, question_max_marks

__all__ = [
    "GradingService",
    "get_grading_service",
    "exam_total_marks",
    "question_max_marks",
]
