"""
exam_grader - Answer evaluation and submission grading for exams
"""

from .answer import AnswerDispatcher, EvaluationResult, QuestionType, evaluate, try_evaluate
from .services import GradingService, exam_total_marks

__version__ = "1.0.0"

__all__ = [
    "AnswerDispatcher",
    "EvaluationResult",
    "QuestionType",
    "evaluate",
    "try_evaluate",
    "GradingService",
    "exam_total_marks",
    "__version__",
]
