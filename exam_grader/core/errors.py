"""
Application exceptions.

Engine errors (bad question data, unknown question types) are raised inside
the evaluators and converted into fallback results by the dispatcher.
Service errors propagate to the caller.
"""

from typing import Any, Dict, Optional


class ExamGraderError(Exception):
    """Base exception for grading errors"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class QuestionDefinitionError(ExamGraderError):
    """Raised when a question definition cannot be parsed or is missing required fields"""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=f"Invalid question definition: {message}",
            details=details
        )


class UnsupportedQuestionTypeError(ExamGraderError):
    """Raised when no evaluator exists for a question type tag"""

    def __init__(self, question_type: Any):
        super().__init__(
            message=f"Unsupported question type: {question_type}",
            details={"question_type": str(question_type)}
        )


class GradingError(ExamGraderError):
    """Raised when a submission cannot be graded"""

    def __init__(self, exam_id: str, error: str):
        super().__init__(
            message=f"Failed to grade submission for exam '{exam_id}': {error}",
            details={"exam_id": exam_id, "error": error}
        )
