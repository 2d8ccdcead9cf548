"""
Evaluation result data structures.

Every evaluator returns an EvaluationResult, whatever the question type:
the correctness flag, the points earned and the formatted answer record
that the submission workflow stores as the graded answer.

A failed evaluation is still a well-formed EvaluationResult (zero points,
``evaluationMethod == "fallback"``) that additionally carries the typed
EvaluationFailure describing what went wrong.
"""

from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, model_validator
from pydantic.alias_generators import to_camel

# Tolerance for float sums compared against max points
_EPSILON = 1e-9


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PlacementResult(_CamelModel):
    """Outcome of one required drag-and-drop placement."""

    assigned_target: Optional[str] = None
    correct_target: str
    is_correct: bool


class SubQuestionResult(_CamelModel):
    """Outcome of one case-study sub-question."""

    question_index: int
    question_type: str
    question_text: Optional[str] = None
    student_answer: Any = None
    correct_answers: Any = None
    is_correct: bool
    points_earned: float
    max_points: float


class EvaluationMethod(str, Enum):
    STANDARDIZED = "standardized"
    FALLBACK = "fallback"


class FailureKind(str, Enum):
    UNSUPPORTED_TYPE = "unsupported_type"
    INVALID_DEFINITION = "invalid_definition"
    INTERNAL = "internal"


class EvaluationFailure(BaseModel):
    """
    Why an answer could not be evaluated.

    Attributes:
        kind: Failure category
        message: Human-readable error, stored as ``formattedAnswer.error``
        question_type: The raw type tag that was being evaluated
        timestamp: When the failure happened
    """

    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    message: str
    question_type: Any = None
    timestamp: datetime


class FormattedAnswer(_CamelModel):
    """
    The graded-answer record persisted for each answer.

    Common fields are always present; the type-specific ones stay ``None``
    when they do not apply.
    """

    question_id: Optional[str] = None
    question_type: str
    question_text: Optional[str] = None
    student_answer: Any = None
    correct_answers: Any = None
    is_correct: bool = False
    points_earned: float = 0.0
    total_points: float = 0.0
    evaluation_method: EvaluationMethod = EvaluationMethod.STANDARDIZED

    # Choice questions
    selected_options: Optional[list[Any]] = None

    # Drag and drop
    drag_drop_results: Optional[dict[str, PlacementResult]] = None

    # Case study
    case_study_context: Optional[str] = None
    sub_question_results: Optional[list[SubQuestionResult]] = None

    # Short answer (keyword policy)
    keywords_matched: Optional[int] = None
    total_keywords: Optional[int] = None

    # Code
    requires_manual_review: Optional[bool] = None

    # Fallback only
    error: Optional[str] = None
    timestamp: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys for storage."""
        return self.model_dump(mode="json", by_alias=True)


class EvaluationResult(BaseModel):
    """
    Result of evaluating one answer.

    Attributes:
        is_correct: Whether the answer counts as correct
        points_earned: Points awarded (0 <= points_earned <= max_points)
        max_points: Marks available for the question
        formatted_answer: Record stored as the graded answer
        failure: Set only when evaluation fell back to a zero score
    """

    model_config = ConfigDict(validate_assignment=True)

    is_correct: StrictBool = False
    points_earned: float = Field(default=0.0, ge=0.0)
    max_points: float = Field(default=0.0, ge=0.0)
    formatted_answer: FormattedAnswer
    failure: Optional[EvaluationFailure] = None

    @model_validator(mode="after")
    def check_points_within_max(self) -> EvaluationResult:
        """Points can never exceed the marks available."""
        if self.points_earned > self.max_points + _EPSILON:
            raise ValueError(
                f"points_earned ({self.points_earned}) exceeds max_points ({self.max_points})"
            )
        return self

    @property
    def ok(self) -> bool:
        """True unless this is a fallback result."""
        return self.failure is None

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to the answer-record contract used by the submission workflow.

        Returns:
            ``{"isCorrect", "pointsEarned", "formattedAnswer"}``
        """
        return {
            "isCorrect": self.is_correct,
            "pointsEarned": self.points_earned,
            "formattedAnswer": self.formatted_answer.to_dict(),
        }

    @classmethod
    def scored(
        cls,
        is_correct: bool,
        points_earned: float,
        max_points: float,
        formatted: FormattedAnswer,
    ) -> EvaluationResult:
        """
        Create a result and keep the formatted record in sync (convenience factory).

        Args:
            is_correct: Correctness flag
            points_earned: Points awarded
            max_points: Marks available
            formatted: Formatted answer with the type-specific fields filled in

        Returns:
            EvaluationResult whose formatted answer mirrors the score
        """
        formatted = formatted.model_copy(
            update={
                "is_correct": is_correct,
                "points_earned": points_earned,
                "total_points": max_points,
            }
        )
        return cls(
            is_correct=is_correct,
            points_earned=points_earned,
            max_points=max_points,
            formatted_answer=formatted,
        )

    @classmethod
    def fallback(
        cls,
        failure: EvaluationFailure,
        student_answer: Any,
        total_marks: Any,
        question_text: Optional[str] = None,
    ) -> EvaluationResult:
        """
        Create the zero-score result for a failed evaluation.

        Args:
            failure: What went wrong
            student_answer: Raw student answer (stored unchanged)
            total_marks: Marks the caller allotted to the question
            question_text: Optional question text for the record

        Returns:
            EvaluationResult with 0 points and the error embedded
        """
        tag = failure.question_type
        if isinstance(tag, Enum):
            tag = tag.value
        max_points = _safe_marks(total_marks)
        formatted = FormattedAnswer(
            question_type="unknown" if tag is None else str(tag),
            question_text=question_text,
            student_answer=student_answer,
            correct_answers=None,
            is_correct=False,
            points_earned=0.0,
            total_points=max_points,
            evaluation_method=EvaluationMethod.FALLBACK,
            error=failure.message,
            timestamp=failure.timestamp,
        )
        return cls(
            is_correct=False,
            points_earned=0.0,
            max_points=max_points,
            formatted_answer=formatted,
            failure=failure,
        )


def _safe_marks(value: Any) -> float:
    # Fallbacks are also built when total_marks itself was the problem
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)


# What try_evaluate() returns
EvaluationOutcome = Union[EvaluationResult, EvaluationFailure]
