"""
Answer evaluation entry point.

The dispatcher resolves the question type, normalizes the stored question
data and hands the answer to the registered evaluator. It never raises:
unknown types, malformed question data and evaluator errors all turn into
a zero-score fallback result carrying an EvaluationFailure.

Example:
    >>> result = evaluate("single-choice", {"options": [...]}, "opt2", 5)
    >>> result.points_earned
    5.0
"""

from __future__ import annotations

import math
import traceback
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from pydantic import ValidationError

from exam_grader.core.config import get_settings
from exam_grader.core.errors import QuestionDefinitionError, UnsupportedQuestionTypeError
from exam_grader.core.logging import get_context_logger

from .evaluator import EvaluatorRegistry
from .evaluators import default_registry
from .policies import EvaluationPolicy
from .questions import parse_question_definition
from .result import EvaluationFailure, EvaluationOutcome, EvaluationResult, FailureKind
from .types import QuestionType

logger = get_context_logger(__name__, component="dispatcher")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnswerDispatcher:
    """
    Dispatches answers to the evaluator for their question type.

    Stateless apart from its configuration, so one instance can serve
    concurrent callers.
    """

    def __init__(
        self,
        policy: Optional[EvaluationPolicy] = None,
        registry: Optional[EvaluatorRegistry] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            policy: Grading policy (defaults: full credit, exact matching)
            registry: Evaluator registry (defaults to all built-in evaluators)
            clock: Source of fallback timestamps
        """
        self.policy = policy or EvaluationPolicy()
        self.registry = registry or default_registry()
        self.clock = clock or _utcnow

    def try_evaluate(
        self,
        question_type: Any,
        question_data: Any,
        student_answer: Any,
        total_marks: Any,
        question_text: Optional[str] = None,
    ) -> EvaluationOutcome:
        """
        Evaluate an answer, returning the failure instead of a fallback result.

        Args:
            question_type: Type tag stored with the question
            question_data: Question definition (dict or JSON string)
            student_answer: Raw answer payload
            total_marks: Marks allotted to the question
            question_text: Question text, used when the definition has none

        Returns:
            EvaluationResult on success, EvaluationFailure otherwise
        """
        try:
            resolved = QuestionType.parse(question_type)
            marks = _check_total_marks(total_marks)
            question = parse_question_definition(resolved, question_data)
            evaluator = self.registry.create_evaluator(
                resolved, question, marks, self.policy
            )
            result = evaluator.evaluate(student_answer)
        except UnsupportedQuestionTypeError as e:
            return self._failure(FailureKind.UNSUPPORTED_TYPE, e.message, question_type)
        except QuestionDefinitionError as e:
            return self._failure(FailureKind.INVALID_DEFINITION, e.message, question_type)
        except ValidationError as e:
            return self._failure(
                FailureKind.INVALID_DEFINITION,
                f"Invalid question definition: {e.error_count()} validation error(s)",
                question_type,
                details=e.errors(include_url=False),
            )
        except Exception as e:
            logger.error(
                "Evaluator raised an unexpected error",
                extra_data={
                    "question_type": _tag_name(question_type),
                    "error": str(e),
                    "traceback": traceback.format_exc(),
                },
            )
            return self._failure(FailureKind.INTERNAL, f"Evaluation error: {e}", question_type)

        if question_text and not result.formatted_answer.question_text:
            result = result.model_copy(
                update={
                    "formatted_answer": result.formatted_answer.model_copy(
                        update={"question_text": question_text}
                    )
                }
            )

        logger.debug(
            "Evaluation complete",
            extra_data={
                "question_type": resolved.value,
                "is_correct": result.is_correct,
                "points_earned": result.points_earned,
                "max_points": result.max_points,
            },
        )
        return result

    def evaluate(
        self,
        question_type: Any,
        question_data: Any,
        student_answer: Any,
        total_marks: Any,
        question_text: Optional[str] = None,
    ) -> EvaluationResult:
        """
        Evaluate an answer.

        Same arguments as try_evaluate(). A failure is converted into the
        fallback result: not correct, zero points, error and timestamp in
        the formatted answer.
        """
        outcome = self.try_evaluate(
            question_type, question_data, student_answer, total_marks, question_text
        )
        if isinstance(outcome, EvaluationFailure):
            return EvaluationResult.fallback(outcome, student_answer, total_marks, question_text)
        return outcome

    def _failure(
        self,
        kind: FailureKind,
        message: str,
        question_type: Any,
        details: Any = None,
    ) -> EvaluationFailure:
        logger.warning(
            "Falling back to zero score",
            extra_data={
                "question_type": _tag_name(question_type),
                "failure_kind": kind.value,
                "error": message,
                **({"details": details} if details else {}),
            },
        )
        return EvaluationFailure(
            kind=kind,
            message=message,
            question_type=question_type,
            timestamp=self.clock(),
        )


def _tag_name(question_type: Any) -> str:
    return question_type.value if isinstance(question_type, QuestionType) else str(question_type)


def _check_total_marks(total_marks: Any) -> float:
    if isinstance(total_marks, bool) or not isinstance(total_marks, (int, float)):
        raise QuestionDefinitionError(
            f"total marks must be a number, got {total_marks!r}", field="marks"
        )
    if not math.isfinite(total_marks) or total_marks < 0:
        raise QuestionDefinitionError(
            f"total marks must be a non-negative number, got {total_marks!r}", field="marks"
        )
    return float(total_marks)


_default_dispatcher: Optional[AnswerDispatcher] = None


def get_dispatcher() -> AnswerDispatcher:
    """Dispatcher configured from application settings."""
    global _default_dispatcher
    if _default_dispatcher is None:
        _default_dispatcher = AnswerDispatcher(
            policy=EvaluationPolicy.from_settings(get_settings())
        )
    return _default_dispatcher


def evaluate(
    question_type: Any,
    question_data: Any,
    student_answer: Any,
    total_marks: Any,
    question_text: Optional[str] = None,
) -> EvaluationResult:
    """
    Evaluate an answer with the default dispatcher.

    Args:
        question_type: Type tag stored with the question
        question_data: Question definition (dict or JSON string)
        student_answer: Raw answer payload
        total_marks: Marks allotted to the question
        question_text: Optional question text

    Returns:
        EvaluationResult (a fallback result on failure)
    """
    return get_dispatcher().evaluate(
        question_type, question_data, student_answer, total_marks, question_text
    )


def try_evaluate(
    question_type: Any,
    question_data: Any,
    student_answer: Any,
    total_marks: Any,
    question_text: Optional[str] = None,
) -> EvaluationOutcome:
    """Evaluate with the default dispatcher, returning failures as EvaluationFailure."""
    return get_dispatcher().try_evaluate(
        question_type, question_data, student_answer, total_marks, question_text
    )
