"""
Base answer evaluator framework.

Provides the abstract base class for per-type evaluators and a registry
for type-based dispatch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from exam_grader.core.errors import UnsupportedQuestionTypeError
from exam_grader.core.logging import get_context_logger

from .policies import EvaluationPolicy
from .result import EvaluationResult, FormattedAnswer
from .types import QuestionType

logger = get_context_logger(__name__, component="evaluator")


class AnswerEvaluator(BaseModel, ABC):
    """
    Abstract base class for answer evaluators.

    An evaluator is created for one question (canonical definition plus the
    marks allotted to it) and scores one student answer.

    Subclasses must implement:
    - evaluate(): Core scoring logic
    - question_type: Class variable for type identification
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    # Type identifier (must be set by subclasses)
    question_type: ClassVar[QuestionType]

    question: Any = Field(description="Canonical question definition")
    total_marks: float = Field(ge=0, description="Marks allotted to the question")
    policy: EvaluationPolicy = Field(default_factory=EvaluationPolicy)
    # Registry that created this evaluator, used for nested questions
    registry: Any = Field(default=None, exclude=True)

    @abstractmethod
    def evaluate(self, student_answer: Any) -> EvaluationResult:
        """
        Score a student's answer.

        Args:
            student_answer: Raw answer payload as submitted

        Returns:
            EvaluationResult with points and the formatted answer record

        A missing or malformed student answer is an incorrect answer, never
        an exception.
        """

    @property
    def max_points(self) -> float:
        """Marks available for this question."""
        return self.total_marks

    def base_record(self, student_answer: Any, **fields: Any) -> FormattedAnswer:
        """Formatted answer with the fields every question type shares."""
        return FormattedAnswer(
            question_id=self.question.id,
            question_type=self.question_type.value,
            question_text=self.question.question_text,
            student_answer=student_answer,
            **fields,
        )

    def all_or_nothing(
        self, is_correct: bool, record: FormattedAnswer
    ) -> EvaluationResult:
        """Full marks when correct, zero otherwise."""
        points = self.total_marks if is_correct else 0.0
        logger.debug(
            "Answer evaluated",
            extra_data={
                "question_type": self.question_type.value,
                "question_id": self.question.id,
                "is_correct": is_correct,
                "points_earned": points,
                "total_marks": self.total_marks,
            },
        )
        return EvaluationResult.scored(is_correct, points, self.max_points, record)


class EvaluatorRegistry(BaseModel):
    """
    Registry for answer evaluators.

    Provides type-based dispatch to the appropriate evaluator.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    _evaluators: dict[QuestionType, type[AnswerEvaluator]] = PrivateAttr(default_factory=dict)

    def register(
        self, question_type: QuestionType, evaluator_class: type[AnswerEvaluator]
    ) -> None:
        """
        Register an evaluator for a question type.

        Args:
            question_type: Type handled by the evaluator
            evaluator_class: Evaluator class to use for this type

        Raises:
            TypeError: If evaluator_class is not an AnswerEvaluator subclass
        """
        if not (isinstance(evaluator_class, type) and issubclass(evaluator_class, AnswerEvaluator)):
            raise TypeError(f"evaluator_class must be a subclass of AnswerEvaluator, got {evaluator_class}")
        self._evaluators[QuestionType.parse(question_type)] = evaluator_class

    def get_evaluator(self, question_type: QuestionType | str) -> type[AnswerEvaluator] | None:
        """
        Get evaluator class for a question type.

        Args:
            question_type: Type or raw tag (aliases accepted)

        Returns:
            Evaluator class, or None if not found
        """
        try:
            return self._evaluators.get(QuestionType.parse(question_type))
        except UnsupportedQuestionTypeError:
            return None

    def create_evaluator(
        self,
        question_type: QuestionType | str,
        question: Any,
        total_marks: float,
        policy: EvaluationPolicy | None = None,
    ) -> AnswerEvaluator:
        """
        Create evaluator instance for a question.

        Args:
            question_type: Type or raw tag
            question: Canonical question definition
            total_marks: Marks allotted to the question
            policy: Grading policy (defaults apply when omitted)

        Returns:
            Evaluator instance

        Raises:
            UnsupportedQuestionTypeError: If no evaluator is registered for the type
        """
        evaluator_class = self.get_evaluator(question_type)
        if evaluator_class is None:
            raise UnsupportedQuestionTypeError(question_type)

        return evaluator_class(
            question=question,
            total_marks=total_marks,
            policy=policy or EvaluationPolicy(),
            registry=self,
        )

    def get_registered_types(self) -> list[QuestionType]:
        """
        Get list of all registered question types.

        Returns:
            List of QuestionType members
        """
        return list(self._evaluators.keys())
