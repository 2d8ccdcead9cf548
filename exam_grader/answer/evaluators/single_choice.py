"""
Single-choice answer evaluator.

The student picks exactly one option; the answer is correct when its id
matches the resolved correct option.
"""

from __future__ import annotations

from typing import Any

from exam_grader.core.logging import get_context_logger

from ..answers import normalize_option_id
from ..evaluator import AnswerEvaluator
from ..questions import SingleChoiceQuestion
from ..result import EvaluationResult
from ..types import QuestionType

logger = get_context_logger(__name__, component="evaluator")


class SingleChoiceEvaluator(AnswerEvaluator):
    """
    Evaluator for single-choice questions.

    Supports:
    - Option ids (``"opt2"``)
    - Legacy zero-based indices (``1`` is read as ``"opt2"``)
    """

    question_type = QuestionType.SINGLE_CHOICE

    question: SingleChoiceQuestion

    def evaluate(self, student_answer: Any) -> EvaluationResult:
        """Evaluate single-choice answer."""
        correct = self.question.correct_answer
        selected = normalize_option_id(student_answer)

        if correct is None:
            logger.warning(
                "No correct option found in question data",
                extra_data={"question_id": self.question.id},
            )
            record = self.base_record(
                student_answer,
                selected_options=[selected] if selected is not None else [],
                correct_answers=[],
            )
            return self.all_or_nothing(False, record)

        record = self.base_record(
            student_answer,
            selected_options=[selected] if selected is not None else [],
            correct_answers=[correct],
        )
        return self.all_or_nothing(selected == correct, record)
