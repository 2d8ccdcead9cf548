"""
Multiple-choice answer evaluator.

Exact set match between the selected and the correct options: every
correct option selected and nothing else. No partial credit.
"""

from __future__ import annotations

from typing import Any

from exam_grader.core.logging import get_context_logger

from ..answers import normalize_selection
from ..evaluator import AnswerEvaluator
from ..questions import MultipleChoiceQuestion
from ..result import EvaluationResult
from ..types import QuestionType

logger = get_context_logger(__name__, component="evaluator")


class MultipleChoiceEvaluator(AnswerEvaluator):
    """Evaluator for multiple-choice questions."""

    question_type = QuestionType.MULTIPLE_CHOICE

    question: MultipleChoiceQuestion

    def evaluate(self, student_answer: Any) -> EvaluationResult:
        """Evaluate multiple-choice answer."""
        correct = list(self.question.correct_answers)
        selected = normalize_selection(student_answer)

        record = self.base_record(
            student_answer,
            selected_options=selected,
            correct_answers=correct,
        )

        if not correct:
            logger.warning(
                "No correct options found in question data",
                extra_data={"question_id": self.question.id},
            )
            return self.all_or_nothing(False, record)

        try:
            is_correct = set(selected) == set(correct)
        except TypeError:
            # Unhashable entries (nested lists, dicts) can never be option ids
            is_correct = False

        return self.all_or_nothing(is_correct, record)
