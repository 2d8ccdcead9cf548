"""
Short answer evaluator.

Handles free-text answers. Comparison is case-insensitive and ignores
surrounding whitespace; the match rule comes from ShortAnswerMatchPolicy.
"""

from __future__ import annotations

from typing import Any

from exam_grader.core.logging import get_context_logger

from ..answers import normalize_text
from ..evaluator import AnswerEvaluator
from ..policies import ShortAnswerMatchPolicy
from ..questions import ShortAnswerQuestion
from ..result import EvaluationResult
from ..types import QuestionType

logger = get_context_logger(__name__, component="evaluator")

# Keyword policy thresholds (fraction of keywords found)
FULL_CREDIT_RATIO = 0.8
HALF_CREDIT_RATIO = 0.5


class ShortAnswerEvaluator(AnswerEvaluator):
    """
    Evaluator for short text answers.

    Supports:
    - Exact matching against any acceptable answer (default)
    - Containment: the answer contains an acceptable answer
    - Keyword coverage with half credit, when the question lists keywords
    """

    question_type = QuestionType.SHORT_ANSWER

    question: ShortAnswerQuestion

    def evaluate(self, student_answer: Any) -> EvaluationResult:
        """Evaluate short answer."""
        text = normalize_text(student_answer)
        acceptable = [a.strip().lower() for a in self.question.acceptable_answers]

        if (
            self.policy.short_answer_match is ShortAnswerMatchPolicy.KEYWORDS
            and self.question.keywords
        ):
            return self._evaluate_keywords(student_answer, text)

        record = self.base_record(
            student_answer,
            correct_answers=list(self.question.acceptable_answers),
        )

        if not acceptable:
            logger.warning(
                "No acceptable answers found in question data",
                extra_data={"question_id": self.question.id},
            )
            return self.all_or_nothing(False, record)

        if not text:
            return self.all_or_nothing(False, record)

        if self.policy.short_answer_match is ShortAnswerMatchPolicy.CONTAINS:
            is_correct = any(expected in text for expected in acceptable)
        else:
            is_correct = text in acceptable

        return self.all_or_nothing(is_correct, record)

    def _evaluate_keywords(self, student_answer: Any, text: str) -> EvaluationResult:
        keywords = [k.strip().lower() for k in self.question.keywords if k.strip()]
        matched = sum(1 for keyword in keywords if keyword in text) if text else 0
        ratio = matched / len(keywords) if keywords else 0.0

        if ratio >= FULL_CREDIT_RATIO:
            is_correct, points = True, self.total_marks
        elif ratio >= HALF_CREDIT_RATIO:
            is_correct, points = False, round(self.total_marks * 0.5, 2)
        else:
            is_correct, points = False, 0.0

        record = self.base_record(
            student_answer,
            correct_answers=list(self.question.acceptable_answers),
            keywords_matched=matched,
            total_keywords=len(keywords),
        )
        return EvaluationResult.scored(is_correct, points, self.max_points, record)
