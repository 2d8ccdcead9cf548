"""
Code question stub.

Submitted code is not executed; it is stored for manual review and scores
zero until a grader marks it.
"""

from __future__ import annotations

from typing import Any

from ..evaluator import AnswerEvaluator
from ..questions import CodeQuestion
from ..result import EvaluationResult
from ..types import QuestionType


class CodeEvaluator(AnswerEvaluator):
    """Placeholder evaluator: always incorrect, flagged for manual review."""

    question_type = QuestionType.CODE

    question: CodeQuestion

    def evaluate(self, student_answer: Any) -> EvaluationResult:
        record = self.base_record(student_answer, requires_manual_review=True)
        return self.all_or_nothing(False, record)
