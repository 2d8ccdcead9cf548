"""
Drag-and-drop answer evaluator.

Every required item must sit on its target. Per-item results are kept in
the record for display, but scoring is all-or-nothing.
"""

from __future__ import annotations

from typing import Any

from exam_grader.core.logging import get_context_logger

from ..answers import normalize_placements
from ..evaluator import AnswerEvaluator
from ..questions import DragDropQuestion
from ..result import EvaluationResult, PlacementResult
from ..types import QuestionType

logger = get_context_logger(__name__, component="evaluator")


class DragDropEvaluator(AnswerEvaluator):
    """Evaluator for drag-and-drop placement questions."""

    question_type = QuestionType.DRAG_DROP

    question: DragDropQuestion

    def evaluate(self, student_answer: Any) -> EvaluationResult:
        """Evaluate drag-and-drop answer."""
        required = self.question.mappings

        if not required:
            logger.warning(
                "No correct mappings found in question data",
                extra_data={"question_id": self.question.id},
            )
            record = self.base_record(
                student_answer,
                correct_answers={},
                drag_drop_results={},
            )
            return self.all_or_nothing(False, record)

        placements = normalize_placements(student_answer, self.question.target_ids())

        results = {}
        for item_id, target_id in required.items():
            assigned = placements.get(item_id)
            results[item_id] = PlacementResult(
                assigned_target=assigned,
                correct_target=target_id,
                is_correct=assigned == target_id,
            )

        is_correct = all(result.is_correct for result in results.values())

        logger.debug(
            "Drag-and-drop placements checked",
            extra_data={
                "question_id": self.question.id,
                "correct_placements": sum(r.is_correct for r in results.values()),
                "required_placements": len(results),
            },
        )

        record = self.base_record(
            student_answer,
            correct_answers=dict(required),
            drag_drop_results=results,
        )
        return self.all_or_nothing(is_correct, record)
