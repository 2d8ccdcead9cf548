"""
Type-specific answer evaluators.

Each module implements the evaluator for one question type.
"""

from functools import lru_cache

from ..evaluator import EvaluatorRegistry
from ..types import QuestionType
from .case_study import CaseStudyEvaluator
from .code import CodeEvaluator
from .drag_drop import DragDropEvaluator
from .multiple_choice import MultipleChoiceEvaluator
from .short_answer import ShortAnswerEvaluator
from .single_choice import SingleChoiceEvaluator

__all__ = [
    "SingleChoiceEvaluator",
    "MultipleChoiceEvaluator",
    "DragDropEvaluator",
    "CaseStudyEvaluator",
    "ShortAnswerEvaluator",
    "CodeEvaluator",
    "build_registry",
    "default_registry",
]


def build_registry() -> EvaluatorRegistry:
    """Registry with the evaluator for every supported question type."""
    registry = EvaluatorRegistry()
    registry.register(QuestionType.SINGLE_CHOICE, SingleChoiceEvaluator)
    registry.register(QuestionType.MULTIPLE_CHOICE, MultipleChoiceEvaluator)
    registry.register(QuestionType.DRAG_DROP, DragDropEvaluator)
    registry.register(QuestionType.CASE_STUDY, CaseStudyEvaluator)
    registry.register(QuestionType.SHORT_ANSWER, ShortAnswerEvaluator)
    registry.register(QuestionType.CODE, CodeEvaluator)
    return registry


@lru_cache()
def default_registry() -> EvaluatorRegistry:
    """Shared registry (read-only after construction)."""
    return build_registry()
