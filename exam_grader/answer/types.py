"""
Question type tags.

The tag decides which evaluator handles an answer. Legacy spellings are
mapped onto one canonical member here so nothing downstream has to know
about them.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from exam_grader.core.errors import UnsupportedQuestionTypeError


class QuestionType(str, Enum):
    """Supported question types."""

    SINGLE_CHOICE = "single-choice"
    MULTIPLE_CHOICE = "multiple-choice"
    DRAG_DROP = "drag-drop"
    CASE_STUDY = "case-study"
    SHORT_ANSWER = "short-answer"
    CODE = "code"

    @classmethod
    def parse(cls, tag: Any) -> QuestionType:
        """
        Resolve a raw type tag to a QuestionType.

        Args:
            tag: Tag as stored with the question (e.g. "drag-and-drop")

        Returns:
            Canonical QuestionType

        Raises:
            UnsupportedQuestionTypeError: If the tag names no known type
        """
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, str):
            if tag in _ALIASES:
                return _ALIASES[tag]
            try:
                return cls(tag)
            except ValueError:
                pass
        raise UnsupportedQuestionTypeError(tag)


_ALIASES: dict[str, QuestionType] = {
    "drag-and-drop": QuestionType.DRAG_DROP,
}

# Types allowed inside a case study
SUB_QUESTION_TYPES = frozenset({
    QuestionType.SINGLE_CHOICE,
    QuestionType.MULTIPLE_CHOICE,
    QuestionType.SHORT_ANSWER,
})
