"""
Canonical question definitions.

Stored question data comes in several historical shapes (``correctAnswer``
vs ``correctAnswers`` vs flags on the options, ``correctMappings`` vs
``dragDropTargets``, camelCase vs snake_case). parse_question_definition()
is the only place that knows about those shapes: it turns raw data into one
of the models below, and every evaluator works on these models only.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from exam_grader.core.errors import QuestionDefinitionError, UnsupportedQuestionTypeError

from .answers import normalize_option_id
from .types import SUB_QUESTION_TYPES, QuestionType


class ChoiceOption(BaseModel):
    """A labeled choice with a stable id."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str = ""
    is_correct: bool = False


class DragDropTarget(BaseModel):
    """A drop zone and the item that belongs in it."""

    model_config = ConfigDict(frozen=True)

    id: str
    correct_item_id: Optional[str] = None
    text: str = ""


class BaseQuestion(BaseModel):
    """Fields shared by every question definition."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    question_text: Optional[str] = None
    # Only used for case-study sub-questions
    marks: Optional[float] = Field(default=None, ge=0)


class SingleChoiceQuestion(BaseQuestion):
    question_type: Literal[QuestionType.SINGLE_CHOICE] = QuestionType.SINGLE_CHOICE
    options: list[ChoiceOption] = Field(default_factory=list)
    # None when the stored data names no correct option
    correct_answer: Optional[str] = None


class MultipleChoiceQuestion(BaseQuestion):
    question_type: Literal[QuestionType.MULTIPLE_CHOICE] = QuestionType.MULTIPLE_CHOICE
    options: list[ChoiceOption] = Field(default_factory=list)
    correct_answers: list[str] = Field(default_factory=list)


class DragDropQuestion(BaseQuestion):
    question_type: Literal[QuestionType.DRAG_DROP] = QuestionType.DRAG_DROP
    targets: list[DragDropTarget] = Field(default_factory=list)
    # item id -> target id
    mappings: dict[str, str] = Field(default_factory=dict)

    def target_ids(self) -> set[str]:
        """All target ids a student may drop onto."""
        return {t.id for t in self.targets} | set(self.mappings.values())


class ShortAnswerQuestion(BaseQuestion):
    question_type: Literal[QuestionType.SHORT_ANSWER] = QuestionType.SHORT_ANSWER
    acceptable_answers: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)


class CodeQuestion(BaseQuestion):
    question_type: Literal[QuestionType.CODE] = QuestionType.CODE


SubQuestion = Annotated[
    Union[SingleChoiceQuestion, MultipleChoiceQuestion, ShortAnswerQuestion],
    Field(discriminator="question_type"),
]


class CaseStudyQuestion(BaseQuestion):
    question_type: Literal[QuestionType.CASE_STUDY] = QuestionType.CASE_STUDY
    context: Optional[str] = None
    sub_questions: list[SubQuestion] = Field(default_factory=list)

    def sub_question_marks(self, total_marks: float) -> list[float]:
        """
        Max marks of each sub-question.

        Explicit per-sub-question marks win; otherwise the parent's marks are
        split equally.
        """
        if not self.sub_questions:
            return []
        share = total_marks / len(self.sub_questions)
        return [
            sub.marks if sub.marks is not None else share
            for sub in self.sub_questions
        ]

    def max_marks(self, total_marks: float) -> float:
        """Total marks of the case study: the sum of its sub-question marks."""
        return round(sum(self.sub_question_marks(total_marks)), 2)


QuestionDefinition = Annotated[
    Union[
        SingleChoiceQuestion,
        MultipleChoiceQuestion,
        DragDropQuestion,
        CaseStudyQuestion,
        ShortAnswerQuestion,
        CodeQuestion,
    ],
    Field(discriminator="question_type"),
]


# -- Normalization -----------------------------------------------------------


def load_question_data(raw: Any) -> dict[str, Any]:
    """
    Decode stored question data.

    Args:
        raw: Dict, or the JSON string stored in the questions table

    Returns:
        Question data as a dict

    Raises:
        QuestionDefinitionError: If the data is not valid JSON or not an object
    """
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise QuestionDefinitionError(f"question data is not valid JSON ({e.msg})")
    if raw is None:
        raise QuestionDefinitionError("question data is missing")
    if not isinstance(raw, Mapping):
        raise QuestionDefinitionError(
            f"question data must be an object, got {type(raw).__name__}"
        )
    return dict(raw)


def parse_question_definition(question_type: QuestionType, raw: Any) -> QuestionDefinition:
    """
    Build the canonical definition for a question.

    Args:
        question_type: Resolved question type
        raw: Stored question data (dict or JSON string)

    Returns:
        Canonical question model for the type

    Raises:
        QuestionDefinitionError: If required structure is missing or malformed
    """
    data = load_question_data(raw)
    common = _common_fields(data)

    if question_type is QuestionType.SINGLE_CHOICE:
        options = _parse_options(data)
        return SingleChoiceQuestion(
            **common,
            options=options,
            correct_answer=_resolve_single_correct(data, options),
        )

    if question_type is QuestionType.MULTIPLE_CHOICE:
        options = _parse_options(data)
        return MultipleChoiceQuestion(
            **common,
            options=options,
            correct_answers=_resolve_multiple_correct(data, options),
        )

    if question_type is QuestionType.DRAG_DROP:
        targets = _parse_targets(data.get("dragDropTargets"))
        return DragDropQuestion(
            **common,
            targets=targets,
            mappings=_resolve_mappings(data, targets),
        )

    if question_type is QuestionType.SHORT_ANSWER:
        return ShortAnswerQuestion(
            **common,
            acceptable_answers=_resolve_acceptable_answers(data),
            keywords=_string_list(data.get("keywords"), "keywords"),
        )

    if question_type is QuestionType.CASE_STUDY:
        return CaseStudyQuestion(
            **common,
            context=data.get("caseStudyContext") or data.get("questionText"),
            sub_questions=_parse_sub_questions(data.get("subQuestions")),
        )

    if question_type is QuestionType.CODE:
        return CodeQuestion(**common)

    raise QuestionDefinitionError(f"no definition model for '{question_type}'")


def _common_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    question_id = data.get("id", data.get("questionId"))
    text = data.get("questionText", data.get("question"))
    return {
        "id": str(question_id) if question_id is not None else None,
        "question_text": text if isinstance(text, str) else None,
        "marks": _parse_marks(data.get("marks")),
    }


def _parse_marks(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise QuestionDefinitionError(f"marks must be a number, got {value!r}", field="marks")
    try:
        marks = float(value)
    except (TypeError, ValueError):
        raise QuestionDefinitionError(f"marks must be a number, got {value!r}", field="marks")
    if not math.isfinite(marks) or marks < 0:
        raise QuestionDefinitionError("marks must be a non-negative number", field="marks")
    return marks


def _parse_options(data: Mapping[str, Any]) -> list[ChoiceOption]:
    raw_options = data.get("options")
    if raw_options is None:
        return []
    if not isinstance(raw_options, list):
        raise QuestionDefinitionError("options must be a list", field="options")

    options = []
    for index, raw in enumerate(raw_options):
        if isinstance(raw, str):
            options.append(ChoiceOption(id=f"opt{index + 1}", text=raw))
        elif isinstance(raw, Mapping):
            option_id = raw.get("id")
            options.append(
                ChoiceOption(
                    id=str(option_id) if option_id is not None else f"opt{index + 1}",
                    text=str(raw.get("text") or ""),
                    is_correct=bool(raw.get("isCorrect", raw.get("is_correct", False))),
                )
            )
        else:
            raise QuestionDefinitionError(
                f"option {index} must be an object or a string", field="options"
            )
    return options


def _as_option_id(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    value = normalize_option_id(value)
    if isinstance(value, bool):
        return None
    return str(value)


def _resolve_single_correct(
    data: Mapping[str, Any], options: list[ChoiceOption]
) -> Optional[str]:
    # Priority: correctAnswer, first of correctAnswers, option flagged correct
    explicit = _as_option_id(data.get("correctAnswer", data.get("correct_answer")))
    if explicit is not None:
        return explicit

    listed = data.get("correctAnswers", data.get("correct_answers"))
    if isinstance(listed, list) and listed:
        return _as_option_id(listed[0])
    if isinstance(listed, (str, int)) and not isinstance(listed, bool):
        return _as_option_id(listed)

    for option in options:
        if option.is_correct:
            return option.id
    return None


def _resolve_multiple_correct(
    data: Mapping[str, Any], options: list[ChoiceOption]
) -> list[str]:
    listed = data.get("correctAnswers", data.get("correct_answers"))
    if isinstance(listed, list):
        resolved = [_as_option_id(v) for v in listed]
        return [v for v in resolved if v is not None]
    return [option.id for option in options if option.is_correct]


def _parse_targets(raw_targets: Any) -> list[DragDropTarget]:
    if raw_targets is None:
        return []
    if not isinstance(raw_targets, list):
        raise QuestionDefinitionError("dragDropTargets must be a list", field="dragDropTargets")

    targets = []
    for index, raw in enumerate(raw_targets):
        if not isinstance(raw, Mapping) or raw.get("id") is None:
            raise QuestionDefinitionError(
                f"drag-and-drop target {index} must be an object with an id",
                field="dragDropTargets",
            )
        item_id = raw.get("correctItemId")
        targets.append(
            DragDropTarget(
                id=str(raw["id"]),
                correct_item_id=str(item_id) if item_id not in (None, "") else None,
                text=str(raw.get("text") or ""),
            )
        )
    return targets


def _resolve_mappings(
    data: Mapping[str, Any], targets: list[DragDropTarget]
) -> dict[str, str]:
    explicit = data.get("correctMappings")
    if isinstance(explicit, Mapping) and explicit:
        return {
            str(item): str(target)
            for item, target in explicit.items()
            if target is not None
        }
    if isinstance(explicit, list) and explicit:
        targets = _parse_targets(explicit)
    elif explicit not in (None, {}, []) and not isinstance(explicit, Mapping):
        raise QuestionDefinitionError(
            "correctMappings must be an object or a list", field="correctMappings"
        )

    return {
        target.correct_item_id: target.id
        for target in targets
        if target.correct_item_id is not None
    }


def _string_list(value: Any, field: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise QuestionDefinitionError(f"{field} must be a string or a list", field=field)
    return [str(v) for v in value if v is not None]


def _resolve_acceptable_answers(data: Mapping[str, Any]) -> list[str]:
    candidates: list[str] = []
    for field in ("correctAnswers", "acceptableAnswers", "expectedAnswer", "correctAnswer"):
        candidates.extend(_string_list(data.get(field), field))

    answers: list[str] = []
    for candidate in candidates:
        candidate = candidate.strip()
        if candidate and candidate not in answers:
            answers.append(candidate)
    return answers


def _parse_sub_questions(raw_subs: Any) -> list[Any]:
    if raw_subs is None:
        return []
    if not isinstance(raw_subs, list):
        raise QuestionDefinitionError("subQuestions must be a list", field="subQuestions")

    sub_questions = []
    for index, raw in enumerate(raw_subs):
        if not isinstance(raw, Mapping):
            raise QuestionDefinitionError(
                f"sub-question {index} must be an object", field="subQuestions"
            )
        tag = raw.get("questionType", raw.get("type", raw.get("question_type")))
        try:
            sub_type = QuestionType.parse(tag)
        except UnsupportedQuestionTypeError:
            sub_type = None
        if sub_type not in SUB_QUESTION_TYPES:
            raise QuestionDefinitionError(
                f"sub-question {index} has unsupported type '{tag}'", field="subQuestions"
            )
        sub_questions.append(parse_question_definition(sub_type, raw))
    return sub_questions
