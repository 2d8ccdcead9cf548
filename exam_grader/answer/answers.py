"""
Student answer normalization.

Raw answers arrive in whatever shape the exam UI produced. These helpers
turn them into the forms the evaluators compare against.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

TARGET_PREFIX = "target-"


def normalize_option_id(value: Any) -> Any:
    """
    Map a legacy zero-based option index to the ``optN`` id scheme.

    ``0 -> "opt1"``, ``1 -> "opt2"``, ... Strings and other values are
    returned unchanged.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return f"opt{value + 1}"
    if isinstance(value, float) and value.is_integer():
        return f"opt{int(value) + 1}"
    return value


def normalize_selection(answer: Any) -> list[Any]:
    """
    Normalize a multiple-choice answer to a list of option ids.

    A scalar is wrapped in a list, ``None`` entries are dropped and
    numeric entries are converted with normalize_option_id().
    """
    if answer is None:
        return []
    if isinstance(answer, (list, tuple, set, frozenset)):
        items = list(answer)
    else:
        items = [answer]
    return [normalize_option_id(item) for item in items if item is not None]


def normalize_placements(answer: Any, target_ids: Iterable[str]) -> dict[str, str]:
    """
    Normalize a drag-and-drop answer to ``{item_id: target_id}``.

    Anything that is not a mapping counts as no placements. A value written
    as ``target-<id>`` is read as ``<id>`` when ``<id>`` is a known target
    and the prefixed form is not itself a target id.
    """
    if not isinstance(answer, Mapping):
        return {}

    known = set(target_ids)
    placements: dict[str, str] = {}
    for item_id, target in answer.items():
        if target is None:
            continue
        target = str(target)
        if target not in known and target.startswith(TARGET_PREFIX):
            bare = target[len(TARGET_PREFIX):]
            if bare in known:
                target = bare
        placements[str(item_id)] = target
    return placements


def normalize_text(answer: Any) -> str:
    """Lower-case and trim a free-text answer. Non-text answers become ''."""
    if isinstance(answer, bool) or answer is None:
        return ""
    if isinstance(answer, (int, float)):
        answer = str(answer)
    if not isinstance(answer, str):
        return ""
    return answer.strip().lower()


def split_sub_answers(answer: Any) -> list[Any]:
    """
    Return the ordered list of case-study sub-answer records.

    Accepts the list itself or a wrapper dict carrying it under
    ``subAnswers`` or ``responses``.
    """
    if isinstance(answer, Mapping):
        for key in ("subAnswers", "responses"):
            if isinstance(answer.get(key), list):
                return answer[key]
        return []
    if isinstance(answer, list):
        return answer
    return []


def unwrap_sub_answer(record: Any) -> Any:
    """Extract the answer value from a ``{studentAnswer: ...}`` record."""
    if isinstance(record, Mapping) and "studentAnswer" in record:
        return record["studentAnswer"]
    return record


def is_blank(answer: Any) -> bool:
    """True when no answer was given at all."""
    if answer is None:
        return True
    if isinstance(answer, str):
        return not answer.strip()
    if isinstance(answer, (list, tuple, dict)):
        return len(answer) == 0
    return False
