"""
Shared pytest fixtures for the answer engine and the grading service.

This module provides:
- A dispatcher with a fixed clock, so fallback results are reproducible
- Question data in the stored shapes the exam application produces
- A helper for asserting Pydantic validation errors
"""

from datetime import datetime, timezone
from typing import Any, Type

import pytest
from pydantic import BaseModel, ValidationError

from exam_grader.answer import AnswerDispatcher, EvaluationPolicy

FIXED_TIME = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    """Clock that always returns the same instant."""
    return lambda: FIXED_TIME


@pytest.fixture
def dispatcher(fixed_clock) -> AnswerDispatcher:
    """Dispatcher with default policies and a fixed clock."""
    return AnswerDispatcher(policy=EvaluationPolicy(), clock=fixed_clock)


@pytest.fixture
def make_dispatcher(fixed_clock):
    """Factory for dispatchers with non-default policies."""
    def _factory(**policy: Any) -> AnswerDispatcher:
        return AnswerDispatcher(policy=EvaluationPolicy(**policy), clock=fixed_clock)
    return _factory


@pytest.fixture
def single_choice_data() -> dict:
    """Single-choice question; opt2 is correct."""
    return {
        "id": "q1",
        "questionText": "Which letter comes second?",
        "options": [
            {"id": "opt1", "text": "A", "isCorrect": False},
            {"id": "opt2", "text": "B", "isCorrect": True},
        ],
    }


@pytest.fixture
def multiple_choice_data() -> dict:
    """Multiple-choice question; opt1 and opt3 are correct."""
    return {
        "id": "q2",
        "questionText": "Pick the odd numbers",
        "options": [
            {"id": "opt1", "text": "1"},
            {"id": "opt2", "text": "2"},
            {"id": "opt3", "text": "3"},
        ],
        "correctAnswers": ["opt1", "opt3"],
    }


@pytest.fixture
def drag_drop_data() -> dict:
    """Drag-and-drop question with targets carrying their correct items."""
    return {
        "id": "q3",
        "questionText": "Match the capitals",
        "dragDropItems": [
            {"id": "item1", "text": "Paris"},
            {"id": "item2", "text": "Rome"},
        ],
        "dragDropTargets": [
            {"id": "t1", "text": "France", "correctItemId": "item1"},
            {"id": "t2", "text": "Italy", "correctItemId": "item2"},
        ],
    }


@pytest.fixture
def case_study_data() -> dict:
    """Case study with a 2-mark single-choice and a 3-mark multiple-choice sub-question."""
    return {
        "id": "q4",
        "questionText": "Read the scenario",
        "caseStudyContext": "A small shop sells apples and pears.",
        "subQuestions": [
            {
                "questionType": "single-choice",
                "questionText": "What does the shop sell most?",
                "marks": 2,
                "options": [
                    {"id": "opt1", "text": "Apples", "isCorrect": True},
                    {"id": "opt2", "text": "Pears"},
                ],
            },
            {
                "questionType": "multiple-choice",
                "questionText": "Which are fruit?",
                "marks": 3,
                "options": [
                    {"id": "opt1", "text": "Apple"},
                    {"id": "opt2", "text": "Carrot"},
                    {"id": "opt3", "text": "Pear"},
                ],
                "correctAnswers": ["opt1", "opt3"],
            },
        ],
    }


@pytest.fixture
def short_answer_data() -> dict:
    """Short-answer question expecting 'Paris'."""
    return {
        "id": "q5",
        "questionText": "Capital of France?",
        "correctAnswers": ["Paris"],
    }


@pytest.fixture
def assert_validation_error():
    """Helper to assert that a ValidationError is raised with expected details."""
    def _assert_validation(
        model_class: Type[BaseModel],
        data: dict[str, Any],
        expected_field: str | None = None,
    ) -> ValidationError:
        """
        Assert that creating a model raises ValidationError.

        Args:
            model_class: The Pydantic model class
            data: Invalid data to pass to model
            expected_field: Expected field name in error (optional)

        Returns:
            The ValidationError that was raised
        """
        with pytest.raises(ValidationError) as exc_info:
            model_class(**data)

        error = exc_info.value
        if expected_field:
            field_errors = [e for e in error.errors() if e['loc'] and e['loc'][0] == expected_field]
            assert len(field_errors) > 0, f"Expected error for field '{expected_field}' not found"

        return error

    return _assert_validation
