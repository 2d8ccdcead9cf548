"""Tests for configuration, structured logging and the error taxonomy."""

import json
import logging

import pytest

from exam_grader.answer import CaseStudyCreditPolicy, EvaluationPolicy, ShortAnswerMatchPolicy
from exam_grader.core.config import Settings
from exam_grader.core.errors import (
    ExamGraderError,
    GradingError,
    QuestionDefinitionError,
    UnsupportedQuestionTypeError,
)
from exam_grader.core.logging import (
    StructuredFormatter,
    TextFormatter,
    get_context_logger,
    setup_logging,
    shorten,
)


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Test default settings values."""
        for name in ("CASE_STUDY_CREDIT_POLICY", "SHORT_ANSWER_MATCH_POLICY", "DEFAULT_PASSING_SCORE"):
            monkeypatch.delenv(f"EXAM_GRADER_{name}", raising=False)
        settings = Settings(_env_file=None)
        assert settings.CASE_STUDY_CREDIT_POLICY == "full"
        assert settings.SHORT_ANSWER_MATCH_POLICY == "exact"
        assert settings.DEFAULT_PASSING_SCORE == 70
        assert settings.LOG_FORMAT == "json"

    def test_environment_prefix(self, monkeypatch):
        """Test that EXAM_GRADER_ variables override defaults."""
        monkeypatch.setenv("EXAM_GRADER_CASE_STUDY_CREDIT_POLICY", "any")
        monkeypatch.setenv("EXAM_GRADER_DEFAULT_PASSING_SCORE", "55")
        settings = Settings(_env_file=None)
        assert settings.CASE_STUDY_CREDIT_POLICY == "any"
        assert settings.DEFAULT_PASSING_SCORE == 55

    def test_passing_score_range(self, monkeypatch):
        monkeypatch.setenv("EXAM_GRADER_DEFAULT_PASSING_SCORE", "150")
        with pytest.raises(ValueError):
            Settings(_env_file=None)


class TestPolicyFromSettings:
    """Test building the evaluation policy from settings."""

    def test_default_policy(self):
        policy = EvaluationPolicy()
        assert policy.case_study_credit is CaseStudyCreditPolicy.FULL
        assert policy.short_answer_match is ShortAnswerMatchPolicy.EXACT

    def test_from_settings(self):
        settings = Settings(
            _env_file=None,
            CASE_STUDY_CREDIT_POLICY="ANY",
            SHORT_ANSWER_MATCH_POLICY="keywords",
        )
        policy = EvaluationPolicy.from_settings(settings)
        assert policy.case_study_credit is CaseStudyCreditPolicy.ANY
        assert policy.short_answer_match is ShortAnswerMatchPolicy.KEYWORDS

    def test_unknown_policy_name(self):
        """Test that a misspelt policy is an error, not a silent default."""
        settings = Settings(_env_file=None, SHORT_ANSWER_MATCH_POLICY="fuzzy")
        with pytest.raises(ValueError):
            EvaluationPolicy.from_settings(settings)


class TestErrors:
    """Test the exception hierarchy."""

    def test_question_definition_error(self):
        error = QuestionDefinitionError("options must be a list", field="options")
        assert isinstance(error, ExamGraderError)
        assert error.message == "Invalid question definition: options must be a list"
        assert error.details == {"field": "options"}
        assert str(error) == error.message

    def test_unsupported_type_error(self):
        error = UnsupportedQuestionTypeError("essay")
        assert error.message == "Unsupported question type: essay"
        assert error.details == {"question_type": "essay"}

    def test_grading_error(self):
        error = GradingError("e1", "unknown question ids: 9")
        assert error.message == "Failed to grade submission for exam 'e1': unknown question ids: 9"
        assert error.details["exam_id"] == "e1"


class TestLogging:
    """Test structured logging."""

    def _record(self, **extra):
        record = logging.LogRecord(
            name="exam_grader.answer.dispatch",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="Falling back to zero score",
            args=(),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_structured_formatter(self):
        """Test that records become one JSON object with the context nested."""
        record = self._record(extra_data={"question_type": "essay", "answer": {1, 2}})
        data = json.loads(StructuredFormatter(environment="test").format(record))
        assert data["level"] == "WARNING"
        assert data["logger"] == "exam_grader.answer.dispatch"
        assert data["message"] == "Falling back to zero score"
        assert data["environment"] == "test"
        assert data["context"]["question_type"] == "essay"
        assert isinstance(data["context"]["answer"], str)

    def test_long_values_shortened(self):
        """Test that long answers are cut but tracebacks are kept whole."""
        code = "x = 1\n" * 200
        record = self._record(extra_data={"student_answer": code, "traceback": code})
        context = json.loads(StructuredFormatter().format(record))["context"]
        assert context["student_answer"].endswith(f"[{len(code)} chars]")
        assert len(context["student_answer"]) < len(code)
        assert context["traceback"] == code

    def test_shorten_nested(self):
        long_text = "a" * 500
        shortened = shorten({"answers": [long_text, 3]}, limit=10)
        assert shortened == {"answers": ["aaaaaaaaaa... [500 chars]", 3]}

    def test_text_formatter(self):
        """Test the text line with context appended."""
        line = TextFormatter().format(self._record(extra_data={"component": "dispatcher"}))
        assert "exam_grader.answer.dispatch: Falling back to zero score" in line
        assert line.endswith("| component=dispatcher")

    def test_text_formatter_without_context(self):
        line = TextFormatter().format(self._record())
        assert line.endswith("Falling back to zero score")

    def test_context_logger_merges_extra_data(self, caplog):
        """Test that permanent context and per-call extra_data both reach the record."""
        logger = get_context_logger("exam_grader.test.adapter", component="dispatcher")
        with caplog.at_level(logging.INFO, logger="exam_grader.test.adapter"):
            logger.info("Evaluation complete", extra_data={"points_earned": 5})
        record = caplog.records[-1]
        assert record.extra_data == {"component": "dispatcher", "points_earned": 5}

    def test_setup_logging_text_and_file(self, tmp_path):
        """Test that setup_logging configures the package logger, not the root logger."""
        log_file = tmp_path / "logs" / "grader.log"
        settings = Settings(_env_file=None, LOG_FORMAT="text", LOG_LEVEL="debug", LOG_FILE=str(log_file))
        root_handlers = logging.getLogger().handlers[:]
        try:
            package_logger = setup_logging(settings)
            assert package_logger.name == "exam_grader"
            assert package_logger.level == logging.DEBUG
            assert package_logger.propagate is False
            assert any(isinstance(h, logging.FileHandler) for h in package_logger.handlers)
            assert all(isinstance(h.formatter, TextFormatter) for h in package_logger.handlers)
            assert logging.getLogger().handlers == root_handlers

            get_context_logger("exam_grader.services.grading_service").info(
                "Submission graded", extra_data={"exam_id": "e1"}
            )
            for handler in package_logger.handlers:
                handler.flush()
            assert "Submission graded | exam_id=e1" in log_file.read_text(encoding="utf-8")
        finally:
            package_logger = logging.getLogger("exam_grader")
            for handler in package_logger.handlers[:]:
                package_logger.removeHandler(handler)
                handler.close()
            package_logger.setLevel(logging.NOTSET)
            package_logger.propagate = True
