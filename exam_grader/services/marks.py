"""
Exam mark totals.

A case-study question is worth the sum of its sub-question marks, never
the marks stored on the question row. Totals computed here use the same
sub-question mark resolution as the case-study evaluator.
"""

from typing import Iterable

from ..answer.questions import CaseStudyQuestion, parse_question_definition
from ..answer.types import QuestionType
from ..core.errors import ExamGraderError
from ..core.logging import get_context_logger
from ..models.domain import ExamQuestion

logger = get_context_logger(__name__, component="marks")


def question_max_marks(question: ExamQuestion) -> float:
    """
    Marks a question contributes to the exam total.

    Args:
        question: Stored question

    Returns:
        Sub-question sum for case studies, the question's marks otherwise.
        A case study whose data cannot be parsed contributes 0.
    """
    try:
        question_type = QuestionType.parse(question.question_type)
    except ExamGraderError:
        return question.marks

    if question_type is not QuestionType.CASE_STUDY:
        return question.marks

    try:
        definition = parse_question_definition(question_type, question.question_data)
    except ExamGraderError as e:
        logger.warning(
            "Failed to parse case-study data, counting 0 marks",
            extra_data={"question_id": question.id, "error": e.message},
        )
        return 0.0

    assert isinstance(definition, CaseStudyQuestion)
    return definition.max_marks(question.marks)


def exam_total_marks(questions: Iterable[ExamQuestion]) -> float:
    """Total marks available in an exam."""
    return round(sum(question_max_marks(q) for q in questions), 2)
