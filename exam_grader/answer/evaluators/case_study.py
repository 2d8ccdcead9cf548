"""
Case-study answer evaluator.

A case study is a scenario with ordered sub-questions. Each sub-question
is scored on its own by the evaluator for its type and the points are
summed. Sub-answers are matched to sub-questions by position.
"""

from __future__ import annotations

from typing import Any

from exam_grader.core.logging import get_context_logger

from ..answers import is_blank, split_sub_answers, unwrap_sub_answer
from ..evaluator import AnswerEvaluator
from ..graders import get_grader
from ..questions import CaseStudyQuestion
from ..result import EvaluationResult, SubQuestionResult
from ..types import QuestionType

logger = get_context_logger(__name__, component="evaluator")


class CaseStudyEvaluator(AnswerEvaluator):
    """
    Evaluator for case-study questions.

    Sub-question marks are taken from each sub-question when given,
    otherwise the question's marks are split equally. The maximum score is
    the sum of the sub-question marks, not the marks passed in.
    """

    question_type = QuestionType.CASE_STUDY

    question: CaseStudyQuestion

    @property
    def max_points(self) -> float:
        return self.question.max_marks(self.total_marks)

    def evaluate(self, student_answer: Any) -> EvaluationResult:
        """Evaluate case-study answer."""
        sub_answers = split_sub_answers(student_answer)
        sub_marks = self.question.sub_question_marks(self.total_marks)

        results = []
        for index, (sub_question, max_marks) in enumerate(
            zip(self.question.sub_questions, sub_marks)
        ):
            record = sub_answers[index] if index < len(sub_answers) else None
            answer = unwrap_sub_answer(record)
            results.append(
                self._evaluate_sub_question(index, sub_question, answer, max_marks)
            )

        earned = round(sum(result.points_earned for result in results), 2)
        is_correct = get_grader(self.policy.case_study_credit).grade(results)

        logger.debug(
            "Case study evaluated",
            extra_data={
                "question_id": self.question.id,
                "sub_questions": len(results),
                "points_earned": earned,
                "max_points": self.max_points,
                "credit_policy": self.policy.case_study_credit.value,
            },
        )

        record = self.base_record(
            student_answer,
            case_study_context=self.question.context,
            sub_question_results=results,
        )
        return EvaluationResult.scored(
            is_correct, min(earned, self.max_points), self.max_points, record
        )

    def _evaluate_sub_question(
        self,
        index: int,
        sub_question: Any,
        answer: Any,
        max_marks: float,
    ) -> SubQuestionResult:
        if is_blank(answer):
            # Unanswered sub-question: zero, the rest are still scored
            return SubQuestionResult(
                question_index=index,
                question_type=sub_question.question_type.value,
                question_text=sub_question.question_text,
                student_answer=answer,
                correct_answers=_correct_answers_of(sub_question),
                is_correct=False,
                points_earned=0.0,
                max_points=max_marks,
            )

        registry = self.registry
        if registry is None:
            from . import default_registry
            registry = default_registry()

        evaluator = registry.create_evaluator(
            sub_question.question_type,
            sub_question,
            max_marks,
            self.policy,
        )
        sub_result = evaluator.evaluate(answer)

        return SubQuestionResult(
            question_index=index,
            question_type=sub_question.question_type.value,
            question_text=sub_question.question_text,
            student_answer=answer,
            correct_answers=sub_result.formatted_answer.correct_answers,
            is_correct=sub_result.is_correct,
            points_earned=sub_result.points_earned,
            max_points=max_marks,
        )


def _correct_answers_of(sub_question: Any) -> Any:
    if sub_question.question_type is QuestionType.SINGLE_CHOICE:
        return [sub_question.correct_answer] if sub_question.correct_answer else []
    if sub_question.question_type is QuestionType.MULTIPLE_CHOICE:
        return list(sub_question.correct_answers)
    return list(sub_question.acceptable_answers)
