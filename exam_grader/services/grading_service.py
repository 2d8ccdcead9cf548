"""
Grading service for exam submissions.

Grades every answer of one attempt at an exam and computes the obtained
marks, percentage and pass/fail outcome.
"""

from typing import Any, Dict, List, Mapping, Optional

from ..answer.answers import is_blank
from ..answer.dispatch import AnswerDispatcher, get_dispatcher
from ..core.errors import GradingError
from ..core.logging import get_context_logger
from ..models.domain import Exam, ExamQuestion, GradedAnswer, SubmissionResult
from .marks import exam_total_marks

logger = get_context_logger(__name__, component="grading_service")

PASS = "PASS"
FAIL = "FAIL"


class GradingService:
    """
    Service for submission grading.

    Answers go through the answer dispatcher, so a broken question scores
    zero instead of failing the whole submission.
    """

    def __init__(self, dispatcher: Optional[AnswerDispatcher] = None):
        self.dispatcher = dispatcher or get_dispatcher()

    def grade_answer(self, question: ExamQuestion, student_answer: Any) -> GradedAnswer:
        """
        Grade a single answer.

        Args:
            question: Stored question
            student_answer: Raw answer payload

        Returns:
            GradedAnswer with the formatted answer record
        """
        result = self.dispatcher.evaluate(
            question.question_type,
            question.question_data,
            student_answer,
            question.marks,
            question.question_text,
        )
        return GradedAnswer(
            question_id=question.id,
            question_type=result.formatted_answer.question_type,
            is_correct=result.is_correct,
            points_earned=result.points_earned,
            max_points=result.max_points,
            formatted_answer=result.to_dict()["formattedAnswer"],
            error=result.formatted_answer.error,
        )

    def grade_submission(self, exam: Exam, answers: Mapping[str, Any]) -> SubmissionResult:
        """
        Grade all answers of a submission.

        Args:
            exam: Exam being taken
            answers: Raw answers by question id

        Returns:
            SubmissionResult

        Raises:
            GradingError: If an answer refers to a question not in the exam
        """
        questions = {q.id: q for q in exam.questions}
        unknown = sorted(str(k) for k in answers if str(k) not in questions)
        if unknown:
            logger.warning(
                "Submission contains answers for unknown questions",
                extra_data={"exam_id": exam.id, "question_ids": unknown},
            )
            raise GradingError(exam.id, f"unknown question ids: {', '.join(unknown)}")

        answers_by_id = {str(k): v for k, v in answers.items()}

        logger.info(
            "Grading submission",
            extra_data={
                "exam_id": exam.id,
                "num_questions": len(questions),
                "num_answers": len(answers_by_id),
            },
        )

        graded: List[GradedAnswer] = []
        for question in exam.questions:
            student_answer = answers_by_id.get(question.id)
            if is_blank(student_answer):
                continue
            graded.append(self.grade_answer(question, student_answer))

        total_marks = exam_total_marks(exam.questions)
        obtained = round(sum(a.points_earned for a in graded), 2)
        percentage = round(obtained / total_marks * 100, 2) if total_marks > 0 else 0.0
        passed = percentage >= exam.passing_score

        result = SubmissionResult(
            exam_id=exam.id,
            total_questions=len(exam.questions),
            answered=len(graded),
            unanswered=len(exam.questions) - len(graded),
            correct_answers=sum(1 for a in graded if a.is_correct),
            obtained_marks=obtained,
            total_marks=total_marks,
            percentage=percentage,
            passed=passed,
            grade=PASS if passed else FAIL,
            answers=graded,
        )

        logger.info(
            "Submission graded",
            extra_data={
                "exam_id": exam.id,
                "obtained_marks": obtained,
                "total_marks": total_marks,
                "percentage": percentage,
                "grade": result.grade,
            },
        )
        return result


# Factory function
def get_grading_service(dispatcher: Optional[AnswerDispatcher] = None) -> GradingService:
    """Create grading service instance"""
    return GradingService(dispatcher)
