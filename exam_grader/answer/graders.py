"""
Case-study credit graders.

Graders decide, from the independently scored sub-questions of a case
study, whether the case study as a whole counts as correct. The points
are always the sum of the sub-question points; only the correctness flag
depends on the grader.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict

from .policies import CaseStudyCreditPolicy
from .result import SubQuestionResult


class Grader(BaseModel, ABC):
    """
    Abstract base class for case-study graders.

    Takes the list of SubQuestionResults (one per sub-question, in order)
    and returns the parent-level correctness flag.
    """

    model_config = ConfigDict(frozen=True)

    @abstractmethod
    def grade(self, results: list[SubQuestionResult]) -> bool:
        """
        Decide whether the case study is correct.

        Args:
            results: Sub-question results

        Returns:
            Parent-level correctness
        """


class FullCreditGrader(Grader):
    """
    Standard (all-or-nothing) grader.

    Correct only if ALL sub-questions are correct. A case study without
    sub-questions is never correct.
    """

    def grade(self, results: list[SubQuestionResult]) -> bool:
        if not results:
            return False
        return all(result.is_correct for result in results)


class AnyCreditGrader(Grader):
    """
    Lenient grader.

    Correct as soon as any sub-question earned points.
    """

    def grade(self, results: list[SubQuestionResult]) -> bool:
        return sum(result.points_earned for result in results) > 0


_GRADERS: dict[CaseStudyCreditPolicy, Grader] = {
    CaseStudyCreditPolicy.FULL: FullCreditGrader(),
    CaseStudyCreditPolicy.ANY: AnyCreditGrader(),
}


def get_grader(policy: CaseStudyCreditPolicy) -> Grader:
    """Grader implementing a case-study credit policy."""
    return _GRADERS[policy]
