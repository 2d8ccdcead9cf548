"""
Grading policies.

Two rules differ between the grading paths of the exam application: when a
case study counts as correct, and how short answers are matched. Both are
named options here instead of being hard-coded in the evaluators.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from exam_grader.core.config import Settings


class CaseStudyCreditPolicy(str, Enum):
    """When a case-study question as a whole is marked correct."""

    FULL = "full"  # every sub-question correct
    ANY = "any"  # at least one point earned


class ShortAnswerMatchPolicy(str, Enum):
    """How a short answer is compared with the acceptable answers."""

    EXACT = "exact"
    CONTAINS = "contains"
    KEYWORDS = "keywords"


class EvaluationPolicy(BaseModel):
    """Policy bundle handed to every evaluator."""

    model_config = ConfigDict(frozen=True)

    case_study_credit: CaseStudyCreditPolicy = CaseStudyCreditPolicy.FULL
    short_answer_match: ShortAnswerMatchPolicy = ShortAnswerMatchPolicy.EXACT

    @classmethod
    def from_settings(cls, settings: Settings) -> EvaluationPolicy:
        """Build the policy from application settings."""
        return cls(
            case_study_credit=CaseStudyCreditPolicy(settings.CASE_STUDY_CREDIT_POLICY.lower()),
            short_answer_match=ShortAnswerMatchPolicy(settings.SHORT_ANSWER_MATCH_POLICY.lower()),
        )
