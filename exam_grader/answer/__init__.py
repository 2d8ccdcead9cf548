"""
answer - Answer evaluation engine for exam questions

Scores a student's answer against a question definition:
- Type-specific evaluators (single/multiple choice, drag and drop,
  case study, short answer, code stub)
- One normalization step from stored question data to canonical models
- Named policies for the rules that differ between grading paths
- Zero-score fallback results instead of exceptions
"""

from .dispatch import AnswerDispatcher, evaluate, get_dispatcher, try_evaluate
from .evaluator import AnswerEvaluator, EvaluatorRegistry
from .graders import AnyCreditGrader, FullCreditGrader, Grader
from .policies import CaseStudyCreditPolicy, EvaluationPolicy, ShortAnswerMatchPolicy
from .questions import parse_question_definition
from .result import (
    EvaluationFailure,
    EvaluationOutcome,
    EvaluationResult,
    FailureKind,
    FormattedAnswer,
)
from .types import QuestionType

__all__ = [
    "AnswerDispatcher",
    "evaluate",
    "try_evaluate",
    "get_dispatcher",
    "AnswerEvaluator",
    "EvaluatorRegistry",
    "Grader",
    "FullCreditGrader",
    "AnyCreditGrader",
    "EvaluationPolicy",
    "CaseStudyCreditPolicy",
    "ShortAnswerMatchPolicy",
    "parse_question_definition",
    "EvaluationResult",
    "EvaluationFailure",
    "EvaluationOutcome",
    "FailureKind",
    "FormattedAnswer",
    "QuestionType",
]
