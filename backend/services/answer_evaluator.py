"""
Scoring seam. The engine never scores answers itself; an AnswerEvaluator
plugged into InterviewService attaches opaque evaluation data to each answer
before it is stored, and the report only aggregates what it was given.
"""

from typing import Optional, Protocol

from models.interview import Answer, AnswerEvaluation, Question


class AnswerEvaluator(Protocol):
    async def evaluate(self, answer: Answer, question: Question) -> Optional[AnswerEvaluation]: ...


class NullAnswerEvaluator:
    """Default: no scoring backend, answers are stored unevaluated."""

    async def evaluate(self, answer: Answer, question: Question) -> Optional[AnswerEvaluation]:
        return None
