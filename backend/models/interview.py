# ========================================
# models/interview.py - Interview aggregate
# ========================================

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire and in the store."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InterviewType(str, Enum):
    PRACTICE = "practice"
    APPLICATION = "application"


class InterviewStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class QuestionType(str, Enum):
    BEHAVIORAL = "behavioral"
    TECHNICAL = "technical"
    CODING = "coding"


class DifficultyLevel(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ViolationType(str, Enum):
    FULLSCREEN_EXIT = "fullscreen_exit"
    TAB_SWITCH = "tab_switch"
    WINDOW_BLUR = "window_blur"


class ReadinessBand(str, Enum):
    NOT_READY = "Not Ready"
    NEEDS_WORK = "Needs Work"
    ALMOST_READY = "Almost Ready"
    READY = "Ready"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Slot layout of every generated set: position -> (type, weight)
QUESTION_LAYOUT = [
    (QuestionType.BEHAVIORAL, 1),
    (QuestionType.TECHNICAL, 2),
    (QuestionType.TECHNICAL, 2),
    (QuestionType.CODING, 3),
    (QuestionType.CODING, 3),
]

TYPE_WEIGHTS = {
    QuestionType.BEHAVIORAL: 1,
    QuestionType.TECHNICAL: 2,
    QuestionType.CODING: 3,
}


class Question(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    type: QuestionType
    category: str = "general"
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM
    weight: float = 1


class AnswerEvaluation(CamelModel):
    """Opaque per-answer scores supplied by the external scoring collaborator."""

    relevance_score: Optional[float] = None
    clarity_score: Optional[float] = None
    depth_score: Optional[float] = None
    technical_accuracy: Optional[float] = None
    score: Optional[float] = None
    feedback: Optional[str] = None
    detected_issues: List[str] = []
    strengths: List[str] = []
    recommendations: List[str] = []
    keywords: List[str] = []
    confidence: Optional[float] = None

    def overall(self) -> Optional[float]:
        """Explicit score if given, otherwise the mean of the sub-scores."""
        if self.score is not None:
            return self.score
        parts = [
            s for s in (
                self.relevance_score,
                self.clarity_score,
                self.depth_score,
                self.technical_accuracy,
            )
            if s is not None
        ]
        if not parts:
            return None
        return sum(parts) / len(parts)


class Answer(CamelModel):
    question_id: str
    transcript: str = ""
    skipped: bool = False
    submitted_at: datetime = Field(default_factory=utcnow)
    ai_evaluation: Optional[AnswerEvaluation] = None


class Violation(CamelModel):
    type: ViolationType
    timestamp: datetime = Field(default_factory=utcnow)


class PrimaryBlocker(CamelModel):
    question_id: str
    question_text: str
    question_type: QuestionType
    issue: str
    severity: Severity = Severity.MEDIUM
    impact: Optional[str] = None


class ReportMetrics(CamelModel):
    average_answer_length: int = 0
    questions_answered: int = 0
    questions_skipped: int = 0
    total_questions: int = 0


class Report(CamelModel):
    overall_score: Optional[int] = None
    technical_score: Optional[int] = None
    behavioral_score: Optional[int] = None
    readiness_band: Optional[ReadinessBand] = None
    primary_blockers: List[PrimaryBlocker] = []
    strengths: List[str] = []
    areas_for_improvement: List[str] = []
    recommendations: List[str] = []
    metrics: ReportMetrics = Field(default_factory=ReportMetrics)
    summary: Optional[str] = None
    ai_confidence: Optional[float] = None
    generated_at: datetime = Field(default_factory=utcnow)


class Interview(CamelModel):
    id: str
    user_id: str
    interview_type: InterviewType = InterviewType.PRACTICE
    job_id: Optional[str] = None
    company_id: Optional[str] = None
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    status: InterviewStatus = InterviewStatus.IN_PROGRESS
    questions: List[Question] = []
    answers: List[Answer] = []
    current_question_index: int = 0
    report: Optional[Report] = None
    violations: List[Violation] = []
    created_at: datetime = Field(default_factory=utcnow)
    completed_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status != InterviewStatus.IN_PROGRESS

    def question(self, question_id: str) -> Optional[Question]:
        for q in self.questions:
            if q.id == question_id:
                return q
        return None

    def answer_for(self, question_id: str) -> Optional[Answer]:
        for a in self.answers:
            if a.question_id == question_id:
                return a
        return None


class UserStats(CamelModel):
    """Totals over a user's completed interviews."""

    completed_interviews: int = 0
    average_score: Optional[int] = None
    total_practice_minutes: int = 0
    total_practice_time: str = "0m"
