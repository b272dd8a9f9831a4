from pydantic import Field
from typing import Optional, List
from datetime import datetime

from models.interview import (
    Answer, CamelModel, InterviewStatus, Question, ViolationType,
)


class StartInterviewRequest(CamelModel):
    user_id: str = Field(..., min_length=1, examples=["user-123"])
    level: Optional[str] = Field(None, description="Junior | Mid | Senior")


class StartApplicationRequest(CamelModel):
    user_id: str = Field(..., min_length=1, examples=["user-123"])


class SubmitAnswerRequest(CamelModel):
    question_id: str = Field(..., min_length=1, examples=["q1"])
    transcript: str = ""
    skipped: bool = False


class ViolationRequest(CamelModel):
    type: ViolationType
    timestamp: Optional[datetime] = None


class StartInterviewResponse(CamelModel):
    interview_id: str


class InterviewView(CamelModel):
    id: str
    status: InterviewStatus
    questions: List[Question]
    current_question_index: int
    answers: List[Answer]
    job_title: Optional[str] = None
    company_name: Optional[str] = None


class SubmitAnswerResponse(CamelModel):
    completed: bool
    current_question_index: int


class OkResponse(CamelModel):
    ok: bool = True
    count: Optional[int] = None
