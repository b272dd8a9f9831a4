# services/interview_service.py
import uuid
from datetime import datetime
from typing import Optional

from models.interview import (
    Answer, Interview, InterviewStatus, Report, UserStats, ViolationType,
)
from models.job import Job, QuestionSpec
from services.answer_evaluator import AnswerEvaluator, NullAnswerEvaluator
from services.interview_session import InterviewSession
from services.interview_store import InterviewStore
from services.question_generator import QuestionGenerationService
from services.report_assembler import ReportAssembler
from utils.errors import NotFoundError, SessionStateError
from utils.logger import get_logger

logger = get_logger("InterviewService")


class InterviewService:
    """Session API: creation, answers, completion, violations and reports."""

    def __init__(
        self,
        store: InterviewStore,
        generator: QuestionGenerationService,
        evaluator: Optional[AnswerEvaluator] = None,
        assembler: Optional[ReportAssembler] = None,
    ):
        self.store = store
        self.generator = generator
        self.evaluator = evaluator or NullAnswerEvaluator()
        self.assembler = assembler or ReportAssembler()

    def _session(self, interview: Interview) -> InterviewSession:
        return InterviewSession(interview, self.assembler)

    async def _create(self, user_id: str, spec: QuestionSpec, job: Optional[Job] = None) -> str:
        # Generation is fully resolved before anything is written
        questions = await self.generator.generate(spec)
        session = InterviewSession.create(str(uuid.uuid4()), user_id, questions, job=job)
        await self.store.create(session.interview)
        logger.info(
            f"Started {session.interview.interview_type.value} interview "
            f"{session.interview.id} for user {user_id}"
        )
        return session.interview.id

    async def start_interview(self, user_id: str, level: str) -> str:
        """Practice interview at the given level; returns the interview id."""
        return await self._create(user_id, QuestionSpec.for_practice(level))

    async def start_application_interview(self, user_id: str, job_id: str) -> str:
        job = await self.store.get_job(job_id)
        return await self._create(user_id, QuestionSpec.for_job(job), job=job)

    async def get_interview(self, interview_id: str) -> Interview:
        return await self.store.get(interview_id)

    async def submit_answer(
        self,
        interview_id: str,
        question_id: str,
        transcript: str,
        skipped: bool = False,
    ) -> Interview:
        """
        Store the answer and advance/complete as the state machine decides.
        Returns the updated interview; its status tells whether it completed.
        """
        snapshot = await self.store.get(interview_id)
        if snapshot.is_terminal:
            raise SessionStateError(
                f"Cannot submit answer: interview {interview_id} is {snapshot.status.value}"
            )
        question = snapshot.question(question_id)
        if question is None:
            raise SessionStateError(f"Unknown question '{question_id}' for interview {interview_id}")

        # Scoring may suspend, so it runs before the atomic write
        evaluation = None
        if not skipped and transcript.strip():
            evaluation = await self.evaluator.evaluate(
                Answer(question_id=question_id, transcript=transcript), question
            )

        interview, _ = await self.store.update(
            interview_id,
            lambda iv: self._session(iv).submit_answer(question_id, transcript, skipped, evaluation),
        )
        return interview

    async def complete_interview(self, interview_id: str) -> Interview:
        interview, _ = await self.store.update(
            interview_id, lambda iv: self._session(iv).complete()
        )
        return interview

    async def record_violation(
        self,
        interview_id: str,
        kind: ViolationType,
        timestamp: Optional[datetime] = None,
    ) -> int:
        _, count = await self.store.update(
            interview_id, lambda iv: self._session(iv).record_violation(kind, timestamp)
        )
        return count

    async def abandon_interview(self, interview_id: str) -> Interview:
        interview, _ = await self.store.update(
            interview_id, lambda iv: self._session(iv).abandon()
        )
        return interview

    async def get_report(self, interview_id: str) -> Report:
        interview = await self.store.get(interview_id)
        if interview.status != InterviewStatus.COMPLETED or interview.report is None:
            raise NotFoundError(f"No report for interview {interview_id}")
        return interview.report

    async def get_user_stats(self, user_id: str) -> UserStats:
        """Completed-interview count, mean overall score and time spent."""
        completed = [
            iv for iv in await self.store.list_for_user(user_id)
            if iv.status == InterviewStatus.COMPLETED
        ]
        scores = [
            iv.report.overall_score for iv in completed
            if iv.report and iv.report.overall_score is not None
        ]
        minutes = sum(
            round((iv.completed_at - iv.created_at).total_seconds() / 60)
            for iv in completed
            if iv.completed_at
        )
        return UserStats(
            completed_interviews=len(completed),
            average_score=round(sum(scores) / len(scores)) if scores else None,
            total_practice_minutes=minutes,
            total_practice_time=f"{minutes}m",
        )
