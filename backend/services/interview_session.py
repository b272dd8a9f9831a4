# services/interview_session.py
"""
State machine for a single interview.

    in_progress ──submit last / complete──▶ completed   (report assembled)
         │
         └────────────abandon────────────▶ abandoned   (no report)

Both end states are final. Every mutating call checks the state first and
raises SessionStateError before touching anything, so a rejected call leaves
the interview exactly as it was.
"""

from datetime import datetime
from typing import List, Optional

from models.interview import (
    Answer, AnswerEvaluation, Interview, InterviewStatus, InterviewType,
    Question, Violation, ViolationType, utcnow,
)
from models.job import Job
from services.report_assembler import ReportAssembler
from utils.errors import SessionStateError
from utils.logger import get_logger

logger = get_logger("InterviewSession")


class InterviewSession:
    def __init__(self, interview: Interview, assembler: Optional[ReportAssembler] = None):
        self.interview = interview
        self.assembler = assembler or ReportAssembler()

    @classmethod
    def create(
        cls,
        interview_id: str,
        user_id: str,
        questions: List[Question],
        job: Optional[Job] = None,
    ) -> "InterviewSession":
        """Fresh in_progress session at index 0 with its full question set."""
        if not questions:
            raise SessionStateError("Cannot create an interview without questions")
        interview = Interview(
            id=interview_id,
            user_id=user_id,
            interview_type=InterviewType.APPLICATION if job else InterviewType.PRACTICE,
            job_id=job.id if job else None,
            company_id=job.company_id if job else None,
            job_title=job.title if job else None,
            company_name=job.company_name if job else None,
            questions=list(questions),
        )
        return cls(interview)

    @property
    def status(self) -> InterviewStatus:
        return self.interview.status

    def _require_in_progress(self, action: str) -> None:
        if self.interview.status != InterviewStatus.IN_PROGRESS:
            raise SessionStateError(
                f"Cannot {action}: interview {self.interview.id} is {self.interview.status.value}"
            )

    def submit_answer(
        self,
        question_id: str,
        transcript: str,
        skipped: bool = False,
        evaluation: Optional[AnswerEvaluation] = None,
    ) -> bool:
        """
        Upsert the answer for question_id and return True if the interview
        completed as a result. Only a submission for the question at the
        current index moves the session forward; anything else is a revision.
        """
        self._require_in_progress("submit answer")
        iv = self.interview
        if iv.question(question_id) is None:
            raise SessionStateError(f"Unknown question '{question_id}' for interview {iv.id}")

        answer = Answer(
            question_id=question_id,
            transcript="" if skipped else transcript,
            skipped=skipped,
            ai_evaluation=evaluation,
        )
        for i, existing in enumerate(iv.answers):
            if existing.question_id == question_id:
                iv.answers[i] = answer
                break
        else:
            iv.answers.append(answer)

        index = iv.current_question_index
        at_current = index < len(iv.questions) and iv.questions[index].id == question_id
        if not at_current:
            logger.info(f"Revised {question_id} for {iv.id} (current index {index})")
            return False

        if index >= len(iv.questions) - 1:
            self._complete()
            return True

        iv.current_question_index = index + 1
        logger.info(f"Stored {question_id} for {iv.id}, advanced to index {iv.current_question_index}")
        return False

    def complete(self) -> None:
        """Explicit end, regardless of how many questions remain."""
        self._require_in_progress("complete interview")
        self._complete()

    def _complete(self) -> None:
        iv = self.interview
        iv.status = InterviewStatus.COMPLETED
        iv.completed_at = utcnow()
        iv.report = self.assembler.assemble(iv)
        logger.info(f"✅ Interview {iv.id} completed")

    def record_violation(self, kind: ViolationType, timestamp: Optional[datetime] = None) -> int:
        """Append a proctoring signal; returns the new log length."""
        self._require_in_progress("record violation")
        violation = Violation(type=kind, timestamp=timestamp or utcnow())
        self.interview.violations.append(violation)
        logger.info(f"Violation '{kind.value}' logged for {self.interview.id}")
        return len(self.interview.violations)

    def abandon(self) -> None:
        self._require_in_progress("abandon interview")
        self.interview.status = InterviewStatus.ABANDONED
        logger.info(f"Interview {self.interview.id} abandoned")
