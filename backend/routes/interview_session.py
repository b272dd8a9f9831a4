# ========================================
# routes/interview_session.py - Session API
# ========================================

from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException

from config import ProviderConfig, get_settings
from models.interview import InterviewStatus, Report, UserStats
from models.request import (
    InterviewView, OkResponse, StartApplicationRequest, StartInterviewRequest,
    StartInterviewResponse, SubmitAnswerRequest, SubmitAnswerResponse,
    ViolationRequest,
)
from services.interview_service import InterviewService
from services.interview_store import InterviewStore
from services.question_generator import QuestionGenerationService
from utils.errors import InterviewEngineError
from utils.redis_client import get_redis
from utils.logger import get_logger

router = APIRouter(prefix="/interview", tags=["Interview"])
logger = get_logger("InterviewRoutes")


@lru_cache
def get_interview_service() -> InterviewService:
    settings = get_settings()
    store = InterviewStore(
        get_redis(),
        ttl_seconds=settings.session_ttl_seconds,
        max_retries=settings.store_max_retries,
    )
    generator = QuestionGenerationService(ProviderConfig.from_settings(settings))
    return InterviewService(store, generator)


@router.post("/start", response_model=StartInterviewResponse)
async def start_interview(
    request: StartInterviewRequest,
    service: InterviewService = Depends(get_interview_service),
):
    """Start a practice interview"""
    level = request.level or get_settings().default_practice_level
    try:
        interview_id = await service.start_interview(request.user_id, level)
    except InterviewEngineError:
        raise
    except Exception as e:
        logger.error(f"Failed to create interview session: {e}", exc_info=True)
        raise HTTPException(500, "Failed to create interview session")
    return StartInterviewResponse(interview_id=interview_id)


@router.post("/start/{job_id}", response_model=StartInterviewResponse)
async def start_application_interview(
    job_id: str,
    request: StartApplicationRequest,
    service: InterviewService = Depends(get_interview_service),
):
    """Start an interview for a specific job posting"""
    try:
        interview_id = await service.start_application_interview(request.user_id, job_id)
    except InterviewEngineError:
        raise
    except Exception as e:
        logger.error(f"Failed to create interview session for job {job_id}: {e}", exc_info=True)
        raise HTTPException(500, "Failed to create interview session")
    return StartInterviewResponse(interview_id=interview_id)


@router.get("/users/{user_id}/stats", response_model=UserStats)
async def get_user_stats(
    user_id: str,
    service: InterviewService = Depends(get_interview_service),
):
    """Totals over the user's completed interviews"""
    return await service.get_user_stats(user_id)


@router.get("/{interview_id}", response_model=InterviewView)
async def get_interview(
    interview_id: str,
    service: InterviewService = Depends(get_interview_service),
):
    """Session state for display; completed sessions should be read via /report"""
    iv = await service.get_interview(interview_id)
    return InterviewView(
        id=iv.id,
        status=iv.status,
        questions=iv.questions,
        current_question_index=iv.current_question_index,
        answers=iv.answers,
        job_title=iv.job_title,
        company_name=iv.company_name,
    )


@router.post("/{interview_id}/answer", response_model=SubmitAnswerResponse)
async def submit_answer(
    interview_id: str,
    request: SubmitAnswerRequest,
    service: InterviewService = Depends(get_interview_service),
):
    iv = await service.submit_answer(
        interview_id, request.question_id, request.transcript, request.skipped
    )
    return SubmitAnswerResponse(
        completed=iv.status == InterviewStatus.COMPLETED,
        current_question_index=iv.current_question_index,
    )


@router.post("/{interview_id}/complete", response_model=OkResponse)
async def complete_interview(
    interview_id: str,
    service: InterviewService = Depends(get_interview_service),
):
    await service.complete_interview(interview_id)
    return OkResponse()


@router.post("/{interview_id}/violation", response_model=OkResponse)
async def record_violation(
    interview_id: str,
    request: ViolationRequest,
    service: InterviewService = Depends(get_interview_service),
):
    count = await service.record_violation(interview_id, request.type, request.timestamp)
    return OkResponse(count=count)


@router.post("/{interview_id}/abandon", response_model=OkResponse)
async def abandon_interview(
    interview_id: str,
    service: InterviewService = Depends(get_interview_service),
):
    await service.abandon_interview(interview_id)
    return OkResponse()


@router.get("/{interview_id}/report", response_model=Report)
async def get_report(
    interview_id: str,
    service: InterviewService = Depends(get_interview_service),
):
    return await service.get_report(interview_id)
