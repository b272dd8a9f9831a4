# backend/main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from routes import interview_session
from config import get_settings
from utils.errors import InterviewEngineError
from utils.logger import setup_logging, get_logger
from utils.redis_client import get_redis, test_connection

setup_logging()
log = get_logger(__name__)
settings = get_settings()

app = FastAPI(
    title="Interview Session Engine API",
    version="1.0.0",
    description="Question generation, interview sessions and readiness reports",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(interview_session.router)


@app.exception_handler(InterviewEngineError)
async def engine_error_handler(request: Request, exc: InterviewEngineError):
    if exc.status_code >= 500:
        log.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    else:
        log.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )


@app.on_event("startup")
async def startup_event():
    """Startup tasks"""
    log.info("🚀 Starting Interview Session Engine v1.0.0")

    redis_ok = await test_connection(get_redis())
    if redis_ok:
        log.info("✅ Redis connected")
    else:
        log.warning("⚠️ Redis connection failed")

    if settings.use_mock_ai:
        log.info("Question generation: deterministic (USE_MOCK_AI)")
    elif settings.groq_api_key:
        log.info(f"Question generation: Groq ({settings.groq_model})")
    else:
        log.warning("⚠️ Question generation unconfigured: interviews cannot be started")


@app.on_event("shutdown")
async def shutdown_event():
    log.info("🛑 Shutting down...")
    await get_redis().aclose()
    log.info("✅ Shutdown complete")


@app.get("/health")
async def health_check():
    """Health check"""
    return {
        "status": "healthy",
        "version": "1.0.0",
        "services": {
            "groq": bool(settings.groq_api_key),
            "mock_ai": settings.use_mock_ai,
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
