# ========================================
# config.py - Engine configuration
# ========================================

from functools import lru_cache
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ---------- LLM Configuration (Groq) ------------------------------- #
    groq_api_key: str = ""
    groq_model: str = "llama-3.3-70b-versatile"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 2500
    llm_timeout_seconds: float = 30.0

    # Deterministic question set instead of the provider (local/dev)
    use_mock_ai: bool = False

    # ---------- Database ----------------------------------------------- #
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str = ""

    # ---------- Interview Settings ------------------------------------- #
    session_ttl_seconds: int = 7 * 24 * 3600
    store_max_retries: int = 5
    default_practice_level: str = "Mid"

    # ---------- CORS --------------------------------------------------- #
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # ---------- Logging ------------------------------------------------ #
    log_level: str = "INFO"
    log_format: str = "console"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()


class ProviderConfig(BaseModel):
    """Everything the question generator needs to talk to its provider."""

    api_key: str = ""
    model: str = "llama-3.3-70b-versatile"
    temperature: float = 0.7
    max_tokens: int = 2500
    timeout_seconds: float = 30.0
    use_mock_ai: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderConfig":
        return cls(
            api_key=settings.groq_api_key,
            model=settings.groq_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            timeout_seconds=settings.llm_timeout_seconds,
            use_mock_ai=settings.use_mock_ai,
        )
