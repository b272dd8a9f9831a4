# services/groq_service.py
from typing import Optional, Protocol
from groq import AsyncGroq

from config import ProviderConfig
from utils.errors import ConfigurationError, GenerationError
from utils.logger import get_logger

logger = get_logger("GroqService")


class TextProvider(Protocol):
    async def generate_text(self, prompt: str, temperature: Optional[float] = None) -> str: ...


class GroqService:
    """Groq chat-completions client, one instance per owning generator."""

    def __init__(self, config: ProviderConfig):
        if not config.api_key:
            raise ConfigurationError("Groq API key not configured")
        self.model = config.model
        self.max_tokens = config.max_tokens
        self.temperature = config.temperature
        # Transport-level bound; the generator also wraps each call in wait_for
        self.client = AsyncGroq(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            max_retries=0,
        )

    async def generate_text(self, prompt: str, temperature: Optional[float] = None) -> str:
        """Single-turn completion. Any SDK failure is raised as GenerationError."""
        try:
            chat_completion = await self.client.chat.completions.create(
                messages=[{"role": "user", "content": prompt}],
                model=self.model,
                temperature=(temperature if temperature is not None else self.temperature),
                max_tokens=self.max_tokens,
                stream=False,
            )
        except Exception as e:
            raise GenerationError(f"Groq request failed: {e}") from e

        choice = (chat_completion.choices or [None])[0]
        content = choice.message.content if choice and choice.message else None
        if not content:
            raise GenerationError("Groq returned no content")
        return content
