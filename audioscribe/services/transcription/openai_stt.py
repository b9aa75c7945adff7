"""
OpenAI speech-to-text provider.

Uses ``openai.AsyncOpenAI`` (``audio.transcriptions``, model ``whisper-1`` by
default). Works against any OpenAI-compatible endpoint through ``base_url``.
"""

import logging

from openai import (
    APIConnectionError,
    APITimeoutError,
    AsyncOpenAI,
    OpenAIError,
    RateLimitError,
)
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from audioscribe.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


class OpenAISTT(BaseSTT):
    """Hosted Whisper transcription with retry on transient errors."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "whisper-1",
        timeout: float = 120.0,
    ) -> None:
        self._model = model
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=16),
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        reraise=True,
    )
    async def transcribe(self, audio: bytes, filename: str = "audio.wav", **kwargs) -> dict:
        """Upload the file and return ``{"text", "language"}``."""
        language = kwargs.get("language")
        params: dict = {"model": self._model, "file": (filename, audio)}
        if language:
            params["language"] = language

        try:
            transcription = await self._client.audio.transcriptions.create(**params)
        except APITimeoutError as exc:
            logger.warning("OpenAI transcription timeout: %s", exc)
            raise TimeoutError(f"OpenAI transcription timed out: {exc}") from exc
        except APIConnectionError as exc:
            logger.warning("OpenAI connection error: %s", exc)
            raise ConnectionError(f"Failed to connect to OpenAI: {exc}") from exc
        except RateLimitError as exc:
            logger.warning("OpenAI rate limit hit: %s", exc)
            raise ConnectionError(f"OpenAI rate limit exceeded: {exc}") from exc
        except OpenAIError as exc:
            logger.error("OpenAI transcription error: %s", exc)
            raise RuntimeError(f"OpenAI transcription error: {exc}") from exc

        logger.debug("Transcribed %s (%d bytes)", filename, len(audio))
        return {"text": transcription.text, "language": language or "unknown"}
