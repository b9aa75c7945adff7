"""
Ollama LLM provider implementation.

Uses the Ollama Python SDK (``ollama.AsyncClient``) to talk to a locally
running Ollama server. Includes automatic retries for transient connection
failures.
"""

import logging

import httpx
from ollama import AsyncClient, ResponseError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from audioscribe.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)


class OllamaLLM(BaseLLM):
    """Ollama local LLM provider with retry logic.

    Retries transient connection failures up to 3 times with exponential backoff.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.2",
        max_tokens: int = 500,
        temperature: float = 0.7,
    ) -> None:
        """Initialize the Ollama LLM provider.

        Args:
            base_url: Ollama server URL.
            model: Model name to use (e.g. "llama3.2").
            max_tokens: Default cap on generated tokens (``num_predict``).
            temperature: Sampling temperature for text generation (0.0-1.0).
        """
        self._base_url = base_url
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._client = AsyncClient(host=base_url)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=16),
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        reraise=True,
    )
    async def _call_api(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Send a chat request to the Ollama server.

        Translates SDK-specific exceptions to standard Python exceptions so
        that callers can retry on ``ConnectionError`` / ``TimeoutError``.
        """
        try:
            response = await self._client.chat(
                model=self._model,
                messages=messages,
                options={
                    "temperature": temperature if temperature is not None else self._temperature,
                    "num_predict": max_tokens or self._max_tokens,
                },
            )
            return response.message.content or ""

        except (TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("Ollama timeout (%s): %s", self._base_url, exc)
            raise TimeoutError(f"Ollama request timed out ({self._base_url}): {exc}") from exc
        except ConnectionError as exc:
            logger.warning("Ollama connection error (%s): %s", self._base_url, exc)
            raise ConnectionError(
                f"Failed to connect to Ollama at {self._base_url}: {exc}"
            ) from exc
        except ResponseError as exc:
            logger.error("Ollama response error: %s", exc)
            raise RuntimeError(f"Ollama error: {exc}") from exc
        except Exception as exc:
            logger.error("Unexpected Ollama error: %s", exc)
            raise RuntimeError(f"Ollama error: {exc}") from exc

    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a response to a single user prompt."""
        return await self.chat([{"role": "user", "content": prompt}], **kwargs)

    async def chat(self, messages: list[dict[str, str]], **kwargs) -> str:
        """Continue a multi-turn conversation."""
        payload: list[dict[str, str]] = []
        system = kwargs.pop("system", None)
        if system:
            payload.append({"role": "system", "content": system})
        payload.extend(messages)
        return await self._call_api(
            messages=payload,
            temperature=kwargs.pop("temperature", None),
            max_tokens=kwargs.pop("max_tokens", None),
        )
