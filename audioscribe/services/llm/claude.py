"""
Claude LLM provider implementation.

Uses the Anthropic Python SDK (``anthropic.AsyncAnthropic``). Includes a
rate-limit semaphore and automatic retries for transient errors.
"""

import asyncio
import logging

from anthropic import (
    APIConnectionError,
    APITimeoutError,
    AsyncAnthropic,
    RateLimitError,
)
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from audioscribe.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)


class ClaudeLLM(BaseLLM):
    """Claude API LLM provider with rate-limit semaphore and retry logic."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 500,
        temperature: float = 0.7,
        max_concurrent: int = 5,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._client = AsyncAnthropic(api_key=api_key)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=16),
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        reraise=True,
    )
    async def _call_api(
        self,
        messages: list[dict[str, str]],
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Send a request to Claude, respecting the concurrency semaphore.

        All SDK exceptions are translated to standard Python exceptions so that
        callers can rely on ``ConnectionError`` / ``TimeoutError`` for retry
        decisions.
        """
        async with self._semaphore:
            try:
                kwargs: dict = {
                    "model": self._model,
                    "max_tokens": max_tokens or self._max_tokens,
                    "temperature": temperature if temperature is not None else self._temperature,
                    "messages": messages,
                }
                if system:
                    kwargs["system"] = system

                response = await self._client.messages.create(**kwargs)
            except APITimeoutError as exc:
                logger.warning("Claude API timeout: %s", exc)
                raise TimeoutError(f"Claude API request timed out: {exc}") from exc
            except APIConnectionError as exc:
                logger.warning("Claude API connection error: %s", exc)
                raise ConnectionError(f"Failed to connect to Claude API: {exc}") from exc
            except RateLimitError as exc:
                logger.warning("Claude API rate limit hit: %s", exc)
                raise ConnectionError(f"Claude API rate limit exceeded: {exc}") from exc
            except Exception as exc:
                logger.error("Unexpected Claude API error: %s", exc)
                raise RuntimeError(f"Claude API error: {exc}") from exc

        for block in response.content:
            if block.type == "text":
                return block.text
        return ""

    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a response to a single user prompt."""
        return await self._call_api(
            messages=[{"role": "user", "content": prompt}],
            system=kwargs.pop("system", None),
            temperature=kwargs.pop("temperature", None),
            max_tokens=kwargs.pop("max_tokens", None),
        )

    async def chat(self, messages: list[dict[str, str]], **kwargs) -> str:
        """Continue a conversation; system turns are folded into ``system``."""
        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        system = kwargs.pop("system", None)
        if system:
            system_parts.insert(0, system)
        return await self._call_api(
            messages=[m for m in messages if m["role"] != "system"],
            system="\n\n".join(system_parts) or None,
            temperature=kwargs.pop("temperature", None),
            max_tokens=kwargs.pop("max_tokens", None),
        )
