"""
OpenAI LLM provider implementation.

Uses ``openai.AsyncOpenAI`` chat completions. Any OpenAI-compatible endpoint
(DeepSeek, Qwen, a local gateway, ...) works through ``base_url``.
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

from audioscribe.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)


class OpenAILLM(BaseLLM):
    """OpenAI-compatible chat completion provider with retry logic."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4",
        max_tokens: int = 500,
        temperature: float | None = None,
        timeout: float = 60.0,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        logger.info("OpenAI LLM ready: model=%s, base_url=%s", model, base_url)

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
        """Send a chat completion request.

        SDK exceptions are translated to ``ConnectionError`` / ``TimeoutError``
        (retried) or ``RuntimeError`` (not retried).
        """
        payload = list(messages)
        if system:
            payload.insert(0, {"role": "system", "content": system})

        kwargs: dict = {
            "model": self._model,
            "messages": payload,
            "max_tokens": max_tokens or self._max_tokens,
        }
        temperature = temperature if temperature is not None else self._temperature
        if temperature is not None:
            kwargs["temperature"] = temperature

        try:
            response = await self._client.chat.completions.create(**kwargs)
        except APITimeoutError as exc:
            logger.warning("OpenAI API timeout: %s", exc)
            raise TimeoutError(f"OpenAI API request timed out: {exc}") from exc
        except APIConnectionError as exc:
            logger.warning("OpenAI API connection error: %s", exc)
            raise ConnectionError(f"Failed to connect to OpenAI API: {exc}") from exc
        except RateLimitError as exc:
            logger.warning("OpenAI API rate limit hit: %s", exc)
            raise ConnectionError(f"OpenAI API rate limit exceeded: {exc}") from exc
        except OpenAIError as exc:
            logger.error("OpenAI API error: %s", exc)
            raise RuntimeError(f"OpenAI API error: {exc}") from exc

        return response.choices[0].message.content or ""

    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a response to a single user prompt."""
        return await self._call_api(
            messages=[{"role": "user", "content": prompt}],
            system=kwargs.pop("system", None),
            temperature=kwargs.pop("temperature", None),
            max_tokens=kwargs.pop("max_tokens", None),
        )

    async def chat(self, messages: list[dict[str, str]], **kwargs) -> str:
        """Continue a multi-turn conversation."""
        return await self._call_api(
            messages=messages,
            system=kwargs.pop("system", None),
            temperature=kwargs.pop("temperature", None),
            max_tokens=kwargs.pop("max_tokens", None),
        )
