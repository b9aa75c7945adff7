"""
Request adapters between the API and the inference providers.

Each operation validates its inputs before reaching upstream and converts
any provider failure into an ``UpstreamFailureError`` with a fixed message.
The provider's reply is returned as-is.
"""

import logging

from audioscribe.core.exceptions import MissingParameterError, UpstreamFailureError
from audioscribe.services.llm import BaseLLM
from audioscribe.services.llm.prompts import (
    SUMMARIZE_SYSTEM_PROMPT,
    build_chat_system_prompt,
    build_summarize_prompt,
    build_translate_prompt,
    build_translate_system_prompt,
)
from audioscribe.services.transcription import BaseSTT

logger = logging.getLogger(__name__)


class AssistantService:
    """Stateless transcription, summarization, translation and chat.

    Args:
        llm: Chat completion provider.
        stt: File-based speech-to-text provider.
        max_tokens: Token cap for summaries and chat replies.
        translate_max_tokens: Token cap for translations.
        default_target_language: Used when a translation names no language.
    """

    def __init__(
        self,
        llm: BaseLLM,
        stt: BaseSTT,
        max_tokens: int = 500,
        translate_max_tokens: int = 1000,
        default_target_language: str = "es",
    ) -> None:
        self._llm = llm
        self._stt = stt
        self._max_tokens = max_tokens
        self._translate_max_tokens = translate_max_tokens
        self._default_target_language = default_target_language

    async def transcribe(self, audio: bytes | None, filename: str | None = None) -> str:
        if not audio:
            raise MissingParameterError("file", "No file uploaded")
        try:
            result = await self._stt.transcribe(audio, filename=filename or "audio.wav")
        except Exception as exc:
            logger.exception("Transcription failed for %s", filename)
            raise UpstreamFailureError("Error processing audio") from exc
        return result.get("text", "")

    async def summarize(self, text: str | None) -> str:
        if not text:
            raise MissingParameterError("text", "No text provided")
        try:
            return await self._llm.generate(
                build_summarize_prompt(text),
                system=SUMMARIZE_SYSTEM_PROMPT,
                max_tokens=self._max_tokens,
            )
        except Exception as exc:
            logger.exception("Summarization failed")
            raise UpstreamFailureError("Error summarizing text") from exc

    async def translate(self, text: str | None, target_language: str | None = None) -> str:
        if not text:
            raise MissingParameterError("text", "No text provided")
        language = target_language or self._default_target_language
        try:
            return await self._llm.generate(
                build_translate_prompt(text, language),
                system=build_translate_system_prompt(language),
                max_tokens=self._translate_max_tokens,
            )
        except Exception as exc:
            logger.exception("Translation to %s failed", language)
            raise UpstreamFailureError("Error translating text") from exc

    async def chat(self, messages: list[dict[str, str]] | None, context: str | None) -> str:
        """Answer the latest turn of a conversation about ``context``.

        Raises:
            MissingParameterError: No messages, or no summary to discuss.
            UpstreamFailureError: The provider failed.
        """
        if not messages or not context:
            raise MissingParameterError(
                "messages" if not messages else "context", "Missing required parameters"
            )
        try:
            return await self._llm.chat(
                messages,
                system=build_chat_system_prompt(context),
                max_tokens=self._max_tokens,
            )
        except Exception as exc:
            logger.exception("Chat completion failed")
            raise UpstreamFailureError("Error processing chat") from exc
