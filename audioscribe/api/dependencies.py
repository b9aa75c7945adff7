"""
FastAPI dependencies.

Routes receive their services through ``Depends`` so tests can swap them
with ``app.dependency_overrides``.
"""

from functools import lru_cache

from audioscribe.core.config import get_settings
from audioscribe.services.assistant import AssistantService
from audioscribe.services.captioning import CaptionSession, manager
from audioscribe.services.llm import create_llm
from audioscribe.services.transcription import create_stt


@lru_cache
def get_assistant() -> AssistantService:
    """Return the shared assistant built from the configured providers."""
    settings = get_settings()
    return AssistantService(
        llm=create_llm(settings),
        stt=create_stt(settings),
        max_tokens=settings.llm_max_tokens,
        translate_max_tokens=settings.translate_max_tokens,
        default_target_language=settings.default_target_language,
    )


def get_caption_session() -> CaptionSession:
    return manager.get_caption_session()
