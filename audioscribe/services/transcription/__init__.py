"""
Transcription module - Speech-to-text abstraction layer.

Factory functions for creating file-based STT providers and the streaming
recognizer used by live captioning.
"""

from audioscribe.core.config import Settings
from audioscribe.core.exceptions import CapabilityUnsupportedError

from .base import BaseSTT

__all__ = ["BaseSTT", "create_recognizer", "create_stt"]


def create_stt(settings: Settings) -> BaseSTT:
    """
    Factory function to create STT instance based on provider.

    Args:
        settings: Application settings; ``stt_provider`` selects the backend.

    Returns:
        BaseSTT implementation instance

    Raises:
        ValueError: If provider is unknown
    """
    provider = settings.stt_provider
    if provider == "openai":
        from .openai_stt import OpenAISTT

        return OpenAISTT(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            model=settings.openai_stt_model,
        )
    elif provider in ("local", "whisper"):
        from .whisper import WhisperSTT

        return WhisperSTT(model_size=settings.whisper_model, device=settings.whisper_device)
    else:
        raise ValueError(f"Unknown STT provider: {provider}")


def create_recognizer(settings: Settings):
    """Build a fresh streaming recognizer for one caption run.

    Raises:
        CapabilityUnsupportedError: Captioning is disabled or the selected
            provider cannot be reached without credentials.
    """
    if settings.caption_provider == "none":
        raise CapabilityUnsupportedError("Live captioning is disabled")
    if settings.stt_provider == "openai" and not settings.openai_api_key:
        raise CapabilityUnsupportedError("Live captioning requires an OpenAI API key")

    from .live import StreamingRecognizer

    return StreamingRecognizer(
        create_stt(settings),
        sample_rate=settings.audio_sample_rate,
        channels=settings.audio_channels,
        window_seconds=settings.caption_window_seconds,
        interim_seconds=settings.caption_interim_seconds,
        silence_windows=settings.caption_silence_windows,
        language=settings.caption_language.split("-")[0].lower() or None,
    )
