"""Process-wide captioning session.

The microphone and the recognizer can only be owned by one session at a
time, so the API layer shares a single ``CaptionSession`` built lazily from
the application settings.

Usage::

    from audioscribe.services.captioning.manager import get_caption_session

    session = get_caption_session()
    await session.start()
"""

import logging
from functools import partial

from audioscribe.core.config import Settings, get_settings
from audioscribe.services.audio.encoder import AudioEncoder
from audioscribe.services.captioning.session import CaptionSession
from audioscribe.services.transcription import create_recognizer

logger = logging.getLogger(__name__)

_session: CaptionSession | None = None


def build_caption_session(settings: Settings) -> CaptionSession:
    """Wire a session to the local microphone and the configured recognizer."""
    # sounddevice loads PortAudio at import time; only pay for it when recording.
    from audioscribe.services.audio.microphone import MicrophoneSource

    source = MicrophoneSource(
        sample_rate=settings.audio_sample_rate,
        channels=settings.audio_channels,
        block_seconds=settings.audio_block_seconds,
    )
    encoder = AudioEncoder(
        sample_rate=settings.audio_sample_rate,
        channels=settings.audio_channels,
        audio_format=settings.audio_format,
    )
    return CaptionSession(
        audio_source=source,
        encoder=encoder,
        recognizer_factory=partial(create_recognizer, settings),
        timestamp_format=settings.caption_timestamp_format,
    )


def get_caption_session() -> CaptionSession:
    """Return the shared session, creating it on first use."""
    global _session
    if _session is None:
        _session = build_caption_session(get_settings())
        logger.info("Caption session initialized")
    return _session


def cleanup() -> None:
    """Stop an active session (called during app shutdown)."""
    if _session is not None and _session.stop() is not None:
        logger.info("Active recording stopped during shutdown")
