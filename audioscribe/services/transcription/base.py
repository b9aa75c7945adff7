"""
Abstract base class for Speech-to-Text providers.

All STT implementations (OpenAI API, local Whisper, etc.) must implement
this interface, enabling provider-agnostic transcription in the service layer.
"""

from abc import ABC, abstractmethod


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    @abstractmethod
    async def transcribe(self, audio: bytes, filename: str = "audio.wav", **kwargs) -> dict:
        """Transcribe an encoded audio file to text.

        Args:
            audio: Complete file contents (WAV, MP3, M4A, OGG, ...).
            filename: Original file name; its extension identifies the format.
            **kwargs: Provider-specific options (language, etc.).

        Returns:
            Dict with at least a ``text`` key.

        Raises:
            ConnectionError: Transient network / rate-limit failure.
            TimeoutError: The provider did not answer in time.
            RuntimeError: Any other provider failure.
        """
