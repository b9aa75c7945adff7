"""Finalization of captured PCM chunks into one downloadable audio file."""

import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import soundfile as sf

logger = logging.getLogger(__name__)

# format -> (soundfile subtype, media type)
_FORMATS: dict[str, tuple[str, str]] = {
    "wav": ("PCM_16", "audio/wav"),
    "flac": ("PCM_16", "audio/flac"),
    "ogg": ("VORBIS", "audio/ogg"),
}


@dataclass(frozen=True)
class AudioArtifact:
    """A finalized recording, ready to download or transcribe."""

    data: bytes
    media_type: str
    filename: str
    duration: float


class AudioEncoder:
    """Encodes ordered 16-bit PCM chunks into a single audio container.

    Args:
        sample_rate: Sample rate of the incoming PCM.
        channels: Interleaved channel count of the incoming PCM.
        audio_format: Output container ("wav", "flac" or "ogg").
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        audio_format: str = "wav",
    ) -> None:
        if audio_format not in _FORMATS:
            raise ValueError(
                f"Unsupported audio format: {audio_format} (expected one of {sorted(_FORMATS)})"
            )
        self._sample_rate = sample_rate
        self._channels = channels
        self._format = audio_format

    @property
    def media_type(self) -> str:
        return _FORMATS[self._format][1]

    def finalize(self, chunks: Sequence[bytes]) -> AudioArtifact:
        """Concatenate chunks in the given order and encode them.

        Args:
            chunks: Raw int16 PCM chunks in production order.

        Returns:
            The encoded recording.
        """
        pcm = b"".join(chunks)
        frame_size = 2 * self._channels
        if len(pcm) % frame_size:
            logger.warning("Dropping %d trailing bytes of a partial frame", len(pcm) % frame_size)
            pcm = pcm[: len(pcm) - len(pcm) % frame_size]

        samples = np.frombuffer(pcm, dtype=np.int16)
        if self._channels > 1:
            samples = samples.reshape(-1, self._channels)

        subtype, media_type = _FORMATS[self._format]
        buf = io.BytesIO()
        sf.write(buf, samples, self._sample_rate, format=self._format.upper(), subtype=subtype)

        duration = len(pcm) / (frame_size * self._sample_rate)
        logger.info(
            "Finalized recording: %d chunks, %.1fs, format=%s",
            len(chunks),
            duration,
            self._format,
        )
        return AudioArtifact(
            data=buf.getvalue(),
            media_type=media_type,
            filename=f"recording.{self._format}",
            duration=duration,
        )
