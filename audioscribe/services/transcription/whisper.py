"""Local Whisper STT implementation using faster-whisper.

The WhisperModel is loaded lazily and cached at module level to avoid
repeated initialization overhead. Inference is CPU-bound and runs in a
worker thread.
"""

import asyncio
import io
import logging
import math

from faster_whisper import WhisperModel

from audioscribe.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)

_model_cache: WhisperModel | None = None


class WhisperSTT(BaseSTT):
    """Speech-to-text provider using faster-whisper (CTranslate2).

    Args:
        model_size: Whisper model size (tiny, base, small, medium, large-v3).
        device: Computation device ("cpu" or "cuda").
        compute_type: CTranslate2 compute type ("int8", "float16", etc.).
    """

    def __init__(
        self,
        model_size: str = "base",
        device: str = "cpu",
        compute_type: str = "int8",
    ) -> None:
        self._model_size = model_size
        self._device = device
        self._compute_type = compute_type

    def _get_model(self) -> WhisperModel:
        """Return the cached WhisperModel, loading it on first use."""
        global _model_cache  # noqa: PLW0603
        if _model_cache is None:
            logger.info(
                "Loading Whisper model: %s (device=%s, compute=%s)",
                self._model_size,
                self._device,
                self._compute_type,
            )
            _model_cache = WhisperModel(
                self._model_size,
                device=self._device,
                compute_type=self._compute_type,
            )
        return _model_cache

    def _run_transcription(
        self,
        audio: bytes,
        language: str | None = None,
        beam_size: int = 5,
        vad_filter: bool = True,
    ) -> tuple:
        """Run synchronous transcription (CPU-bound).

        Must be called via asyncio.to_thread(). The segment iterator is
        materialized into a list inside this function to avoid CTranslate2
        thread-safety issues.

        Returns:
            Tuple of (list[segment_objects], info_object).
        """
        model = self._get_model()
        segments_iter, info = model.transcribe(
            io.BytesIO(audio),
            language=language,
            beam_size=beam_size,
            vad_filter=vad_filter,
        )
        segments = list(segments_iter)
        return segments, info

    @staticmethod
    def _logprob_to_confidence(avg_logprob: float) -> float:
        """Convert average log probability to a 0-1 confidence score."""
        return max(0.0, min(1.0, math.exp(avg_logprob)))

    async def transcribe(self, audio: bytes, filename: str = "audio.wav", **kwargs) -> dict:
        """Transcribe an encoded audio file.

        Args:
            audio: File contents; any format ffmpeg/PyAV can decode.
            filename: Unused; faster-whisper sniffs the container.
            **kwargs: Optional keys: language, beam_size, vad_filter.

        Returns:
            Dict with text, language, confidence and duration.
        """
        try:
            segments, info = await asyncio.to_thread(
                self._run_transcription,
                audio,
                language=kwargs.get("language"),
                beam_size=kwargs.get("beam_size", 5),
                vad_filter=kwargs.get("vad_filter", True),
            )
        except Exception as exc:
            raise RuntimeError(f"Whisper transcription failed: {exc}") from exc

        texts = [seg.text.strip() for seg in segments if seg.text.strip()]
        confidence = 0.0
        if segments:
            avg_logprob = sum(seg.avg_logprob for seg in segments) / len(segments)
            confidence = self._logprob_to_confidence(avg_logprob)

        return {
            "text": " ".join(texts),
            "language": info.language or "unknown",
            "confidence": confidence,
            "duration": info.duration,
        }
