"""Continuous speech recognition on top of any file-based STT provider.

Recorded PCM is fed in as it is captured. Audio is cut into fixed windows:

* while a window fills up, the partial audio is transcribed every
  ``interim_seconds`` and emitted as an interim fragment;
* a full window is transcribed once and emitted as a final fragment;
* silent windows are skipped, and after ``silence_windows`` consecutive
  silent windows the run ends on its own, the way browser recognizers stop
  listening after a pause. The owner decides whether to restart.

Provider failures are reported as ``RecognitionRuntimeError`` and the run
continues with the next window.
"""

import asyncio
import logging

from audioscribe.core.exceptions import RecognitionRuntimeError
from audioscribe.core.models import RecognitionFragment
from audioscribe.services.audio.processor import AudioProcessor
from audioscribe.services.audio.recorder import AudioBuffer
from audioscribe.services.captioning.base import BaseRecognizer
from audioscribe.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


class StreamingRecognizer(BaseRecognizer):
    """Windowed recognizer emitting interim and final fragments.

    Args:
        stt: Provider used to transcribe each window.
        sample_rate: Sample rate of the fed PCM.
        channels: Channel count of the fed PCM.
        window_seconds: Audio per final fragment.
        interim_seconds: Interim refresh cadence; 0 disables interim results.
        silence_windows: Consecutive silent windows that end the run; 0 never ends.
        language: ISO 639-1 hint passed to the provider.
        silence_threshold: RMS level under which a window counts as silent.
    """

    def __init__(
        self,
        stt: BaseSTT,
        sample_rate: int = 16000,
        channels: int = 1,
        window_seconds: float = 4.0,
        interim_seconds: float = 1.0,
        silence_windows: int = 3,
        language: str | None = None,
        silence_threshold: float = 0.01,
    ) -> None:
        super().__init__()
        self._stt = stt
        self._sample_rate = sample_rate
        self._channels = channels
        self._window_seconds = window_seconds
        self._interim_seconds = interim_seconds
        self._silence_windows = silence_windows
        self._language = language
        self._silence_threshold = silence_threshold
        self._processor = AudioProcessor(sample_rate=sample_rate, channels=channels)
        self._queue: asyncio.Queue[bytes] | None = None
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            logger.debug("Recognizer already running")
            return
        self._queue = asyncio.Queue()
        self._task = asyncio.get_running_loop().create_task(self._run())
        self._task.add_done_callback(self._on_done)

    def stop(self) -> None:
        if self.is_running:
            self._task.cancel()

    def feed(self, chunk: bytes) -> None:
        if self.is_running and self._queue is not None:
            self._queue.put_nowait(chunk)

    def _on_done(self, task: asyncio.Task) -> None:
        # Runs after the task has fully finished, so a restart never overlaps it.
        if task.cancelled():
            logger.debug("Recognizer stopped")
        elif task.exception() is not None:
            logger.error("Recognizer crashed", exc_info=task.exception())
        self._emit_end()

    def _is_silent(self, pcm: bytes) -> bool:
        return self._processor.is_silent(
            self._processor.pcm_to_ndarray(pcm), threshold=self._silence_threshold
        )

    async def _transcribe(self, pcm: bytes) -> str:
        """Transcribe one window; failures are reported and yield no text."""
        try:
            result = await self._stt.transcribe(
                self._processor.to_wav_bytes(pcm),
                filename="caption.wav",
                language=self._language,
            )
        except Exception as exc:
            logger.warning("Caption transcription failed: %s", exc)
            self._emit_error(RecognitionRuntimeError(f"Caption transcription failed: {exc}"))
            return ""
        return result.get("text", "")

    def _silence_exhausted(self, silent_windows: int) -> bool:
        return 0 < self._silence_windows <= silent_windows

    async def _run(self) -> None:
        buffer = AudioBuffer(
            chunk_duration=self._window_seconds,
            sample_rate=self._sample_rate,
            channels=self._channels,
        )
        silent_windows = 0
        next_interim = self._interim_seconds

        while not self._silence_exhausted(silent_windows):
            buffer.add_bytes(await self._queue.get())

            while buffer.has_chunk() and not self._silence_exhausted(silent_windows):
                window = buffer.get_chunk()
                next_interim = self._interim_seconds
                if self._is_silent(window):
                    silent_windows += 1
                    continue
                silent_windows = 0
                text = await self._transcribe(window)
                if text.strip():
                    self._emit_result([RecognitionFragment(transcript=text, is_final=True)])

            if self._silence_exhausted(silent_windows):
                break

            if self._interim_seconds > 0 and buffer.buffered_duration >= next_interim:
                next_interim = buffer.buffered_duration + self._interim_seconds
                partial = buffer.peek()
                if partial and not self._is_silent(partial):
                    text = await self._transcribe(partial)
                    if text.strip():
                        self._emit_result([RecognitionFragment(transcript=text, is_final=False)])

        logger.info("Recognizer ended after %d silent windows", silent_windows)
