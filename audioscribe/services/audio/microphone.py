"""Local microphone capture via sounddevice (PortAudio).

PortAudio invokes the stream callback on its own thread; every block is
handed to the event loop with ``call_soon_threadsafe`` so the session only
ever sees chunks on the loop thread, in capture order.
"""

import asyncio
import logging

import sounddevice as sd

from audioscribe.core.exceptions import DeviceUnavailableError
from audioscribe.services.captioning.base import AudioStream, BaseAudioSource, ChunkHandler

logger = logging.getLogger(__name__)


class MicrophoneStream(AudioStream):
    """An open 16-bit PCM input stream on one device."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._stream: sd.RawInputStream | None = None
        self._on_chunk: ChunkHandler | None = None

    def open(
        self,
        sample_rate: int,
        channels: int,
        blocksize: int,
        device: int | str | None = None,
    ) -> None:
        """Open the device. Blocking; called from a worker thread."""
        self._stream = sd.RawInputStream(
            samplerate=sample_rate,
            channels=channels,
            dtype="int16",
            blocksize=blocksize,
            device=device,
            callback=self._callback,
        )

    def _callback(self, indata, frames, time_info, status) -> None:  # noqa: ANN001
        """PortAudio thread: copy the block and hand it to the loop."""
        if status:
            logger.debug("Input stream status: %s", status)
        data = bytes(indata)
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._deliver, data)

    def _deliver(self, data: bytes) -> None:
        if self._on_chunk is not None:
            self._on_chunk(data)

    def start(self, on_chunk: ChunkHandler) -> None:
        if self._stream is None:
            raise DeviceUnavailableError("Microphone stream is not open")
        self._on_chunk = on_chunk
        try:
            self._stream.start()
        except sd.PortAudioError as exc:
            self._on_chunk = None
            raise DeviceUnavailableError(f"Could not start microphone: {exc}") from exc

    def stop(self) -> None:
        self._on_chunk = None
        if self._stream is not None and self._stream.active:
            self._stream.stop()

    def close(self) -> None:
        self._on_chunk = None
        if self._stream is not None:
            stream, self._stream = self._stream, None
            stream.close()
            logger.debug("Microphone released")


class MicrophoneSource(BaseAudioSource):
    """Opens the default (or a named) input device.

    Args:
        sample_rate: Capture rate in Hz.
        channels: Channel count.
        block_seconds: Duration of each delivered chunk.
        device: sounddevice device index or name; None for the system default.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        block_seconds: float = 0.25,
        device: int | str | None = None,
    ) -> None:
        self._sample_rate = sample_rate
        self._channels = channels
        self._blocksize = max(1, int(sample_rate * block_seconds))
        self._device = device

    async def acquire(self) -> MicrophoneStream:
        stream = MicrophoneStream(asyncio.get_running_loop())
        try:
            await asyncio.to_thread(
                stream.open,
                self._sample_rate,
                self._channels,
                self._blocksize,
                self._device,
            )
        except (sd.PortAudioError, ValueError) as exc:
            logger.warning("Microphone unavailable: %s", exc)
            raise DeviceUnavailableError(f"Microphone unavailable: {exc}") from exc
        logger.info(
            "Microphone opened: %d Hz, %d channel(s), device=%s",
            self._sample_rate,
            self._channels,
            self._device if self._device is not None else "default",
        )
        return stream
