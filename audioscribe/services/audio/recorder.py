"""Audio buffering for streaming recognition.

Accumulates incoming PCM bytes and yields fixed-duration windows that the
live recognizer transcribes. ``peek()`` exposes the partial window so the
recognizer can produce interim results before the window is complete.
"""


class AudioBuffer:
    """Accumulates PCM audio bytes and yields windows for transcription.

    Maintains a byte buffer and produces fixed-duration PCM windows
    with configurable overlap between consecutive windows.
    """

    def __init__(
        self,
        chunk_duration: float = 3.0,
        sample_rate: int = 16000,
        sample_width: int = 2,
        channels: int = 1,
        overlap_duration: float = 0.0,
    ) -> None:
        if overlap_duration >= chunk_duration:
            raise ValueError("overlap_duration must be shorter than chunk_duration")
        self._chunk_duration = chunk_duration
        self._sample_rate = sample_rate
        self._sample_width = sample_width
        self._channels = channels
        self._overlap_duration = overlap_duration
        self._buffer = bytearray()

    @property
    def _bytes_per_second(self) -> int:
        return self._sample_rate * self._sample_width * self._channels

    @property
    def _frame_size(self) -> int:
        return self._sample_width * self._channels

    @property
    def chunk_size_bytes(self) -> int:
        """Number of bytes required for one full window, frame aligned."""
        size = int(self._chunk_duration * self._bytes_per_second)
        return size - size % self._frame_size

    @property
    def _overlap_size_bytes(self) -> int:
        """Number of bytes for the overlap region, frame aligned."""
        size = int(self._overlap_duration * self._bytes_per_second)
        return size - size % self._frame_size

    @property
    def buffered_duration(self) -> float:
        """Duration of currently buffered audio in seconds."""
        return len(self._buffer) / self._bytes_per_second

    def add_bytes(self, data: bytes) -> None:
        """Append raw PCM bytes to the buffer."""
        self._buffer.extend(data)

    def has_chunk(self) -> bool:
        """Check if enough data has accumulated for a full window."""
        return len(self._buffer) >= self.chunk_size_bytes

    def get_chunk(self) -> bytes | None:
        """Extract one window from the buffer, retaining overlap.

        Returns:
            PCM bytes of the window, or None if not enough data.
        """
        if not self.has_chunk():
            return None

        chunk = bytes(self._buffer[: self.chunk_size_bytes])
        # Keep overlap bytes for the next window
        keep_from = self.chunk_size_bytes - self._overlap_size_bytes
        self._buffer = bytearray(self._buffer[keep_from:])
        return chunk

    def peek(self) -> bytes:
        """Return the frame-aligned buffered audio without consuming it."""
        usable = len(self._buffer) - (len(self._buffer) % self._frame_size)
        return bytes(self._buffer[:usable])

