"""Shared pytest fixtures for the AudioScribe test suite.

Provides mock LLM/STT providers, PCM audio samples and in-memory fakes of
the microphone and speech recognizer used by the caption session.
"""

import math
import struct
from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from audioscribe.core.exceptions import DeviceUnavailableError
from audioscribe.services.audio.encoder import AudioEncoder
from audioscribe.services.captioning.base import AudioStream, BaseAudioSource, BaseRecognizer
from audioscribe.services.captioning.session import CaptionSession

# ---------------------------------------------------------------------------
# LLM / STT Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm():
    """Create a mock LLM provider implementing the BaseLLM interface."""
    from audioscribe.services.llm.base import BaseLLM

    llm = AsyncMock(spec=BaseLLM)
    llm.generate.return_value = "A short summary."
    llm.chat.return_value = "An answer about the summary."
    return llm


@pytest.fixture
def mock_stt():
    """Create a mock STT provider implementing the BaseSTT interface."""
    from audioscribe.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe.return_value = {
        "text": "This is a test transcription.",
        "language": "en",
        "confidence": 0.95,
    }
    return stt


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


def make_tone(seconds: float, sample_rate: int = 16000, amplitude: int = 16000) -> bytes:
    """Return ``seconds`` of 440Hz sine-wave PCM (16-bit, mono)."""
    return b"".join(
        struct.pack("<h", int(amplitude * math.sin(2 * math.pi * 440.0 * i / sample_rate)))
        for i in range(int(sample_rate * seconds))
    )


def make_silence(seconds: float, sample_rate: int = 16000) -> bytes:
    return b"\x00\x00" * int(sample_rate * seconds)


@pytest.fixture
def sample_pcm_bytes():
    """1 second of 440Hz sine-wave PCM audio (16kHz, 16-bit, mono)."""
    return make_tone(1.0)


@pytest.fixture
def silent_pcm_bytes():
    """1 second of silence as PCM audio (16kHz, 16-bit, mono)."""
    return make_silence(1.0)


# ---------------------------------------------------------------------------
# Caption session fakes
# ---------------------------------------------------------------------------


class FakeStream(AudioStream):
    """In-memory capture stream; tests push chunks with ``emit``."""

    def __init__(self, fail_on_start: bool = False) -> None:
        self.on_chunk = None
        self.started = False
        self.stopped = False
        self.close_calls = 0
        self._fail_on_start = fail_on_start

    def start(self, on_chunk) -> None:
        if self._fail_on_start:
            raise DeviceUnavailableError("Audio input stream failed to start")
        self.on_chunk = on_chunk
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def close(self) -> None:
        self.close_calls += 1

    def emit(self, chunk: bytes) -> None:
        self.on_chunk(chunk)


class FakeAudioSource(BaseAudioSource):
    """Hands out a fresh ``FakeStream`` per acquire, or raises ``error``."""

    def __init__(self) -> None:
        self.streams: list[FakeStream] = []
        self.error: Exception | None = None
        self.fail_on_start = False

    async def acquire(self) -> FakeStream:
        if self.error is not None:
            raise self.error
        stream = FakeStream(fail_on_start=self.fail_on_start)
        self.streams.append(stream)
        return stream

    @property
    def last(self) -> FakeStream:
        return self.streams[-1]


class FakeRecognizer(BaseRecognizer):
    """Recognizer driven by the test through ``result`` / ``error`` / ``end``."""

    def __init__(self) -> None:
        super().__init__()
        self.start_calls = 0
        self.stop_calls = 0
        self.fed: list[bytes] = []
        self.start_error: Exception | None = None

    def start(self) -> None:
        if self.start_error is not None:
            raise self.start_error
        self.start_calls += 1

    def stop(self) -> None:
        self.stop_calls += 1

    def feed(self, chunk: bytes) -> None:
        self.fed.append(chunk)

    def result(self, *fragments) -> None:
        self._emit_result(list(fragments))

    def error(self, error) -> None:
        self._emit_error(error)

    def end(self) -> None:
        self._emit_end()


class RecognizerFactory:
    """Records every recognizer it builds.

    ``error`` makes the factory raise; ``start_error`` is handed to each built
    recognizer so its ``start()`` raises.
    """

    def __init__(self) -> None:
        self.built: list[FakeRecognizer] = []
        self.error: Exception | None = None
        self.start_error: Exception | None = None

    def __call__(self) -> FakeRecognizer:
        if self.error is not None:
            raise self.error
        recognizer = FakeRecognizer()
        recognizer.start_error = self.start_error
        self.built.append(recognizer)
        return recognizer

    @property
    def last(self) -> FakeRecognizer:
        return self.built[-1]


@pytest.fixture
def audio_source():
    return FakeAudioSource()


@pytest.fixture
def recognizer_factory():
    return RecognizerFactory()


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 3, 5, 14, 7, 9)


@pytest.fixture
def caption_session(audio_source, recognizer_factory, fixed_clock):
    """A CaptionSession wired to fakes and a WAV encoder."""
    return CaptionSession(
        audio_source=audio_source,
        encoder=AudioEncoder(sample_rate=16000, channels=1, audio_format="wav"),
        recognizer_factory=recognizer_factory,
        clock=fixed_clock,
    )


@pytest.fixture
def tone():
    """Factory for sine-wave PCM of a given duration."""
    return make_tone


@pytest.fixture
def silence():
    """Factory for silent PCM of a given duration."""
    return make_silence
