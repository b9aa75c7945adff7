"""Tests for StreamingRecognizer (windowed live recognition over a mocked STT)."""

import asyncio

import pytest

from audioscribe.core.exceptions import RecognitionRuntimeError
from audioscribe.services.transcription.live import StreamingRecognizer


async def _settle(rounds: int = 20) -> None:
    """Let the recognizer task drain its queue."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class _Collector:
    def __init__(self) -> None:
        self.results = []
        self.errors = []
        self.ends = 0

    def on_end(self) -> None:
        self.ends += 1


@pytest.fixture
def collector():
    return _Collector()


@pytest.fixture
async def recognizer(mock_stt, collector):
    instance = StreamingRecognizer(
        mock_stt,
        sample_rate=16000,
        channels=1,
        window_seconds=0.5,
        interim_seconds=0.25,
        silence_windows=2,
        language="en",
    )
    instance.bind(
        on_result=collector.results.append,
        on_error=collector.errors.append,
        on_end=collector.on_end,
    )
    yield instance
    instance.stop()
    await _settle()


class TestWindows:
    async def test_full_window_emits_final(self, recognizer, collector, mock_stt, tone):
        recognizer.start()

        recognizer.feed(tone(0.5))
        await _settle()

        [fragments] = collector.results
        assert [(f.transcript, f.is_final) for f in fragments] == [
            ("This is a test transcription.", True)
        ]
        args, kwargs = mock_stt.transcribe.call_args
        assert args[0].startswith(b"RIFF")
        assert kwargs == {"filename": "caption.wav", "language": "en"}

    async def test_partial_window_emits_interim(self, recognizer, collector, mock_stt, tone):
        mock_stt.transcribe.side_effect = [{"text": "this is"}, {"text": "this is a test"}]
        recognizer.start()

        recognizer.feed(tone(0.25))
        await _settle()
        recognizer.feed(tone(0.25))
        await _settle()

        flat = [(f.transcript, f.is_final) for batch in collector.results for f in batch]
        assert flat == [("this is", False), ("this is a test", True)]

    async def test_interim_disabled(self, mock_stt, collector, tone):
        recognizer = StreamingRecognizer(mock_stt, window_seconds=0.5, interim_seconds=0)
        recognizer.bind(collector.results.append, collector.errors.append, collector.on_end)
        recognizer.start()

        recognizer.feed(tone(0.25))
        await _settle()

        assert collector.results == []
        mock_stt.transcribe.assert_not_awaited()
        recognizer.stop()

    async def test_blank_text_not_emitted(self, recognizer, collector, mock_stt, tone):
        mock_stt.transcribe.return_value = {"text": "  "}
        recognizer.start()

        recognizer.feed(tone(0.5))
        await _settle()

        assert collector.results == []


class TestSilence:
    async def test_silent_windows_end_the_run(self, recognizer, collector, mock_stt, silence):
        recognizer.start()

        recognizer.feed(silence(1.0))
        await _settle()

        assert recognizer.is_running is False
        assert collector.ends == 1
        mock_stt.transcribe.assert_not_awaited()

    async def test_speech_resets_silence_count(self, recognizer, collector, silence, tone):
        recognizer.start()

        recognizer.feed(silence(0.5))
        recognizer.feed(tone(0.5))
        recognizer.feed(silence(0.5))
        await _settle()

        assert recognizer.is_running is True
        assert collector.ends == 0

    async def test_zero_never_ends(self, mock_stt, collector, silence):
        recognizer = StreamingRecognizer(mock_stt, window_seconds=0.5, silence_windows=0)
        recognizer.bind(collector.results.append, collector.errors.append, collector.on_end)
        recognizer.start()

        recognizer.feed(silence(3.0))
        await _settle()

        assert recognizer.is_running is True
        recognizer.stop()

    async def test_restart_after_natural_end(self, recognizer, collector, silence, tone):
        recognizer.start()
        recognizer.feed(silence(1.0))
        await _settle()

        recognizer.start()
        recognizer.feed(tone(0.5))
        await _settle()

        assert recognizer.is_running is True
        assert len(collector.results) == 1


class TestLifecycle:
    async def test_stop_fires_end_once(self, recognizer, collector):
        recognizer.start()

        recognizer.stop()
        await _settle()

        assert recognizer.is_running is False
        assert collector.ends == 1

    async def test_feed_when_idle_is_ignored(self, recognizer, collector, tone):
        recognizer.feed(tone(0.5))
        await _settle()

        assert collector.results == []

    async def test_start_twice_keeps_one_task(self, recognizer):
        recognizer.start()
        task = recognizer._task

        recognizer.start()

        assert recognizer._task is task

    async def test_provider_failure_reported_and_run_continues(
        self, recognizer, collector, mock_stt, tone
    ):
        mock_stt.transcribe.side_effect = [ConnectionError("offline"), {"text": "recovered"}]
        recognizer.start()

        recognizer.feed(tone(0.5))
        recognizer.feed(tone(0.5))
        await _settle()

        [error] = collector.errors
        assert isinstance(error, RecognitionRuntimeError)
        assert "offline" in error.detail
        assert collector.results[0][0].transcript == "recovered"
        assert recognizer.is_running is True
