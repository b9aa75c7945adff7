"""Integration tests for the caption session REST endpoints."""

from audioscribe.core.exceptions import DeviceUnavailableError
from audioscribe.core.models import RecognitionFragment


async def test_initial_state_is_idle(async_client):
    resp = await async_client.get("/api/captions")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "idle"
    assert body["history"] == []
    assert body["can_export"] is False
    assert body["recording_available"] is False


async def test_start_and_second_start(async_client):
    resp = await async_client.post("/api/captions/start")
    assert resp.status_code == 200
    assert resp.json()["status"] == "active"
    assert resp.json()["captioning_enabled"] is True

    resp = await async_client.post("/api/captions/start")
    assert resp.status_code == 409
    assert resp.json()["code"] == "SESSION_ALREADY_ACTIVE"


async def test_start_without_microphone(async_client, audio_source):
    audio_source.error = DeviceUnavailableError("Microphone permission denied")

    resp = await async_client.post("/api/captions/start")

    assert resp.status_code == 503
    body = resp.json()
    assert body["code"] == "DEVICE_UNAVAILABLE"
    assert body["detail"] == "Microphone permission denied"

    state = await async_client.get("/api/captions")
    assert state.json()["status"] == "idle"


async def test_stop_is_idempotent(async_client):
    first = await async_client.post("/api/captions/stop")
    second = await async_client.post("/api/captions/stop")

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json()["status"] == "idle"
    assert second.json()["can_export"] is False


async def test_captions_visible_while_active(async_client, recognizer_factory):
    await async_client.post("/api/captions/start")
    recognizer_factory.last.result(RecognitionFragment(transcript="hello wor", is_final=False))

    body = (await async_client.get("/api/captions")).json()
    assert body["current_transcript"] == "hello wor"
    assert body["history"] == []

    recognizer_factory.last.result(RecognitionFragment(transcript="hello world", is_final=True))

    body = (await async_client.get("/api/captions")).json()
    assert body["history"] == [{"text": "hello world", "timestamp": "14:07:09", "is_final": True}]


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


async def test_export_before_completion(async_client):
    resp = await async_client.get("/api/captions/export")

    assert resp.status_code == 409
    assert resp.json()["code"] == "EXPORT_UNAVAILABLE"


async def test_export_unavailable_while_active(async_client):
    await async_client.post("/api/captions/start")

    resp = await async_client.get("/api/captions/export")

    assert resp.status_code == 409


async def test_export_after_stop(async_client, recognizer_factory):
    await async_client.post("/api/captions/start")
    recognizer_factory.last.result(RecognitionFragment(transcript="First line", is_final=True))
    recognizer_factory.last.result(RecognitionFragment(transcript="Second line", is_final=True))
    await async_client.post("/api/captions/stop")

    resp = await async_client.get("/api/captions/export")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.headers["content-disposition"] == 'attachment; filename="transcript-2024-03-05.txt"'
    assert resp.text == "[14:07:09] First line\n\n[14:07:09] Second line"


async def test_export_empty_history(async_client):
    await async_client.post("/api/captions/start")
    await async_client.post("/api/captions/stop")

    resp = await async_client.get("/api/captions/export")

    assert resp.status_code == 200
    assert resp.text == ""


# ---------------------------------------------------------------------------
# Recording
# ---------------------------------------------------------------------------


async def test_recording_missing(async_client):
    resp = await async_client.get("/api/captions/recording")

    assert resp.status_code == 404
    assert resp.json()["code"] == "RECORDING_NOT_AVAILABLE"


async def test_recording_after_stop(async_client, audio_source, sample_pcm_bytes):
    await async_client.post("/api/captions/start")
    audio_source.last.emit(sample_pcm_bytes)
    state = (await async_client.post("/api/captions/stop")).json()
    assert state["recording_available"] is True

    resp = await async_client.get("/api/captions/recording")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "audio/wav"
    assert resp.headers["content-disposition"] == 'attachment; filename="recording.wav"'
    assert resp.content[:4] == b"RIFF"


async def test_start_with_broken_recognizer_records_without_captions(
    async_client, recognizer_factory
):
    recognizer_factory.error = ValueError("Unknown STT provider: groq")

    resp = await async_client.post("/api/captions/start")

    assert resp.status_code == 200
    assert resp.json()["status"] == "active"
    assert resp.json()["captioning_enabled"] is False

    stopped = await async_client.post("/api/captions/stop")
    assert stopped.json()["recording_available"] is True
