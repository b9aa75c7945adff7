"""Recording + live-caption session.

A two-state machine (``idle`` / ``active``) that starts and stops a
microphone capture and a speech-recognition stream together and reconciles
them on stop.

Every handler runs to completion on the event loop, so a status check and
the transition that depends on it can never be interleaved with ``stop()``.
Callbacks from a recognizer that no longer belongs to the running session
(e.g. a late end event after a stop/start cycle) are ignored.

Usage::

    session = CaptionSession(audio_source, encoder, recognizer_factory)
    await session.start()
    ...
    artifact = session.stop()
    document = session.export()
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from audioscribe.core.exceptions import (
    CapabilityUnsupportedError,
    ExportUnavailableError,
    RecognitionRuntimeError,
    SessionAlreadyActiveError,
)
from audioscribe.core.models import (
    CaptionEntry,
    CaptionStateResponse,
    RecognitionFragment,
    SessionStatus,
    WebSocketMessage,
    WebSocketMessageType,
)
from audioscribe.services.audio.encoder import AudioArtifact, AudioEncoder
from audioscribe.services.captioning.base import AudioStream, BaseAudioSource, BaseRecognizer
from audioscribe.services.captioning.export import TranscriptDocument, build_transcript

logger = logging.getLogger(__name__)

Listener = Callable[[WebSocketMessage], None]


class CaptionSession:
    """Owns the capture stream, the recognizer and the caption history.

    Args:
        audio_source: Opens the microphone on ``start()``.
        encoder: Turns the buffered chunks into one artifact on ``stop()``.
        recognizer_factory: Builds a recognizer per session. ``None`` or a
            ``CapabilityUnsupportedError`` means recording without captions.
        on_complete: Receives the finalized artifact after every stop.
        timestamp_format: ``strftime`` format of caption timestamps.
        clock: Wall-clock source (local time).
    """

    def __init__(
        self,
        audio_source: BaseAudioSource,
        encoder: AudioEncoder,
        recognizer_factory: Callable[[], BaseRecognizer] | None = None,
        on_complete: Callable[[AudioArtifact], None] | None = None,
        timestamp_format: str = "%H:%M:%S",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._audio_source = audio_source
        self._encoder = encoder
        self._recognizer_factory = recognizer_factory
        self._on_complete = on_complete
        self._timestamp_format = timestamp_format
        self._clock = clock

        self._status = SessionStatus.idle
        self._starting = False
        self._stream: AudioStream | None = None
        self._recognizer: BaseRecognizer | None = None
        self._chunks: list[bytes] = []
        self._current_transcript = ""
        self._transcript_committed = False
        self._history: list[CaptionEntry] = []
        self._completed = False
        self._artifact: AudioArtifact | None = None
        self._restart_count = 0
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def current_transcript(self) -> str:
        return self._current_transcript

    @property
    def history(self) -> list[CaptionEntry]:
        """A copy of the caption history, in insertion order."""
        return list(self._history)

    @property
    def captioning_enabled(self) -> bool:
        return self._recognizer is not None

    @property
    def can_export(self) -> bool:
        """True once the current session has gone from active back to idle."""
        return self._completed

    @property
    def artifact(self) -> AudioArtifact | None:
        """The most recently finalized recording."""
        return self._artifact

    @property
    def restart_count(self) -> int:
        """Recognizer restarts performed during the current session."""
        return self._restart_count

    def snapshot(self) -> CaptionStateResponse:
        return CaptionStateResponse(
            status=self._status,
            current_transcript=self._current_transcript,
            history=self.history,
            captioning_enabled=self.captioning_enabled,
            can_export=self._completed,
            recording_available=self._artifact is not None,
            restart_count=self._restart_count,
        )

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            logger.debug("Listener was not registered")

    def _emit(self, type_: WebSocketMessageType, data: dict) -> None:
        message = WebSocketMessage(type=type_, data=data)
        for listener in list(self._listeners):
            try:
                listener(message)
            except Exception:
                logger.warning("Caption listener failed for %s event (non-fatal)", type_)

    def _emit_state(self) -> None:
        self._emit(
            WebSocketMessageType.state,
            self.snapshot().model_dump(mode="json", exclude={"history"}),
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Idle -> Active: open the microphone, reset captions, begin listening.

        Raises:
            SessionAlreadyActiveError: A session is running or starting.
            DeviceUnavailableError: The microphone could not be opened; the
                session stays idle and the previous captions are untouched.
        """
        if self._status is SessionStatus.active or self._starting:
            raise SessionAlreadyActiveError()

        self._starting = True
        try:
            stream = await self._audio_source.acquire()
        finally:
            self._starting = False

        try:
            stream.start(self._handle_chunk)
        except Exception:
            self._release_stream(stream)
            raise

        self._stream = stream
        self._chunks = []
        self._current_transcript = ""
        self._transcript_committed = False
        self._history = []
        self._completed = False
        self._restart_count = 0
        self._status = SessionStatus.active

        self._start_recognition()
        logger.info("Recording started (captions %s)", "on" if self.captioning_enabled else "off")
        self._emit_state()

    def stop(self) -> AudioArtifact | None:
        """Active -> Idle: tear everything down and finalize the recording.

        A no-op returning ``None`` when the session is already idle.

        Returns:
            The finalized recording.
        """
        if self._status is SessionStatus.idle:
            return None

        # Flip the status first so a late recognizer end never restarts.
        self._status = SessionStatus.idle
        stream, self._stream = self._stream, None
        recognizer, self._recognizer = self._recognizer, None

        try:
            if recognizer is not None:
                try:
                    recognizer.stop()
                except Exception:
                    logger.exception("Speech recognition did not stop cleanly")
            try:
                stream.stop()
            except Exception:
                logger.exception("Audio capture did not stop cleanly")
        finally:
            self._release_stream(stream)

        pending = self._current_transcript.strip()
        if pending and not self._transcript_committed:
            self._append_caption(pending)
        self._current_transcript = ""
        self._transcript_committed = False

        artifact = self._encoder.finalize(self._chunks)
        self._chunks = []
        self._artifact = artifact
        self._completed = True

        logger.info(
            "Recording stopped: %d captions, %.1fs audio", len(self._history), artifact.duration
        )
        self._emit_state()
        self._emit(
            WebSocketMessageType.recording,
            {
                "media_type": artifact.media_type,
                "filename": artifact.filename,
                "duration": artifact.duration,
                "size": len(artifact.data),
            },
        )
        if self._on_complete is not None:
            self._on_complete(artifact)
        return artifact

    def export(self) -> TranscriptDocument:
        """Render the caption history as a downloadable text document.

        Raises:
            ExportUnavailableError: No session has completed since the last start.
        """
        if not self._completed:
            raise ExportUnavailableError()
        return build_transcript(self._history, self._clock().date())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _start_recognition(self) -> None:
        if self._recognizer_factory is None:
            logger.info("No speech recognizer configured; recording without captions")
            return
        try:
            recognizer = self._recognizer_factory()
            recognizer.bind(
                on_result=lambda fragments: self._handle_result(recognizer, fragments),
                on_error=lambda error: self._handle_error(recognizer, error),
                on_end=lambda: self._handle_end(recognizer),
            )
            recognizer.start()
        except CapabilityUnsupportedError as exc:
            logger.warning("Live captions unavailable, recording without them: %s", exc.detail)
            return
        except Exception:
            logger.exception("Speech recognition failed to start; recording without captions")
            return
        self._recognizer = recognizer

    def _release_stream(self, stream: AudioStream) -> None:
        try:
            stream.close()
        except Exception:
            logger.exception("Failed to release the microphone")

    def _append_caption(self, text: str) -> None:
        entry = CaptionEntry(
            text=text,
            timestamp=self._clock().strftime(self._timestamp_format),
            is_final=True,
        )
        self._history.append(entry)
        self._emit(WebSocketMessageType.caption, entry.model_dump(mode="json"))

    def _handle_chunk(self, chunk: bytes) -> None:
        if self._status is not SessionStatus.active or not chunk:
            return
        self._chunks.append(chunk)
        if self._recognizer is not None:
            self._recognizer.feed(chunk)

    def _handle_result(
        self, recognizer: BaseRecognizer, fragments: Sequence[RecognitionFragment]
    ) -> None:
        if self._status is not SessionStatus.active or recognizer is not self._recognizer:
            return

        finals = [f.transcript for f in fragments if f.is_final]
        interims = [f.transcript for f in fragments if not f.is_final]
        has_final = bool(finals)
        final_text = "".join(finals)

        self._current_transcript = final_text if has_final else "".join(interims)
        self._transcript_committed = has_final
        self._emit(
            WebSocketMessageType.transcript,
            {"text": self._current_transcript, "is_final": has_final},
        )

        if has_final and final_text.strip():
            self._append_caption(final_text.strip())

    def _handle_error(self, recognizer: BaseRecognizer, error: RecognitionRuntimeError) -> None:
        if recognizer is not self._recognizer:
            return
        logger.warning("Speech recognition error: %s", error.detail)
        self._emit(WebSocketMessageType.error, {"detail": error.detail, "code": error.code})

    def _handle_end(self, recognizer: BaseRecognizer) -> None:
        if self._status is not SessionStatus.active or recognizer is not self._recognizer:
            logger.debug("Speech recognition ended")
            return

        self._restart_count += 1
        logger.info("Speech recognition ended while recording; restart #%d", self._restart_count)
        try:
            recognizer.start()
        except (CapabilityUnsupportedError, RecognitionRuntimeError) as exc:
            logger.warning("Could not restart speech recognition, captions off: %s", exc.detail)
            self._recognizer = None
            self._emit_state()
        except Exception:
            logger.exception("Speech recognition restart failed, captions off")
            self._recognizer = None
            self._emit_state()
