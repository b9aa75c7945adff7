"""
Pydantic v2 request / response models used across the API layer.

Also holds the small immutable value types shared by the captioning
session and the recognizers (``CaptionEntry``, ``RecognitionFragment``).
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


# ---------------------------------------------------------------------------
# Text adapters
# ---------------------------------------------------------------------------


class TranscribeResponse(BaseModel):
    """POST /api/transcribe response."""

    text: str


class SummarizeRequest(BaseModel):
    """POST /api/summarize request body.

    ``text`` is optional at the schema level so an absent field surfaces as
    a 400 ``MISSING_PARAMETER`` instead of a 422 validation error.
    """

    text: str | None = None


class SummarizeResponse(BaseModel):
    summary: str


class TranslateRequest(BaseModel):
    """POST /api/translate request body (``targetLanguage`` on the wire)."""

    model_config = ConfigDict(populate_by_name=True)

    text: str | None = None
    target_language: str | None = Field(default=None, alias="targetLanguage")


class TranslateResponse(BaseModel):
    translation: str


class ChatMessage(BaseModel):
    """One turn of the conversation, in chat-completion format."""

    role: str
    content: str


class ChatRequest(BaseModel):
    """POST /api/chat request body."""

    messages: list[ChatMessage] | None = None
    context: str | None = None


class ChatResponse(BaseModel):
    response: str


# ---------------------------------------------------------------------------
# Live captions
# ---------------------------------------------------------------------------


class SessionStatus(StrEnum):
    """States of the recording / captioning session."""

    idle = "idle"
    active = "active"


class CaptionEntry(BaseModel):
    """One committed utterance in the caption history."""

    model_config = ConfigDict(frozen=True)

    text: str
    timestamp: str
    is_final: bool = True


class RecognitionFragment(BaseModel):
    """A single recognizer result inside a result batch."""

    model_config = ConfigDict(frozen=True)

    transcript: str
    is_final: bool = False
    confidence: float = 0.0


class CaptionStateResponse(BaseModel):
    """Snapshot of the captioning session returned by the caption endpoints."""

    status: SessionStatus
    current_transcript: str = ""
    history: list[CaptionEntry] = Field(default_factory=list)
    captioning_enabled: bool = False
    can_export: bool = False
    recording_available: bool = False
    restart_count: int = 0


# ---------------------------------------------------------------------------
# WebSocket
# ---------------------------------------------------------------------------


class WebSocketMessageType(StrEnum):
    """Discriminator for messages sent over the caption WebSocket."""

    connected = "connected"
    state = "state"
    transcript = "transcript"
    caption = "caption"
    recording = "recording"
    error = "error"


class WebSocketMessage(BaseModel):
    """JSON message sent from server to client over WebSocket."""

    type: WebSocketMessageType
    data: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Error
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard JSON error envelope returned by the error handlers."""

    detail: str
    code: str
    timestamp: str
