"""
Assistant REST endpoints.

Each path accepts POST only; any other method is answered with 405 by the
router and wrapped in the error envelope.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from audioscribe.api.dependencies import get_assistant
from audioscribe.core.models import (
    ChatRequest,
    ChatResponse,
    SummarizeRequest,
    SummarizeResponse,
    TranscribeResponse,
    TranslateRequest,
    TranslateResponse,
)
from audioscribe.services.assistant import AssistantService

router = APIRouter(tags=["assistant"])


@router.post("/transcribe", response_model=TranscribeResponse)
async def transcribe(
    file: UploadFile | None = File(None),
    assistant: AssistantService = Depends(get_assistant),
) -> TranscribeResponse:
    """Transcribe an uploaded audio file (multipart field ``file``)."""
    audio = await file.read() if file is not None else None
    filename = file.filename if file is not None else None
    text = await assistant.transcribe(audio, filename)
    return TranscribeResponse(text=text)


@router.post("/summarize", response_model=SummarizeResponse)
async def summarize(
    body: SummarizeRequest,
    assistant: AssistantService = Depends(get_assistant),
) -> SummarizeResponse:
    summary = await assistant.summarize(body.text)
    return SummarizeResponse(summary=summary)


@router.post("/translate", response_model=TranslateResponse)
async def translate(
    body: TranslateRequest,
    assistant: AssistantService = Depends(get_assistant),
) -> TranslateResponse:
    translation = await assistant.translate(body.text, body.target_language)
    return TranslateResponse(translation=translation)


@router.post("/chat", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    assistant: AssistantService = Depends(get_assistant),
) -> ChatResponse:
    """Answer a question about a previously generated summary."""
    messages = [m.model_dump() for m in body.messages] if body.messages else None
    reply = await assistant.chat(messages, body.context)
    return ChatResponse(response=reply)
