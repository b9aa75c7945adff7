"""
Caption session REST endpoints.

Start and stop the shared recording session, poll its state, download the
finalized recording and export the caption history.
"""

from fastapi import APIRouter, Depends, Response

from audioscribe.api.dependencies import get_caption_session
from audioscribe.core.exceptions import RecordingNotAvailableError
from audioscribe.core.models import CaptionStateResponse
from audioscribe.services.captioning import CaptionSession

router = APIRouter(prefix="/captions", tags=["captions"])


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("", response_model=CaptionStateResponse)
async def get_state(session: CaptionSession = Depends(get_caption_session)) -> CaptionStateResponse:
    return session.snapshot()


@router.post("/start", response_model=CaptionStateResponse)
async def start_captions(
    session: CaptionSession = Depends(get_caption_session),
) -> CaptionStateResponse:
    """Open the microphone and begin live captioning.

    Returns 409 while a session is active and 503 when no microphone can be
    opened.
    """
    await session.start()
    return session.snapshot()


@router.post("/stop", response_model=CaptionStateResponse)
async def stop_captions(
    session: CaptionSession = Depends(get_caption_session),
) -> CaptionStateResponse:
    """Stop the session; calling it while idle is a no-op."""
    session.stop()
    return session.snapshot()


@router.get("/recording")
async def download_recording(session: CaptionSession = Depends(get_caption_session)) -> Response:
    artifact = session.artifact
    if artifact is None:
        raise RecordingNotAvailableError()
    return Response(
        content=artifact.data,
        media_type=artifact.media_type,
        headers=_attachment(artifact.filename),
    )


@router.get("/export")
async def export_transcript(session: CaptionSession = Depends(get_caption_session)) -> Response:
    """Download the caption history as ``transcript-YYYY-MM-DD.txt``."""
    document = session.export()
    return Response(
        content=document.text,
        media_type=document.media_type,
        headers=_attachment(document.filename),
    )
