"""Plain-text transcript export of a caption history."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from audioscribe.core.models import CaptionEntry


@dataclass(frozen=True)
class TranscriptDocument:
    """A rendered transcript, offered to the user as a file download."""

    filename: str
    text: str
    media_type: str = "text/plain"


def render_transcript(entries: Iterable[CaptionEntry]) -> str:
    """Render entries as ``[timestamp] text`` blocks separated by a blank line."""
    return "\n\n".join(f"[{entry.timestamp}] {entry.text}" for entry in entries)


def transcript_filename(day: date) -> str:
    """Return the download name for a transcript exported on ``day``."""
    return f"transcript-{day.isoformat()}.txt"


def build_transcript(entries: Iterable[CaptionEntry], day: date) -> TranscriptDocument:
    return TranscriptDocument(
        filename=transcript_filename(day),
        text=render_transcript(entries),
    )
