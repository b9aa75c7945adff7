"""
Captioning module - Recording and live-caption session.
"""

from .base import AudioStream, BaseAudioSource, BaseRecognizer
from .export import TranscriptDocument, render_transcript
from .session import CaptionSession

__all__ = [
    "AudioStream",
    "BaseAudioSource",
    "BaseRecognizer",
    "CaptionSession",
    "TranscriptDocument",
    "render_transcript",
]
