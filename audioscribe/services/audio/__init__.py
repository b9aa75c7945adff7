"""
Audio module - Audio processing, buffering and encoding utilities.

The sounddevice-backed ``MicrophoneSource`` lives in ``.microphone`` and is
imported on demand because PortAudio is loaded at import time.
"""

from .encoder import AudioArtifact, AudioEncoder
from .processor import AudioProcessor
from .recorder import AudioBuffer

__all__ = ["AudioArtifact", "AudioBuffer", "AudioEncoder", "AudioProcessor"]
