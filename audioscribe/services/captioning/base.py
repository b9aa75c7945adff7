"""
Abstract collaborators of the captioning session.

The session owns exactly one ``AudioStream`` (obtained from a
``BaseAudioSource``) and at most one ``BaseRecognizer`` while it is active.
Implementations must deliver every callback on the event loop thread so the
session's handlers never interleave.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

from audioscribe.core.exceptions import RecognitionRuntimeError
from audioscribe.core.models import RecognitionFragment

ChunkHandler = Callable[[bytes], None]
ResultHandler = Callable[[Sequence[RecognitionFragment]], None]
ErrorHandler = Callable[[RecognitionRuntimeError], None]
EndHandler = Callable[[], None]


class AudioStream(ABC):
    """An acquired capture device producing raw 16-bit PCM chunks."""

    @abstractmethod
    def start(self, on_chunk: ChunkHandler) -> None:
        """Begin capture; ``on_chunk`` receives chunks in production order."""

    @abstractmethod
    def stop(self) -> None:
        """Stop producing chunks."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying hardware. Must be safe to call twice."""


class BaseAudioSource(ABC):
    """Factory for capture streams."""

    @abstractmethod
    async def acquire(self) -> AudioStream:
        """Open the capture device.

        Raises:
            DeviceUnavailableError: Permission denied or no device present.
        """


class BaseRecognizer(ABC):
    """A continuous speech-recognition stream.

    The owner binds its handlers once, then calls ``start()`` / ``stop()``.
    ``on_end`` fires after every run has fully finished, whether it ended on
    its own (e.g. a silence timeout) or because ``stop()`` was called;
    restarting is the owner's decision.
    """

    def __init__(self) -> None:
        self._on_result: ResultHandler | None = None
        self._on_error: ErrorHandler | None = None
        self._on_end: EndHandler | None = None

    def bind(
        self,
        on_result: ResultHandler,
        on_error: ErrorHandler,
        on_end: EndHandler,
    ) -> None:
        self._on_result = on_result
        self._on_error = on_error
        self._on_end = on_end

    @abstractmethod
    def start(self) -> None:
        """Begin listening."""

    @abstractmethod
    def stop(self) -> None:
        """Stop listening; ``on_end`` follows once the run has finished."""

    def feed(self, chunk: bytes) -> None:
        """Receive recorded audio. Recognizers with their own input ignore it."""

    def _emit_result(self, fragments: Sequence[RecognitionFragment]) -> None:
        if self._on_result is not None:
            self._on_result(fragments)

    def _emit_error(self, error: RecognitionRuntimeError) -> None:
        if self._on_error is not None:
            self._on_error(error)

    def _emit_end(self) -> None:
        if self._on_end is not None:
            self._on_end()
