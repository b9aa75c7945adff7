"""
AudioScribe exception hierarchy.

All application-specific exceptions inherit from AudioScribeError,
enabling centralized error handling in the API middleware layer.
"""

from datetime import UTC, datetime


class AudioScribeError(Exception):
    """Base exception for all AudioScribe errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "AUDIOSCRIBE_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class MissingParameterError(AudioScribeError):
    """Raised when a required request field is absent or empty."""

    def __init__(self, parameter: str, detail: str | None = None) -> None:
        self.parameter = parameter
        super().__init__(
            detail=detail or f"Missing required parameter: {parameter}",
            code="MISSING_PARAMETER",
            status_code=400,
        )


class UpstreamFailureError(AudioScribeError):
    """Raised when the external inference API fails or times out.

    The detail is a fixed, user-facing message; the provider error is only
    logged so upstream implementation details never reach the client.
    """

    def __init__(self, detail: str = "Upstream service error") -> None:
        super().__init__(
            detail=detail,
            code="UPSTREAM_FAILURE",
            status_code=500,
        )


class DeviceUnavailableError(AudioScribeError):
    """Raised when the microphone cannot be opened (permission or hardware)."""

    def __init__(self, detail: str = "Microphone is not available") -> None:
        super().__init__(
            detail=detail,
            code="DEVICE_UNAVAILABLE",
            status_code=503,
        )


class CapabilityUnsupportedError(AudioScribeError):
    """Raised when live speech recognition is not available.

    Callers treat this as degraded mode: recording continues without captions.
    """

    def __init__(self, detail: str = "Speech recognition is not supported") -> None:
        super().__init__(
            detail=detail,
            code="CAPABILITY_UNSUPPORTED",
            status_code=501,
        )


class RecognitionRuntimeError(AudioScribeError):
    """Transient speech-recognition failure; logged, never interrupts a session."""

    def __init__(self, detail: str = "Speech recognition error") -> None:
        super().__init__(
            detail=detail,
            code="RECOGNITION_ERROR",
            status_code=500,
        )


class SessionAlreadyActiveError(AudioScribeError):
    """Raised when trying to start a recording while one is already active."""

    def __init__(self) -> None:
        super().__init__(
            detail="A recording is already active",
            code="SESSION_ALREADY_ACTIVE",
            status_code=409,
        )


class ExportUnavailableError(AudioScribeError):
    """Raised when a transcript export is requested before a session completed."""

    def __init__(self) -> None:
        super().__init__(
            detail="No completed recording to export",
            code="EXPORT_UNAVAILABLE",
            status_code=409,
        )


class RecordingNotAvailableError(AudioScribeError):
    """Raised when the finalized recording is requested but none exists."""

    def __init__(self) -> None:
        super().__init__(
            detail="No finalized recording is available",
            code="RECORDING_NOT_AVAILABLE",
            status_code=404,
        )
