"""
Global error handling for the FastAPI application.

Catches AudioScribeError subclasses, HTTP errors raised by routing (404,
405), Pydantic validation errors and unhandled exceptions, converting them
into a consistent JSON envelope.
"""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from audioscribe.core.exceptions import AudioScribeError

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def _envelope(status_code: int, detail: str, code: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "code": code,
            "timestamp": datetime.now(UTC).isoformat(),
        },
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    Registers four handlers:
    1. ``AudioScribeError``: maps domain errors to structured JSON responses.
    2. ``HTTPException``: routing errors such as an unsupported method (405).
    3. ``RequestValidationError``: Pydantic validation failures (422).
    4. ``Exception``: catch-all for unexpected server errors (500).

    Args:
        app: The FastAPI application instance to register handlers on.
    """

    @app.exception_handler(AudioScribeError)
    async def audioscribe_error_handler(_request: Request, exc: AudioScribeError) -> JSONResponse:
        """Convert domain-specific errors into a JSON error envelope."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "code": exc.code,
                "timestamp": exc.timestamp,
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Wrap framework HTTP errors, keeping headers such as ``Allow``."""
        if exc.status_code == 405:
            detail = "Method not allowed"
        else:
            detail = str(exc.detail)
        return _envelope(
            exc.status_code,
            detail,
            _HTTP_CODES.get(exc.status_code, "HTTP_ERROR"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle Pydantic request validation errors (malformed body/params)."""
        return _envelope(422, str(exc), "VALIDATION_ERROR")

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler; stack traces are logged, never returned."""
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _envelope(500, "Internal server error", "INTERNAL_ERROR")
