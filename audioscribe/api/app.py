"""
FastAPI application factory.

``create_app()`` assembles the application with CORS, error handlers,
routers, and the health endpoint. The module-level ``app`` instance
allows ``uvicorn audioscribe.api.app:app --reload``.
"""

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from audioscribe import __version__
from audioscribe.api import websocket
from audioscribe.api.middleware.error_handler import register_error_handlers
from audioscribe.api.routes import assistant, captions
from audioscribe.core.config import get_settings
from audioscribe.core.models import HealthResponse
from audioscribe.services.captioning import manager

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s │ %(levelname)-7s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    )


@asynccontextmanager
async def lifespan(_app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(
        "AudioScribe starting (llm=%s, stt=%s, captions=%s)",
        settings.llm_provider,
        settings.stt_provider,
        settings.caption_provider,
    )
    yield
    manager.cleanup()
    logger.info("AudioScribe stopped")


def create_app() -> FastAPI:
    """Build and return a fully configured FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="AudioScribe",
        description="Audio transcription, summarization, translation and chat "
        "with live captioning.",
        version=__version__,
        lifespan=lifespan,
    )

    # -- CORS --
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- Health check (root-level, not under /api) --
    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(timestamp=datetime.now(UTC))

    # -- REST routes --
    app.include_router(assistant.router, prefix="/api")
    app.include_router(captions.router, prefix="/api")

    # -- WebSocket --
    app.include_router(websocket.router)

    return app


app = create_app()
