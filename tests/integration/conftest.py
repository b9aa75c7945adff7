"""Integration test fixtures for AudioScribe.

Provides an async HTTP client and a sync TestClient (for WebSocket) over an
app whose assistant and caption session are wired to mocks and fakes.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from audioscribe.api.app import create_app
from audioscribe.api.dependencies import get_assistant, get_caption_session
from audioscribe.services.assistant import AssistantService


@pytest.fixture
def assistant(mock_llm, mock_stt):
    return AssistantService(llm=mock_llm, stt=mock_stt)


@pytest.fixture
def app(assistant, caption_session):
    """Create a fresh FastAPI application with test dependencies."""
    application = create_app()
    application.dependency_overrides[get_assistant] = lambda: assistant
    application.dependency_overrides[get_caption_session] = lambda: caption_session
    return application


@pytest.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def test_client(app):
    """Synchronous TestClient for WebSocket tests."""
    with TestClient(app) as c:
        yield c
