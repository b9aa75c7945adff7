"""
Synchronous HTTP client for the AudioScribe backend API.

Uses ``httpx.Client`` (sync) because Streamlit scripts run synchronously.
"""

import logging
import re

import httpx
import streamlit as st

logger = logging.getLogger(__name__)


class APIError(Exception):
    """User-friendly API error with categorized message.

    Categories: "connection", "timeout", "http", "network", "unknown".
    ``status_code`` is set for "http" errors.
    """

    def __init__(
        self, message: str, category: str = "unknown", status_code: int | None = None
    ) -> None:
        self.message = message
        self.category = category
        self.status_code = status_code
        super().__init__(message)


class APIClient:
    """Thin synchronous wrapper around httpx for calling the FastAPI backend.

    All methods return parsed JSON (or raw bytes for downloads) or raise
    ``APIError`` with a message suitable for ``st.error``.
    """

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 60.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self._base_url, timeout=timeout)

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with user-friendly error handling.

        Raises:
            APIError: On connection, timeout, HTTP status, or network errors.
        """
        try:
            resp = getattr(self._client, method)(path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.ConnectError:
            raise APIError(
                "Backend server is not running. "
                "Start it with: `uvicorn audioscribe.api.app:app --port 8000`",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise APIError(
                "Request timed out. The server may be overloaded.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            try:
                detail = exc.response.json().get("detail", exc.response.text)
            except ValueError:
                detail = exc.response.text or str(exc)
            raise APIError(
                str(detail), category="http", status_code=exc.response.status_code
            ) from None
        except httpx.HTTPError as exc:
            raise APIError(f"Network error: {exc}", category="network") from None

    # -- health --

    def health_check(self) -> dict:
        return self._request("get", "/health").json()

    def check_connection(self) -> tuple[bool, str]:
        """Check if the backend is reachable. Returns (ok, message)."""
        try:
            self.health_check()
            return True, "Connected"
        except APIError as exc:
            return False, exc.message

    # -- assistant --

    def transcribe(self, audio: bytes, filename: str, content_type: str | None = None) -> str:
        files = {"file": (filename, audio, content_type or "application/octet-stream")}
        return self._request("post", "/api/transcribe", files=files, timeout=300.0).json()["text"]

    def summarize(self, text: str) -> str:
        return self._request("post", "/api/summarize", json={"text": text}).json()["summary"]

    def translate(self, text: str, target_language: str = "es") -> str:
        body = {"text": text, "targetLanguage": target_language}
        return self._request("post", "/api/translate", json=body).json()["translation"]

    def chat(self, messages: list[dict[str, str]], context: str) -> str:
        body = {"messages": messages, "context": context}
        return self._request("post", "/api/chat", json=body).json()["response"]

    # -- captions --

    def get_caption_state(self) -> dict:
        return self._request("get", "/api/captions").json()

    def start_captions(self) -> dict:
        return self._request("post", "/api/captions/start").json()

    def stop_captions(self) -> dict:
        return self._request("post", "/api/captions/stop").json()

    def download_recording(self) -> tuple[bytes, str] | None:
        """Fetch the finalized recording as (bytes, media type). None if absent."""
        try:
            resp = self._request("get", "/api/captions/recording")
        except APIError as exc:
            if exc.status_code == 404:
                return None
            raise
        return resp.content, resp.headers.get("content-type", "audio/wav")

    def export_transcript(self) -> tuple[str, str]:
        """Return (filename, text) of the caption transcript."""
        resp = self._request("get", "/api/captions/export")
        disposition = resp.headers.get("content-disposition", "")
        match = re.search(r'filename="?([^";]+)"?', disposition)
        return (match.group(1) if match else "transcript.txt"), resp.text


@st.cache_resource
def get_api_client(base_url: str = "http://localhost:8000") -> APIClient:
    """Return a cached APIClient, keyed by base_url."""
    return APIClient(base_url=base_url)
