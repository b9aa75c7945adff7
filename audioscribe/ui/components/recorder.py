"""
Live caption panel.

Drives the backend caption session over REST and refreshes itself once a
second while recording. Stopping hands the finished recording to the
upload pipeline; "Use recording" selects it again after another upload.
"""

import logging

import streamlit as st

from audioscribe.ui.api_client import APIError, get_api_client

logger = logging.getLogger(__name__)


def _client():
    return get_api_client(st.session_state.get("api_base_url", "http://localhost:8000"))


def _start() -> None:
    try:
        st.session_state.caption_state = _client().start_captions()
    except APIError as exc:
        st.session_state.caption_error = exc.message


def _stop() -> None:
    try:
        state = _client().stop_captions()
    except APIError as exc:
        st.session_state.caption_error = exc.message
        return
    st.session_state.caption_state = state
    # The finished recording becomes the selected audio right away.
    if state.get("recording_available"):
        _use_recording()


def _use_recording() -> None:
    try:
        result = _client().download_recording()
    except APIError as exc:
        st.session_state.caption_error = exc.message
        return
    if result is None:
        st.session_state.caption_error = "No finished recording yet."
        return
    data, media_type = result
    extension = media_type.split("/")[-1]
    st.session_state.pending_audio = {
        "data": data,
        "filename": f"recording.{extension}",
        "content_type": media_type,
    }


@st.fragment(run_every=1.0)
def _render_live() -> None:
    """Poll the caption session and render the live transcript and history."""
    try:
        state = _client().get_caption_state()
    except APIError as exc:
        st.error(exc.message)
        return
    st.session_state.caption_state = state

    if state["status"] == "active":
        if state["captioning_enabled"]:
            st.markdown(f"**Live:** {state['current_transcript'] or '...'}")
        else:
            st.info("Recording without live captions (recognition unavailable).")

    for entry in reversed(state["history"]):
        st.markdown(f"`{entry['timestamp']}` {entry['text']}")


def render_recorder() -> None:
    """Render start/stop controls, live captions and post-recording actions."""
    state = st.session_state.get("caption_state") or {"status": "idle"}
    active = state.get("status") == "active"

    col1, col2 = st.columns(2)
    with col1:
        st.button("Start recording", on_click=_start, disabled=active, use_container_width=True)
    with col2:
        st.button("Stop recording", on_click=_stop, disabled=not active, use_container_width=True)

    error = st.session_state.pop("caption_error", None)
    if error:
        st.error(error)

    _render_live()

    if state.get("can_export"):
        try:
            filename, text = _client().export_transcript()
        except APIError as exc:
            st.error(exc.message)
        else:
            st.download_button(
                "Save transcript",
                data=text,
                file_name=filename,
                mime="text/plain",
            )
    if state.get("recording_available"):
        st.button("Use recording", on_click=_use_recording)
