"""
AudioScribe Streamlit UI, main entry point.

Run with: ``streamlit run audioscribe/ui/app.py``
"""

import streamlit as st

from audioscribe.ui.api_client import APIError, get_api_client
from audioscribe.ui.components.recorder import render_recorder

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="AudioScribe",
    page_icon="\U0001f399️",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Session state defaults
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "api_base_url": "http://localhost:8000",
    "pending_audio": None,
    "transcription": "",
    "summary": "",
    "translation": "",
    "target_language": "es",
    "chat_messages": [],
    "caption_state": None,
}

for key, value in _DEFAULTS.items():
    if key not in st.session_state:
        st.session_state[key] = value

_LANGUAGE_OPTIONS = [
    ("Spanish", "es"),
    ("French", "fr"),
    ("German", "de"),
    ("Italian", "it"),
    ("Portuguese", "pt"),
    ("Japanese", "ja"),
    ("Korean", "ko"),
    ("Chinese", "zh"),
]

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("\U0001f399️ AudioScribe")
    st.caption("Convert speech to text and summarize it using AI")
    st.divider()
    st.session_state.api_base_url = st.text_input(
        "Backend API URL",
        value=st.session_state.api_base_url,
        help="URL of the AudioScribe FastAPI backend (default: http://localhost:8000)",
    )
    _client = get_api_client(st.session_state.api_base_url)
    _conn_ok, _conn_msg = _client.check_connection()
    if _conn_ok:
        st.success(f"Backend: {_conn_msg}")
    else:
        st.error(f"Backend: {_conn_msg}")


def _process_audio(audio: dict) -> None:
    """Transcribe then summarize; a failed step keeps the previous results."""
    try:
        text = _client.transcribe(audio["data"], audio["filename"], audio.get("content_type"))
    except APIError as exc:
        st.error(f"Transcription failed: {exc.message}")
        return
    st.session_state.transcription = text

    try:
        summary = _client.summarize(text)
    except APIError as exc:
        st.error(f"Summarization failed: {exc.message}")
        return
    st.session_state.summary = summary


def _translate() -> None:
    try:
        translation = _client.translate(
            st.session_state.transcription, st.session_state.target_language
        )
    except APIError as exc:
        st.error(f"Translation failed: {exc.message}")
        return
    st.session_state.translation = translation


def _send_chat(question: str) -> bool:
    """Append the question and the reply only when the reply arrives."""
    messages = [*st.session_state.chat_messages, {"role": "user", "content": question}]
    try:
        reply = _client.chat(messages, st.session_state.summary)
    except APIError as exc:
        st.error(f"Chat failed: {exc.message}")
        return False
    st.session_state.chat_messages = [*messages, {"role": "assistant", "content": reply}]
    return True


# ---------------------------------------------------------------------------
# Input column: upload or record
# ---------------------------------------------------------------------------
left, right = st.columns(2)

with left:
    st.header("Upload Audio")
    uploaded = st.file_uploader("Audio file", type=["mp3", "wav", "m4a", "ogg"])
    if uploaded is not None:
        st.session_state.pending_audio = {
            "data": uploaded.getvalue(),
            "filename": uploaded.name,
            "content_type": uploaded.type,
        }

    st.subheader("Or Record Audio")
    render_recorder()

    pending = st.session_state.pending_audio
    if pending:
        st.markdown(f"Selected file: **{pending['filename']}**")
        if st.button("Process Audio", type="primary", use_container_width=True):
            with st.spinner("Processing..."):
                _process_audio(pending)

# ---------------------------------------------------------------------------
# Results column
# ---------------------------------------------------------------------------
with right:
    transcript_tab, summary_tab, translation_tab, chat_tab = st.tabs(
        ["Transcript", "Summary", "Translation", "Chat"]
    )

    with transcript_tab:
        st.write(st.session_state.transcription or "Transcription will appear here...")

    with summary_tab:
        st.write(st.session_state.summary or "Summary will appear here...")

    with translation_tab:
        labels = [label for label, _ in _LANGUAGE_OPTIONS]
        codes = [code for _, code in _LANGUAGE_OPTIONS]
        current = st.session_state.target_language
        selected = st.selectbox(
            "Target language",
            range(len(labels)),
            index=codes.index(current) if current in codes else 0,
            format_func=lambda i: labels[i],
        )
        st.session_state.target_language = codes[selected]
        if st.button("Translate", disabled=not st.session_state.transcription):
            with st.spinner("Translating..."):
                _translate()
        st.write(st.session_state.translation or "Translation will appear here...")

    with chat_tab:
        if not st.session_state.summary:
            st.info("Process some audio first; chat discusses its summary.")
        else:
            for message in st.session_state.chat_messages:
                with st.chat_message(message["role"]):
                    st.write(message["content"])
            question = st.chat_input("Ask about the content...")
            if question and question.strip():
                if _send_chat(question.strip()):
                    st.rerun()
