"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """AudioScribe application settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        llm_provider: Chat-completion backend ("openai", "claude" or "ollama").
        stt_provider: Speech-to-text backend ("openai" for the hosted API,
            "local" for faster-whisper).
        caption_provider: Live-caption recognizer ("stt" streams microphone
            audio through ``stt_provider``, "none" disables captions).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- LLM Provider ---
    llm_provider: str = "openai"

    # OpenAI (also any OpenAI-compatible endpoint via base_url)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4"

    # Claude (Anthropic API) settings
    claude_api_key: str = ""  # Required when llm_provider="claude"
    claude_model: str = "claude-sonnet-4-20250514"

    # Ollama (local LLM) settings
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"

    # Response length caps for the text adapters
    llm_max_tokens: int = 500
    translate_max_tokens: int = 1000
    default_target_language: str = "es"

    # --- Speech-to-text ---
    stt_provider: str = "openai"
    openai_stt_model: str = "whisper-1"
    whisper_model: str = "base"  # Local model size: tiny, base, small, medium, large-v3
    whisper_device: str = "cpu"

    # --- Live captions ---
    caption_provider: str = "stt"
    caption_language: str = "en-US"  # BCP-47 tag; the primary subtag is sent to the STT
    caption_window_seconds: float = 4.0  # Audio per final caption fragment
    caption_interim_seconds: float = 1.0  # Interim refresh cadence, 0 disables interim results
    caption_silence_windows: int = 3  # Silent windows before the recognizer ends on its own
    caption_timestamp_format: str = "%H:%M:%S"

    # --- Audio capture ---
    audio_sample_rate: int = 16000
    audio_channels: int = 1
    audio_block_seconds: float = 0.25  # Microphone callback granularity
    audio_format: str = "wav"  # Container for the finalized recording: wav, flac, ogg

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    cors_origins: list[str] = [
        "http://localhost:8501",  # Streamlit
        "http://localhost:3000",  # Dev frontend
    ]


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
