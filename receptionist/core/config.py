"""Application configuration."""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OpenAI
    openai_api_key: str
    openai_model: str = "gpt-4o-mini"
    max_tokens: int = 120
    temperature: float = 0.6
    request_timeout_seconds: Optional[float] = None

    # Twilio voice
    base_url: Optional[str] = None
    voice: str = "alice"
    language: str = "en-US"

    # Conversation memory
    history_limit: int = Field(default=12, ge=2)
    persist_fallback_reply: bool = False
    annotate_caller_number: bool = False
    session_idle_timeout_seconds: Optional[float] = None
    session_sweep_interval_seconds: float = 60.0

    # Server
    host: str = "0.0.0.0"
    port: int = 4000
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
