"""Application configuration."""

import os
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nutriai.adapters.gemini_client import GEMINI_OPENAI_BASE_URL
from nutriai.services.diary import DEFAULT_MAX_PAYLOAD_BYTES

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["supabase", "firestore"] = "supabase"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    firestore_project_id: str | None = None
    firestore_database: str = "(default)"
    session_secret: str
    session_ttl_days: int = 30
    gemini_api_key: str
    gemini_base_url: str = GEMINI_OPENAI_BASE_URL
    ai_model: str = "gemini-2.5-flash"
    ai_timeout_seconds: float = 30.0
    chat_temperature: float = 0.7
    chat_max_tokens: int = 2048
    spotify_client_id: str | None = None
    spotify_client_secret: str | None = None
    spotify_market: str = "TW"
    diary_max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES
    allowed_origins: str | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_storage_backend(self) -> "Settings":
        if self.storage_backend == "supabase" and not (
            self.supabase_url and self.supabase_service_key
        ):
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required "
                "for the supabase storage backend"
            )
        if self.storage_backend == "firestore" and not self.firestore_project_id:
            raise ValueError(
                "FIRESTORE_PROJECT_ID is required for the firestore storage backend"
            )
        return self

    @property
    def music_enabled(self) -> bool:
        """Return True when Spotify credentials are configured."""
        return bool(self.spotify_client_id and self.spotify_client_secret)


def parse_allowed_origins(raw: str | None) -> list[str]:
    """Parse CORS origins from env; empty or `*` allows any origin."""
    if raw is None:
        return ["*"]
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return ["*"]
    origins = [chunk.strip().rstrip("/") for chunk in cleaned.split(",")]
    return [origin for origin in origins if origin] or ["*"]
