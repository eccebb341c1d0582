"""Application configuration."""

import os
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["sql", "supabase"] = "sql"
    database_url: str = "sqlite:///exercise_tracker.db"
    database_echo: bool = False
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    cors_allowed_origins: str | None = None
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_supabase_credentials(self) -> "Settings":
        if self.storage_backend == "supabase" and not (
            self.supabase_url and self.supabase_service_key
        ):
            raise ValueError(
                "supabase_url and supabase_service_key are required "
                "when storage_backend is 'supabase'"
            )
        return self


def parse_allowed_origins(raw: str | None) -> list[str]:
    """Parse allowed CORS origins from env; empty or '*' allows any origin."""
    if raw is None:
        return ["*"]
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return ["*"]
    origins = []
    for chunk in cleaned.split(","):
        value = chunk.strip().rstrip("/")
        if value and value not in origins:
            origins.append(value)
    return origins or ["*"]
