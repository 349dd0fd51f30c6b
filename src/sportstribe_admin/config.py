"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_email: str = "admin@sportstribe.com"
    admin_password: str = "admin123"
    admin_markers: str = "admin"
    admin_domain_suffixes: str = "@admin.com"
    session_timeout_hours: int = 24
    session_storage_path: str = ".sportstribe_admin_session.json"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_csv(raw: str | None) -> tuple[str, ...]:
    """Parse a comma-separated setting into lower-cased, non-empty values."""
    if raw is None:
        return ()
    values: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip().lower()
        if value and value not in values:
            values.append(value)
    return tuple(values)
