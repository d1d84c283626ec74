"""Application configuration."""

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_url: str
    database_pool_size: int = 5
    database_auto_create: bool = False
    admin_token: str
    aws_access_key_id: str
    aws_secret_access_key: str
    aws_region: str
    aws_bucket_name: str
    s3_endpoint_url: str | None = None
    s3_connect_timeout: float = 5.0
    s3_read_timeout: float = 10.0
    s3_max_attempts: int = 3
    storage_delete_timeout: float = 15.0
    presign_expires_in: int = 3600
    cloud_front_url: str = Field(min_length=1)
    frontend_url: str = "http://localhost:3000"
    resend_api_key: str | None = None
    resend_email: str | None = None
    contact_api_key: str | None = None
    email_from: str = "Fotokirsti <onboarding@resend.dev>"
    contact_rate_limit: int = 5
    contact_rate_window_seconds: int = 15 * 60
    server_host: str = "127.0.0.1"
    server_port: int = 8000
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("frontend_url")
    @classmethod
    def _normalize_frontend_url(cls, value: str) -> str:
        return normalize_url(value)

    @field_validator("database_url")
    @classmethod
    def _normalize_database_url(cls, value: str) -> str:
        return normalize_database_url(value)


def normalize_url(raw: str) -> str:
    """Trim a URL and add https:// when no scheme is present."""
    cleaned = raw.strip()
    if not cleaned:
        return cleaned
    if cleaned.startswith(("http://", "https://")):
        return cleaned
    return f"https://{cleaned}"


def normalize_database_url(raw: str) -> str:
    """Point bare Postgres URLs at the psycopg driver."""
    cleaned = raw.strip()
    for prefix in ("postgres://", "postgresql://"):
        if cleaned.startswith(prefix):
            return "postgresql+psycopg://" + cleaned[len(prefix) :]
    return cleaned
