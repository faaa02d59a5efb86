"""
Configuration and settings for the portfolio backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")
    log_level: str = Field(default="INFO")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Database (Postgres expected, any SQLAlchemy URL works)
    database_url: Optional[str] = Field(default=None)

    # S3-compatible object storage for media uploads
    storage_endpoint: Optional[str] = Field(default=None)
    storage_region: Optional[str] = Field(default=None)
    storage_bucket: Optional[str] = Field(default=None)
    storage_public_base_url: Optional[str] = Field(default=None)
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)

    # Queue + sessions (Redis)
    redis_url: Optional[str] = Field(default=None)
    redis_queue_key: str = Field(default="portfolio:emails")
    redis_session_prefix: str = Field(default="portfolio:session:")

    # Email delivery (Resend)
    resend_api_key: Optional[str] = Field(default=None)
    email_from: str = Field(default="onboarding@resend.dev")
    admin_email: Optional[str] = Field(default=None)
    site_name: str = Field(default="Portfolio")
    site_url: str = Field(default="http://localhost:3000")

    # Admin sessions
    secret_key: str = Field(default="change-me")
    session_timeout_seconds: int = Field(default=600)

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
