"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./always_connected.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    shared_secret_hash: str | None = Field(
        default=None,
        description="passlib hash of the password shared by both participants",
    )
    openai_api_key: str | None = Field(
        default=None,
        description="API key used to generate notes for predefined messages",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="Chat completion model used for note generation",
    )
    enrichment_timeout_seconds: float = Field(
        default=8.0,
        description="Upper bound for a single note generation request",
        gt=0,
    )
    vapid_public_key: str | None = Field(
        default=None,
        description="Application server public key handed to browsers on subscribe",
    )
    vapid_private_key: str | None = Field(
        default=None,
        description="Private key used to sign Web Push requests",
    )
    vapid_contact: str = Field(
        default="mailto:admin@example.com",
        description="Contact URI sent in the VAPID ``sub`` claim",
    )
    push_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied to every individual push endpoint request",
        gt=0,
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        description="Origins allowed to call the HTTP API",
    )
    history_limit: int = Field(
        default=100,
        description="Maximum number of messages returned by a history query",
        gt=0,
    )

    @model_validator(mode="after")
    def _validate_vapid_pair(self) -> "Settings":
        if bool(self.vapid_public_key) ^ bool(self.vapid_private_key):
            raise ValueError(
                "VAPID_PUBLIC_KEY and VAPID_PRIVATE_KEY must both be provided to enable push"
            )
        if not self.vapid_contact.startswith(("mailto:", "https://")):
            raise ValueError("VAPID_CONTACT must be a mailto: or https:// URI")
        return self

    @property
    def push_enabled(self) -> bool:
        """Return ``True`` when a VAPID key pair is configured."""

        return bool(self.vapid_public_key and self.vapid_private_key)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
