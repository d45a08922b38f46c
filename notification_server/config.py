"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./notifications.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    database_echo: bool = Field(
        default=False, description="Log every SQL statement emitted by the engine"
    )
    database_pool_size: int = Field(
        default=5, description="Connections kept open in the pool", gt=0
    )
    database_max_overflow: int = Field(
        default=10, description="Connections allowed above the pool size", ge=0
    )
    database_pool_timeout: int = Field(
        default=30, description="Seconds to wait for a pooled connection", gt=0
    )
    image_storage_path: str = Field(
        description="Directory where re-encoded images are written",
        min_length=1,
    )
    image_max_size_mb: int = Field(
        default=10, description="Largest accepted upload, in MiB", gt=0
    )
    image_webp_quality: int = Field(
        default=80, description="WebP encoder quality for stored images", ge=1, le=100
    )
    host_url: str = Field(
        default="http://localhost:8080/image/",
        description="Public prefix prepended to image identifiers in API responses",
        min_length=1,
    )
    bearer_token: str = Field(
        description="Shared secret expected in the Authorization header",
        min_length=1,
    )
    server_host: str = Field(default="0.0.0.0", description="Interface to bind")
    server_port: int = Field(default=8080, description="Port to listen on", gt=0, le=65535)
    log_level: str = Field(default="INFO", description="Root logging level")

    @field_validator("bearer_token")
    @classmethod
    def _reject_blank_token(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("BEARER_TOKEN must not be blank")
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    @model_validator(mode="after")
    def _normalize_host_url(self) -> "Settings":
        if not self.host_url.endswith("/"):
            self.host_url = f"{self.host_url}/"
        return self

    @property
    def image_max_size_bytes(self) -> int:
        return self.image_max_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
