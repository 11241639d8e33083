"""
Application configuration models and helpers.

Centralizes settings management so the HTTP surface and the handshake
orchestrator share a consistent configuration surface. Values are read once
and passed explicitly into the services that need them.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class StoreSettings(BaseSettings):
    """Configuration for the ephemeral record store."""

    model_config = SettingsConfigDict(populate_by_name=True)

    backend: Literal["memory", "redis"] = Field(
        "memory",
        validation_alias="GAMF_STORE_BACKEND",
        description="Record store implementation: in-process map or Redis.",
    )
    redis_url: str = Field("redis://localhost:6379", validation_alias="REDIS_URL")
    initiation_ttl_seconds: int = Field(600, validation_alias="GAMF_INITIATION_TTL")
    code_ttl_seconds: int = Field(300, validation_alias="GAMF_CODE_TTL")

    @field_validator("initiation_ttl_seconds", "code_ttl_seconds")
    @classmethod
    def _positive_ttl(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("TTL must be a positive number of seconds")
        return value


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    environment: str = Field("development", validation_alias="GAMF_ENV")
    log_level: str = Field("INFO", validation_alias="GAMF_LOG_LEVEL")
    port: int = Field(1123, validation_alias="PORT")
    host: str = Field(
        "localhost:1123",
        validation_alias="GAMF_HOST",
        description="Host and port this instance is reachable on.",
    )
    base_url: str = Field(
        "http://localhost:1123",
        validation_alias="GAMF_URL",
        description="Public base URL used to build redirect and callback URLs.",
    )
    request_timeout_seconds: float = Field(5.0, validation_alias="GAMF_REQUEST_TIMEOUT")
    store: StoreSettings = Field(default_factory=StoreSettings)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        """Keep URL composition free of doubled slashes."""
        return value.rstrip("/")


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "StoreSettings",
    "get_settings",
]
