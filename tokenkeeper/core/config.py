"""
Application configuration models and helpers.

Centralizes settings management so the CLI and the token services share a
consistent configuration surface. Credentials are threaded explicitly into the
clients that need them rather than read from module globals.
"""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file into the environment."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
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


class DiscordSettings(BaseSettings):
    """Configuration required for the Discord OAuth2 authorization-code flow."""

    model_config = SettingsConfigDict(
        env_prefix="DISCORD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    client_id: str
    client_secret: str
    redirect_uri: str = Field(
        "http://localhost",
        description="Redirect URI registered for the application.",
    )
    scope: str = Field(
        "identify",
        description="Space-delimited scopes requested during authorization.",
    )
    base_url: str = Field("https://discord.com")
    timeout_seconds: float = Field(
        30.0,
        validation_alias="DISCORD_HTTP_TIMEOUT",
        description="Upper bound for a single token endpoint request.",
    )

    @field_validator("client_id", "client_secret")
    @classmethod
    def _require_value(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("timeout_seconds")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value


class AppSettings(BaseSettings):
    """Root settings object for the token CLI."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = Field("WARNING", validation_alias="TOKENKEEPER_LOG_LEVEL")
    token_path: Path = Field(
        Path("access_token"),
        validation_alias="TOKEN_FILE_PATH",
        description="Location of the persisted token record.",
    )
    discord: DiscordSettings = Field(default_factory=DiscordSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "DiscordSettings",
    "get_settings",
]
