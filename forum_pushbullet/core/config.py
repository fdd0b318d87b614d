"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the push dispatcher and
the provisioning script share a consistent configuration surface.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LANGUAGE = "en_GB"
DEFAULT_FORUM_TITLE = "NodeBB"


class ForumSettings(BaseSettings):
    """Describes the forum installation notifications originate from."""

    model_config = SettingsConfigDict(
        env_prefix="FORUM_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    url: AnyHttpUrl = Field(..., description="Public base URL of the forum.")
    title: Optional[str] = Field(
        None, description="Display name used in push notification titles."
    )
    default_language: Optional[str] = Field(
        None, description="Forum-wide language used when a user has none set."
    )
    active_user_count: Optional[int] = Field(
        None,
        description=(
            "Known user population, used to size the language cache. "
            "Counted from stored user settings when omitted."
        ),
    )
    hook_token: Optional[str] = Field(
        None, description="Shared token the forum passes when posting events."
    )

    @property
    def base_url(self) -> str:
        return str(self.url).rstrip("/")


class PushbulletSettings(BaseSettings):
    """Endpoints and credentials for the Pushbullet API."""

    model_config = SettingsConfigDict(
        env_prefix="PUSHBULLET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_uri: Optional[AnyHttpUrl] = Field(
        None,
        description="Overrides the default <forum url>/pushbullet/auth callback.",
    )
    authorize_url: str = "https://www.pushbullet.com/authorize"
    token_url: str = "https://api.pushbullet.com/oauth2/token"
    push_url: str = "https://api.pushbullet.com/v2/pushes"
    timeout_seconds: float = 10.0


class LanguageCacheSettings(BaseSettings):
    """Sizing and expiry for the per-user language cache."""

    model_config = SettingsConfigDict(
        env_prefix="LANGUAGE_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ttl_seconds: float = 60 * 60 * 24
    min_size: int = 50
    users_per_entry: int = 20

    @field_validator("min_size", "users_per_entry")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be a positive integer")
        return value


class SecuritySettings(BaseSettings):
    """Security-related configuration."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    token_encryption_secret: Optional[str] = Field(
        None,
        description=(
            "Secret used to derive the symmetric key for encrypting stored tokens."
        ),
    )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    store_db_path: str = Field(
        "data/forum_pushbullet.db", validation_alias="STORE_DB_PATH"
    )
    forum: ForumSettings = Field(default_factory=ForumSettings)
    pushbullet: PushbulletSettings = Field(default_factory=PushbulletSettings)
    language_cache: LanguageCacheSettings = Field(
        default_factory=LanguageCacheSettings
    )
    security: SecuritySettings = Field(default_factory=SecuritySettings)


@dataclass(frozen=True)
class PluginConfig:
    """Pushbullet OAuth client credentials, fixed for the process lifetime."""

    client_id: str
    client_secret: str


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "DEFAULT_FORUM_TITLE",
    "DEFAULT_LANGUAGE",
    "ForumSettings",
    "LanguageCacheSettings",
    "PluginConfig",
    "PushbulletSettings",
    "SecuritySettings",
    "get_settings",
]
