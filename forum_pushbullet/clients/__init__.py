"""Expose constructed client wrappers."""

from .pushbullet import (
    PluginNotConfiguredError,
    PushbulletClient,
    PushbulletError,
    PushbulletParseError,
    PushbulletProviderError,
    PushbulletTransportError,
)
from .sqlite_store import SQLiteStore

__all__ = [
    "PluginNotConfiguredError",
    "PushbulletClient",
    "PushbulletError",
    "PushbulletParseError",
    "PushbulletProviderError",
    "PushbulletTransportError",
    "SQLiteStore",
]
