"""
Per-user settings access and the plugin's settings sub-protocol.

The forum keeps each user's settings in a ``user:<uid>:settings`` hash. The
forum owns ``language``; this plugin owns ``pushbullet:enabled``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from forum_pushbullet.clients import SQLiteStore
from forum_pushbullet.schemas import ENABLED_FIELD, UserPluginSettings

logger = logging.getLogger(__name__)

LANGUAGE_FIELD = "language"


class NotLoggedInError(Exception):
    """Raised when a settings operation arrives without a signed-in caller."""

    code = "not-logged-in"

    def __init__(self) -> None:
        super().__init__(self.code)


@dataclass(frozen=True)
class Caller:
    """Identity the forum attached to an incoming request or socket."""

    uid: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return self.uid is not None and self.uid > 0


def settings_key(user_id: int | str) -> str:
    return f"user:{user_id}:settings"


class UserSettingsService:
    """Read user settings and serve the ``settings.save`` / ``settings.load`` calls."""

    def __init__(self, store: SQLiteStore) -> None:
        self._store = store

    def get_language(self, user_id: int) -> Optional[str]:
        language = self._store.get_field(settings_key(user_id), LANGUAGE_FIELD)
        return str(language) if language else None

    def count_users(self) -> int:
        return self._store.count_keys(settings_key("%"))

    async def save(self, caller: Caller, data: Dict[str, Any]) -> None:
        if not caller.is_authenticated:
            raise NotLoggedInError()
        settings = UserPluginSettings.model_validate(data)
        values = settings.model_dump(by_alias=True, exclude_none=True)
        self._store.set_fields(settings_key(caller.uid), values)
        logger.debug("Saved plugin settings for uid %s: %s", caller.uid, sorted(values))

    async def load(self, caller: Caller) -> Dict[str, Any]:
        if not caller.is_authenticated:
            raise NotLoggedInError()
        return self._store.get_fields(settings_key(caller.uid), [ENABLED_FIELD])


__all__ = [
    "Caller",
    "LANGUAGE_FIELD",
    "NotLoggedInError",
    "UserSettingsService",
    "settings_key",
]
