"""
Per-user Pushbullet token persistence.

Tokens live in a single ``pushbullet:tokens`` hash keyed by forum user id.
"""

from __future__ import annotations

import logging
from typing import Optional

from forum_pushbullet.clients import SQLiteStore
from forum_pushbullet.services.token_cipher import TokenCipherService

logger = logging.getLogger(__name__)

TOKENS_KEY = "pushbullet:tokens"


class TokenStore:
    """Save and load the opaque access token linked to each forum user."""

    def __init__(
        self,
        store: SQLiteStore,
        token_cipher: Optional[TokenCipherService] = None,
    ) -> None:
        self._store = store
        self._cipher = token_cipher

    def save(self, user_id: int, token: str) -> None:
        value = self._cipher.encrypt(token) if self._cipher else token
        self._store.set_field(TOKENS_KEY, str(user_id), value)

    def load(self, user_id: int) -> Optional[str]:
        value = self._store.get_field(TOKENS_KEY, str(user_id))
        if not value:
            return None
        if self._cipher is None:
            return str(value)

        if not self._cipher.is_encrypted(value):
            # Stored before encryption was switched on; rewrite it encrypted.
            self.save(user_id, value)
            return str(value)

        try:
            return self._cipher.decrypt(value)
        except ValueError:
            logger.error("Stored token for uid %s could not be decrypted", user_id)
            return None


__all__ = ["TOKENS_KEY", "TokenStore"]
