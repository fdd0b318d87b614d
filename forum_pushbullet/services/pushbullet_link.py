"""
Linking a forum account to Pushbullet through the OAuth2 code flow.

Only the resulting token is persisted. In-flight states are tracked in memory
per user, expire after ``PENDING_TTL_SECONDS`` and fall back to
``UNAUTHORIZED`` if the process restarts.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from cachetools import TTLCache  # type: ignore[import-untyped]

from forum_pushbullet.clients.pushbullet import PushbulletClient, PushbulletError
from forum_pushbullet.core.config import ForumSettings, PushbulletSettings
from forum_pushbullet.schemas import LinkState
from forum_pushbullet.services.token_store import TokenStore

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/pushbullet/auth"
PENDING_TTL_SECONDS = 15 * 60
PENDING_MAX_ENTRIES = 1024


class PushbulletLinkService:
    """Start the consent redirect and finish the code-for-token exchange."""

    def __init__(
        self,
        *,
        pushbullet_client: PushbulletClient,
        token_store: TokenStore,
        forum_settings: ForumSettings,
        pushbullet_settings: PushbulletSettings,
        pending_ttl_seconds: float = PENDING_TTL_SECONDS,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = pushbullet_client
        self._tokens = token_store
        self._forum = forum_settings
        self._pushbullet = pushbullet_settings
        self._pending: TTLCache = TTLCache(
            maxsize=PENDING_MAX_ENTRIES, ttl=pending_ttl_seconds, timer=timer
        )

    @property
    def redirect_uri(self) -> str:
        if self._pushbullet.redirect_uri is not None:
            return str(self._pushbullet.redirect_uri)
        return f"{self._forum.base_url}{CALLBACK_PATH}"

    def initiate(self, user_id: Optional[int] = None) -> str:
        """Return the Pushbullet consent URL the browser should be sent to."""
        url = self._client.build_authorization_url(self.redirect_uri)
        if user_id is not None:
            self._pending[user_id] = LinkState.AWAITING_CODE
        return url

    async def complete_exchange(self, code: str, user_id: int) -> LinkState:
        """
        Trade ``code`` for an access token and store it against ``user_id``.

        The token is saved before ``AUTHORIZED`` is reported, so a dispatch
        issued right after setup already sees it. Failures propagate.
        """
        self._pending[user_id] = LinkState.EXCHANGING
        try:
            token = await self._client.exchange_authorization_code(code)
            self._tokens.save(user_id, token)
        except PushbulletError as exc:
            logger.warning("Pushbullet linking failed for uid %s: %s", user_id, exc)
            raise
        finally:
            self._pending.pop(user_id, None)

        logger.info("Linked Pushbullet account for uid %s", user_id)
        return LinkState.AUTHORIZED

    def link_state(self, user_id: int) -> LinkState:
        if self._tokens.load(user_id):
            return LinkState.AUTHORIZED
        return self._pending.get(user_id, LinkState.UNAUTHORIZED)


__all__ = ["CALLBACK_PATH", "PENDING_TTL_SECONDS", "PushbulletLinkService"]
