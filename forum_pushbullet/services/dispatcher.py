"""
Best-effort delivery of forum notifications to linked Pushbullet accounts.

Dispatch never raises: a missing token is the normal "not linked" state, and
every delivery failure is logged and dropped so the forum's own notification
pipeline is never held up by Pushbullet.
"""

from __future__ import annotations

import logging

from forum_pushbullet.clients.pushbullet import (
    PushbulletClient,
    PushbulletTransportError,
    UndecodableBody,
)
from forum_pushbullet.core.config import DEFAULT_FORUM_TITLE, ForumSettings
from forum_pushbullet.schemas import NotificationEvent, PushPayload
from forum_pushbullet.services.token_store import TokenStore
from forum_pushbullet.services.translator import NotificationTranslator

logger = logging.getLogger(__name__)


class PushDispatcher:
    """Forward one notification to its recipient's Pushbullet devices."""

    def __init__(
        self,
        *,
        token_store: TokenStore,
        translator: NotificationTranslator,
        pushbullet_client: PushbulletClient,
        forum_settings: ForumSettings,
    ) -> None:
        self._tokens = token_store
        self._translator = translator
        self._client = pushbullet_client
        self._forum = forum_settings

    def build_payload(self, notification: NotificationEvent, body: str) -> PushPayload:
        title = self._forum.title or DEFAULT_FORUM_TITLE
        return PushPayload(
            title=f"New Notification from {title}",
            url=f"{self._forum.base_url}{notification.path}",
            body=body,
        )

    async def dispatch(self, notification: NotificationEvent) -> None:
        uid = notification.recipient_id
        try:
            await self._deliver(notification)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Unexpected failure pushing notification to uid %s", uid)

    async def _deliver(self, notification: NotificationEvent) -> None:
        uid = notification.recipient_id
        token = self._tokens.load(uid)
        if not token:
            return

        body = self._translator.localize(uid, notification.text)
        payload = self.build_payload(notification, body)

        try:
            decoded = await self._client.send_push(token, payload)
        except PushbulletTransportError as exc:
            logger.error("Push to uid %s failed: %s", uid, exc)
            return

        if decoded is None:
            return
        if isinstance(decoded, UndecodableBody):
            logger.error(
                "Unparseable Pushbullet response for uid %s: %s", uid, decoded.error
            )
            return

        error = decoded.error_object()
        if error is not None:
            logger.error(
                "%s (%s)", error.get("message", ""), error.get("type", "unknown_error")
            )


__all__ = ["PushDispatcher"]
