"""Public schema exports."""

from .auth import LinkState, SettingsView, SetupResponse
from .notifications import NotificationEvent, PushPayload
from .settings import (
    ENABLED_FIELD,
    SocketReply,
    SocketRequest,
    UserPluginSettings,
)

__all__ = [
    "ENABLED_FIELD",
    "LinkState",
    "NotificationEvent",
    "PushPayload",
    "SettingsView",
    "SetupResponse",
    "SocketReply",
    "SocketRequest",
    "UserPluginSettings",
]
