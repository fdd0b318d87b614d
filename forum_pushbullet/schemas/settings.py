"""Schemas for the per-user plugin settings and the socket sub-protocol."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ENABLED_FIELD = "pushbullet:enabled"

SettingsEvent = Literal[
    "plugins.pushbullet.settings.save",
    "plugins.pushbullet.settings.load",
]


class UserPluginSettings(BaseModel):
    """Fields this plugin owns inside a user's settings hash."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    enabled: Optional[bool] = Field(None, alias=ENABLED_FIELD)


class SocketRequest(BaseModel):
    """A single request frame received over the settings websocket."""

    id: Optional[int] = None
    event: SettingsEvent
    data: dict[str, Any] = Field(default_factory=dict)


class SocketReply(BaseModel):
    """Acknowledgement or error frame sent back for a ``SocketRequest``."""

    id: Optional[int] = None
    ok: bool
    data: Optional[dict[str, Any]] = None
    error: Optional[str] = None


__all__ = [
    "ENABLED_FIELD",
    "SettingsEvent",
    "SocketReply",
    "SocketRequest",
    "UserPluginSettings",
]
