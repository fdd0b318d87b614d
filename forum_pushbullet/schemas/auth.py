"""Schemas related to the Pushbullet OAuth flow."""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, Field


class LinkState(str, enum.Enum):
    """Where a user is in linking their Pushbullet account."""

    UNAUTHORIZED = "unauthorized"
    AWAITING_CODE = "awaiting_code"
    EXCHANGING = "exchanging"
    AUTHORIZED = "authorized"


class SetupResponse(BaseModel):
    """Returned to API clients instead of a redirect when starting setup."""

    authorization_url: str = Field(..., description="Pushbullet consent URL.")


class SettingsView(BaseModel):
    """What the settings page needs to render for the signed-in user."""

    state: LinkState
    enabled: Optional[bool] = None
    setup_url: str


__all__ = ["LinkState", "SettingsView", "SetupResponse"]
