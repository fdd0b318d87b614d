"""
Pydantic models for forum notification events and outbound pushes.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class NotificationEvent(BaseModel):
    """A notification the forum raised for one of its users."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    recipient_id: int = Field(
        ...,
        alias="uid",
        gt=0,
        description="Forum user id the notification is addressed to.",
    )
    text: str = Field(
        ...,
        description="Display text, possibly holding [[namespace:key]] tokens and markup.",
    )
    path: str = Field(
        "",
        description="Forum-relative path the notification links to (e.g. /topic/1).",
    )


class PushPayload(BaseModel):
    """Form fields posted to the Pushbullet pushes endpoint."""

    type: Literal["link"] = "link"
    title: str
    url: str
    body: str


__all__ = ["NotificationEvent", "PushPayload"]
