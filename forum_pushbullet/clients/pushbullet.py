"""
Pushbullet API utilities.

These helpers build the authorization URL, exchange authorization codes for
access tokens and send link pushes on behalf of a linked user.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
from urllib.parse import urlencode

import httpx

from forum_pushbullet.core.config import PluginConfig, PushbulletSettings
from forum_pushbullet.schemas import PushPayload


class PushbulletError(Exception):
    """Base class for failures talking to Pushbullet."""


class PushbulletTransportError(PushbulletError):
    """Raised when the HTTP request itself fails (DNS, TLS, timeout, ...)."""


class PushbulletParseError(PushbulletError):
    """Raised when Pushbullet answers with a body that is not valid JSON."""


class PushbulletProviderError(PushbulletError):
    """Raised when Pushbullet reports an error object in its response."""

    def __init__(self, error_type: str, message: str = "") -> None:
        super().__init__(f"{message} ({error_type})" if message else error_type)
        self.error_type = error_type
        self.message = message


class PluginNotConfiguredError(PushbulletError):
    """Raised when an OAuth operation runs without client credentials."""


@dataclass(frozen=True)
class DecodedJson:
    """A response body that decoded to a JSON value."""

    payload: Any

    def error_object(self) -> Optional[Dict[str, Any]]:
        if isinstance(self.payload, dict) and isinstance(self.payload.get("error"), dict):
            return self.payload["error"]
        return None


@dataclass(frozen=True)
class UndecodableBody:
    """A response body that could not be decoded."""

    raw: str
    error: Exception


DecodedBody = Union[DecodedJson, UndecodableBody]


def decode_body(raw: str) -> DecodedBody:
    """Decode a response body into a tagged result instead of raising."""
    try:
        return DecodedJson(payload=json.loads(raw))
    except ValueError as exc:
        return UndecodableBody(raw=raw, error=exc)


def provider_error_from(error: Dict[str, Any]) -> PushbulletProviderError:
    return PushbulletProviderError(
        error_type=str(error.get("type") or "unknown_error"),
        message=str(error.get("message") or ""),
    )


class PushbulletClient:
    """Build Pushbullet authorization URLs, exchange codes and send pushes."""

    def __init__(
        self,
        api_settings: PushbulletSettings,
        plugin_config: Optional[PluginConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api = api_settings
        self._config = plugin_config
        self._transport = transport

    @property
    def configured(self) -> bool:
        return self._config is not None

    def _require_config(self) -> PluginConfig:
        if self._config is None:
            raise PluginNotConfiguredError("Pushbullet client credentials are not configured.")
        return self._config

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._api.timeout_seconds, transport=self._transport
        )

    def build_authorization_url(self, redirect_uri: str) -> str:
        """Construct the Pushbullet consent URL."""
        config = self._require_config()
        params = {
            "client_id": config.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
        }
        return f"{self._api.authorize_url}?{urlencode(params)}"

    async def exchange_authorization_code(self, code: str) -> str:
        """
        Exchange an authorization code for an access token.

        Every failure propagates: the user-facing setup flow needs to report it.
        """
        config = self._require_config()
        form = {
            "grant_type": "authorization_code",
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "code": code,
        }

        try:
            async with self._http() as client:
                response = await client.post(self._api.token_url, data=form)
        except httpx.HTTPError as exc:
            raise PushbulletTransportError(str(exc) or exc.__class__.__name__) from exc

        decoded = decode_body(response.text)
        if isinstance(decoded, UndecodableBody):
            raise PushbulletParseError(
                f"Token endpoint returned an unparseable body (HTTP {response.status_code})."
            ) from decoded.error

        error = decoded.error_object()
        if error is not None:
            raise provider_error_from(error)

        if not response.is_success:
            raise PushbulletProviderError(
                f"http_{response.status_code}", "Token endpoint rejected the request."
            )

        access_token = (
            decoded.payload.get("access_token") if isinstance(decoded.payload, dict) else None
        )
        if not access_token:
            raise PushbulletProviderError(
                "missing_access_token", "Token endpoint response had no access_token."
            )
        return str(access_token)

    async def send_push(self, token: str, payload: PushPayload) -> DecodedBody | None:
        """
        Post a push as the linked user.

        Transport failures raise ``PushbulletTransportError``. The decoded body
        is handed back untouched so the caller decides what a provider error
        means; ``None`` signals an empty body.
        """
        try:
            async with self._http() as client:
                response = await client.post(
                    self._api.push_url,
                    data=payload.model_dump(),
                    auth=(token, ""),
                )
        except httpx.HTTPError as exc:
            raise PushbulletTransportError(str(exc) or exc.__class__.__name__) from exc

        if not response.text:
            return None
        return decode_body(response.text)


__all__ = [
    "DecodedBody",
    "DecodedJson",
    "PluginNotConfiguredError",
    "PushbulletClient",
    "PushbulletError",
    "PushbulletParseError",
    "PushbulletProviderError",
    "PushbulletTransportError",
    "UndecodableBody",
    "decode_body",
    "provider_error_from",
]
