from __future__ import annotations

import base64
import logging
from typing import Callable
from urllib.parse import parse_qs

import httpx
import pytest

from forum_pushbullet.clients import PushbulletClient, SQLiteStore
from forum_pushbullet.core.config import ForumSettings, PluginConfig, PushbulletSettings
from forum_pushbullet.schemas import ENABLED_FIELD, NotificationEvent
from forum_pushbullet.services import (
    LanguageCache,
    NotificationTranslator,
    PushDispatcher,
    TokenStore,
    TranslationCatalog,
    UserSettingsService,
)
from forum_pushbullet.services.user_settings import settings_key

PUSH_URL = "https://api.pushbullet.test/v2/pushes"


class RecordingTransport(httpx.MockTransport):
    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


def _build_dispatcher(
    store: SQLiteStore,
    transport: httpx.MockTransport,
    *,
    title: str | None = "Example Forum",
) -> PushDispatcher:
    user_settings = UserSettingsService(store)
    client = PushbulletClient(
        PushbulletSettings(push_url=PUSH_URL),
        PluginConfig(client_id="client", client_secret="secret"),
        transport=transport,
    )
    translator = NotificationTranslator(
        language_cache=LanguageCache(),
        user_settings=user_settings,
        catalog=TranslationCatalog(),
    )
    return PushDispatcher(
        token_store=TokenStore(store),
        translator=translator,
        pushbullet_client=client,
        forum_settings=ForumSettings(url="https://forum.example.com/", title=title),
    )


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"active": True, "iden": "push-1"})


def _event(text: str = "<b>Hello</b>", uid: int = 7) -> NotificationEvent:
    return NotificationEvent(uid=uid, text=text, path="/topic/12/welcome")


@pytest.mark.asyncio
async def test_dispatch_without_token_makes_no_calls(store: SQLiteStore) -> None:
    transport = RecordingTransport(_ok)
    dispatcher = _build_dispatcher(store, transport)

    await dispatcher.dispatch(_event())

    assert transport.requests == []


@pytest.mark.asyncio
async def test_dispatch_posts_sanitized_link_push(store: SQLiteStore) -> None:
    transport = RecordingTransport(_ok)
    dispatcher = _build_dispatcher(store, transport)
    TokenStore(store).save(7, "o.token")

    await dispatcher.dispatch(_event())

    assert len(transport.requests) == 1
    request = transport.requests[0]
    assert str(request.url) == PUSH_URL
    assert request.method == "POST"

    form = {key: values[0] for key, values in parse_qs(request.content.decode()).items()}
    assert form == {
        "type": "link",
        "title": "New Notification from Example Forum",
        "url": "https://forum.example.com/topic/12/welcome",
        "body": "Hello",
    }

    expected_auth = base64.b64encode(b"o.token:").decode()
    assert request.headers["authorization"] == f"Basic {expected_auth}"


@pytest.mark.asyncio
async def test_dispatch_translates_into_recipient_language(store: SQLiteStore) -> None:
    transport = RecordingTransport(_ok)
    dispatcher = _build_dispatcher(store, transport, title=None)
    TokenStore(store).save(7, "o.token")
    store.set_field(settings_key(7), "language", "de")

    await dispatcher.dispatch(_event("[[notifications:new_message_from, <i>frank</i>]]"))

    form = parse_qs(transport.requests[0].content.decode())
    assert form["body"] == ["Neue Nachricht von frank"]
    assert form["title"] == ["New Notification from NodeBB"]


@pytest.mark.asyncio
async def test_dispatch_ignores_enabled_flag_when_token_exists(store: SQLiteStore) -> None:
    transport = RecordingTransport(_ok)
    dispatcher = _build_dispatcher(store, transport)
    TokenStore(store).save(7, "o.token")
    store.set_field(settings_key(7), ENABLED_FIELD, False)

    await dispatcher.dispatch(_event())

    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_provider_error_is_logged_not_raised(
    store: SQLiteStore, caplog: pytest.LogCaptureFixture
) -> None:
    def _rejected(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            401,
            json={"error": {"type": "invalid_request", "message": "Access token is missing or invalid."}},
        )

    transport = RecordingTransport(_rejected)
    dispatcher = _build_dispatcher(store, transport)
    TokenStore(store).save(7, "o.revoked")

    with caplog.at_level(logging.ERROR):
        await dispatcher.dispatch(_event())

    assert len(transport.requests) == 1
    assert "Access token is missing or invalid. (invalid_request)" in caplog.text


@pytest.mark.asyncio
async def test_transport_error_is_swallowed(
    store: SQLiteStore, caplog: pytest.LogCaptureFixture
) -> None:
    def _unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = RecordingTransport(_unreachable)
    dispatcher = _build_dispatcher(store, transport)
    TokenStore(store).save(7, "o.token")

    with caplog.at_level(logging.ERROR):
        await dispatcher.dispatch(_event())

    assert len(transport.requests) == 1
    assert "connection refused" in caplog.text


@pytest.mark.asyncio
async def test_unparseable_response_is_swallowed(
    store: SQLiteStore, caplog: pytest.LogCaptureFixture
) -> None:
    transport = RecordingTransport(lambda request: httpx.Response(502, text="<html>Bad Gateway</html>"))
    dispatcher = _build_dispatcher(store, transport)
    TokenStore(store).save(7, "o.token")

    with caplog.at_level(logging.ERROR):
        await dispatcher.dispatch(_event())

    assert "Unparseable Pushbullet response" in caplog.text


@pytest.mark.asyncio
async def test_empty_response_is_fine(
    store: SQLiteStore, caplog: pytest.LogCaptureFixture
) -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200))
    dispatcher = _build_dispatcher(store, transport)
    TokenStore(store).save(7, "o.token")

    with caplog.at_level(logging.ERROR):
        await dispatcher.dispatch(_event())

    assert len(transport.requests) == 1
    assert caplog.records == []
