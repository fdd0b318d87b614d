"""
FastAPI routes for the forum Pushbullet bridge.

``router`` carries the machine-facing endpoints (forum hook, settings socket,
health) and is mounted under ``/api``. ``pushbullet_router`` carries the
pages the forum proxies to us under ``/pushbullet``.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    HTTPException,
    Query,
    Request,
    WebSocket,
    WebSocketDisconnect,
)
from fastapi.responses import JSONResponse, RedirectResponse, Response
from pydantic import ValidationError

from forum_pushbullet.clients import PushbulletError, PushbulletProviderError
from forum_pushbullet.core.config import ForumSettings, PluginConfig
from forum_pushbullet.dependencies import (
    get_caller,
    get_forum_settings,
    get_link_service,
    get_push_dispatcher,
    get_socket_caller,
    get_user_settings_service,
    require_plugin_config,
)
from forum_pushbullet.schemas import (
    ENABLED_FIELD,
    NotificationEvent,
    SettingsView,
    SetupResponse,
    SocketReply,
    SocketRequest,
)
from forum_pushbullet.services import Caller, NotLoggedInError, UserSettingsService

router = APIRouter()
pushbullet_router = APIRouter()
logger = logging.getLogger(__name__)


def _wants_redirect(request: Request, redirect: bool) -> bool:
    accept_header = request.headers.get("accept", "")
    return redirect or "text/html" in accept_header.lower()


def _require_login(caller: Caller) -> int:
    if not caller.is_authenticated:
        raise HTTPException(
            status_code=HTTPStatus.UNAUTHORIZED, detail=NotLoggedInError.code
        )
    return caller.uid  # type: ignore[return-value]


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.post("/hooks/notifications", status_code=HTTPStatus.ACCEPTED)
async def receive_notification(
    event: NotificationEvent,
    background_tasks: BackgroundTasks,
    dispatcher: Annotated[Any, Depends(get_push_dispatcher)],
    forum: Annotated[ForumSettings, Depends(get_forum_settings)],
    token: str | None = Query(None, description="Shared hook token for verification."),
) -> dict:
    """Accept a forum notification and push it in the background."""
    expected_token = forum.hook_token
    if expected_token and token != expected_token:
        raise HTTPException(status_code=HTTPStatus.FORBIDDEN, detail="Invalid token")

    background_tasks.add_task(dispatcher.dispatch, event)
    return {"status": "accepted"}


@router.websocket("/ws")
async def plugin_socket(
    websocket: WebSocket,
    caller: Annotated[Caller, Depends(get_socket_caller)],
    settings_service: Annotated[Any, Depends(get_user_settings_service)],
) -> None:
    """Serve the ``plugins.pushbullet.settings.*`` calls for one client."""
    await websocket.accept()
    try:
        while True:
            frame = await websocket.receive_text()
            reply = await _handle_socket_frame(frame, caller, settings_service)
            await websocket.send_json(reply.model_dump(exclude_none=True))
    except WebSocketDisconnect:
        return


async def _handle_socket_frame(
    frame: str, caller: Caller, settings_service: UserSettingsService
) -> SocketReply:
    try:
        request = SocketRequest.model_validate_json(frame)
    except ValidationError:
        return SocketReply(ok=False, error="invalid-request")

    try:
        if request.event.endswith(".save"):
            await settings_service.save(caller, request.data)
            return SocketReply(id=request.id, ok=True)
        data = await settings_service.load(caller)
        return SocketReply(id=request.id, ok=True, data=data)
    except NotLoggedInError as exc:
        return SocketReply(id=request.id, ok=False, error=exc.code)
    except ValidationError:
        return SocketReply(id=request.id, ok=False, error="invalid-data")


@pushbullet_router.get("/setup", status_code=HTTPStatus.OK, response_model=None)
async def start_pushbullet_setup(
    request: Request,
    _config: Annotated[PluginConfig, Depends(require_plugin_config)],
    link_service: Annotated[Any, Depends(get_link_service)],
    caller: Annotated[Caller, Depends(get_caller)],
    redirect: bool = Query(
        default=False,
        description="When true, respond with a redirect to the Pushbullet consent screen.",
    ),
) -> Response | dict:
    """Send the user to Pushbullet to authorize this forum."""
    authorization_url = link_service.initiate(caller.uid)
    if _wants_redirect(request, redirect):
        return RedirectResponse(
            url=authorization_url, status_code=HTTPStatus.TEMPORARY_REDIRECT
        )
    return SetupResponse(authorization_url=authorization_url).model_dump()


@pushbullet_router.get("/auth", status_code=HTTPStatus.OK)
async def complete_pushbullet_setup(
    request: Request,
    _config: Annotated[PluginConfig, Depends(require_plugin_config)],
    link_service: Annotated[Any, Depends(get_link_service)],
    caller: Annotated[Caller, Depends(get_caller)],
    forum: Annotated[ForumSettings, Depends(get_forum_settings)],
    code: str = Query(..., min_length=1, description="Authorization code from Pushbullet."),
    redirect: bool = Query(
        default=False,
        description="When true, redirect browser clients instead of returning JSON.",
    ),
) -> Response:
    """Exchange the authorization code and link the account."""
    uid = _require_login(caller)

    try:
        state = await link_service.complete_exchange(code, uid)
    except PushbulletProviderError as exc:
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail=f"Pushbullet rejected the authorization ({exc.error_type}).",
        ) from exc
    except PushbulletError as exc:
        raise HTTPException(
            status_code=HTTPStatus.BAD_GATEWAY,
            detail="Failed to exchange authorization code.",
        ) from exc

    if _wants_redirect(request, redirect):
        return RedirectResponse(
            url=f"{forum.base_url}/pushbullet/settings",
            status_code=HTTPStatus.TEMPORARY_REDIRECT,
        )
    return JSONResponse(content={"status": "connected", "state": state.value})


@pushbullet_router.get("/settings", response_model=SettingsView)
async def pushbullet_settings(
    caller: Annotated[Caller, Depends(get_caller)],
    link_service: Annotated[Any, Depends(get_link_service)],
    settings_service: Annotated[Any, Depends(get_user_settings_service)],
    forum: Annotated[ForumSettings, Depends(get_forum_settings)],
) -> SettingsView:
    """Link state and plugin settings for the signed-in user."""
    uid = _require_login(caller)
    stored = await settings_service.load(caller)
    return SettingsView(
        state=link_service.link_state(uid),
        enabled=stored.get(ENABLED_FIELD),
        setup_url=f"{forum.base_url}/pushbullet/setup",
    )


__all__ = ["pushbullet_router", "router"]
