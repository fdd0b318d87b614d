"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    CALLER_HEADER,
    get_caller,
    get_language_cache,
    get_link_service,
    get_plugin_config,
    get_push_dispatcher,
    get_pushbullet_client,
    get_socket_caller,
    get_sqlite_store,
    get_token_cipher_service,
    get_token_store,
    get_translator,
    get_user_settings_service,
    require_plugin_config,
)
from .config import get_app_settings, get_forum_settings

__all__ = [
    "CALLER_HEADER",
    "get_app_settings",
    "get_caller",
    "get_forum_settings",
    "get_language_cache",
    "get_link_service",
    "get_plugin_config",
    "get_push_dispatcher",
    "get_pushbullet_client",
    "get_socket_caller",
    "get_sqlite_store",
    "get_token_cipher_service",
    "get_token_store",
    "get_translator",
    "get_user_settings_service",
    "require_plugin_config",
]
