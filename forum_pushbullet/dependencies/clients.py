"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, Request, WebSocket, status

from forum_pushbullet.clients import PushbulletClient, SQLiteStore
from forum_pushbullet.core.config import PluginConfig, get_settings
from forum_pushbullet.services import (
    Caller,
    LanguageCache,
    NotificationTranslator,
    PushbulletLinkService,
    PushDispatcher,
    TokenCipherService,
    TokenStore,
    TranslationCatalog,
    UserSettingsService,
    load_plugin_config,
)

CALLER_HEADER = "x-forum-uid"


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_sqlite_store() -> SQLiteStore:
    """Provide the shared forum key-value store."""
    return SQLiteStore(_settings().store_db_path)


@lru_cache()
def get_plugin_config() -> Optional[PluginConfig]:
    """Resolve client credentials once per process."""
    return load_plugin_config(_settings().pushbullet, get_sqlite_store())


def require_plugin_config(
    config: Optional[PluginConfig] = Depends(get_plugin_config),
) -> PluginConfig:
    """Guard for routes that must not run before the plugin is provisioned."""
    if config is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Pushbullet plugin has not been configured.",
        )
    return config


@lru_cache()
def get_pushbullet_client() -> PushbulletClient:
    """Create a singleton Pushbullet API client."""
    return PushbulletClient(_settings().pushbullet, get_plugin_config())


@lru_cache()
def get_token_cipher_service() -> Optional[TokenCipherService]:
    """Provide token encryption when a secret is configured."""
    secret = _settings().security.token_encryption_secret
    if not secret:
        return None
    return TokenCipherService(secret=secret)


@lru_cache()
def get_token_store() -> TokenStore:
    return TokenStore(get_sqlite_store(), get_token_cipher_service())


@lru_cache()
def get_user_settings_service() -> UserSettingsService:
    return UserSettingsService(get_sqlite_store())


@lru_cache()
def get_language_cache() -> LanguageCache:
    """Size the language cache from the known user population."""
    settings = _settings()
    active_users = settings.forum.active_user_count
    if active_users is None:
        active_users = get_user_settings_service().count_users()
    return LanguageCache.for_population(
        active_users,
        ttl_seconds=settings.language_cache.ttl_seconds,
        min_size=settings.language_cache.min_size,
        users_per_entry=settings.language_cache.users_per_entry,
    )


@lru_cache()
def get_translator() -> NotificationTranslator:
    return NotificationTranslator(
        language_cache=get_language_cache(),
        user_settings=get_user_settings_service(),
        catalog=TranslationCatalog(),
        default_language=_settings().forum.default_language,
    )


@lru_cache()
def get_push_dispatcher() -> PushDispatcher:
    """Wire the dispatcher that forwards forum notifications."""
    return PushDispatcher(
        token_store=get_token_store(),
        translator=get_translator(),
        pushbullet_client=get_pushbullet_client(),
        forum_settings=_settings().forum,
    )


@lru_cache()
def get_link_service() -> PushbulletLinkService:
    settings = _settings()
    return PushbulletLinkService(
        pushbullet_client=get_pushbullet_client(),
        token_store=get_token_store(),
        forum_settings=settings.forum,
        pushbullet_settings=settings.pushbullet,
    )


def _caller_from_header(raw: Optional[str]) -> Caller:
    try:
        uid = int(raw) if raw else None
    except ValueError:
        uid = None
    return Caller(uid=uid if uid and uid > 0 else None)


def get_caller(request: Request) -> Caller:
    """Identity forwarded by the forum's session middleware."""
    return _caller_from_header(request.headers.get(CALLER_HEADER))


def get_socket_caller(websocket: WebSocket) -> Caller:
    return _caller_from_header(websocket.headers.get(CALLER_HEADER))


__all__ = [
    "CALLER_HEADER",
    "get_caller",
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
