"""Service layer exports."""

from .dispatcher import PushDispatcher
from .language_cache import LanguageCache, capacity_for
from .plugin_config import load_plugin_config, save_plugin_config
from .pushbullet_link import PushbulletLinkService
from .token_cipher import TokenCipherService
from .token_store import TokenStore
from .translator import NotificationTranslator, TranslationCatalog, strip_markup
from .user_settings import Caller, NotLoggedInError, UserSettingsService

__all__ = [
    "Caller",
    "LanguageCache",
    "NotLoggedInError",
    "NotificationTranslator",
    "PushDispatcher",
    "PushbulletLinkService",
    "TokenCipherService",
    "TokenStore",
    "TranslationCatalog",
    "UserSettingsService",
    "capacity_for",
    "load_plugin_config",
    "save_plugin_config",
    "strip_markup",
]
