"""
Localization of forum notification text.

Forum notifications carry translation tokens such as
``[[notifications:user_posted_to, <strong>alice</strong>, Welcome]]``. Tokens
are resolved against JSON catalogs under ``languages/<lang>/<namespace>.json``;
``%1``, ``%2`` ... in the catalog string are replaced by the token arguments.
Arguments may themselves be tokens, so resolution works from the innermost
token outwards.
"""

from __future__ import annotations

import html
import json
import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from forum_pushbullet.core.config import DEFAULT_LANGUAGE
from forum_pushbullet.services.language_cache import LanguageCache
from forum_pushbullet.services.user_settings import UserSettingsService

logger = logging.getLogger(__name__)

LANGUAGE_DIR = Path(__file__).resolve().parents[1] / "languages"

_TOKEN_RE = re.compile(r"\[\[([\w\-]+):([\w\-.]+)((?:,[^\[\]]*)?)\]\]")
_PLACEHOLDER_RE = re.compile(r"%(\d+)")
_TAG_RE = re.compile(r"<[^>]*>")
_LANGUAGE_CODE_RE = re.compile(r"^[A-Za-z]{2,3}(?:[_\-][A-Za-z0-9]{2,8})*$")
_MAX_PASSES = 8


def strip_markup(text: str) -> str:
    """Drop HTML tags and decode entities, leaving plain text."""
    return html.unescape(_TAG_RE.sub("", text)).strip()


@lru_cache(maxsize=256)
def _load_namespace(directory: Path, language: str, namespace: str) -> Dict[str, str]:
    path = directory / language / f"{namespace}.json"
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError:
        logger.error("Ignoring malformed language file %s", path)
        return {}
    return {str(key): str(value) for key, value in data.items()}


class TranslationCatalog:
    """Resolve ``[[namespace:key, args]]`` tokens from on-disk JSON catalogs."""

    def __init__(
        self,
        directory: Path = LANGUAGE_DIR,
        fallback_language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self._directory = directory
        self._fallback = fallback_language

    def lookup(self, language: str, namespace: str, key: str) -> Optional[str]:
        for candidate in (language, self._fallback):
            if not _LANGUAGE_CODE_RE.match(candidate):
                continue
            value = _load_namespace(self._directory, candidate, namespace).get(key)
            if value is not None:
                return value
        return None

    def translate(self, text: str, language: str) -> str:
        for _ in range(_MAX_PASSES):
            translated = _TOKEN_RE.sub(lambda match: self._render(match, language), text)
            if translated == text:
                break
            text = translated
        return text

    def _render(self, match: re.Match, language: str) -> str:
        namespace, key, raw_args = match.group(1), match.group(2), match.group(3)
        args = [arg.strip() for arg in raw_args.split(",")[1:]] if raw_args else []

        template = self.lookup(language, namespace, key)
        if template is None:
            logger.debug("Missing translation %s:%s for %s", namespace, key, language)
            return key

        def _substitute(placeholder: re.Match) -> str:
            index = int(placeholder.group(1)) - 1
            return args[index] if 0 <= index < len(args) else placeholder.group(0)

        return _PLACEHOLDER_RE.sub(_substitute, template)


class NotificationTranslator:
    """Pick a user's language and turn notification text into plain localized text."""

    def __init__(
        self,
        *,
        language_cache: LanguageCache,
        user_settings: UserSettingsService,
        catalog: TranslationCatalog,
        default_language: Optional[str] = None,
    ) -> None:
        self._cache = language_cache
        self._settings = user_settings
        self._catalog = catalog
        self._default_language = default_language

    def resolve_language(self, user_id: int) -> str:
        cached = self._cache.get(user_id)
        if cached:
            return cached

        language = (
            self._settings.get_language(user_id)
            or self._default_language
            or DEFAULT_LANGUAGE
        )
        self._cache.set(user_id, language)
        return language

    def translate(self, text: str, language: str) -> str:
        return self._catalog.translate(text, language)

    def localize(self, user_id: int, text: str) -> str:
        """Translate ``text`` into the user's language and strip its markup."""
        language = self.resolve_language(user_id)
        return strip_markup(self.translate(text, language))


__all__ = [
    "LANGUAGE_DIR",
    "NotificationTranslator",
    "TranslationCatalog",
    "strip_markup",
]
