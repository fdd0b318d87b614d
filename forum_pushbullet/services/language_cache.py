"""Bounded, expiring cache of each user's preferred language.

Backed by ``cachetools.TTLCache``: least-recently-used entries are evicted when
the cache is full, and entries older than the TTL read as misses even before
eviction. Contents are advisory; a miss always goes back to user settings.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from cachetools import TTLCache  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60 * 60 * 24
DEFAULT_MIN_SIZE = 50
DEFAULT_USERS_PER_ENTRY = 20


def capacity_for(
    active_user_count: Optional[int],
    *,
    min_size: int = DEFAULT_MIN_SIZE,
    users_per_entry: int = DEFAULT_USERS_PER_ENTRY,
) -> int:
    """One entry per ``users_per_entry`` active users, never below ``min_size``."""
    if not active_user_count or active_user_count <= 0:
        return min_size
    return max(min_size, active_user_count // users_per_entry)


class LanguageCache:
    """Map of user id to language code with LRU eviction and a fixed TTL."""

    def __init__(
        self,
        capacity: int = DEFAULT_MIN_SIZE,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cache: TTLCache = TTLCache(maxsize=capacity, ttl=ttl_seconds, timer=timer)

    @classmethod
    def for_population(
        cls,
        active_user_count: Optional[int],
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        min_size: int = DEFAULT_MIN_SIZE,
        users_per_entry: int = DEFAULT_USERS_PER_ENTRY,
        timer: Callable[[], float] = time.monotonic,
    ) -> "LanguageCache":
        capacity = capacity_for(
            active_user_count, min_size=min_size, users_per_entry=users_per_entry
        )
        logger.info(
            "Language cache sized to %d entries for %s active users",
            capacity,
            active_user_count if active_user_count is not None else "unknown",
        )
        return cls(capacity, ttl_seconds, timer=timer)

    @property
    def capacity(self) -> int:
        return int(self._cache.maxsize)

    def get(self, user_id: int) -> Optional[str]:
        """Return the cached language, or ``None`` on a miss or expired entry."""
        return self._cache.get(user_id)

    def set(self, user_id: int, language: str) -> None:
        self._cache[user_id] = language

    def __len__(self) -> int:
        return len(self._cache)


__all__ = ["LanguageCache", "capacity_for"]
