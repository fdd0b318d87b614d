"""
FastAPI dependency utilities for injecting configuration.
"""

from fastapi import Depends

from forum_pushbullet.core.config import AppSettings, ForumSettings, get_settings


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning application settings."""
    return get_settings()


def get_forum_settings(
    settings: AppSettings = Depends(get_app_settings),
) -> ForumSettings:
    """The forum section only; follows any override of ``get_app_settings``."""
    return settings.forum


__all__ = ["get_app_settings", "get_forum_settings"]
