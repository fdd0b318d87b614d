"""
FastAPI application entrypoint for the forum Pushbullet bridge.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from forum_pushbullet.api.routes import pushbullet_router
from forum_pushbullet.api.routes import router as api_router
from forum_pushbullet.core.config import get_settings
from forum_pushbullet.core.logging import configure_logging
from forum_pushbullet.dependencies import get_language_cache, get_plugin_config


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # Credentials and cache sizing are fixed for the life of the process.
    get_plugin_config()
    get_language_cache()
    yield


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Forum Pushbullet Bridge",
        version="0.1.0",
        description="Forwards forum notifications to linked Pushbullet accounts.",
        lifespan=lifespan,
    )
    app.include_router(api_router, prefix="/api")
    app.include_router(pushbullet_router, prefix="/pushbullet")
    return app


app = create_app()

__all__ = ["app", "create_app"]
