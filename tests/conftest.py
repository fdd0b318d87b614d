"""Pytest configuration shared across the suite."""

from pathlib import Path

import pytest

try:
    from . import _bootstrap  # noqa: F401
except ImportError:  # pragma: no cover - rootdir-relative collection
    import _bootstrap  # type: ignore # noqa: F401

from forum_pushbullet.clients import SQLiteStore


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def store(tmp_path: Path) -> SQLiteStore:
    """A fresh on-disk forum store per test."""
    return SQLiteStore(str(tmp_path / "forum.db"))
