"""SQLite-backed hash store mirroring the forum's key/field object storage."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional


class SQLiteStore:
    """Key-value store where each key holds a hash of JSON-encoded fields."""

    def __init__(self, db_path: str) -> None:
        self._db_path = Path(db_path)
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_fields (
                    key TEXT NOT NULL,
                    field TEXT NOT NULL,
                    value TEXT NOT NULL,
                    PRIMARY KEY (key, field)
                )
                """
            )

    def set_field(self, key: str, field: str, value: Any) -> None:
        self.set_fields(key, {field: value})

    def set_fields(self, key: str, values: Mapping[str, Any]) -> None:
        if not key:
            raise ValueError("A non-empty key is required")
        rows = [(key, str(field), json.dumps(value)) for field, value in values.items()]
        if not rows:
            return
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO kv_fields (key, field, value)
                VALUES (?, ?, ?)
                ON CONFLICT(key, field) DO UPDATE SET value = excluded.value
                """,
                rows,
            )

    def get_field(self, key: str, field: str) -> Optional[Any]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM kv_fields WHERE key = ? AND field = ?",
                (key, field),
            ).fetchone()
        if not row:
            return None
        return json.loads(row["value"])

    def get_fields(self, key: str, fields: Iterable[str]) -> Dict[str, Optional[Any]]:
        """Return the requested fields, with ``None`` for any that are unset."""
        wanted = list(fields)
        stored = self.get_all(key)
        return {field: stored.get(field) for field in wanted}

    def get_all(self, key: str) -> Dict[str, Any]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT field, value FROM kv_fields WHERE key = ?",
                (key,),
            ).fetchall()
        return {row["field"]: json.loads(row["value"]) for row in rows}

    def delete(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM kv_fields WHERE key = ?", (key,))

    def count_keys(self, pattern: str) -> int:
        """Count distinct keys matching a SQL ``LIKE`` pattern."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT COUNT(DISTINCT key) AS total FROM kv_fields WHERE key LIKE ?",
                (pattern,),
            ).fetchone()
        return int(row["total"]) if row else 0


__all__ = ["SQLiteStore"]
