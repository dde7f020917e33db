# src/modern_todo/tasks/preferences.py

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import sqlite3
import time
from pathlib import Path

logger = logging.getLogger(__name__)

_KIND_STRING_LIST = "string_list"
_KIND_BOOL = "bool"


class SqlitePreferences:
    """
    SQLite key-value preference store.

    One row per key; the value is stored as text and tagged with its kind:
    - string lists are JSON arrays
    - booleans are "1" / "0"

    Thread-safety:
    - each method opens its own SQLite connection, so the async wrappers can
      run the blocking work in worker threads via asyncio.to_thread
    """

    def __init__(self, db_path: str | Path = "prefs.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_keys()
        except sqlite3.Error:
            total = -1
        logger.info("SqlitePreferences ready db=%s keys=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS prefs (
                    key TEXT PRIMARY KEY,
                    kind TEXT NOT NULL,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def _read(self, key: str, kind: str) -> str | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT kind, value FROM prefs WHERE key = ?", (key,))
            row = cur.fetchone()
        finally:
            conn.close()

        if row is None:
            return None
        if row["kind"] != kind:
            raise TypeError(f"preference {key!r} holds {row['kind']}, not {kind}")
        return str(row["value"])

    def _write(self, key: str, kind: str, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO prefs(key, kind, value, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    kind = excluded.kind,
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, kind, value, time.time()),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug("Preference written key=%s kind=%s bytes=%d", key, kind, len(value))

    def _delete(self, key: str) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM prefs WHERE key = ?", (key,))
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    # ---- sync API ----

    def count_keys(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM prefs")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def read_string_list(self, key: str) -> list[str] | None:
        raw = self._read(key, _KIND_STRING_LIST)
        if raw is None:
            return None
        val = json.loads(raw)
        if not isinstance(val, list):
            raise TypeError(f"preference {key!r} is not a list")
        return [str(v) for v in val]

    def write_string_list(self, key: str, values: list[str]) -> None:
        self._write(key, _KIND_STRING_LIST, json.dumps(list(values), ensure_ascii=False))

    def read_bool(self, key: str) -> bool | None:
        raw = self._read(key, _KIND_BOOL)
        if raw is None:
            return None
        return raw == "1"

    def write_bool(self, key: str, value: bool) -> None:
        self._write(key, _KIND_BOOL, "1" if value else "0")

    # ---- async API (PreferenceRepo) ----

    async def get_string_list(self, key: str) -> list[str] | None:
        return await asyncio.to_thread(self.read_string_list, key)

    async def set_string_list(self, key: str, values: list[str]) -> None:
        await asyncio.to_thread(self.write_string_list, key, list(values))

    async def get_bool(self, key: str) -> bool | None:
        return await asyncio.to_thread(self.read_bool, key)

    async def set_bool(self, key: str, value: bool) -> None:
        await asyncio.to_thread(self.write_bool, key, bool(value))

    async def remove(self, key: str) -> bool:
        return await asyncio.to_thread(self._delete, key)
