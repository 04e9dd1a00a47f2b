# src/zentask/storage/kv_store.py

from __future__ import annotations

import contextlib
import copy
import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any

from ..core.errors import StorageError

logger = logging.getLogger(__name__)


class SqliteKeyValueStore:
    """
    SQLite key-value store.

    One table, one row per key, values stored as JSON text. A put() replaces
    the whole value inside a single transaction, so a failed write leaves the
    previous value in place.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SqliteKeyValueStore ready db=%s", self._db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

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
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open {self._db_path}") from e
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot create schema in {self._db_path}") from e
        finally:
            conn.close()

    # ---- public API ----

    def get(self, key: str) -> Any | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read {key!r}") from e

        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except ValueError as e:
            raise StorageError(f"Stored value for {key!r} is not valid JSON") from e

    def put(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not JSON-serializable") from e

        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                    """,
                    (key, payload, time.time()),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write {key!r}") from e
        logger.debug("kv put key=%s bytes=%d", key, len(payload))


class InMemoryKeyValueStore:
    """
    Process-local key-value store (ZENTASK_STORAGE=memory, tests).

    Values are deep-copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Any | None:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def put(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
