"""Key-value storage handles for the ledger and the admin contact slot."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from foodstand.config import ADMIN_PHONE_STORAGE_KEY, DB_PATH

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """An opaque text slot store."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SqliteStore:
    """Key-value slots kept in a single sqlite table."""

    def __init__(self, db_path: str | Path = DB_PATH) -> None:
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(self.db_path)

    def bootstrap_schema(self) -> None:
        """Create the slot table if it does not already exist."""
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                    """
                )
        finally:
            conn.close()

    def get(self, key: str) -> str | None:
        conn = self._connect()
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        return str(row[0])

    def set(self, key: str, value: str) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                    """,
                    (key, value, _utc_now_iso()),
                )
        finally:
            conn.close()


class MemoryStore:
    """Dict-backed store. ``fail_writes`` makes every ``set`` raise, like a full disk."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.fail_writes = False
        self.writes = 0

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("store rejected the write")
        self.data[key] = value
        self.writes += 1


def load_admin_phone(store: KeyValueStore) -> str:
    try:
        return store.get(ADMIN_PHONE_STORAGE_KEY) or ""
    except Exception:
        logger.warning("Could not read admin phone", exc_info=True)
        return ""


def save_admin_phone(store: KeyValueStore, phone: str) -> bool:
    """Store the admin phone as typed. Returns False when the store rejects the write."""
    try:
        store.set(ADMIN_PHONE_STORAGE_KEY, phone or "")
    except Exception:
        logger.warning("Could not save admin phone", exc_info=True)
        return False
    return True
