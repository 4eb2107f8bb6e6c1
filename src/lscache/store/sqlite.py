"""
SQLiteStore: file-backed flat store with a character quota.

The quota is enforced inside SQLite by a trigger that aborts any insert
which would push the total length of keys and values past the limit, so
the capacity signal comes from the database itself. A genuinely full disk
(SQLITE_FULL) is reported as a quota error too.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from lscache.exceptions import StoreUnavailableError
from lscache.store.base import StorageBackend

QUOTA_MESSAGE = "lscache quota exceeded"


class SQLiteStore(StorageBackend):
    """SQLite-backed flat key-value store.

    Keys enumerate in rowid order, i.e. the order they were (re)inserted.
    Single writer per process; no cross-process coordination.
    """

    def __init__(self, db_path: Path | str, quota: int = 5 * 1024 * 1024) -> None:
        """Initialize SQLiteStore.

        Args:
            db_path: Path to the database file, or ":memory:".
            quota: Capacity in characters of keys plus values.
        """
        self.db_path = str(db_path)
        self.quota = quota
        self._conn: sqlite3.Connection | None = None
        self._initialized = False

    def init(self) -> None:
        """Create the schema and quota trigger. Safe to call multiple times."""
        if self._initialized:
            return

        conn = self._get_conn()
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS items (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS meta (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                quota INTEGER NOT NULL
            )
        """)
        cursor.execute(
            "INSERT INTO meta (id, quota) VALUES (1, ?) "
            "ON CONFLICT(id) DO UPDATE SET quota = excluded.quota",
            (self.quota,),
        )

        cursor.execute(f"""
            CREATE TRIGGER IF NOT EXISTS enforce_quota
            BEFORE INSERT ON items
            WHEN (
                SELECT COALESCE(SUM(length(key) + length(value)), 0) FROM items
            ) + length(NEW.key) + length(NEW.value) > (SELECT quota FROM meta WHERE id = 1)
            BEGIN
                SELECT RAISE(ABORT, '{QUOTA_MESSAGE}');
            END
        """)

        conn.commit()
        self._initialized = True

    def _get_conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            try:
                self._conn = sqlite3.connect(
                    self.db_path,
                    timeout=30.0,
                    isolation_level="DEFERRED",
                )
            except sqlite3.Error as e:
                raise StoreUnavailableError(
                    "Cannot open SQLite store", context={"path": self.db_path}
                ) from e
        return self._conn

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self._initialized = False

    def get_item(self, key: str) -> str | None:
        self.init()
        row = self._get_conn().execute(
            "SELECT value FROM items WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row is not None else None

    def set_item(self, key: str, value: str) -> None:
        self.init()
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM items WHERE key = ?", (key,))
            conn.execute("INSERT INTO items (key, value) VALUES (?, ?)", (key, value))
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise

    def remove_item(self, key: str) -> None:
        self.init()
        conn = self._get_conn()
        conn.execute("DELETE FROM items WHERE key = ?", (key,))
        conn.commit()

    def length(self) -> int:
        self.init()
        row = self._get_conn().execute("SELECT COUNT(*) FROM items").fetchone()
        return int(row[0])

    def key(self, index: int) -> str | None:
        self.init()
        if index < 0:
            return None
        row = self._get_conn().execute(
            "SELECT key FROM items ORDER BY rowid LIMIT 1 OFFSET ?", (index,)
        ).fetchone()
        return row[0] if row is not None else None

    def keys(self) -> list[str]:
        self.init()
        rows = self._get_conn().execute("SELECT key FROM items ORDER BY rowid").fetchall()
        return [row[0] for row in rows]

    def usage(self) -> int:
        """Characters currently used by keys and values."""
        self.init()
        row = self._get_conn().execute(
            "SELECT COALESCE(SUM(length(key) + length(value)), 0) FROM items"
        ).fetchone()
        return int(row[0])

    def is_quota_error(self, exc: BaseException) -> bool:
        if not isinstance(exc, sqlite3.Error):
            return False
        if QUOTA_MESSAGE in str(exc):
            return True
        if isinstance(exc, sqlite3.OperationalError):
            if getattr(exc, "sqlite_errorname", None) == "SQLITE_FULL":
                return True
            return "database or disk is full" in str(exc)
        return False
