"""
ChorePlan Assistant — SQLite storage.

Two small tables live here: the chore catalog the user picks from, and a
key/value table holding the single LLM API key set through /apikey.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from src.data.models import ChoreCatalogEntry

logger = logging.getLogger(__name__)

DEFAULT_CATALOG: list[tuple[str, str]] = [
    ("Dishwashing", "🧼"),
    ("Laundry", "🧺"),
    ("Vacuuming", "💨"),
    ("Grocery Shopping", "🛒"),
    ("Take Out Trash", "🗑️"),
    ("Mopping Floors", "🧽"),
    ("Clean Bathroom", "🚽"),
    ("Change Bed Sheets", "🛏️"),
    ("Water Plants", "🪴"),
    ("Dusting", "🪶"),
    ("Cooking", "🍳"),
    ("Ironing", "👔"),
    ("Clean Windows", "🪟"),
    ("Clean Fridge", "🧊"),
    ("Feed Pets", "🐾"),
]


def _resolve_path(db_path: str | None) -> str:
    if db_path is None:
        from src.config import settings
        db_path = settings.DATABASE_PATH
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    return db_path


def _memory_connection(db_path: str) -> sqlite3.Connection | None:
    """An in-memory database only lives as long as its connection, so
    ":memory:" stores hold one open connection instead of reconnecting."""
    if db_path != ":memory:":
        return None
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


class CatalogDB:
    """SQLite-backed chore catalog."""

    def __init__(self, db_path: str | None = None) -> None:
        self._db_path = _resolve_path(db_path)
        self._memory_conn = _memory_connection(self._db_path)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        if self._memory_conn is not None:
            return self._memory_conn
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Create the catalog table if it doesn't exist."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS catalog (
                    id    INTEGER PRIMARY KEY AUTOINCREMENT,
                    name  TEXT    NOT NULL UNIQUE,
                    icon  TEXT    NOT NULL
                )
            """)
        logger.debug("Catalog table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> ChoreCatalogEntry:
        return ChoreCatalogEntry(id=row["id"], name=row["name"], icon=row["icon"])

    def add_entry(self, name: str, icon: str) -> ChoreCatalogEntry:
        """Insert a new catalog entry. Raises sqlite3.IntegrityError on duplicate names."""
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO catalog (name, icon) VALUES (?, ?)", (name, icon),
            )
            entry_id = cursor.lastrowid
        logger.info("Catalog entry added: #%d '%s'", entry_id, name)
        return ChoreCatalogEntry(id=entry_id, name=name, icon=icon)

    def get_entry(self, entry_id: int) -> ChoreCatalogEntry | None:
        """Fetch a single catalog entry by ID."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM catalog WHERE id = ?", (entry_id,)
            ).fetchone()
        if row is None:
            return None
        return self._row_to_entry(row)

    def list_all(self) -> list[ChoreCatalogEntry]:
        """Return every catalog row, sorted alphabetically by name."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM catalog ORDER BY name COLLATE NOCASE"
            ).fetchall()
        return [self._row_to_entry(r) for r in rows]

    def seed_defaults(self) -> int:
        """Populate an empty catalog with DEFAULT_CATALOG. Returns rows inserted."""
        with self._connect() as conn:
            count = conn.execute("SELECT COUNT(*) FROM catalog").fetchone()[0]
            if count:
                return 0
            conn.executemany(
                "INSERT INTO catalog (name, icon) VALUES (?, ?)", DEFAULT_CATALOG,
            )
        logger.info("Seeded catalog with %d default chores", len(DEFAULT_CATALOG))
        return len(DEFAULT_CATALOG)


class CredentialStore:
    """Durable named string values (the LLM API key) in SQLite.

    Setting an empty value deletes the key, so absence always means
    "no stored credential".
    """

    def __init__(self, db_path: str | None = None) -> None:
        self._db_path = _resolve_path(db_path)
        self._memory_conn = _memory_connection(self._db_path)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        if self._memory_conn is not None:
            return self._memory_conn
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS credentials (
                    name   TEXT PRIMARY KEY,
                    value  TEXT NOT NULL
                )
            """)

    def get(self, name: str) -> str | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM credentials WHERE name = ?", (name,)
            ).fetchone()
        return row["value"] if row else None

    def set(self, name: str, value: str) -> None:
        if not value:
            self.delete(name)
            return
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO credentials (name, value) VALUES (?, ?) "
                "ON CONFLICT(name) DO UPDATE SET value = excluded.value",
                (name, value),
            )
        logger.info("Credential '%s' updated", name)

    def delete(self, name: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM credentials WHERE name = ?", (name,))
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info("Credential '%s' removed", name)
        return deleted
