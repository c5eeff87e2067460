"""
Local Storage
Durable key/value storage for client-side state, the Python stand-in for a
browser's localStorage.

Entries are namespaced by origin: a store opened for one origin never sees
another origin's keys, even in the same database file.
"""

import sqlite3
import uuid
from pathlib import Path
from typing import Dict, Optional, Protocol


# Query parameter that carries the per-browser id across reloads
BROWSER_ID_PARAM = "sid"


def new_browser_id() -> str:
    return uuid.uuid4().hex


def browser_origin(origin: str, browser_id: str) -> str:
    """Storage namespace for one browser: visitors of the same server never share entries"""
    if not browser_id:
        raise ValueError("browser_id must be non-empty")
    return f"{origin}#{browser_id}"


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...
    def clear(self) -> None: ...


class LocalStorage:
    """
    SQLite-backed localStorage.

    Table:
        - local_storage: (origin, key) -> value
    """

    def __init__(self, db_path: str = "data/local_storage.db", origin: str = "http://localhost:8501"):
        self.db_path = db_path
        self.origin = origin
        self._ensure_directory()
        self._init_schema()

    def _ensure_directory(self):
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

    def _init_schema(self):
        with sqlite3.connect(self.db_path) as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS local_storage (
                    origin TEXT NOT NULL,
                    key TEXT NOT NULL,
                    value TEXT NOT NULL,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (origin, key)
                );
            """)

    def get_item(self, key: str) -> Optional[str]:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM local_storage WHERE origin = ? AND key = ?",
                [self.origin, key]
            ).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """INSERT OR REPLACE INTO local_storage (origin, key, value, updated_at)
                   VALUES (?, ?, ?, CURRENT_TIMESTAMP)""",
                [self.origin, key, value]
            )

    def remove_item(self, key: str) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "DELETE FROM local_storage WHERE origin = ? AND key = ?",
                [self.origin, key]
            )

    def clear(self) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM local_storage WHERE origin = ?", [self.origin])


class MemoryStorage:
    """In-process storage with the same interface; nothing survives the process"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()
