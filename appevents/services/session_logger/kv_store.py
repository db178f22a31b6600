"""
Persistent key-value storage for values the session logger caches between runs.

SQLite is the default backend; every call opens its own connection so that
independent callers never share a cursor.
"""

import sqlite3
from abc import ABC, abstractmethod
import threading
import logging
from pathlib import Path
from typing import Dict, Optional

from .constants import APP_EVENT_PREFERENCES

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Minimal get/put contract, namespaced per host application"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        pass


class SQLiteKeyValueStore(KeyValueStore):
    """
    Stores string values in a single `preferences` table.

    Concurrent writers are tolerated: writes are INSERT OR REPLACE and the
    values written for a given key are expected to be identical.
    """

    def __init__(self, db_file: str, namespace: str = APP_EVENT_PREFERENCES):
        self.db_file = str(db_file)
        self.namespace = namespace
        self._init_db()

    def _init_db(self) -> None:
        """Initialize database schema"""
        Path(self.db_file).parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(self.db_file)
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS preferences (
                    namespace TEXT NOT NULL,
                    key TEXT NOT NULL,
                    value TEXT,
                    PRIMARY KEY (namespace, key)
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def get(self, key: str) -> Optional[str]:
        conn = sqlite3.connect(self.db_file)
        try:
            row = conn.execute(
                "SELECT value FROM preferences WHERE namespace = ? AND key = ?",
                (self.namespace, key),
            ).fetchone()
        finally:
            conn.close()

        return row[0] if row else None

    def put(self, key: str, value: str) -> None:
        conn = sqlite3.connect(self.db_file)
        try:
            conn.execute(
                "INSERT OR REPLACE INTO preferences (namespace, key, value) VALUES (?, ?, ?)",
                (self.namespace, key, value),
            )
            conn.commit()
        finally:
            conn.close()

        logger.debug(f"Stored preference {key} in namespace {self.namespace}")


class MemoryKeyValueStore(KeyValueStore):
    """In-process store for tests and ephemeral runs"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value
