# storage/kv.py
"""
Key-value storage backends.

The application keeps three JSON blobs (user table, session record and
analysis history) under fixed string keys. Components receive a store
instance instead of reaching for a global, so tests can inject a
MemoryStore.

SqliteStore keeps a single kv table in a file-based SQLite database.
Use ":memory:" for a throwaway database.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

_logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a value cannot be written (quota exceeded, I/O failure)."""

    pass


class KeyValueStore(ABC):
    """
    String-keyed, string-valued storage.

    Mirrors the browser storage contract: reads of missing keys return
    None, removes are idempotent, and writes may fail.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value.

        Raises:
            StorageError: If the value cannot be stored
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key. No-op if the key is absent."""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        """List stored keys."""
        pass


class MemoryStore(KeyValueStore):
    """
    In-process store.

    quota_bytes bounds the total size of keys plus values, which lets
    tests reproduce a full browser store.
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self._data: Dict[str, str] = {}
        self._quota_bytes = quota_bytes
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageError(f"Value for {key} must be a string")

        with self._lock:
            if self._quota_bytes is not None:
                used = sum(
                    len(k) + len(v) for k, v in self._data.items() if k != key
                )
                if used + len(key) + len(value) > self._quota_bytes:
                    raise StorageError(
                        f"Storage quota exceeded writing {key} "
                        f"({self._quota_bytes} bytes available)"
                    )
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._data.keys())


class SqliteStore(KeyValueStore):
    """
    SQLite-backed store.

    One connection per thread; the kv table is created on first use.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = str(path)
        self._local = threading.local()
        self._init_lock = threading.Lock()
        self._initialized = False
        # A ":memory:" database exists per connection, so share one
        self._shared: Optional[sqlite3.Connection] = None

    @property
    def path(self) -> str:
        return self._path

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if self._path == ":memory:":
            if self._shared is None:
                self._shared = sqlite3.connect(":memory:", check_same_thread=False)
            return self._shared

        conn = getattr(self._local, "connection", None)
        if conn is None:
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self._path, timeout=30.0, check_same_thread=False)
            self._local.connection = conn
        return conn

    @contextmanager
    def _db(self):
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def _init_schema(self) -> None:
        """Create the kv table. Safe to call multiple times."""
        with self._init_lock:
            if self._initialized:
                return
            with self._db() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                """)
            _logger.info(f"Key-value store initialized at {self._path}")
            self._initialized = True

    def get(self, key: str) -> Optional[str]:
        self._init_schema()
        with self._db() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self._init_schema()
        try:
            with self._db() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)",
                    (key, value),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write {key}: {e}") from e

    def remove(self, key: str) -> None:
        self._init_schema()
        with self._db() as conn:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))

    def keys(self) -> List[str]:
        self._init_schema()
        with self._db() as conn:
            rows = conn.execute("SELECT key FROM kv ORDER BY key").fetchall()
        return [row[0] for row in rows]

    def close(self) -> None:
        """Close the calling thread's connection."""
        conn = getattr(self._local, "connection", None)
        if conn is not None:
            conn.close()
            self._local.connection = None
        if self._shared is not None:
            self._shared.close()
            self._shared = None
            self._initialized = False


def read_json(store: KeyValueStore, key: str, default: Any = None) -> Any:
    """
    Read and decode a JSON value.

    Missing keys, backend read failures and malformed JSON all return
    default. Never raises.
    """
    try:
        raw = store.get(key)
    except (StorageError, sqlite3.Error) as e:
        _logger.warning(f"Failed to read {key}: {e}")
        return default

    if raw is None:
        return default

    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        _logger.warning(f"Ignoring malformed value at {key}: {e}")
        return default


def write_json(store: KeyValueStore, key: str, value: Any) -> None:
    """
    Encode and store a JSON value.

    Raises:
        StorageError: If the value cannot be serialized or stored
    """
    try:
        raw = json.dumps(value, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise StorageError(f"Value for {key} is not JSON-serializable: {e}") from e
    store.set(key, raw)
