# storage/__init__.py
"""
Local key-value storage.

Provides:
- KeyValueStore interface (get/set/remove over string keys)
- In-memory and SQLite-backed implementations
- JSON helpers that treat corrupt values as absent
"""

from storage.kv import (
    KeyValueStore,
    MemoryStore,
    SqliteStore,
    StorageError,
    read_json,
    write_json,
)

USERS_KEY = "legalis_users_db"
SESSION_KEY = "legalis_session_v1"
HISTORY_KEY = "legalis_history_v1"

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "SqliteStore",
    "StorageError",
    "read_json",
    "write_json",
    "USERS_KEY",
    "SESSION_KEY",
    "HISTORY_KEY",
]
