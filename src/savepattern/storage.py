"""
Key/value persistence - one byte blob per string key.

Backends promise that set() is all-or-nothing: a reader sees the previous
blob or the new one, never a partial write.
"""

import re
import sqlite3
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from .atomic_write import atomic_bytes_write
from .errors import RetryConfig, StorageError, retry_with_backoff


class KeyValueStore(ABC):
    """Durable byte-blob store keyed by name."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the blob for key, or None if it was never set.

        Raises:
            StorageError: the blob exists but could not be read.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Replace the blob for key atomically.

        Raises:
            StorageError: the write failed; the previous blob is untouched.
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""
        pass


class MemoryKeyValueStore(KeyValueStore):
    """In-process store for tests and ephemeral sessions."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileKeyValueStore(KeyValueStore):
    """One file per key inside a directory, written with temp-file-then-rename."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key) or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.blob"

    def get(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        try:
            atomic_bytes_write(path, value)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

    def delete(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)


def _is_locked(error: Exception) -> bool:
    return isinstance(error, sqlite3.OperationalError) and "locked" in str(error).lower()


class SqliteKeyValueStore(KeyValueStore):
    """SQLite-backed store. Each set() is a single transaction."""

    def __init__(self, db_path: str = "savepattern.db"):
        self.db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()
        self._retry = RetryConfig()

    def _connect(self) -> sqlite3.Connection:
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, timeout=5.0, check_same_thread=False)
            # WAL mode allows concurrent reads while writing
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA busy_timeout=5000")
            self._init_schema()
        return self._conn

    def _init_schema(self):
        """Create tables if they don't exist."""
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value BLOB NOT NULL,
                updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            );
        """)
        self._conn.commit()

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            try:
                row = self._connect().execute(
                    "SELECT value FROM kv WHERE key = ?", (key,)
                ).fetchone()
            except sqlite3.Error as e:
                raise StorageError(f"Failed to read key {key!r}: {e}") from e
        return bytes(row[0]) if row else None

    def set(self, key: str, value: bytes) -> None:
        def write():
            conn = self._connect()
            # Connection as context manager: commit on success, rollback on error
            with conn:
                conn.execute(
                    """INSERT INTO kv (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
                       ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                                      updated_at = excluded.updated_at""",
                    (key, sqlite3.Binary(bytes(value))),
                )

        with self._lock:
            try:
                retry_with_backoff(write, self._retry, error_filter=_is_locked)
            except sqlite3.Error as e:
                raise StorageError(f"Failed to write key {key!r}: {e}") from e

    def delete(self, key: str) -> None:
        with self._lock:
            conn = self._connect()
            with conn:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))

    def close(self):
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
