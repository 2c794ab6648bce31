"""Device-local key-value storage.

Values are JSON-serialisable and survive restarts when backed by the local
SQLite file. The in-memory store is for tests and throwaway sessions.
"""

import copy
import json
import logging
from typing import Any, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ..db.models import KeyValue
from ..db.sqlite import Database
from ..errors import StorageError

logger = logging.getLogger(__name__)

# Namespaced keys
METADATA_KEY = "book_metadata_v1"
PROGRESS_KEY = "book_progress_v1"
GUEST_BOOKS_KEY = "@reading_tracker_books"
GUEST_HISTORY_KEY = "@reading_tracker_history"
THEME_KEY = "@reading_tracker_theme"
NOTIFICATIONS_KEY = "@reading_tracker_notifications"


class KeyValueStore(Protocol):
    """Persistent mapping from string keys to JSON values."""

    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None when the key is absent."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serialisable value under key."""
        ...

    def remove(self, key: str) -> None:
        """Delete key if present."""
        ...


class MemoryKeyValueStore:
    """Dict-backed key-value store.

    Values are round-tripped through JSON so callers see the same types a
    persistent store would give back.
    """

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not JSON serialisable: {e}") from e

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def snapshot(self) -> dict[str, Any]:
        """Copy of all stored values, for inspection in tests."""
        return {k: copy.deepcopy(json.loads(v)) for k, v in self._data.items()}


class SqliteKeyValueStore:
    """Key-value store kept in the key_values table of the local database."""

    def __init__(self, db: Database):
        """Initialize key-value store.

        Args:
            db: Local database instance (tables must exist)
        """
        self.db = db

    def get(self, key: str) -> Optional[Any]:
        try:
            with self.db.get_session() as session:
                row = session.get(KeyValue, key)
                if row is None:
                    return None
                return row.get_value()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read {key!r}: {e}") from e
        except json.JSONDecodeError as e:
            raise StorageError(f"Stored value for {key!r} is not valid JSON") from e

    def set(self, key: str, value: Any) -> None:
        try:
            with self.db.get_session() as session:
                row = session.get(KeyValue, key)
                if row is None:
                    row = KeyValue(key=key)
                    session.add(row)
                row.set_value(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not JSON serialisable: {e}") from e
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write {key!r}: {e}") from e
        logger.debug(f"Stored local value {key}")

    def remove(self, key: str) -> None:
        try:
            with self.db.get_session() as session:
                row = session.get(KeyValue, key)
                if row is not None:
                    session.delete(row)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to remove {key!r}: {e}") from e

    def keys(self) -> list[str]:
        try:
            with self.db.get_session() as session:
                return list(session.execute(select(KeyValue.key)).scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list keys: {e}") from e
