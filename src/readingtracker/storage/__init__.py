"""Storage layer: local key-value store, record stores and metadata cache."""

from .kv import (
    GUEST_BOOKS_KEY,
    GUEST_HISTORY_KEY,
    METADATA_KEY,
    NOTIFICATIONS_KEY,
    PROGRESS_KEY,
    THEME_KEY,
    KeyValueStore,
    MemoryKeyValueStore,
    SqliteKeyValueStore,
)
from .metadata import MetadataCache
from .records import LocalRecordStore, RecordStore, SqlRecordStore

__all__ = [
    "GUEST_BOOKS_KEY",
    "GUEST_HISTORY_KEY",
    "METADATA_KEY",
    "NOTIFICATIONS_KEY",
    "PROGRESS_KEY",
    "THEME_KEY",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqliteKeyValueStore",
    "MetadataCache",
    "LocalRecordStore",
    "RecordStore",
    "SqlRecordStore",
]
