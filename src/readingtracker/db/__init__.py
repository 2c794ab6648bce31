"""Database module: ORM models, schemas and engine management."""

from .models import Base, Book, KeyValue, ReadingHistory
from .schemas import (
    DEFAULT_TOTAL_PAGES,
    MAX_TITLE_LENGTH,
    UNKNOWN_AUTHOR,
    BookCategory,
    BookCreate,
    BookMetadata,
    BookRecord,
    BookView,
    HistoryEntry,
    ProgressSource,
)
from .sqlite import Database

__all__ = [
    "Base",
    "Book",
    "KeyValue",
    "ReadingHistory",
    "DEFAULT_TOTAL_PAGES",
    "MAX_TITLE_LENGTH",
    "UNKNOWN_AUTHOR",
    "BookCategory",
    "BookCreate",
    "BookMetadata",
    "BookRecord",
    "BookView",
    "HistoryEntry",
    "ProgressSource",
    "Database",
]
