"""Pytest configuration and shared fixtures.

This module provides fixtures for testing the readingtracker application:
in-memory databases, both record store strategies and the services wired
on top of them.
"""

from datetime import date, timedelta
from typing import Generator

import pytest

from readingtracker.auth import StaticSession
from readingtracker.config import reset_config
from readingtracker.db.schemas import ProgressSource
from readingtracker.db.sqlite import Database
from readingtracker.library.catalog import BookCatalog
from readingtracker.reading.ledger import HistoryLedger
from readingtracker.reading.progress import ProgressEngine
from readingtracker.services import reset_tracker
from readingtracker.stats.analytics import ReadingAnalytics
from readingtracker.storage.kv import MemoryKeyValueStore
from readingtracker.storage.metadata import MetadataCache
from readingtracker.storage.records import LocalRecordStore, SqlRecordStore
from readingtracker.streaks.manager import StreakManager

USER_ID = "user-1"


# ============================================================================
# Global State
# ============================================================================


@pytest.fixture(autouse=True)
def reset_globals() -> Generator[None, None, None]:
    """Make sure no test sees another test's config or tracker."""
    reset_tracker()
    reset_config()
    yield
    reset_tracker()
    reset_config()


# ============================================================================
# Storage Fixtures
# ============================================================================


@pytest.fixture
def db() -> Generator[Database, None, None]:
    """Create an in-memory database for testing."""
    database = Database(":memory:")
    database.create_tables()
    yield database
    database.dispose()


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def sql_records(db: Database) -> SqlRecordStore:
    return SqlRecordStore(db)


@pytest.fixture
def local_records(kv: MemoryKeyValueStore) -> LocalRecordStore:
    return LocalRecordStore(kv)


@pytest.fixture(params=["sql", "local"])
def records(request, db, kv):
    """Each record store strategy in turn."""
    if request.param == "sql":
        return SqlRecordStore(db)
    return LocalRecordStore(kv)


@pytest.fixture
def cache(kv: MemoryKeyValueStore) -> MetadataCache:
    return MetadataCache(kv)


@pytest.fixture
def session() -> StaticSession:
    return StaticSession(USER_ID)


# ============================================================================
# Service Fixtures (account mode: SQL records, progress in the local cache)
# ============================================================================


@pytest.fixture
def ledger(sql_records: SqlRecordStore) -> HistoryLedger:
    return HistoryLedger(sql_records)


@pytest.fixture
def catalog(sql_records, cache, session) -> BookCatalog:
    return BookCatalog(sql_records, cache, session, ProgressSource.CACHE)


@pytest.fixture
def engine(sql_records, cache, session, ledger) -> ProgressEngine:
    return ProgressEngine(sql_records, cache, session, ProgressSource.CACHE, ledger)


@pytest.fixture
def analytics(ledger, session) -> ReadingAnalytics:
    return ReadingAnalytics(ledger, session)


@pytest.fixture
def streaks(ledger, session) -> StreakManager:
    return StreakManager(ledger, session)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def today() -> date:
    return date(2024, 5, 15)


@pytest.fixture
def sample_book(catalog: BookCatalog):
    """A 200 page book with no progress."""
    return catalog.add_book(
        {"title": "The Hobbit", "total_pages": 200, "author": "J.R.R. Tolkien", "category": "Fantasy"}
    )


@pytest.fixture
def reading_days(ledger: HistoryLedger, sample_book, today: date):
    """Write pages into the history for the given day offsets before today.

    Usage: reading_days({0: 20, 1: 10}) credits 20 pages today, 10 yesterday.
    """

    def _write(pages_by_offset: dict[int, int]) -> None:
        for offset, pages in pages_by_offset.items():
            ledger.append(USER_ID, sample_book.id, pages, today - timedelta(days=offset))

    return _write
