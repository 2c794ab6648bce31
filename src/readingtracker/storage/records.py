"""Record stores for books and reading history.

A record store holds the two collections, ``books`` and
``reading_history``, and scopes every query by user id. Account mode talks
to a relational backend through SQLAlchemy; guest mode keeps the same
collections as JSON lists in device-local key-value storage. Both refuse to
delete a book that still has history rows.
"""

import logging
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Generator, Optional, Protocol
from uuid import uuid4

from sqlalchemy import delete, func, select
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from ..db.models import Book, ReadingHistory
from ..db.schemas import BookCategory, BookRecord, HistoryEntry
from ..db.sqlite import Database
from ..errors import NetworkError, NotFoundError, StorageError
from .kv import GUEST_BOOKS_KEY, GUEST_HISTORY_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Protocol for the store that owns canonical book and history records."""

    def create_book(
        self,
        user_id: str,
        title: str,
        total_pages: int,
        category: BookCategory = BookCategory.OTHER,
        cover_image: Optional[str] = None,
    ) -> BookRecord:
        """Insert a book with pages_read = 0 and return the stored row."""
        ...

    def list_books(self, user_id: str) -> list[BookRecord]:
        """All of a user's books, newest first."""
        ...

    def get_book(self, user_id: str, book_id: str) -> Optional[BookRecord]:
        ...

    def update_pages_read(self, user_id: str, book_id: str, pages_read: int) -> BookRecord:
        """Raises:
            NotFoundError: If the book does not exist.
        """
        ...

    def delete_book(self, user_id: str, book_id: str) -> None:
        """Raises:
            StorageError: If history rows still reference the book.
        """
        ...

    def delete_all_books(self, user_id: str) -> int:
        ...

    def find_history(self, user_id: str, book_id: str, day: date) -> Optional[HistoryEntry]:
        ...

    def add_history(self, user_id: str, book_id: str, day: date, pages_read: int) -> HistoryEntry:
        ...

    def set_history_pages(self, entry_id: str, pages_read: int) -> None:
        ...

    def delete_history(self, user_id: str, book_id: str) -> int:
        """Delete every history row for one book. Returns rows removed."""
        ...

    def delete_all_history(self, user_id: str) -> int:
        ...

    def history_since(self, user_id: str, since: date) -> list[HistoryEntry]:
        """History rows dated on or after since, oldest first."""
        ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# SQL record store (account mode)
# ============================================================================


class SqlRecordStore:
    """Record store backed by a relational database via SQLAlchemy."""

    def __init__(self, db: Database):
        """Initialize record store.

        Args:
            db: Database instance for the record store (tables must exist)
        """
        self.db = db

    @contextmanager
    def _session(self, action: str) -> Generator:
        """Open a session and translate driver failures to tracker errors."""
        try:
            with self.db.get_session() as session:
                yield session
        except OperationalError as e:
            logger.error(f"Record store unreachable while trying to {action}: {e}")
            raise NetworkError(f"Could not {action}: record store unreachable") from e
        except SQLAlchemyError as e:
            logger.error(f"Record store failed to {action}: {e}")
            raise StorageError(f"Could not {action}: {e}") from e

    def create_book(
        self,
        user_id: str,
        title: str,
        total_pages: int,
        category: BookCategory = BookCategory.OTHER,
        cover_image: Optional[str] = None,
    ) -> BookRecord:
        with self._session("create book") as session:
            last_seq = session.execute(select(func.max(Book.seq))).scalar()
            book = Book(
                seq=(last_seq or 0) + 1,
                user_id=user_id,
                title=title,
                total_pages=total_pages,
                pages_read=0,
                category=BookCategory(category).value,
                cover_image=cover_image,
                created_at=_now(),
            )
            session.add(book)
            session.flush()
            return BookRecord.model_validate(book)

    def list_books(self, user_id: str) -> list[BookRecord]:
        with self._session("list books") as session:
            stmt = (
                select(Book)
                .where(Book.user_id == user_id)
                .order_by(Book.created_at.desc(), Book.seq)
            )
            books = session.execute(stmt).scalars().all()
            return [BookRecord.model_validate(b) for b in books]

    def get_book(self, user_id: str, book_id: str) -> Optional[BookRecord]:
        with self._session("fetch book") as session:
            book = self._find_book(session, user_id, book_id)
            return BookRecord.model_validate(book) if book else None

    def update_pages_read(self, user_id: str, book_id: str, pages_read: int) -> BookRecord:
        with self._session("update progress") as session:
            book = self._find_book(session, user_id, book_id)
            if book is None:
                raise NotFoundError(f"Book not found: {book_id}")
            book.pages_read = pages_read
            session.flush()
            return BookRecord.model_validate(book)

    def delete_book(self, user_id: str, book_id: str) -> None:
        with self._session("delete book") as session:
            session.execute(
                delete(Book).where(Book.id == book_id, Book.user_id == user_id)
            )

    def delete_all_books(self, user_id: str) -> int:
        with self._session("delete books") as session:
            result = session.execute(delete(Book).where(Book.user_id == user_id))
            return result.rowcount or 0

    def find_history(self, user_id: str, book_id: str, day: date) -> Optional[HistoryEntry]:
        with self._session("fetch reading history") as session:
            stmt = select(ReadingHistory).where(
                ReadingHistory.user_id == user_id,
                ReadingHistory.book_id == book_id,
                ReadingHistory.date == day.isoformat(),
            )
            entry = session.execute(stmt).scalars().first()
            return HistoryEntry.model_validate(entry) if entry else None

    def add_history(self, user_id: str, book_id: str, day: date, pages_read: int) -> HistoryEntry:
        with self._session("record reading history") as session:
            entry = ReadingHistory(
                user_id=user_id,
                book_id=book_id,
                date=day.isoformat(),
                pages_read=pages_read,
                created_at=_now(),
            )
            session.add(entry)
            session.flush()
            return HistoryEntry.model_validate(entry)

    def set_history_pages(self, entry_id: str, pages_read: int) -> None:
        with self._session("update reading history") as session:
            entry = session.get(ReadingHistory, entry_id)
            if entry is None:
                raise NotFoundError(f"History entry not found: {entry_id}")
            entry.pages_read = pages_read

    def delete_history(self, user_id: str, book_id: str) -> int:
        with self._session("delete reading history") as session:
            result = session.execute(
                delete(ReadingHistory).where(
                    ReadingHistory.user_id == user_id,
                    ReadingHistory.book_id == book_id,
                )
            )
            return result.rowcount or 0

    def delete_all_history(self, user_id: str) -> int:
        with self._session("delete reading history") as session:
            result = session.execute(
                delete(ReadingHistory).where(ReadingHistory.user_id == user_id)
            )
            return result.rowcount or 0

    def history_since(self, user_id: str, since: date) -> list[HistoryEntry]:
        with self._session("fetch reading history") as session:
            stmt = (
                select(ReadingHistory)
                .where(
                    ReadingHistory.user_id == user_id,
                    ReadingHistory.date >= since.isoformat(),
                )
                .order_by(ReadingHistory.date)
            )
            entries = session.execute(stmt).scalars().all()
            return [HistoryEntry.model_validate(e) for e in entries]

    @staticmethod
    def _find_book(session, user_id: str, book_id: str) -> Optional[Book]:
        stmt = select(Book).where(Book.id == book_id, Book.user_id == user_id)
        return session.execute(stmt).scalar_one_or_none()


# ============================================================================
# Local record store (guest mode)
# ============================================================================


class LocalRecordStore:
    """Record store kept as JSON lists in device-local key-value storage."""

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def _load(self, key: str) -> list[dict]:
        rows = self.kv.get(key)
        return rows if isinstance(rows, list) else []

    def _books(self) -> list[dict]:
        return self._load(GUEST_BOOKS_KEY)

    def _history(self) -> list[dict]:
        return self._load(GUEST_HISTORY_KEY)

    def create_book(
        self,
        user_id: str,
        title: str,
        total_pages: int,
        category: BookCategory = BookCategory.OTHER,
        cover_image: Optional[str] = None,
    ) -> BookRecord:
        record = BookRecord(
            id=str(uuid4()),
            user_id=user_id,
            title=title,
            total_pages=total_pages,
            pages_read=0,
            category=BookCategory(category),
            cover_image=cover_image,
            created_at=_now(),
        )
        books = self._books()
        books.append(record.model_dump(mode="json"))
        self.kv.set(GUEST_BOOKS_KEY, books)
        return record

    def list_books(self, user_id: str) -> list[BookRecord]:
        records = [BookRecord.model_validate(b) for b in self._books() if b["user_id"] == user_id]
        # sorted() is stable, so equal timestamps keep insertion order
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def get_book(self, user_id: str, book_id: str) -> Optional[BookRecord]:
        for row in self._books():
            if row["id"] == book_id and row["user_id"] == user_id:
                return BookRecord.model_validate(row)
        return None

    def update_pages_read(self, user_id: str, book_id: str, pages_read: int) -> BookRecord:
        books = self._books()
        for row in books:
            if row["id"] == book_id and row["user_id"] == user_id:
                row["pages_read"] = pages_read
                self.kv.set(GUEST_BOOKS_KEY, books)
                return BookRecord.model_validate(row)
        raise NotFoundError(f"Book not found: {book_id}")

    def delete_book(self, user_id: str, book_id: str) -> None:
        if any(h["book_id"] == book_id for h in self._history()):
            raise StorageError(f"Book {book_id} still has reading history")
        books = [
            b for b in self._books()
            if not (b["id"] == book_id and b["user_id"] == user_id)
        ]
        self.kv.set(GUEST_BOOKS_KEY, books)

    def delete_all_books(self, user_id: str) -> int:
        books = self._books()
        remaining = [b for b in books if b["user_id"] != user_id]
        owned = {b["id"] for b in books if b["user_id"] == user_id}
        if any(h["book_id"] in owned for h in self._history()):
            raise StorageError("Books still have reading history")
        self.kv.set(GUEST_BOOKS_KEY, remaining)
        return len(books) - len(remaining)

    def find_history(self, user_id: str, book_id: str, day: date) -> Optional[HistoryEntry]:
        key = day.isoformat()
        for row in self._history():
            if row["user_id"] == user_id and row["book_id"] == book_id and row["date"] == key:
                return HistoryEntry.model_validate(row)
        return None

    def add_history(self, user_id: str, book_id: str, day: date, pages_read: int) -> HistoryEntry:
        entry = HistoryEntry(
            id=str(uuid4()),
            user_id=user_id,
            book_id=book_id,
            date=day,
            pages_read=pages_read,
            created_at=_now(),
        )
        history = self._history()
        history.append(entry.model_dump(mode="json"))
        self.kv.set(GUEST_HISTORY_KEY, history)
        return entry

    def set_history_pages(self, entry_id: str, pages_read: int) -> None:
        history = self._history()
        for row in history:
            if row["id"] == entry_id:
                row["pages_read"] = pages_read
                self.kv.set(GUEST_HISTORY_KEY, history)
                return
        raise NotFoundError(f"History entry not found: {entry_id}")

    def delete_history(self, user_id: str, book_id: str) -> int:
        history = self._history()
        remaining = [
            h for h in history
            if not (h["user_id"] == user_id and h["book_id"] == book_id)
        ]
        self.kv.set(GUEST_HISTORY_KEY, remaining)
        return len(history) - len(remaining)

    def delete_all_history(self, user_id: str) -> int:
        history = self._history()
        remaining = [h for h in history if h["user_id"] != user_id]
        self.kv.set(GUEST_HISTORY_KEY, remaining)
        return len(history) - len(remaining)

    def history_since(self, user_id: str, since: date) -> list[HistoryEntry]:
        entries = [
            HistoryEntry.model_validate(h)
            for h in self._history()
            if h["user_id"] == user_id
        ]
        return sorted((e for e in entries if e.date >= since), key=lambda e: e.date)
