"""SQLAlchemy ORM models.

Tables:
- books: Canonical book records, scoped per user
- reading_history: Pages read per (user, book, date)
- key_values: Device-local JSON values (metadata cache, settings, guest data)
"""

import json
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .schemas import BookCategory


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Book(Base):
    """Book model - canonical fields owned by the record store."""

    __tablename__ = "books"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    total_pages: Mapped[Optional[int]] = mapped_column(Integer)
    pages_read: Mapped[int] = mapped_column(Integer, default=0)
    category: Mapped[str] = mapped_column(String(50), default=BookCategory.OTHER.value)
    cover_image: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )
    # Insertion order, breaks ties between equal created_at values
    seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title={self.title!r})>"


class ReadingHistory(Base):
    """Reading history model - one row per (user, book, date) bucket.

    Not unique-constrained; writers look the bucket up before inserting.
    """

    __tablename__ = "reading_history"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    book_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("books.id"), nullable=False, index=True
    )
    date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)  # ISO date
    pages_read: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def __repr__(self) -> str:
        return f"<ReadingHistory(book_id={self.book_id}, date={self.date}, pages={self.pages_read})>"


class KeyValue(Base):
    """Key-value model - JSON blobs stored under namespaced string keys."""

    __tablename__ = "key_values"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)  # JSON
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    def get_value(self) -> Any:
        """Parse the stored JSON value."""
        return json.loads(self.value)

    def set_value(self, value: Any) -> None:
        """Serialize a value to JSON for storage."""
        self.value = json.dumps(value)
