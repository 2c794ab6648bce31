"""Tests for Pydantic schemas."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from readingtracker.db.schemas import (
    DEFAULT_TOTAL_PAGES,
    UNKNOWN_AUTHOR,
    BookCategory,
    BookCreate,
    BookView,
    HistoryEntry,
)


class TestBookCreate:
    """Tests for BookCreate schema."""

    def test_minimal(self):
        book = BookCreate(title="Dune", total_pages=412)

        assert book.title == "Dune"
        assert book.total_pages == 412
        assert book.category == BookCategory.OTHER
        assert book.author is None

    def test_title_is_stripped(self):
        book = BookCreate(title="  Dune  ", total_pages=412)
        assert book.title == "Dune"

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError):
            BookCreate(title="   ", total_pages=100)

    def test_title_length_limit(self):
        BookCreate(title="x" * 100, total_pages=10)
        with pytest.raises(ValidationError):
            BookCreate(title="x" * 101, total_pages=10)

    def test_total_pages_from_string(self):
        book = BookCreate(title="Dune", total_pages=" 412 ")
        assert book.total_pages == 412

    @pytest.mark.parametrize("pages", [0, -5, "abc", True])
    def test_invalid_total_pages(self, pages):
        with pytest.raises(ValidationError):
            BookCreate(title="Dune", total_pages=pages)

    def test_category_by_value(self):
        book = BookCreate(title="Dune", total_pages=412, category="Science Fiction")
        assert book.category == BookCategory.SCIENCE_FICTION

    def test_blank_optional_fields_become_none(self):
        book = BookCreate(title="Dune", total_pages=412, author=" ", read_url="")
        assert book.author is None
        assert book.read_url is None


class TestBookView:
    """Tests for the composed book view."""

    def _view(self, **kwargs) -> BookView:
        return BookView(
            id="b1", title="Dune", created_at=datetime.now(timezone.utc), **kwargs
        )

    def test_defaults(self):
        view = self._view()
        assert view.author == UNKNOWN_AUTHOR
        assert view.total_pages == DEFAULT_TOTAL_PAGES
        assert view.pages_read == 0

    def test_remaining_and_finished(self):
        view = self._view(total_pages=100, pages_read=60)
        assert view.remaining_pages == 40
        assert not view.is_finished

        done = self._view(total_pages=100, pages_read=100)
        assert done.remaining_pages == 0
        assert done.is_finished


class TestHistoryEntry:
    def test_date_from_iso_string(self):
        entry = HistoryEntry(
            id="h1",
            user_id="u",
            book_id="b",
            date="2024-05-15",
            pages_read=12,
            created_at=datetime.now(timezone.utc),
        )
        assert entry.date.isoformat() == "2024-05-15"

    def test_negative_pages_rejected(self):
        with pytest.raises(ValidationError):
            HistoryEntry(
                id="h1",
                user_id="u",
                book_id="b",
                date="2024-05-15",
                pages_read=-1,
                created_at=datetime.now(timezone.utc),
            )
