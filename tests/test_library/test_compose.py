"""Tests for the book composition rules."""

from datetime import datetime, timezone

import pytest

from readingtracker.db.schemas import (
    DEFAULT_TOTAL_PAGES,
    UNKNOWN_AUTHOR,
    BookCategory,
    BookMetadata,
    BookRecord,
    ProgressSource,
)
from readingtracker.library.compose import (
    clamp_pages,
    compose_book,
    effective_total_pages,
    progress_percent,
)


def make_record(**kwargs) -> BookRecord:
    fields = {
        "id": "b1",
        "user_id": "u",
        "title": "Dune",
        "total_pages": 400,
        "pages_read": 0,
        "category": BookCategory.SCIENCE_FICTION,
        "created_at": datetime(2024, 5, 1, tzinfo=timezone.utc),
    }
    fields.update(kwargs)
    return BookRecord(**fields)


class TestEffectiveTotalPages:
    def test_record_value_wins(self):
        assert effective_total_pages(400, 250) == 400

    def test_falls_back_to_cache(self):
        assert effective_total_pages(None, 250) == 250
        assert effective_total_pages(0, 250) == 250

    def test_default(self):
        assert effective_total_pages(None, None) == DEFAULT_TOTAL_PAGES
        assert effective_total_pages(0, 0) == DEFAULT_TOTAL_PAGES


class TestProgressPercent:
    @pytest.mark.parametrize(
        "pages_read,total,expected",
        [
            (0, 100, 0),
            (50, 100, 50),
            (1, 3, 33),
            (1, 8, 13),  # 12.5 rounds half up
            (100, 100, 100),
            (0, 0, 0),
        ],
    )
    def test_percent(self, pages_read, total, expected):
        assert progress_percent(pages_read, total) == expected

    def test_clamp(self):
        assert clamp_pages(-3, 100) == 0
        assert clamp_pages(150, 100) == 100
        assert clamp_pages(40, 100) == 40


class TestComposeBook:
    def test_unknown_author_without_metadata(self):
        view = compose_book(make_record())

        assert view.author == UNKNOWN_AUTHOR
        assert view.cover_image is None
        assert view.read_url is None

    def test_metadata_fields(self):
        meta = BookMetadata(
            author="Frank Herbert",
            gutenberg_id=12,
            read_url="https://example.org/dune",
        )
        view = compose_book(make_record(), meta)

        assert view.author == "Frank Herbert"
        assert view.gutenberg_id == 12
        assert view.read_url == "https://example.org/dune"

    def test_cover_prefers_record(self):
        meta = BookMetadata(cover_image="cached.jpg")

        assert compose_book(make_record(cover_image="remote.jpg"), meta).cover_image == "remote.jpg"
        assert compose_book(make_record(), meta).cover_image == "cached.jpg"

    def test_total_from_cache_when_record_missing(self):
        view = compose_book(make_record(total_pages=None), BookMetadata(total_pages=250))
        assert view.total_pages == 250

    def test_default_total(self):
        view = compose_book(make_record(total_pages=None))
        assert view.total_pages == DEFAULT_TOTAL_PAGES

    def test_progress_from_cache(self):
        view = compose_book(make_record(pages_read=10), None, 100, ProgressSource.CACHE)

        assert view.pages_read == 100
        assert view.progress_percent == 25

    def test_progress_from_record(self):
        view = compose_book(make_record(pages_read=10), None, 100, ProgressSource.RECORD)
        assert view.pages_read == 10

    def test_progress_clamped_to_total(self):
        view = compose_book(make_record(total_pages=100), None, 180)

        assert view.pages_read == 100
        assert view.progress_percent == 100
        assert view.is_finished
