"""Tests for HistoryLedger."""

from datetime import date, timedelta

import pytest

from readingtracker.reading.ledger import HistoryLedger

USER = "user-1"


@pytest.fixture
def book_ids(records):
    return [
        records.create_book(USER, "Dune", 400).id,
        records.create_book(USER, "Emma", 300).id,
    ]


class TestAppend:
    """Tests for writing to the ledger, against both record stores."""

    def test_first_append_creates_bucket(self, records, book_ids):
        ledger = HistoryLedger(records)
        day = date(2024, 5, 15)

        entry = ledger.append(USER, book_ids[0], 5, day)

        assert entry.pages_read == 5
        assert entry.date == day
        assert records.find_history(USER, book_ids[0], day).pages_read == 5

    def test_same_day_accumulates(self, records, book_ids):
        ledger = HistoryLedger(records)
        day = date(2024, 5, 15)

        ledger.append(USER, book_ids[0], 5, day)
        entry = ledger.append(USER, book_ids[0], 3, day)

        assert entry.pages_read == 8
        entries = records.history_since(USER, day)
        assert len(entries) == 1
        assert entries[0].pages_read == 8

    def test_buckets_per_book_and_day(self, records, book_ids):
        ledger = HistoryLedger(records)
        day = date(2024, 5, 15)

        ledger.append(USER, book_ids[0], 5, day)
        ledger.append(USER, book_ids[1], 7, day)
        ledger.append(USER, book_ids[0], 2, day + timedelta(days=1))

        assert len(records.history_since(USER, day)) == 3

    def test_defaults_to_today(self, records, book_ids):
        ledger = HistoryLedger(records)
        entry = ledger.append(USER, book_ids[0], 4)
        assert entry.date == date.today()


class TestAggregation:
    def test_daily_totals_across_books(self, records, book_ids):
        ledger = HistoryLedger(records)
        day = date(2024, 5, 15)
        ledger.append(USER, book_ids[0], 5, day)
        ledger.append(USER, book_ids[1], 7, day)
        ledger.append(USER, book_ids[0], 2, day - timedelta(days=1))

        totals = ledger.daily_totals(USER, day - timedelta(days=1))

        assert totals == {day: 12, day - timedelta(days=1): 2}

    def test_window_excludes_outside_days(self, records, book_ids):
        ledger = HistoryLedger(records)
        today = date(2024, 5, 15)
        ledger.append(USER, book_ids[0], 1, today - timedelta(days=7))  # outside
        ledger.append(USER, book_ids[0], 2, today - timedelta(days=6))
        ledger.append(USER, book_ids[0], 3, today)
        ledger.append(USER, book_ids[0], 4, today + timedelta(days=1))  # future

        totals = ledger.window(USER, 7, today)

        assert totals == {today - timedelta(days=6): 2, today: 3}

    def test_empty(self, records):
        ledger = HistoryLedger(records)
        assert ledger.daily_totals(USER, date(2024, 1, 1)) == {}
