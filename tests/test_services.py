"""Tests for wiring the tracker from configuration."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from readingtracker.auth import StaticSession
from readingtracker.config import Config, StorageMode
from readingtracker.db.schemas import ProgressSource
from readingtracker.db.sqlite import Database
from readingtracker.settings.schemas import PermissionStatus
from readingtracker.storage.records import LocalRecordStore, SqlRecordStore
from readingtracker.services import build_tracker


def make_config(tmp_path, mode: StorageMode, user_id="reader") -> Config:
    return Config(
        mode=mode,
        local_db_path=tmp_path / "device.db",
        database_url=f"sqlite:///{tmp_path / 'records.db'}",
        user_id=user_id,
        streak_lookback_days=60,
        stats_window_days=7,
        reminder_hour=21,
        reminder_minute=15,
        gutendex_url="http://localhost/books",
        http_timeout=3,
    )


@pytest.fixture
def account_tracker(tmp_path):
    tracker = build_tracker(make_config(tmp_path, StorageMode.ACCOUNT))
    yield tracker
    tracker.close()


@pytest.fixture
def guest_tracker(tmp_path):
    tracker = build_tracker(make_config(tmp_path, StorageMode.GUEST, user_id=None))
    yield tracker
    tracker.close()


class TestBuildTracker:
    def test_account_mode(self, account_tracker, tmp_path):
        assert isinstance(account_tracker.records, SqlRecordStore)
        assert account_tracker.catalog.progress_source == ProgressSource.CACHE
        assert account_tracker.catalog.user_id == "reader"
        assert (tmp_path / "records.db").exists()

    def test_guest_mode(self, guest_tracker):
        assert isinstance(guest_tracker.records, LocalRecordStore)
        assert guest_tracker.records_db is None
        assert guest_tracker.progress.progress_source == ProgressSource.RECORD
        assert guest_tracker.catalog.user_id == "local"

    def test_explicit_databases_and_session(self, tmp_path):
        local = Database(":memory:")
        remote = Database(":memory:")
        tracker = build_tracker(
            make_config(tmp_path, StorageMode.ACCOUNT),
            session=StaticSession("someone"),
            local_db=local,
            records_db=remote,
        )

        assert tracker.records_db is remote
        assert tracker.catalog.user_id == "someone"
        tracker.close()

    def test_gutendex_client_from_config(self, account_tracker):
        client = account_tracker.gutendex()
        assert client.base_url == "http://localhost/books"
        assert client.timeout == 3


class TestEndToEnd:
    @pytest.mark.parametrize("mode", [StorageMode.ACCOUNT, StorageMode.GUEST])
    def test_read_and_report(self, tmp_path, mode):
        tracker = build_tracker(make_config(tmp_path, mode))
        today = date(2024, 5, 15)
        try:
            book = tracker.catalog.add_book({"title": "Emma", "total_pages": 100})
            tracker.progress.record_progress(book.id, 30, on_date=today)
            tracker.progress.record_progress(book.id, 90, on_date=today)

            assert tracker.catalog.get_book(book.id).pages_read == 100
            stats = tracker.analytics.compute_statistics(7, today)
            assert stats.total_pages == 100
            streak = tracker.streaks.compute_streak(60, today)
            assert streak.current_streak == 1

            tracker.catalog.delete_book(book.id)
            assert tracker.catalog.list_books() == []
        finally:
            tracker.close()

    def test_data_survives_rebuild(self, tmp_path):
        config = make_config(tmp_path, StorageMode.GUEST, user_id=None)
        first = build_tracker(config)
        book = first.catalog.add_book({"title": "Emma", "total_pages": 100})
        first.theme.set_theme("light")
        first.close()

        second = build_tracker(config)
        assert [b.id for b in second.catalog.list_books()] == [book.id]
        assert second.theme.get_theme().value == "light"
        second.close()


class TestNotifications:
    def test_uses_configured_time(self, account_tracker):
        notifier = MagicMock()
        notifier.get_permission_status.return_value = PermissionStatus.GRANTED

        service = account_tracker.notifications(notifier)
        service.schedule_daily_reminder()

        reminder = notifier.schedule.call_args.args[0]
        assert (reminder.hour, reminder.minute) == (21, 15)

    def test_close_shuts_down(self, tmp_path):
        tracker = build_tracker(make_config(tmp_path, StorageMode.GUEST))
        service = tracker.notifications(MagicMock())
        tracker.close()

        assert not service.is_initialized
