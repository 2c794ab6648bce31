"""Wiring: builds the tracker's services from configuration.

Account mode keeps book records in the relational record store and caches
metadata and progress on the device. Guest mode keeps everything on the
device, with progress stored on the book record itself.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .api.gutendex import GutendexClient
from .auth import SessionProvider, StaticSession
from .config import Config, StorageMode, get_config
from .db.schemas import ProgressSource
from .db.sqlite import Database
from .library.catalog import BookCatalog
from .reading.ledger import HistoryLedger
from .reading.progress import ProgressEngine
from .settings.manager import ThemeManager
from .settings.notifications import NotificationService, Notifier
from .stats.analytics import ReadingAnalytics
from .storage.kv import SqliteKeyValueStore
from .storage.metadata import MetadataCache
from .storage.records import LocalRecordStore, RecordStore, SqlRecordStore
from .streaks.manager import StreakManager

logger = logging.getLogger(__name__)


@dataclass
class Tracker:
    """All services for one signed-in user (or the guest)."""

    config: Config
    local_db: Database
    records: RecordStore
    cache: MetadataCache
    catalog: BookCatalog
    ledger: HistoryLedger
    progress: ProgressEngine
    analytics: ReadingAnalytics
    streaks: StreakManager
    theme: ThemeManager
    kv: SqliteKeyValueStore
    records_db: Optional[Database] = None
    _notifications: Optional[NotificationService] = field(default=None, repr=False)

    def notifications(self, notifier: Notifier) -> NotificationService:
        """Create and start the reminder service for a platform notifier."""
        if self._notifications is not None:
            self._notifications.shutdown()
        self._notifications = NotificationService(
            self.kv,
            notifier,
            reminder_hour=self.config.reminder_hour,
            reminder_minute=self.config.reminder_minute,
        )
        self._notifications.initialize()
        return self._notifications

    def gutendex(self) -> GutendexClient:
        return GutendexClient(self.config.gutendex_url, timeout=self.config.http_timeout)

    def close(self) -> None:
        """Shut down services and release database connections."""
        if self._notifications is not None:
            self._notifications.shutdown()
            self._notifications = None
        if self.records_db is not None:
            self.records_db.dispose()
        self.local_db.dispose()


def build_tracker(
    config: Optional[Config] = None,
    session: Optional[SessionProvider] = None,
    local_db: Optional[Database] = None,
    records_db: Optional[Database] = None,
) -> Tracker:
    """Build a Tracker.

    Args:
        config: Configuration (default: from environment)
        session: Signed-in user provider (default: config's user id)
        local_db: Device database (default: config.local_db_path)
        records_db: Record store database in account mode
                    (default: config.database_url)
    """
    config = config or get_config()
    session = session or StaticSession(config.effective_user_id)

    if local_db is None:
        local_db = Database(str(config.local_db_path))
    local_db.create_tables()
    kv = SqliteKeyValueStore(local_db)

    if config.mode == StorageMode.GUEST:
        records: RecordStore = LocalRecordStore(kv)
        progress_source = ProgressSource.RECORD
        records_db = None
    else:
        if records_db is None:
            records_db = Database(url=config.database_url)
        records_db.create_tables()
        records = SqlRecordStore(records_db)
        progress_source = ProgressSource.CACHE

    cache = MetadataCache(kv)
    ledger = HistoryLedger(records)

    logger.debug(f"Tracker built in {config.mode.value} mode")

    return Tracker(
        config=config,
        local_db=local_db,
        records=records,
        cache=cache,
        catalog=BookCatalog(records, cache, session, progress_source),
        ledger=ledger,
        progress=ProgressEngine(records, cache, session, progress_source, ledger),
        analytics=ReadingAnalytics(ledger, session),
        streaks=StreakManager(ledger, session),
        theme=ThemeManager(kv),
        kv=kv,
        records_db=records_db,
    )


# Global tracker instance
_tracker: Optional[Tracker] = None


def get_tracker() -> Tracker:
    """Get or create the global tracker instance."""
    global _tracker
    if _tracker is None:
        _tracker = build_tracker()
    return _tracker


def reset_tracker() -> None:
    """Close and forget the global tracker. Used for testing."""
    global _tracker
    if _tracker is not None:
        _tracker.close()
    _tracker = None
