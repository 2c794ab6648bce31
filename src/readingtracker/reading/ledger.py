"""Date-bucketed reading history ledger.

Each (user, book, date) bucket accumulates the pages credited on that day.
Buckets are looked up before writing because the record store does not
enforce uniqueness, so two updates on the same day land in one bucket.
"""

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Optional

from ..db.schemas import HistoryEntry
from ..storage.records import RecordStore

logger = logging.getLogger(__name__)


class HistoryLedger:
    """Appends to and aggregates the reading history."""

    def __init__(self, records: RecordStore):
        self.records = records

    def append(
        self,
        user_id: str,
        book_id: str,
        pages: int,
        day: Optional[date] = None,
    ) -> HistoryEntry:
        """Add pages to a book's bucket for the day, creating it if needed.

        Args:
            user_id: Owner of the history
            book_id: Book the pages were read in
            pages: Pages to add (must be positive)
            day: Calendar day (default: today)

        Returns:
            The bucket after the update
        """
        if day is None:
            day = date.today()

        existing = self.records.find_history(user_id, book_id, day)
        if existing:
            total = existing.pages_read + pages
            self.records.set_history_pages(existing.id, total)
            logger.debug(f"History {day} for book {book_id}: {existing.pages_read} -> {total}")
            return existing.model_copy(update={"pages_read": total})

        entry = self.records.add_history(user_id, book_id, day, pages)
        logger.debug(f"History {day} for book {book_id}: new bucket with {pages}")
        return entry

    def daily_totals(self, user_id: str, since: date) -> dict[date, int]:
        """Pages read per day across all books, for days on or after since."""
        totals: dict[date, int] = defaultdict(int)
        for entry in self.records.history_since(user_id, since):
            totals[entry.date] += entry.pages_read or 0
        return dict(totals)

    def window(self, user_id: str, days: int, today: Optional[date] = None) -> dict[date, int]:
        """Daily totals for the trailing window of days ending today."""
        if today is None:
            today = date.today()
        since = today - timedelta(days=days - 1)
        return {d: p for d, p in self.daily_totals(user_id, since).items() if d <= today}
