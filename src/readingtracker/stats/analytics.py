"""Reading statistics over a trailing window of days.

Builds one bucket per calendar day (days without history count as zero),
then derives the window total and the daily average used by the charts.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from ..auth import SessionProvider, require_user_id
from ..errors import InvalidInputError
from ..reading.ledger import HistoryLedger
from ..utils import round_half_up


@dataclass
class DailyPages:
    """Pages read on one calendar day."""

    date: date
    pages_read: int = 0

    @property
    def day_name(self) -> str:
        """Short English weekday, e.g. 'Mon'."""
        return ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")[self.date.weekday()]


@dataclass
class ReadingStatistics:
    """Statistics for a trailing window ending today."""

    window_days: int
    days: list[DailyPages] = field(default_factory=list)
    total_pages: int = 0
    average_pages_per_day: float = 0.0

    @property
    def best_day(self) -> Optional[DailyPages]:
        """Day with the most pages, or None if nothing was read."""
        best = max(self.days, key=lambda d: d.pages_read, default=None)
        return best if best and best.pages_read > 0 else None


def average_per_day(total_pages: int, days: int) -> float:
    """Daily average rounded to one decimal place."""
    return round_half_up(total_pages / days * 10) / 10


class ReadingAnalytics:
    """Calculates reading statistics from the history ledger."""

    def __init__(self, ledger: HistoryLedger, session: SessionProvider):
        """Initialize analytics.

        Args:
            ledger: History ledger to aggregate
            session: Reports the signed-in user
        """
        self.ledger = ledger
        self.session = session

    def compute_statistics(
        self, window_days: int = 7, today: Optional[date] = None
    ) -> ReadingStatistics:
        """Get statistics for the trailing window_days days, today included.

        Args:
            window_days: Number of days in the window
            today: Last day of the window (default: today)

        Returns:
            ReadingStatistics with one DailyPages per day, oldest first

        Raises:
            InvalidInputError: If window_days is not a positive integer
        """
        if isinstance(window_days, bool) or not isinstance(window_days, int) or window_days <= 0:
            raise InvalidInputError("Statistics window must be a positive number of days")
        if today is None:
            today = date.today()

        totals = self.ledger.window(require_user_id(self.session), window_days, today)

        days = []
        for offset in range(window_days - 1, -1, -1):
            day = today - timedelta(days=offset)
            days.append(DailyPages(date=day, pages_read=totals.get(day, 0)))

        total_pages = sum(d.pages_read for d in days)

        return ReadingStatistics(
            window_days=window_days,
            days=days,
            total_pages=total_pages,
            average_pages_per_day=average_per_day(total_pages, window_days),
        )

    def weekly_pages_read(self, today: Optional[date] = None) -> int:
        """Pages read over the last seven days."""
        return self.compute_statistics(7, today).total_pages

    def average_pages_per_day(self, days: int = 7, today: Optional[date] = None) -> float:
        """Average pages per day over the last days days."""
        return self.compute_statistics(days, today).average_pages_per_day
