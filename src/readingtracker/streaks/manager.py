"""Streak computation from the reading history.

Streaks are recomputed from the ledger on every call; nothing about them
is stored. Two separate passes are made over the window:

- forward, oldest to newest, tracking the longest run of reading days;
- backward from today, counting the run that is still going.

A day with no pages yet today does not break the current streak until the
day is over: the backward pass then starts from yesterday and the streak is
reported as at risk.
"""

from datetime import date, timedelta
from typing import Optional

from ..auth import SessionProvider, require_user_id
from ..errors import InvalidInputError
from ..reading.ledger import HistoryLedger
from .schemas import StreakStatus, StreakStats

DEFAULT_LOOKBACK_DAYS = 60

# (minimum streak, badge, message), highest first
STREAK_LEVELS = [
    (30, "🔥", "Incredible! You're on fire!"),
    (14, "⭐", "Amazing dedication!"),
    (7, "📚", "Great consistency!"),
    (3, "📖", "Keep it up!"),
    (0, "📕", "Start your reading journey!"),
]


def longest_run(totals: dict[date, int], start: date, end: date) -> int:
    """Longest run of consecutive days with pages read, start..end inclusive."""
    longest = 0
    rolling = 0
    day = start
    while day <= end:
        if totals.get(day, 0) > 0:
            rolling += 1
            longest = max(longest, rolling)
        else:
            rolling = 0
        day += timedelta(days=1)
    return longest


def run_ending(totals: dict[date, int], end: date, earliest: date) -> int:
    """Consecutive reading days counted backward from end, not before earliest."""
    count = 0
    day = end
    while day >= earliest and totals.get(day, 0) > 0:
        count += 1
        day -= timedelta(days=1)
    return count


def streak_badge(streak: int) -> str:
    for minimum, badge, _ in STREAK_LEVELS:
        if streak >= minimum:
            return badge
    return STREAK_LEVELS[-1][1]


def streak_message(streak: int) -> str:
    """Motivational line for a streak length."""
    for minimum, badge, message in STREAK_LEVELS:
        if streak >= minimum:
            return f"{message} {badge}"
    return STREAK_LEVELS[-1][2]


class StreakManager:
    """Computes reading streaks from the history ledger."""

    def __init__(self, ledger: HistoryLedger, session: SessionProvider):
        """Initialize streak manager.

        Args:
            ledger: History ledger to scan
            session: Reports the signed-in user
        """
        self.ledger = ledger
        self.session = session

    def compute_streak(
        self,
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
        today: Optional[date] = None,
    ) -> StreakStats:
        """Compute current and longest streak over the look-back window.

        Args:
            lookback_days: Days to scan, today included
            today: Last day of the window (default: today)

        Returns:
            StreakStats

        Raises:
            InvalidInputError: If lookback_days is not a positive integer
        """
        if isinstance(lookback_days, bool) or not isinstance(lookback_days, int) or lookback_days <= 0:
            raise InvalidInputError("Streak look-back must be a positive number of days")
        if today is None:
            today = date.today()

        totals = self.ledger.window(require_user_id(self.session), lookback_days, today)
        start = today - timedelta(days=lookback_days - 1)

        longest = longest_run(totals, start, today)

        read_today = totals.get(today, 0) > 0
        if read_today:
            current = run_ending(totals, today, start)
            status = StreakStatus.ACTIVE
        else:
            current = run_ending(totals, today - timedelta(days=1), start)
            status = StreakStatus.AT_RISK if current > 0 else StreakStatus.ENDED

        return StreakStats(
            current_streak=current,
            longest_streak=longest,
            read_today=read_today,
            status=status,
            lookback_days=lookback_days,
        )
