"""Reading streaks."""

from .manager import (
    DEFAULT_LOOKBACK_DAYS,
    StreakManager,
    longest_run,
    run_ending,
    streak_badge,
    streak_message,
)
from .schemas import StreakStats, StreakStatus

__all__ = [
    "DEFAULT_LOOKBACK_DAYS",
    "StreakManager",
    "longest_run",
    "run_ending",
    "streak_badge",
    "streak_message",
    "StreakStats",
    "StreakStatus",
]
