"""Reading statistics."""

from .analytics import (
    DailyPages,
    ReadingAnalytics,
    ReadingStatistics,
    average_per_day,
)

__all__ = [
    "DailyPages",
    "ReadingAnalytics",
    "ReadingStatistics",
    "average_per_day",
]
