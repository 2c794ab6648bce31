"""Tests for StreakManager."""

from datetime import date, timedelta

import pytest

from readingtracker.errors import InvalidInputError
from readingtracker.streaks.manager import (
    longest_run,
    run_ending,
    streak_badge,
    streak_message,
)
from readingtracker.streaks.schemas import StreakStatus


class TestComputeStreak:
    """Tests for the current and longest streak."""

    def test_no_history(self, streaks, today):
        result = streaks.compute_streak(60, today)

        assert result.current_streak == 0
        assert result.longest_streak == 0
        assert not result.read_today
        assert result.status == StreakStatus.ENDED
        assert result.lookback_days == 60

    def test_three_days_including_today(self, streaks, reading_days, today):
        reading_days({0: 10, 1: 5, 2: 8})

        result = streaks.compute_streak(60, today)

        assert result.current_streak == 3
        assert result.longest_streak == 3
        assert result.read_today
        assert result.status == StreakStatus.ACTIVE

    def test_longest_earlier_in_window(self, streaks, reading_days, today):
        reading_days({offset: 5 for offset in range(20, 30)})  # ten days, ended a while ago
        reading_days({0: 5, 1: 5, 2: 5})

        result = streaks.compute_streak(60, today)

        assert result.current_streak == 3
        assert result.longest_streak == 10

    def test_not_read_today_yet(self, streaks, reading_days, today):
        reading_days({1: 5, 2: 5})

        result = streaks.compute_streak(60, today)

        assert result.current_streak == 2
        assert not result.read_today
        assert result.status == StreakStatus.AT_RISK

    def test_streak_ended(self, streaks, reading_days, today):
        reading_days({2: 5, 3: 5, 4: 5})

        result = streaks.compute_streak(60, today)

        assert result.current_streak == 0
        assert result.longest_streak == 3
        assert result.status == StreakStatus.ENDED

    def test_gap_breaks_streak(self, streaks, reading_days, today):
        reading_days({0: 5, 2: 5, 3: 5})

        result = streaks.compute_streak(60, today)

        assert result.current_streak == 1
        assert result.longest_streak == 2

    def test_limited_to_lookback(self, streaks, reading_days, today):
        reading_days({offset: 1 for offset in range(10)})

        result = streaks.compute_streak(5, today)

        assert result.current_streak == 5
        assert result.longest_streak == 5

    @pytest.mark.parametrize("lookback", [0, -3, "60"])
    def test_invalid_lookback(self, streaks, lookback):
        with pytest.raises(InvalidInputError):
            streaks.compute_streak(lookback)


class TestRunHelpers:
    def test_longest_run(self):
        start = date(2024, 5, 1)
        totals = {start + timedelta(days=d): 1 for d in (0, 1, 3, 4, 5, 8)}

        assert longest_run(totals, start, start + timedelta(days=9)) == 3

    def test_zero_page_days_do_not_count(self):
        start = date(2024, 5, 1)
        totals = {start: 3, start + timedelta(days=1): 0, start + timedelta(days=2): 4}

        assert longest_run(totals, start, start + timedelta(days=2)) == 1
        assert run_ending(totals, start + timedelta(days=2), start) == 1

    def test_run_ending_stops_at_earliest(self):
        end = date(2024, 5, 10)
        totals = {end - timedelta(days=d): 1 for d in range(10)}

        assert run_ending(totals, end, end - timedelta(days=3)) == 4


class TestStreakMessage:
    @pytest.mark.parametrize(
        "streak,expected",
        [
            (0, "Start your reading journey! 📕"),
            (2, "Start your reading journey! 📕"),
            (3, "Keep it up! 📖"),
            (7, "Great consistency! 📚"),
            (14, "Amazing dedication! ⭐"),
            (30, "Incredible! You're on fire! 🔥"),
            (100, "Incredible! You're on fire! 🔥"),
        ],
    )
    def test_messages(self, streak, expected):
        assert streak_message(streak) == expected

    def test_badge(self):
        assert streak_badge(8) == "📚"
