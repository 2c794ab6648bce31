"""Pydantic schemas for reading streaks."""

from enum import Enum

from pydantic import BaseModel, Field


class StreakStatus(str, Enum):
    """Status of the current streak."""

    ACTIVE = "active"  # Read today
    AT_RISK = "at_risk"  # Read yesterday, not yet today
    ENDED = "ended"


class StreakStats(BaseModel):
    """Current and longest streak within the look-back window."""

    current_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)
    read_today: bool = False
    status: StreakStatus = StreakStatus.ENDED
    lookback_days: int

    model_config = {"frozen": True}
