"""Schemas for app settings."""

from datetime import time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ThemeMode(str, Enum):
    """Display theme mode."""

    DARK = "dark"
    LIGHT = "light"


class PermissionStatus(str, Enum):
    """Notification permission as reported by the OS."""

    GRANTED = "granted"
    DENIED = "denied"
    UNDETERMINED = "undetermined"


class NotificationState(BaseModel):
    """Persisted daily reminder state."""

    permission_granted: bool = False
    notification_scheduled: bool = False


class ReminderSchedule(BaseModel):
    """A repeating daily notification."""

    identifier: str
    title: str
    body: str
    hour: int = Field(20, ge=0, le=23)
    minute: int = Field(0, ge=0, le=59)
    repeats: bool = True

    @property
    def at(self) -> time:
        return time(self.hour, self.minute)


class NotificationContent(BaseModel):
    """A one-off notification delivered immediately."""

    title: str
    body: str
    identifier: Optional[str] = None
