"""App settings: theme preference and the daily reading reminder."""

from .manager import DEFAULT_THEME, ThemeManager
from .notifications import REMINDER_ID, NotificationService, Notifier
from .schemas import (
    NotificationContent,
    NotificationState,
    PermissionStatus,
    ReminderSchedule,
    ThemeMode,
)

__all__ = [
    "DEFAULT_THEME",
    "ThemeManager",
    "REMINDER_ID",
    "NotificationService",
    "Notifier",
    "NotificationContent",
    "NotificationState",
    "PermissionStatus",
    "ReminderSchedule",
    "ThemeMode",
]
