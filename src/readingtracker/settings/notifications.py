"""Daily reading reminder.

Scheduling is delegated to the platform's notification service, which is
passed in as a ``Notifier``. The service object owns its lifecycle:
``initialize()`` restores a previously enabled reminder and ``shutdown()``
detaches the notifier. It can also be used as a context manager.
"""

import logging
from typing import Optional, Protocol

from ..errors import InvalidInputError
from ..storage.kv import NOTIFICATIONS_KEY, KeyValueStore
from .schemas import (
    NotificationContent,
    NotificationState,
    PermissionStatus,
    ReminderSchedule,
)

logger = logging.getLogger(__name__)

REMINDER_ID = "daily_reading_reminder"
REMINDER_TITLE = "📚 Reading Time!"
REMINDER_BODY = "Don't forget to update your reading progress!"


class Notifier(Protocol):
    """Platform notification service."""

    def get_permission_status(self) -> PermissionStatus:
        ...

    def request_permission(self) -> PermissionStatus:
        ...

    def schedule(self, reminder: ReminderSchedule) -> None:
        """Schedule (or replace) a repeating notification."""
        ...

    def cancel(self, identifier: str) -> None:
        ...

    def present(self, content: NotificationContent) -> None:
        """Deliver a notification immediately."""
        ...


class NotificationService:
    """Manages the daily reading reminder and its persisted state."""

    def __init__(
        self,
        kv: KeyValueStore,
        notifier: Notifier,
        reminder_hour: int = 20,
        reminder_minute: int = 0,
    ):
        """Initialize notification service.

        Args:
            kv: Local key-value store for reminder state
            notifier: Platform notification service
            reminder_hour: Default hour for the daily reminder
            reminder_minute: Default minute for the daily reminder
        """
        self.kv = kv
        self._notifier: Optional[Notifier] = notifier
        self.reminder_hour = reminder_hour
        self.reminder_minute = reminder_minute
        self._initialized = False

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def initialize(self) -> NotificationState:
        """Start the service, re-scheduling the reminder if it was enabled."""
        self._require_notifier()
        self._initialized = True
        state = self.get_state()
        if state.permission_granted and state.notification_scheduled:
            self.schedule_daily_reminder()
        return self.get_state()

    def shutdown(self) -> None:
        """Detach from the notifier. Scheduled reminders stay with the OS."""
        self._notifier = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def __enter__(self) -> "NotificationService":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def _require_notifier(self) -> Notifier:
        if self._notifier is None:
            raise RuntimeError("Notification service has been shut down")
        return self._notifier

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    def get_state(self) -> NotificationState:
        value = self.kv.get(NOTIFICATIONS_KEY)
        if isinstance(value, dict):
            return NotificationState.model_validate(value)
        return NotificationState()

    def _save_state(self, state: NotificationState) -> None:
        self.kv.set(NOTIFICATIONS_KEY, state.model_dump())

    def is_reminder_scheduled(self) -> bool:
        return self.get_state().notification_scheduled

    # -------------------------------------------------------------------------
    # Permissions
    # -------------------------------------------------------------------------

    def check_permissions(self) -> bool:
        return self._require_notifier().get_permission_status() == PermissionStatus.GRANTED

    def request_permissions(self) -> bool:
        """Ask for permission if not already granted.

        Returns:
            True if notifications are allowed
        """
        notifier = self._require_notifier()
        status = notifier.get_permission_status()
        if status != PermissionStatus.GRANTED:
            status = notifier.request_permission()

        if status != PermissionStatus.GRANTED:
            logger.info("Notification permission not granted")
            return False

        state = self.get_state()
        self._save_state(state.model_copy(update={"permission_granted": True}))
        return True

    # -------------------------------------------------------------------------
    # Reminders
    # -------------------------------------------------------------------------

    def schedule_daily_reminder(
        self, hour: Optional[int] = None, minute: Optional[int] = None
    ) -> bool:
        """Schedule the repeating daily reminder, replacing any existing one.

        Returns:
            False if notification permission has not been granted

        Raises:
            InvalidInputError: If hour or minute is out of range
        """
        hour = self.reminder_hour if hour is None else hour
        minute = self.reminder_minute if minute is None else minute
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise InvalidInputError(f"Invalid reminder time: {hour:02d}:{minute:02d}")

        notifier = self._require_notifier()
        if not self.check_permissions():
            logger.info("Notification permissions not granted")
            return False

        notifier.cancel(REMINDER_ID)
        notifier.schedule(
            ReminderSchedule(
                identifier=REMINDER_ID,
                title=REMINDER_TITLE,
                body=REMINDER_BODY,
                hour=hour,
                minute=minute,
            )
        )

        self._save_state(
            NotificationState(permission_granted=True, notification_scheduled=True)
        )
        logger.info(f"Daily reading reminder scheduled for {hour:02d}:{minute:02d}")
        return True

    def cancel_daily_reminder(self) -> None:
        self._require_notifier().cancel(REMINDER_ID)
        state = self.get_state()
        self._save_state(state.model_copy(update={"notification_scheduled": False}))
        logger.info("Daily reading reminder cancelled")

    def send_test_notification(self) -> bool:
        """Deliver a test notification now, if permitted."""
        notifier = self._require_notifier()
        if not self.check_permissions():
            return False
        notifier.present(
            NotificationContent(
                title="📚 Test Notification",
                body="This is a test notification for Reading Tracker!",
            )
        )
        return True
