"""Configuration management for readingtracker.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .auth import GUEST_USER_ID

# Load .env file if present
load_dotenv()

DEFAULT_DATA_DIR = Path.home() / ".readingtracker"


class StorageMode(str, Enum):
    """Where canonical book records live."""

    ACCOUNT = "account"  # Relational record store, scoped per signed-in user
    GUEST = "guest"  # Device-local key-value storage only


@dataclass
class Config:
    """Application configuration."""

    mode: StorageMode

    # Storage
    local_db_path: Path
    database_url: str
    user_id: Optional[str]

    # Statistics
    streak_lookback_days: int
    stats_window_days: int

    # Daily reminder
    reminder_hour: int
    reminder_minute: int

    # Public-domain search
    gutendex_url: str
    http_timeout: int  # seconds

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        local_db_path = Path(
            os.environ.get(
                "READINGTRACKER_LOCAL_DB_PATH",
                str(DEFAULT_DATA_DIR / "device.db"),
            )
        ).expanduser()

        database_url = os.environ.get(
            "READINGTRACKER_DATABASE_URL",
            f"sqlite:///{local_db_path.parent / 'records.db'}",
        )

        return cls(
            mode=StorageMode(os.environ.get("READINGTRACKER_MODE", StorageMode.ACCOUNT.value)),
            local_db_path=local_db_path,
            database_url=database_url,
            user_id=os.environ.get("READINGTRACKER_USER_ID"),
            streak_lookback_days=int(
                os.environ.get("READINGTRACKER_STREAK_LOOKBACK_DAYS", "60")
            ),
            stats_window_days=int(os.environ.get("READINGTRACKER_STATS_WINDOW_DAYS", "7")),
            reminder_hour=int(os.environ.get("READINGTRACKER_REMINDER_HOUR", "20")),
            reminder_minute=int(os.environ.get("READINGTRACKER_REMINDER_MINUTE", "0")),
            gutendex_url=os.environ.get("GUTENDEX_URL", "https://gutendex.com/books"),
            http_timeout=int(os.environ.get("READINGTRACKER_HTTP_TIMEOUT", "10")),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        # Check local database directory is writable
        if not self.local_db_path.parent.exists():
            try:
                self.local_db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create data directory: {self.local_db_path.parent}")

        if self.mode == StorageMode.ACCOUNT and not self.user_id:
            errors.append("READINGTRACKER_USER_ID is required in account mode")

        if self.streak_lookback_days < 1:
            errors.append("Streak lookback must be at least 1 day")
        if self.stats_window_days < 1:
            errors.append("Statistics window must be at least 1 day")

        if not 0 <= self.reminder_hour <= 23:
            errors.append(f"Invalid reminder hour: {self.reminder_hour}")
        if not 0 <= self.reminder_minute <= 59:
            errors.append(f"Invalid reminder minute: {self.reminder_minute}")

        return errors

    @property
    def effective_user_id(self) -> Optional[str]:
        """User id that scopes records; guest mode always uses the local id."""
        if self.mode == StorageMode.GUEST:
            return GUEST_USER_ID
        return self.user_id


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
