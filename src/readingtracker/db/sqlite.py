"""Database engine and session management.

The same class backs both the relational record store (any SQLAlchemy URL)
and the device-local SQLite file that holds key-value data.
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """Turn on foreign key enforcement for each SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Database connection and session manager."""

    def __init__(self, db_path: Optional[str] = None, url: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to a SQLite database file, or ":memory:". If neither
                     this nor url is given, uses READINGTRACKER_LOCAL_DB_PATH
                     or the default location.
            url: Full SQLAlchemy database URL. Takes precedence over db_path.
        """
        if url is None:
            if db_path is None:
                db_path = os.environ.get(
                    "READINGTRACKER_LOCAL_DB_PATH",
                    str(Path.home() / ".readingtracker" / "device.db"),
                )
            url = "sqlite:///:memory:" if str(db_path) == ":memory:" else f"sqlite:///{db_path}"

        self.url = make_url(url)
        self._is_sqlite = self.url.get_backend_name() == "sqlite"
        self._is_memory = self._is_sqlite and self.url.database in (None, "", ":memory:")

        if self._is_sqlite and not self._is_memory:
            self.db_path: Optional[Path] = Path(self.url.database)
            self._ensure_directory()
        else:
            self.db_path = None

        if self._is_memory:
            # StaticPool keeps every session on the same in-memory database
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        elif self._is_sqlite:
            self.engine = create_engine(
                self.url,
                echo=False,
                connect_args={"check_same_thread": False},
            )
        else:
            self.engine = create_engine(self.url, echo=False, pool_pre_ping=True)

        if self._is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all database tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)

    def dispose(self) -> None:
        """Close pooled connections."""
        self.engine.dispose()

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
