"""Tests for the Database wrapper and ORM models."""

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError

from readingtracker.db.models import Book, KeyValue, ReadingHistory
from readingtracker.db.sqlite import Database


class TestDatabase:
    """Tests for Database."""

    def test_create_tables(self, db):
        tables = set(inspect(db.engine).get_table_names())
        assert {"books", "reading_history", "key_values"} <= tables

    def test_file_database_creates_directory(self, tmp_path):
        path = tmp_path / "nested" / "device.db"
        database = Database(str(path))
        database.create_tables()

        assert path.parent.exists()
        assert database.db_path == path
        database.dispose()

    def test_url_takes_precedence(self, tmp_path):
        database = Database(db_path="ignored.db", url=f"sqlite:///{tmp_path / 'records.db'}")
        assert database.db_path == tmp_path / "records.db"
        database.dispose()

    def test_foreign_keys_enforced(self, db):
        with db.get_session() as session:
            assert session.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_session_rolls_back_on_error(self, db):
        with pytest.raises(IntegrityError):
            with db.get_session() as session:
                session.add(Book(user_id="u", title="Orphaned", total_pages=10))
                session.flush()
                session.add(ReadingHistory(user_id="u", book_id="missing", date="2024-01-01"))
                session.flush()

        with db.get_session() as session:
            assert session.query(Book).count() == 0

    def test_key_value_json(self, db):
        with db.get_session() as session:
            row = KeyValue(key="k")
            row.set_value({"a": [1, 2]})
            session.add(row)

        with db.get_session() as session:
            assert session.get(KeyValue, "k").get_value() == {"a": [1, 2]}
