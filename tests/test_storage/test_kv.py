"""Tests for key-value stores."""

import pytest

from readingtracker.errors import StorageError
from readingtracker.storage.kv import MemoryKeyValueStore, SqliteKeyValueStore


@pytest.fixture(params=["memory", "sqlite"])
def store(request, db):
    if request.param == "memory":
        return MemoryKeyValueStore()
    return SqliteKeyValueStore(db)


class TestKeyValueStore:
    """Behaviour shared by both stores."""

    def test_missing_key(self, store):
        assert store.get("nope") is None

    def test_set_and_get(self, store):
        store.set("theme", "light")
        assert store.get("theme") == "light"

    def test_overwrite(self, store):
        store.set("k", {"a": 1})
        store.set("k", {"b": 2})
        assert store.get("k") == {"b": 2}

    def test_remove(self, store):
        store.set("k", [1, 2, 3])
        store.remove("k")
        assert store.get("k") is None

    def test_remove_missing_is_noop(self, store):
        store.remove("never-set")

    def test_keys(self, store):
        store.set("a", 1)
        store.set("b", 2)
        assert sorted(store.keys()) == ["a", "b"]

    def test_unserialisable_value(self, store):
        with pytest.raises(StorageError):
            store.set("k", object())


class TestMemoryKeyValueStore:
    def test_values_are_copies(self):
        store = MemoryKeyValueStore()
        value = {"items": [1]}
        store.set("k", value)
        value["items"].append(2)

        assert store.get("k") == {"items": [1]}

    def test_snapshot(self):
        store = MemoryKeyValueStore()
        store.set("k", {"x": 1})
        assert store.snapshot() == {"k": {"x": 1}}


class TestSqliteKeyValueStore:
    def test_persists_across_instances(self, tmp_path):
        from readingtracker.db.sqlite import Database

        path = tmp_path / "device.db"
        first = Database(str(path))
        first.create_tables()
        SqliteKeyValueStore(first).set("k", {"saved": True})
        first.dispose()

        second = Database(str(path))
        assert SqliteKeyValueStore(second).get("k") == {"saved": True}
        second.dispose()

    def test_missing_table_raises_storage_error(self):
        from readingtracker.db.sqlite import Database

        database = Database(":memory:")  # tables never created
        with pytest.raises(StorageError):
            SqliteKeyValueStore(database).get("k")
        database.dispose()
