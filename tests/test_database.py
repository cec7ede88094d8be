"""Tests for app.core.database: dialect translation and the credential store lifecycle."""

import os
import tempfile
import unittest
from unittest.mock import patch

from app.core.config import Settings
from app.core.database import (
    PostgresStore,
    SqliteStore,
    StoreConnectionError,
    StoreError,
    WriteResult,
    create_store,
    translate_to_sqlite,
)
from app.models.user import CREATE_USERS_TABLE_SQL


def _sqlite_settings(path: str) -> Settings:
    return Settings(DB_TYPE="sqlite", SQLITE_PATH=path, _env_file=None)


class TestTranslateToSqlite(unittest.TestCase):
    """translate_to_sqlite rewrites canonical-dialect DDL tokens."""

    def test_serial_primary_key(self) -> None:
        out = translate_to_sqlite("id SERIAL PRIMARY KEY,")
        self.assertEqual(out, "id INTEGER PRIMARY KEY AUTOINCREMENT,")

    def test_auto_increment_primary_key(self) -> None:
        out = translate_to_sqlite("id INT NOT NULL AUTO_INCREMENT PRIMARY KEY,")
        self.assertEqual(out, "id INTEGER PRIMARY KEY AUTOINCREMENT,")

    def test_timestamp_with_time_zone(self) -> None:
        out = translate_to_sqlite("createdAt timestamp with time zone DEFAULT CURRENT_TIMESTAMP")
        self.assertEqual(out, "createdAt DATETIME DEFAULT CURRENT_TIMESTAMP")

    def test_boolean_defaults(self) -> None:
        self.assertEqual(translate_to_sqlite("isActive BOOLEAN DEFAULT TRUE"), "isActive BOOLEAN DEFAULT 1")
        self.assertEqual(translate_to_sqlite("isLocked BOOLEAN default false"), "isLocked BOOLEAN DEFAULT 0")

    def test_on_update_clause_removed(self) -> None:
        out = translate_to_sqlite("updatedAt TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP")
        self.assertEqual(out, "updatedAt TIMESTAMP DEFAULT CURRENT_TIMESTAMP")

    def test_users_schema_has_no_canonical_tokens_left(self) -> None:
        out = translate_to_sqlite(CREATE_USERS_TABLE_SQL).upper()
        self.assertNotIn("SERIAL", out)
        self.assertNotIn("TIME ZONE", out)
        self.assertNotIn("DEFAULT TRUE", out)
        self.assertIn("INTEGER PRIMARY KEY AUTOINCREMENT", out)

    def test_translation_is_stable(self) -> None:
        once = translate_to_sqlite(CREATE_USERS_TABLE_SQL)
        self.assertEqual(translate_to_sqlite(once), once)


class TestCreateStore(unittest.TestCase):
    """create_store picks the backend from DB_TYPE without connecting."""

    def test_sqlite_selected(self) -> None:
        store = create_store(_sqlite_settings("./unused.db"))
        self.assertIsInstance(store, SqliteStore)
        self.assertFalse(store.is_connected)

    def test_postgres_selected(self) -> None:
        settings = Settings(DB_TYPE="postgres", DB_HOST="db.internal", DB_NAME="auth", _env_file=None)
        store = create_store(settings)
        self.assertIsInstance(store, PostgresStore)
        url = store.url()
        self.assertEqual(url.host, "db.internal")
        self.assertEqual(url.database, "auth")
        self.assertEqual(url.drivername, "postgresql+psycopg2")

    def test_postgres_runs_canonical_ddl_untranslated(self) -> None:
        store = PostgresStore(Settings(DB_TYPE="postgres", _env_file=None))
        with patch.object(store, "execute") as execute:
            store.create_table(CREATE_USERS_TABLE_SQL)
        execute.assert_called_once_with(CREATE_USERS_TABLE_SQL)


class TestSqliteStore(unittest.TestCase):
    """SqliteStore against a temporary database file."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.store = SqliteStore(_sqlite_settings(os.path.join(self._tmp.name, "store.db")))
        self.store.connect()
        self.store.execute("CREATE TABLE items (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT UNIQUE NOT NULL)")

    def tearDown(self) -> None:
        self.store.close()
        self._tmp.cleanup()

    def _names(self) -> list[str]:
        return [r["name"] for r in self.store.execute("SELECT name FROM items ORDER BY id")]

    def test_execute_before_connect_raises(self) -> None:
        store = SqliteStore(_sqlite_settings(os.path.join(self._tmp.name, "other.db")))
        with self.assertRaises(StoreError):
            store.execute("SELECT 1")

    def test_write_returns_descriptor_and_read_returns_rows(self) -> None:
        result = self.store.execute("INSERT INTO items (name) VALUES (:name)", {"name": "a"})
        self.assertIsInstance(result, WriteResult)
        self.assertEqual(result.rowcount, 1)
        self.assertEqual(result.lastrowid, 1)
        self.assertEqual(self.store.execute("SELECT id, name FROM items"), [{"id": 1, "name": "a"}])

    def test_parameters_are_bound_not_interpolated(self) -> None:
        hostile = "x'); DROP TABLE items; --"
        self.store.execute("INSERT INTO items (name) VALUES (:name)", {"name": hostile})
        self.assertEqual(self._names(), [hostile])

    def test_table_exists_is_case_insensitive(self) -> None:
        self.assertTrue(self.store.table_exists("items"))
        self.assertTrue(self.store.table_exists("ITEMS"))
        self.assertFalse(self.store.table_exists("missing"))

    def test_create_table_translates_canonical_schema(self) -> None:
        self.assertFalse(self.store.table_exists("USERS"))
        self.store.create_table(CREATE_USERS_TABLE_SQL)
        self.assertTrue(self.store.table_exists("USERS"))

    def test_transaction_commits(self) -> None:
        with self.store.transaction():
            self.store.execute("INSERT INTO items (name) VALUES (:name)", {"name": "a"})
            self.store.execute("INSERT INTO items (name) VALUES (:name)", {"name": "b"})
        self.assertEqual(self._names(), ["a", "b"])

    def test_transaction_rolls_back_before_error_propagates(self) -> None:
        with self.assertRaises(RuntimeError):
            with self.store.transaction():
                self.store.execute("INSERT INTO items (name) VALUES (:name)", {"name": "a"})
                raise RuntimeError("boom")
        self.assertEqual(self._names(), [])
        # The bracket is closed; a new one can be opened.
        self.store.begin_transaction()
        self.store.rollback()

    def test_explicit_begin_rollback(self) -> None:
        self.store.begin_transaction()
        self.store.execute("INSERT INTO items (name) VALUES (:name)", {"name": "a"})
        self.store.rollback()
        self.assertEqual(self._names(), [])

    def test_nested_begin_rejected(self) -> None:
        self.store.begin_transaction()
        try:
            with self.assertRaises(StoreError):
                self.store.begin_transaction()
        finally:
            self.store.rollback()

    def test_commit_without_transaction_rejected(self) -> None:
        with self.assertRaises(StoreError):
            self.store.commit()
        with self.assertRaises(StoreError):
            self.store.rollback()

    def test_savepoint_undoes_only_its_block(self) -> None:
        with self.store.transaction():
            self.store.execute("INSERT INTO items (name) VALUES (:name)", {"name": "a"})
            with self.assertRaises(RuntimeError):
                with self.store.savepoint():
                    self.store.execute("INSERT INTO items (name) VALUES (:name)", {"name": "b"})
                    raise RuntimeError("undo b")
            self.store.execute("INSERT INTO items (name) VALUES (:name)", {"name": "c"})
        self.assertEqual(self._names(), ["a", "c"])

    def test_savepoint_requires_transaction(self) -> None:
        with self.assertRaises(StoreError):
            with self.store.savepoint():
                pass

    def test_close_is_idempotent(self) -> None:
        self.store.close()
        self.store.close()
        self.assertFalse(self.store.is_connected)
        never_opened = SqliteStore(_sqlite_settings(os.path.join(self._tmp.name, "never.db")))
        never_opened.close()

    def test_close_rolls_back_open_transaction(self) -> None:
        self.store.begin_transaction()
        self.store.execute("INSERT INTO items (name) VALUES (:name)", {"name": "a"})
        self.store.close()
        self.store.connect()
        self.assertEqual(self._names(), [])


class TestConnectFailure(unittest.TestCase):
    """connect() raises StoreConnectionError when the backend cannot be opened."""

    def test_unopenable_sqlite_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            # A directory cannot be opened as a database file.
            store = SqliteStore(_sqlite_settings(tmp))
            with self.assertRaises(StoreConnectionError):
                store.connect()
            self.assertFalse(store.is_connected)


if __name__ == "__main__":
    unittest.main()
