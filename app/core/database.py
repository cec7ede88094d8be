"""
Credential store: one data-access interface over PostgreSQL (production) or SQLite (testing).

Statements are plain SQL with named bind parameters (":name"); SQLAlchemy compiles
them to each driver's native placeholder style, so caller values never end up in
the SQL text. The only place SQL is rewritten is create_table(), which translates
the canonical (PostgreSQL) DDL for SQLite.
"""

import logging
import re
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from app.core.config import Settings

logger = logging.getLogger(__name__)

Rows = list[dict[str, Any]]

# Canonical-dialect tokens and their SQLite equivalents, applied in order.
_SQLITE_SUBSTITUTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bSERIAL\s+PRIMARY\s+KEY\b", re.IGNORECASE), "INTEGER PRIMARY KEY AUTOINCREMENT"),
    (
        re.compile(
            r"\b(?:INT|INTEGER|BIGINT)\s+(?:NOT\s+NULL\s+)?AUTO_INCREMENT\s+PRIMARY\s+KEY\b",
            re.IGNORECASE,
        ),
        "INTEGER PRIMARY KEY AUTOINCREMENT",
    ),
    (re.compile(r"\bTIMESTAMP\s+WITH\s+TIME\s+ZONE\b", re.IGNORECASE), "DATETIME"),
    (re.compile(r"\bDEFAULT\s+TRUE\b", re.IGNORECASE), "DEFAULT 1"),
    (re.compile(r"\bDEFAULT\s+FALSE\b", re.IGNORECASE), "DEFAULT 0"),
    # SQLite has no equivalent; updatedAt is not refreshed automatically there.
    (re.compile(r"\s+ON\s+UPDATE\s+CURRENT_TIMESTAMP\b", re.IGNORECASE), ""),
)


def translate_to_sqlite(statement: str) -> str:
    """Rewrite a canonical-dialect CREATE TABLE statement for SQLite."""
    for pattern, replacement in _SQLITE_SUBSTITUTIONS:
        statement = pattern.sub(replacement, statement)
    return statement


class StoreError(Exception):
    """Raised when the store is used outside its open/close or transaction lifecycle."""


class StoreConnectionError(StoreError):
    """Raised when the backend cannot be reached or rejects the credentials."""


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a statement that returns no rows."""

    rowcount: int
    lastrowid: int | None = None


class CredentialStore:
    """
    Base data-access shim. Subclasses provide the engine and dialect-specific SQL.

    Lifecycle: construct, connect(), use, close(). A transaction bracket
    (begin_transaction ... commit/rollback, or the transaction() context manager)
    pins one connection to the calling thread; execute() calls from that thread go
    through it until the bracket ends.
    """

    backend = ""
    reports_lastrowid = False
    TABLE_EXISTS_SQL = ""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._engine: Engine | None = None
        self._lock = threading.RLock()
        self._tx_conn: Connection | None = None
        self._tx_owner: int | None = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def _create_engine(self) -> Engine:
        raise NotImplementedError

    def _describe(self) -> str:
        raise NotImplementedError

    def prepare_ddl(self, statement: str) -> str:
        """Return the DDL this backend should run for a canonical-dialect statement."""
        return statement

    @contextmanager
    def _serialized(self) -> Iterator[None]:
        yield

    def connect(self) -> None:
        """Create the engine and verify the backend answers. Raises StoreConnectionError."""
        if self._engine is not None:
            return
        engine: Engine | None = None
        try:
            engine = self._create_engine()
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            if engine is not None:
                engine.dispose()
            logger.error("Failed to connect to %s database (%s): %s", self.backend, self._describe(), exc)
            raise StoreConnectionError(f"Could not connect to {self.backend} database") from exc
        self._engine = engine
        logger.info("Connected to %s database (%s)", self.backend.upper(), self._describe())

    def _require_engine(self) -> Engine:
        if self._engine is None:
            raise StoreError("Store is not connected; call connect() first")
        return self._engine

    def _in_own_transaction(self) -> bool:
        return self._tx_conn is not None and self._tx_owner == threading.get_ident()

    def _run(self, conn: Connection, statement: str, params: Mapping[str, Any] | None) -> Rows | WriteResult:
        result = conn.execute(text(statement), dict(params or {}))
        if result.returns_rows:
            return [dict(row) for row in result.mappings()]
        lastrowid = result.lastrowid if self.reports_lastrowid else None
        return WriteResult(rowcount=result.rowcount, lastrowid=lastrowid)

    def execute(self, statement: str, params: Mapping[str, Any] | None = None) -> Rows | WriteResult:
        """
        Run one statement with bound parameters.

        Returns a list of row dicts for statements that produce rows, otherwise a
        WriteResult. Outside a transaction bracket each call commits on its own.
        """
        engine = self._require_engine()
        if self._in_own_transaction():
            return self._run(self._tx_conn, statement, params)
        with self._serialized():
            with engine.begin() as conn:
                return self._run(conn, statement, params)

    def table_exists(self, name: str) -> bool:
        rows = self.execute(self.TABLE_EXISTS_SQL, {"name": name})
        return len(rows) > 0

    def create_table(self, statement: str) -> None:
        """Run a canonical-dialect CREATE TABLE, translated for this backend."""
        self.execute(self.prepare_ddl(statement))

    def begin_transaction(self) -> None:
        """Open a transaction bracket. Blocks while another thread holds one."""
        engine = self._require_engine()
        self._lock.acquire()
        if self._tx_conn is not None:
            self._lock.release()
            raise StoreError("A transaction is already open on this store")
        conn: Connection | None = None
        try:
            conn = engine.connect()
            conn.begin()
        except BaseException:
            if conn is not None:
                conn.close()
            self._lock.release()
            raise
        self._tx_conn = conn
        self._tx_owner = threading.get_ident()

    def _require_own_transaction(self) -> Connection:
        if not self._in_own_transaction():
            raise StoreError("No transaction is open in this thread")
        return self._tx_conn

    def _end_transaction(self) -> None:
        conn = self._tx_conn
        self._tx_conn = None
        self._tx_owner = None
        try:
            if conn is not None:
                conn.close()
        finally:
            self._lock.release()

    def commit(self) -> None:
        conn = self._require_own_transaction()
        try:
            conn.commit()
        finally:
            self._end_transaction()

    def rollback(self) -> None:
        conn = self._require_own_transaction()
        try:
            conn.rollback()
        finally:
            self._end_transaction()

    @contextmanager
    def transaction(self) -> Iterator["CredentialStore"]:
        """Bracket a block: commit on success, roll back before any error propagates."""
        self.begin_transaction()
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        self.commit()

    @contextmanager
    def savepoint(self) -> Iterator[None]:
        """Nested bracket inside an open transaction; an error undoes only this block."""
        conn = self._require_own_transaction()
        with conn.begin_nested():
            yield

    def close(self) -> None:
        """Release pooled connections or the file handle. Safe to call more than once."""
        if self._in_own_transaction():
            logger.warning("Closing %s store with an open transaction; rolling back", self.backend)
            self.rollback()
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        logger.info("Closed %s database connection", self.backend)


class PostgresStore(CredentialStore):
    """Networked backend: bounded connection pool over psycopg2."""

    backend = "postgres"
    # Unquoted identifiers are folded to lower case by PostgreSQL.
    TABLE_EXISTS_SQL = (
        "SELECT table_name FROM information_schema.tables "
        "WHERE table_schema = current_schema() AND table_name = lower(:name)"
    )

    def url(self) -> URL:
        s = self.settings
        return URL.create(
            "postgresql+psycopg2",
            username=s.DB_USER,
            password=s.DB_PASSWORD.get_secret_value(),
            host=s.DB_HOST,
            port=s.DB_PORT,
            database=s.DB_NAME,
        )

    def _create_engine(self) -> Engine:
        s = self.settings
        return create_engine(
            self.url(),
            pool_size=s.DB_POOL_SIZE,
            max_overflow=0,
            pool_timeout=s.DB_CONNECT_TIMEOUT_SEC,
            pool_recycle=s.DB_IDLE_TIMEOUT_SEC,
            pool_pre_ping=True,
            connect_args={"connect_timeout": s.DB_CONNECT_TIMEOUT_SEC},
            echo=s.DEBUG,
        )

    def _describe(self) -> str:
        s = self.settings
        return f"{s.DB_HOST}:{s.DB_PORT}/{s.DB_NAME}"


def _disable_pysqlite_autobegin(dbapi_connection: Any, connection_record: Any) -> None:
    # Let SQLAlchemy emit BEGIN itself so savepoints and DDL stay transactional.
    dbapi_connection.isolation_level = None


def _emit_begin(conn: Connection) -> None:
    conn.exec_driver_sql("BEGIN")


class SqliteStore(CredentialStore):
    """Embedded backend: one shared connection, every call serialized through a lock."""

    backend = "sqlite"
    reports_lastrowid = True
    TABLE_EXISTS_SQL = "SELECT name FROM sqlite_master WHERE type = 'table' AND lower(name) = lower(:name)"

    def _create_engine(self) -> Engine:
        path = self.settings.SQLITE_PATH
        if path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            f"sqlite:///{path}",
            poolclass=StaticPool,
            connect_args={"check_same_thread": False, "timeout": 30},
            echo=self.settings.DEBUG,
        )
        event.listen(engine, "connect", _disable_pysqlite_autobegin)
        event.listen(engine, "begin", _emit_begin)
        return engine

    def _describe(self) -> str:
        return self.settings.SQLITE_PATH

    def prepare_ddl(self, statement: str) -> str:
        return translate_to_sqlite(statement)

    @contextmanager
    def _serialized(self) -> Iterator[None]:
        with self._lock:
            yield


def create_store(settings: Settings) -> CredentialStore:
    """Build the store for the configured backend (not yet connected)."""
    if settings.DB_TYPE == "postgres":
        return PostgresStore(settings)
    return SqliteStore(settings)


def get_store(request: Request) -> CredentialStore:
    """Dependency returning the store opened during application startup."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreError("Credential store is not initialized")
    return store
