"""Shared fixtures for fxload tests."""

import sqlite3
from pathlib import Path
from typing import Any, Optional, Sequence

import pytest
from sqlalchemy import create_engine, event

from fxload.core.session import Session
from fxload.exceptions import DatabaseError
from fxload.operators.sql import SQLSession

TESTDATA = Path(__file__).parent / "testdata"
FIXTURES_DIR = TESTDATA / "fixtures"
SQLITE_SCHEMA = TESTDATA / "schema" / "sqlite.sql"


class RecordingSession(Session):
    """In-memory session that records every statement instead of running it.

    ``results`` maps a SQL fragment to the rows returned by fetch_all()
    for any query containing it. Statements containing ``fail_on`` raise
    DatabaseError, as do commit() and rollback() when told to fail.
    Transaction calls are recorded as ``begin()``, ``commit()`` and
    ``rollback()``.
    """

    def __init__(
        self,
        results: Optional[dict] = None,
        fail_on: Optional[str] = None,
        fail_commit: bool = False,
        fail_rollback: bool = False,
        dbapi_connection: Any = None,
    ):
        self.results = results or {}
        self.fail_on = fail_on
        self.fail_commit = fail_commit
        self.fail_rollback = fail_rollback
        self.log: list[str] = []
        self.params: list[list] = []
        self._dbapi_connection = dbapi_connection
        self._in_transaction = False

    @property
    def statements(self) -> list[str]:
        """Logged SQL without the transaction markers."""
        return [entry for entry in self.log if not entry.endswith("()")]

    def _record(self, sql: str, params: Sequence[Any]) -> None:
        self.log.append(sql)
        self.params.append(list(params))
        if self.fail_on and self.fail_on in sql:
            raise DatabaseError(f"Failed to execute {sql!r}: simulated failure")

    def begin(self) -> None:
        self.log.append("begin()")
        self._in_transaction = True

    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        self._record(sql, params)

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        self._record(sql, params)
        for fragment, rows in self.results.items():
            if fragment in sql:
                return list(rows)
        return []

    def commit(self) -> None:
        self.log.append("commit()")
        if self.fail_commit:
            raise DatabaseError("Failed to commit fixtures: simulated failure")
        self._in_transaction = False

    def rollback(self) -> None:
        self.log.append("rollback()")
        if self.fail_rollback:
            raise DatabaseError("Failed to roll back fixtures: simulated failure")
        self._in_transaction = False

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    @property
    def dbapi_connection(self) -> Any:
        return self._dbapi_connection


def create_sqlite_database(path: Path) -> Path:
    """Create a SQLite database file with the blog schema."""
    conn = sqlite3.connect(path)
    try:
        conn.executescript(SQLITE_SCHEMA.read_text())
        conn.commit()
    finally:
        conn.close()
    return path


def create_sqlite_engine(path: Path):
    """Create an engine that enforces foreign keys on every connection."""
    engine = create_engine(f"sqlite:///{path}")

    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    return engine


def count_rows(engine, table: str) -> int:
    with engine.connect() as conn:
        return conn.exec_driver_sql(f'SELECT COUNT(*) FROM "{table}"').scalar()


def fetch_rows(engine, sql: str) -> list[tuple]:
    with engine.connect() as conn:
        return [tuple(row) for row in conn.exec_driver_sql(sql)]


@pytest.fixture
def fixtures_dir():
    """Directory with the blog fixtures."""
    return FIXTURES_DIR


@pytest.fixture
def sqlite_db(tmp_path):
    """Path of a fresh SQLite test database with the blog schema."""
    return create_sqlite_database(tmp_path / "fixtures_test.db")


@pytest.fixture
def sqlite_engine(sqlite_db):
    """Engine on the SQLite test database."""
    engine = create_sqlite_engine(sqlite_db)
    yield engine
    engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine):
    """SQLSession on the SQLite test database."""
    session = SQLSession(sqlite_engine)
    yield session
    session.close()


@pytest.fixture
def production_engine(tmp_path):
    """Engine on a SQLite database whose name does not look like a test database."""
    engine = create_sqlite_engine(create_sqlite_database(tmp_path / "production.db"))
    yield engine
    engine.dispose()
