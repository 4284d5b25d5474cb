"""SQL session using SQLAlchemy.

This module provides the Session implementation for any database
SQLAlchemy can connect to.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Union

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine, NestedTransaction, Transaction
from sqlalchemy.exc import SQLAlchemyError

from fxload.core.config import config
from fxload.core.session import Session
from fxload.exceptions import ConnectionError, DatabaseError

logger = logging.getLogger(__name__)


class SQLSession(Session):
    """Session on a SQLAlchemy connection.

    Statements are sent with ``Connection.exec_driver_sql``, so the SQL
    text produced by the dialect reaches the DB-API driver unchanged and
    parameters are passed positionally.

    The session can be built from:
    - a URL string (an engine is created and disposed on close),
    - an Engine (a connection is checked out and returned on close),
    - an open Connection (used as is and left open on close).

    Examples:
        >>> with SQLSession("sqlite:///fixtures_test.db") as session:
        ...     session.begin()
        ...     session.execute("INSERT INTO tags (id, name) VALUES (?, ?)", [1, "go"])
        ...     session.commit()
    """

    def __init__(self, bind: Union[str, Engine, Connection], **engine_kwargs: Any):
        """Initialize SQL session.

        Args:
            bind: Database URL, Engine or Connection
            **engine_kwargs: Passed to create_engine() when bind is a URL

        Raises:
            ConnectionError: If the engine cannot be created or connected
        """
        self._owns_engine = False
        self._owns_connection = False
        self._transaction: Optional[Transaction] = None

        try:
            if isinstance(bind, Connection):
                self.engine = bind.engine
                self.connection = bind
            else:
                if isinstance(bind, str):
                    engine_kwargs.setdefault("echo", config.echo_sql)
                    self.engine = create_engine(bind, **engine_kwargs)
                    self._owns_engine = True
                else:
                    self.engine = bind
                self.connection = self.engine.connect()
                self._owns_connection = True
        except SQLAlchemyError as e:
            raise ConnectionError(f"Failed to connect to database: {e}") from e

    @property
    def dialect_name(self) -> str:
        """SQLAlchemy dialect name (e.g. 'postgresql', 'sqlite')."""
        return self.engine.dialect.name

    @property
    def paramstyle(self) -> str:
        """DB-API paramstyle of the underlying driver."""
        return self.engine.dialect.dbapi.paramstyle

    @property
    def dbapi_connection(self) -> Optional[Any]:
        return self.connection.connection.dbapi_connection

    @property
    def in_transaction(self) -> bool:
        return self._transaction is not None and self._transaction.is_active

    def begin(self) -> None:
        """Open the load transaction.

        Inside a transaction the caller already holds on the connection,
        the load runs in a SAVEPOINT instead.
        """
        try:
            if self.connection.in_transaction():
                self._transaction = self.connection.begin_nested()
            else:
                self._transaction = self.connection.begin()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to begin transaction: {e}") from e

    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        self._run(sql, params, fetch=False)

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        return self._run(sql, params, fetch=True)

    def _run(self, sql: str, params: Sequence[Any], fetch: bool) -> list[tuple]:
        logger.debug("%s %r", sql, params)
        # statements outside begin() autobegin a transaction; end it right away
        autobegun = self._transaction is None and not self.connection.in_transaction()
        try:
            result = self.connection.exec_driver_sql(sql, tuple(params))
            rows = [tuple(row) for row in result] if fetch and result.returns_rows else []
            if autobegun:
                self.connection.commit()
            return rows
        except SQLAlchemyError as e:
            if autobegun and self.connection.in_transaction():
                self.connection.rollback()
            raise DatabaseError(f"Failed to execute {sql!r}: {e}") from e

    def commit(self) -> None:
        if self._transaction is None:
            return
        try:
            self._transaction.commit()
        except SQLAlchemyError as e:
            # left set so that rollback() can clean up the driver transaction
            raise DatabaseError(f"Failed to commit fixtures: {e}") from e
        self._transaction = None

    def rollback(self) -> None:
        if self._transaction is None:
            return
        transaction, self._transaction = self._transaction, None
        try:
            if transaction.is_active:
                transaction.rollback()
            elif isinstance(transaction, NestedTransaction):
                transaction.close()
            else:
                # a failed COMMIT (e.g. deferred foreign keys) deactivates the
                # SQLAlchemy transaction but leaves the driver transaction open
                transaction.close()
                self.connection.connection.rollback()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to roll back fixtures: {e}") from e
        except self.engine.dialect.loaded_dbapi.Error as e:
            raise DatabaseError(f"Failed to roll back fixtures: {e}") from e

    def close(self) -> None:
        """Close the connection (and dispose the engine) if this session opened them."""
        if self._owns_connection:
            self.connection.close()
        if self._owns_engine:
            self.engine.dispose()
