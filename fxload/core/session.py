"""Base Session abstract class.

This module defines the Session interface: the single connection and
transaction a fixture load runs on.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence


class Session(ABC):
    """Transactional context for loading fixtures.

    A session owns exactly one database connection. All deletes and
    inserts of a load execute on it, inside one transaction opened with
    begin() and closed with commit() or rollback().

    Statements are passed through to the database as written, so the
    placeholder syntax in ``sql`` must be the one the underlying driver
    understands. Dialects take care of that.

    Examples:
        >>> with SQLSession("sqlite:///fixtures_test.db") as session:
        ...     session.begin()
        ...     session.execute("DELETE FROM posts")
        ...     session.commit()
    """

    @abstractmethod
    def begin(self) -> None:
        """Open the load transaction.

        Raises:
            DatabaseError: If the transaction cannot be started
        """
        pass

    @abstractmethod
    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        """Execute a statement with positional parameters.

        Args:
            sql: Statement text in the driver's placeholder syntax
            params: Positional parameter values

        Raises:
            DatabaseError: If execution fails
        """
        pass

    @abstractmethod
    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        """Execute a query and return all rows as tuples.

        Raises:
            DatabaseError: If execution fails
        """
        pass

    def scalar(self, sql: str, params: Sequence[Any] = ()) -> Optional[Any]:
        """Execute a query and return the first column of the first row."""
        rows = self.fetch_all(sql, params)
        if not rows:
            return None
        return rows[0][0]

    @abstractmethod
    def commit(self) -> None:
        """Commit the load transaction."""
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Roll back the load transaction. Safe to call with none open."""
        pass

    @property
    @abstractmethod
    def in_transaction(self) -> bool:
        """Whether begin() was called and not yet committed or rolled back."""
        pass

    @property
    def dbapi_connection(self) -> Optional[Any]:
        """Underlying DB-API connection, when the session exposes one."""
        return None

    def close(self) -> None:
        """Release the connection. Default does nothing."""
        pass

    def __enter__(self) -> Session:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
