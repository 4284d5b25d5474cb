"""SQLite dialect implementation.

This module provides fixture loading behavior for SQLite databases.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

from fxload.core.dialect import Dialect, ParamStyle
from fxload.core.session import Session


class SQLiteDialect(Dialect):
    """SQLite dialect.

    Foreign keys are deferred with ``PRAGMA defer_foreign_keys``, so they
    are checked once, at commit. The pragma only lasts for the current
    transaction, and the sqlite3 module does not open one until the
    first DML statement, so the dialect issues ``BEGIN`` itself when no
    transaction is open yet.

    INTEGER PRIMARY KEY columns pick max(rowid) + 1 on their own, so no
    sequence handling is needed after inserts.

    The database name is the file name of the main database (empty for
    in-memory databases).

    Examples:
        >>> SQLiteDialect().placeholder_for(3, 42)
        '?'
    """

    name = "sqlite"
    quote_open = '"'
    quote_close = '"'
    default_param_style = ParamStyle.QUESTION

    def run_exclusive_of_referential_integrity(
        self,
        session: Session,
        body: Callable[[], None],
        tables: Sequence[str] = (),
    ) -> None:
        raw = session.dbapi_connection
        if raw is not None and not getattr(raw, "in_transaction", True):
            session.execute("BEGIN")
        # switched off by SQLite at COMMIT or ROLLBACK; switching it off
        # earlier would discard the pending violations
        session.execute("PRAGMA defer_foreign_keys = ON")
        body()

    def resolve_database_name(self, session: Session) -> str:
        for _, name, file in session.fetch_all("PRAGMA database_list"):
            if name == "main":
                return Path(file).name if file else ""
        return ""
