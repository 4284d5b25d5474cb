"""Oracle dialect implementation.

This module provides fixture loading behavior for Oracle databases.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from fxload.core.dialect import Dialect, ParamStyle
from fxload.core.session import Session
from fxload.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class OracleDialect(Dialect):
    """Oracle dialect.

    Uses numbered ``:1`` placeholders. Date, time and datetime values are
    bound as strings and converted with ``to_date()``.

    Every enabled foreign key of the current schema is disabled before the
    load and enabled again after it. Oracle commits implicitly around DDL,
    so on failure the load transaction is rolled back before the
    constraints are re-enabled.

    Examples:
        >>> import datetime
        >>> OracleDialect().placeholder_for(1, datetime.date(2016, 1, 1))
        "to_date(:1, 'YYYY-MM-DD')"
    """

    name = "oracle"
    quote_open = '"'
    quote_close = '"'
    default_param_style = ParamStyle.COLON

    def _enabled_foreign_keys(self, session: Session) -> list[tuple[str, str]]:
        rows = session.fetch_all(
            "SELECT table_name, constraint_name FROM user_constraints "
            "WHERE constraint_type = 'R' AND status = 'ENABLED'"
        )
        return [(table, constraint) for table, constraint in rows]

    def run_exclusive_of_referential_integrity(
        self,
        session: Session,
        body: Callable[[], None],
        tables: Sequence[str] = (),
    ) -> None:
        constraints = self._enabled_foreign_keys(session)
        statements = [
            (self.quote_identifier(table), self.quote_identifier(constraint))
            for table, constraint in constraints
        ]
        for table_ref, constraint_ref in statements:
            session.execute(f"ALTER TABLE {table_ref} DISABLE CONSTRAINT {constraint_ref}")

        try:
            body()
        except BaseException:
            session.rollback()
            for table_ref, constraint_ref in statements:
                try:
                    session.execute(f"ALTER TABLE {table_ref} ENABLE CONSTRAINT {constraint_ref}")
                except DatabaseError as e:
                    logger.warning("Could not re-enable %s on %s: %s", constraint_ref, table_ref, e)
            raise

        for table_ref, constraint_ref in statements:
            session.execute(f"ALTER TABLE {table_ref} ENABLE CONSTRAINT {constraint_ref}")

    def resolve_database_name(self, session: Session) -> str:
        return session.scalar("SELECT user FROM dual") or ""
