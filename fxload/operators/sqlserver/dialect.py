"""SQL Server dialect implementation.

This module provides fixture loading behavior for Microsoft SQL Server.
"""

from __future__ import annotations

from typing import Callable, Sequence

from fxload.core.compiler import quote_literal
from fxload.core.dialect import Dialect, ParamStyle
from fxload.core.session import Session


class SQLServerDialect(Dialect):
    """SQL Server dialect.

    Constraints are switched off per table with ``NOCHECK CONSTRAINT ALL``
    and re-validated with ``WITH CHECK CHECK CONSTRAINT ALL`` once the
    load is done. Tables with an identity column get
    ``SET IDENTITY_INSERT ... ON`` while their fixture rows go in.

    Examples:
        >>> SQLServerDialect().quote_identifier("test_schema.posts_tags")
        '[test_schema].[posts_tags]'
    """

    name = "mssql"
    quote_open = "["
    quote_close = "]"
    default_param_style = ParamStyle.QUESTION

    def _table_names(self, session: Session, tables: Sequence[str]) -> list[str]:
        """Every base table of the database, plus the fixture tables."""
        rows = session.fetch_all(
            "SELECT table_schema, table_name FROM information_schema.tables "
            "WHERE table_type = 'BASE TABLE' ORDER BY table_schema, table_name"
        )
        names = [f"{schema}.{table}" for schema, table in rows]
        known = set(names) | {table for _, table in rows}
        names.extend(table for table in tables if table not in known)
        return [self.quote_identifier(name) for name in names]

    def run_exclusive_of_referential_integrity(
        self,
        session: Session,
        body: Callable[[], None],
        tables: Sequence[str] = (),
    ) -> None:
        names = self._table_names(session, tables)
        self._bracket(
            session,
            body,
            before=[f"ALTER TABLE {name} NOCHECK CONSTRAINT ALL" for name in names],
            after=[f"ALTER TABLE {name} WITH CHECK CHECK CONSTRAINT ALL" for name in names],
        )

    def has_identity_column(self, session: Session, table_name: str) -> bool:
        table_literal = quote_literal(self.quote_identifier(table_name))
        value = session.scalar(
            f"SELECT OBJECTPROPERTY(OBJECT_ID({table_literal}), 'TableHasIdentity')"
        )
        return value == 1

    def around_table_insert(
        self,
        session: Session,
        table_name: str,
        body: Callable[[], None],
    ) -> None:
        if not self.has_identity_column(session, table_name):
            body()
            return
        table_ref = self.quote_identifier(table_name)
        self._bracket(
            session,
            body,
            before=[f"SET IDENTITY_INSERT {table_ref} ON"],
            after=[f"SET IDENTITY_INSERT {table_ref} OFF"],
        )

    def resolve_database_name(self, session: Session) -> str:
        return session.scalar("SELECT DB_NAME()") or ""
