"""PostgreSQL dialect implementation.

This module provides fixture loading behavior for PostgreSQL databases.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from fxload.core.compiler import quote_literal
from fxload.core.dialect import Dialect, ParamStyle
from fxload.core.session import Session
from fxload.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class PostgreSQLDialect(Dialect):
    """PostgreSQL dialect.

    Referential integrity is suspended in one of two ways:
    - default: ``ALTER TABLE ... DISABLE TRIGGER ALL`` on every table,
      which needs superuser (or table owner with system triggers) rights;
    - ``use_alter_constraint=True``: every non-deferrable foreign key is
      made ``DEFERRABLE INITIALLY DEFERRED`` for the duration of the load
      and checked when the load finishes.

    Both run inside the load transaction, so a failed load also rolls
    back the DDL.

    After each table is filled, the sequences owned by its columns are
    moved past the highest inserted value so the application can keep
    inserting rows without colliding with fixture ids.

    Examples:
        >>> dialect = PostgreSQLDialect()
        >>> dialect.quote_identifier("test_schema.posts_tags")
        '"test_schema"."posts_tags"'
        >>> dialect.placeholder_for(2, "x")
        '$2'
    """

    name = "postgresql"
    quote_open = '"'
    quote_close = '"'
    default_param_style = ParamStyle.DOLLAR

    def __init__(
        self,
        param_style: Optional[ParamStyle] = None,
        use_alter_constraint: bool = False,
        skip_reset_sequences: bool = False,
        reset_sequences_to: Optional[int] = None,
    ):
        """Initialize PostgreSQL dialect.

        Args:
            param_style: Placeholder family (DOLLAR by default; FORMAT for psycopg)
            use_alter_constraint: Defer foreign keys instead of disabling triggers
            skip_reset_sequences: Leave sequences alone after inserts
            reset_sequences_to: Restart every sequence at this fixed value
                instead of just past the table's maximum

        Raises:
            ConfigurationError: If reset_sequences_to is not positive
        """
        super().__init__(param_style)
        if reset_sequences_to is not None and reset_sequences_to < 1:
            raise ConfigurationError(
                f"reset_sequences_to must be >= 1, got {reset_sequences_to}"
            )
        self.use_alter_constraint = use_alter_constraint
        self.skip_reset_sequences = skip_reset_sequences
        self.reset_sequences_to = reset_sequences_to

    def resolve_database_name(self, session: Session) -> str:
        return session.scalar("SELECT current_database()") or ""

    # ==================== Referential Integrity ====================

    def run_exclusive_of_referential_integrity(
        self,
        session: Session,
        body: Callable[[], None],
        tables: Sequence[str] = (),
    ) -> None:
        if self.use_alter_constraint:
            self._run_with_deferred_constraints(session, body)
        else:
            self._run_with_disabled_triggers(session, body, tables)

    def _table_names(self, session: Session, tables: Sequence[str]) -> list[str]:
        """Every ordinary table outside the system schemas, plus the fixture tables."""
        rows = session.fetch_all(
            "SELECT n.nspname, c.relname "
            "FROM pg_class c "
            "INNER JOIN pg_namespace n ON n.oid = c.relnamespace "
            "WHERE c.relkind = 'r' "
            "AND n.nspname NOT IN ('pg_catalog', 'information_schema') "
            "AND left(n.nspname, 8) <> 'pg_toast' "
            "ORDER BY n.nspname, c.relname"
        )
        names = [f"{schema}.{table}" for schema, table in rows]
        known = set(names) | {table for _, table in rows}
        names.extend(table for table in tables if table not in known)
        return [self.quote_identifier(name) for name in names]

    def _run_with_disabled_triggers(
        self,
        session: Session,
        body: Callable[[], None],
        tables: Sequence[str],
    ) -> None:
        names = self._table_names(session, tables)
        self._bracket(
            session,
            body,
            before=[f"ALTER TABLE {name} DISABLE TRIGGER ALL" for name in names],
            after=[f"ALTER TABLE {name} ENABLE TRIGGER ALL" for name in names],
        )

    def _run_with_deferred_constraints(self, session: Session, body: Callable[[], None]) -> None:
        rows = session.fetch_all(
            "SELECT table_schema, table_name, constraint_name "
            "FROM information_schema.table_constraints "
            "WHERE constraint_type = 'FOREIGN KEY' AND is_deferrable = 'NO'"
        )
        before = []
        after = ["SET CONSTRAINTS ALL IMMEDIATE"]
        for schema, table, constraint in rows:
            table_ref = self.quote_identifier(f"{schema}.{table}")
            constraint_ref = self.quote_identifier(constraint)
            before.append(
                f"ALTER TABLE {table_ref} ALTER CONSTRAINT {constraint_ref} "
                "DEFERRABLE INITIALLY DEFERRED"
            )
            after.append(
                f"ALTER TABLE {table_ref} ALTER CONSTRAINT {constraint_ref} NOT DEFERRABLE"
            )
        before.append("SET CONSTRAINTS ALL DEFERRED")
        self._bracket(session, body, before=before, after=after)

    # ==================== Sequences ====================

    def around_table_insert(
        self,
        session: Session,
        table_name: str,
        body: Callable[[], None],
    ) -> None:
        body()
        if not self.skip_reset_sequences:
            self.reset_sequences(session, table_name)

    def reset_sequences(self, session: Session, table_name: str) -> None:
        """Move each sequence owned by a column of ``table_name`` past its data."""
        table_ref = self.quote_identifier(table_name)
        table_literal = quote_literal(table_ref)
        rows = session.fetch_all(
            f"SELECT a.attname, pg_get_serial_sequence({table_literal}, a.attname) "
            "FROM pg_attribute a "
            f"WHERE a.attrelid = CAST({table_literal} AS regclass) "
            "AND a.attnum > 0 AND NOT a.attisdropped "
            f"AND pg_get_serial_sequence({table_literal}, a.attname) IS NOT NULL"
        )
        for column, sequence in rows:
            if self.reset_sequences_to is not None:
                next_value = str(self.reset_sequences_to)
            else:
                next_value = (
                    f"COALESCE((SELECT MAX({self.quote_identifier(column)}) FROM {table_ref}), 0) + 1"
                )
            session.scalar(f"SELECT setval({quote_literal(sequence)}, {next_value}, false)")
            logger.debug("Reset sequence %s of %s.%s", sequence, table_name, column)
