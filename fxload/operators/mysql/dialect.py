"""MySQL dialect implementation.

This module provides fixture loading behavior for MySQL and MariaDB.
"""

from __future__ import annotations

from typing import Callable, Sequence

from fxload.core.dialect import Dialect, ParamStyle
from fxload.core.session import Session


class MySQLDialect(Dialect):
    """MySQL / MariaDB dialect.

    Foreign key checks are switched off for the session with
    ``SET FOREIGN_KEY_CHECKS = 0`` and switched back on afterwards. The
    setting is not transactional, so it is restored even when the load
    fails.

    No sequence handling is needed: InnoDB moves AUTO_INCREMENT past any
    explicit id that is inserted. Avoid DDL here, MySQL commits
    implicitly before it.

    Examples:
        >>> MySQLDialect().quote_identifier("posts_tags")
        '`posts_tags`'
    """

    name = "mysql"
    quote_open = "`"
    quote_close = "`"
    default_param_style = ParamStyle.QUESTION

    def run_exclusive_of_referential_integrity(
        self,
        session: Session,
        body: Callable[[], None],
        tables: Sequence[str] = (),
    ) -> None:
        self._bracket(
            session,
            body,
            before=["SET FOREIGN_KEY_CHECKS = 0"],
            after=["SET FOREIGN_KEY_CHECKS = 1"],
        )

    def resolve_database_name(self, session: Session) -> str:
        return session.scalar("SELECT DATABASE()") or ""
