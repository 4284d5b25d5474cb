"""Base Dialect abstract class.

This module defines the Dialect interface. A dialect holds everything
that differs between database engines during a fixture load: identifier
quoting, placeholder syntax, value casting, and how referential
integrity is suspended while tables are wiped and refilled.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Callable, Optional, Sequence

from fxload.core.session import Session
from fxload.exceptions import DatabaseError

logger = logging.getLogger(__name__)

DATETIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}[ T]\d{2}:\d{2}:\d{2}$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^\d{2}:\d{2}:\d{2}$")

DATETIME_MASK = "YYYY-MM-DD HH24:MI:SS"
DATE_MASK = "YYYY-MM-DD"
TIME_MASK = "HH24:MI:SS"


class ParamStyle(str, Enum):
    """Placeholder families for bound parameters."""

    DOLLAR = "dollar"  # $1, $2, ...
    QUESTION = "question"  # ?
    COLON = "colon"  # :1, :2, ... with to_date() casting
    FORMAT = "format"  # %s

    @classmethod
    def from_dbapi(cls, paramstyle: str) -> ParamStyle:
        """Map a DB-API ``paramstyle`` string to a placeholder family.

        Args:
            paramstyle: Value of a DB-API module's ``paramstyle`` attribute
                (or SQLAlchemy's dialect.paramstyle)

        Returns:
            Matching ParamStyle

        Raises:
            ValueError: If the paramstyle has no positional equivalent
        """
        mapping = {
            "qmark": cls.QUESTION,
            "numeric": cls.COLON,
            "named": cls.COLON,
            "numeric_dollar": cls.DOLLAR,
            "format": cls.FORMAT,
            "pyformat": cls.FORMAT,
        }
        try:
            return mapping[paramstyle]
        except KeyError:
            raise ValueError(f"Unsupported DB-API paramstyle: {paramstyle}") from None


def temporal_kind(value: Any) -> Optional[str]:
    """Classify a value as 'datetime', 'date', 'time' or None.

    Accepts date/time objects as produced by YAML timestamps, and strings
    shaped like ``2016-01-01 12:30:00``, ``2016-01-01`` or ``12:30:00``.
    """
    if isinstance(value, datetime):
        return "datetime"
    if isinstance(value, date):
        return "date"
    if isinstance(value, time):
        return "time"
    if isinstance(value, str):
        if DATETIME_PATTERN.match(value):
            return "datetime"
        if DATE_PATTERN.match(value):
            return "date"
        if TIME_PATTERN.match(value):
            return "time"
    return None


class Dialect(ABC):
    """Base class for engine-specific fixture loading behavior.

    The record compiler and the loader never branch on the engine; they
    only call the methods below. Subclasses provide the quote characters,
    a default placeholder family, the referential integrity bracket and
    the database name query. Everything else has a working default.

    A dialect keeps no per-load state and can be shared between loads.

    Examples:
        Subclass implementation:
        >>> class MyDBDialect(Dialect):
        ...     name = "mydb"
        ...     quote_open = quote_close = '"'
        ...     default_param_style = ParamStyle.QUESTION
        ...
        ...     def run_exclusive_of_referential_integrity(self, session, body, tables=()):
        ...         session.execute("SET CHECKS OFF")
        ...         try:
        ...             body()
        ...         finally:
        ...             session.execute("SET CHECKS ON")
        ...
        ...     def resolve_database_name(self, session):
        ...         return session.scalar("SELECT db_name()")
    """

    name: str = ""
    quote_open: str = '"'
    quote_close: str = '"'
    default_param_style: ParamStyle = ParamStyle.QUESTION

    def __init__(self, param_style: Optional[ParamStyle] = None):
        """Initialize dialect.

        Args:
            param_style: Placeholder family to emit. Defaults to the
                engine's usual one; override it to match the installed driver.
        """
        self.param_style = ParamStyle(param_style) if param_style else self.default_param_style

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(param_style={self.param_style.value!r})"

    # ==================== Identifier Quoting ====================

    def quote_identifier(self, name: str) -> str:
        """Quote a possibly schema-qualified identifier.

        Each dot-separated segment is quoted on its own, with embedded
        close-quote characters doubled. A segment already wrapped in quotes
        is unwrapped first, so quoting twice is harmless. Case is preserved.

        Args:
            name: Identifier such as ``posts`` or ``test_schema.posts``

        Returns:
            Quoted identifier such as ``"test_schema"."posts"``
        """
        open_, close = self.quote_open, self.quote_close
        parts = []
        for segment in name.split("."):
            if len(segment) >= 2 and segment.startswith(open_) and segment.endswith(close):
                segment = segment[1:-1].replace(close * 2, close)
            parts.append(f"{open_}{segment.replace(close, close * 2)}{close}")
        return ".".join(parts)

    # ==================== Placeholders ====================

    def placeholder_for(self, position: int, value: Any) -> str:
        """Placeholder text for the ``position``-th bound parameter (1-based).

        With the colon family, date, time and datetime values are wrapped
        in ``to_date()`` with the matching format mask.
        """
        if self.param_style is ParamStyle.DOLLAR:
            return f"${position}"
        if self.param_style is ParamStyle.QUESTION:
            return "?"
        if self.param_style is ParamStyle.FORMAT:
            return "%s"

        kind = temporal_kind(value)
        if kind == "datetime":
            return f"to_date(:{position}, '{DATETIME_MASK}')"
        if kind == "date":
            return f"to_date(:{position}, '{DATE_MASK}')"
        if kind == "time":
            return f"to_date(:{position}, '{TIME_MASK}')"
        return f":{position}"

    def bind_value(self, value: Any) -> Any:
        """Convert a record value into what the driver receives.

        Values pass through unchanged except with the colon family, where
        date and time values become strings matching the to_date() mask.
        """
        if self.param_style is not ParamStyle.COLON:
            return value

        kind = temporal_kind(value)
        if kind == "datetime":
            if isinstance(value, datetime):
                return value.strftime("%Y-%m-%d %H:%M:%S")
            return value.replace("T", " ")
        if kind == "date" and isinstance(value, date):
            return value.strftime("%Y-%m-%d")
        if kind == "time" and isinstance(value, time):
            return value.strftime("%H:%M:%S")
        return value

    # ==================== Load Bracketing ====================

    @abstractmethod
    def run_exclusive_of_referential_integrity(
        self,
        session: Session,
        body: Callable[[], None],
        tables: Sequence[str] = (),
    ) -> None:
        """Run ``body`` with foreign key enforcement suspended.

        Enforcement must be restored before returning, whether or not
        ``body`` raised. Exceptions from ``body`` propagate unchanged.

        Args:
            session: Session with the load transaction open
            body: Callable performing all deletes and inserts
            tables: Names of the tables the body touches
        """
        pass

    def around_table_insert(
        self,
        session: Session,
        table_name: str,
        body: Callable[[], None],
    ) -> None:
        """Run ``body`` (all inserts for one table) with engine specific setup.

        Default just calls ``body``. Engines override this to reset
        sequences after explicit ids were inserted, or to allow explicit
        values in identity columns.
        """
        body()

    def _bracket(
        self,
        session: Session,
        body: Callable[[], None],
        before: Sequence[str],
        after: Sequence[str],
    ) -> None:
        """Run ``before`` statements, ``body``, then ``after`` statements.

        ``after`` also runs when ``body`` fails. In that case the error
        from ``body`` is the one raised; a failing ``after`` statement is
        only logged, since the transaction is about to be rolled back.
        """
        for statement in before:
            session.execute(statement)
        try:
            body()
        except BaseException:
            for statement in after:
                try:
                    session.execute(statement)
                except DatabaseError as e:
                    logger.warning("Could not run %r after a failed load: %s", statement, e)
            raise
        for statement in after:
            session.execute(statement)

    # ==================== Database Identity ====================

    @abstractmethod
    def resolve_database_name(self, session: Session) -> str:
        """Return the name of the database the session is connected to."""
        pass
