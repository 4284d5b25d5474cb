"""Engine operators for fxload.

This package provides one dialect per database engine family plus the
SQLAlchemy session, and factories that pick the dialect for a given
engine name or SQLAlchemy engine.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from sqlalchemy.engine import Connection, Engine

from fxload.core.dialect import Dialect, ParamStyle
from fxload.exceptions import ConfigurationError
from fxload.operators.mysql import MySQLDialect
from fxload.operators.oracle import OracleDialect
from fxload.operators.postgres import PostgreSQLDialect
from fxload.operators.sql import SQLSession
from fxload.operators.sqlite import SQLiteDialect
from fxload.operators.sqlserver import SQLServerDialect

DIALECTS: dict[str, type[Dialect]] = {
    "postgres": PostgreSQLDialect,
    "postgresql": PostgreSQLDialect,
    "pgx": PostgreSQLDialect,
    "mysql": MySQLDialect,
    "mariadb": MySQLDialect,
    "sqlite": SQLiteDialect,
    "sqlite3": SQLiteDialect,
    "mssql": SQLServerDialect,
    "sqlserver": SQLServerDialect,
    "oracle": OracleDialect,
    "oci8": OracleDialect,
}


def dialect_for(name: str, **options: Any) -> Dialect:
    """Create the dialect registered under ``name``.

    Args:
        name: Engine or driver name (e.g. "postgres", "mysql", "sqlite3")
        **options: Passed to the dialect constructor

    Returns:
        Dialect instance

    Raises:
        ConfigurationError: If the name is unknown

    Examples:
        >>> dialect_for("postgres", use_alter_constraint=True)
        PostgreSQLDialect(param_style='dollar')
    """
    try:
        dialect_cls = DIALECTS[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unsupported database: {name}. Must be one of: {sorted(DIALECTS)}"
        ) from None
    try:
        return dialect_cls(**options)
    except TypeError as e:
        raise ConfigurationError(f"Invalid options for {dialect_cls.__name__}: {e}") from e


def dialect_for_engine(
    bind: Union[Engine, Connection, SQLSession],
    param_style: Optional[ParamStyle] = None,
    **options: Any,
) -> Dialect:
    """Create the dialect matching a SQLAlchemy engine and its driver.

    The engine family comes from the SQLAlchemy dialect name, the
    placeholder family from the DB-API driver's ``paramstyle`` (so that
    psycopg and PyMySQL get ``%s``, sqlite3 and pyodbc get ``?``).

    Args:
        bind: Engine, Connection or SQLSession
        param_style: Force a placeholder family instead of asking the driver
        **options: Passed to the dialect constructor

    Raises:
        ConfigurationError: If the engine or its paramstyle is unsupported
    """
    engine = bind.engine
    if param_style is None:
        try:
            param_style = ParamStyle.from_dbapi(engine.dialect.dbapi.paramstyle)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
    return dialect_for(engine.dialect.name, param_style=param_style, **options)


__all__ = [
    "DIALECTS",
    "MySQLDialect",
    "OracleDialect",
    "PostgreSQLDialect",
    "SQLServerDialect",
    "SQLSession",
    "SQLiteDialect",
    "dialect_for",
    "dialect_for_engine",
]
