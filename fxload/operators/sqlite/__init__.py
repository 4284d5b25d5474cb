"""SQLite operator for fxload."""

from fxload.operators.sqlite.dialect import SQLiteDialect

__all__ = ["SQLiteDialect"]
