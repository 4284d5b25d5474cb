"""PostgreSQL operator for fxload."""

from fxload.operators.postgres.dialect import PostgreSQLDialect

__all__ = ["PostgreSQLDialect"]
