"""Microsoft SQL Server operator for fxload."""

from fxload.operators.sqlserver.dialect import SQLServerDialect

__all__ = ["SQLServerDialect"]
