"""Oracle operator for fxload."""

from fxload.operators.oracle.dialect import OracleDialect

__all__ = ["OracleDialect"]
