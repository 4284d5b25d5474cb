"""MySQL and MariaDB operator for fxload."""

from fxload.operators.mysql.dialect import MySQLDialect

__all__ = ["MySQLDialect"]
