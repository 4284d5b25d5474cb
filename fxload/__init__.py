"""fxload - YAML fixture loader for test databases."""

__version__ = "0.1.0"

# Re-export core classes
from fxload.core import (
    Dialect,
    FixtureLoader,
    ParamStyle,
    Session,
    compile_insert,
    is_test_database,
    skip_database_name_check,
)

# Re-export models
from fxload.models import FixtureFile, FixtureSet, LoadResult, TableResult

# Re-export engine support
from fxload.operators import (
    MySQLDialect,
    OracleDialect,
    PostgreSQLDialect,
    SQLiteDialect,
    SQLServerDialect,
    SQLSession,
    dialect_for,
    dialect_for_engine,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Dialect",
    "FixtureLoader",
    "ParamStyle",
    "Session",
    "compile_insert",
    "is_test_database",
    "skip_database_name_check",
    # Models
    "FixtureFile",
    "FixtureSet",
    "LoadResult",
    "TableResult",
    # Engines
    "MySQLDialect",
    "OracleDialect",
    "PostgreSQLDialect",
    "SQLiteDialect",
    "SQLServerDialect",
    "SQLSession",
    "dialect_for",
    "dialect_for_engine",
]
