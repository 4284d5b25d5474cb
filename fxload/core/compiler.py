"""Record to SQL compilation.

Turns one fixture record into a parameterized INSERT for the active
dialect. The compiler itself is engine agnostic.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fxload.core.dialect import Dialect
from fxload.exceptions import KeyIsNotStringError, RecordNotMappingError


def compile_insert(dialect: Dialect, table_name: str, record: Any) -> tuple[str, list[Any]]:
    """Build an INSERT statement and its ordered values for one record.

    Columns follow the record's iteration order, which for records
    parsed from YAML is the order they appear in the file.

    Args:
        dialect: Dialect providing quoting, placeholders and value binding
        table_name: Target table, optionally schema-qualified
        record: Mapping of column name to scalar value

    Returns:
        Tuple of (sql, values) where values line up with the placeholders

    Raises:
        RecordNotMappingError: If record is not a mapping
        KeyIsNotStringError: If a column name is not a string

    Examples:
        >>> compile_insert(PostgreSQLDialect(), "posts", {"id": 1, "title": "Hi"})
        ('INSERT INTO "posts" ("id", "title") VALUES ($1, $2)', [1, 'Hi'])
    """
    if not isinstance(record, Mapping):
        raise RecordNotMappingError(
            f"Could not compile record for {table_name}: not a mapping ({type(record).__name__})"
        )

    columns: list[str] = []
    placeholders: list[str] = []
    values: list[Any] = []
    for position, (key, value) in enumerate(record.items(), start=1):
        if not isinstance(key, str):
            raise KeyIsNotStringError(key)
        columns.append(dialect.quote_identifier(key))
        placeholders.append(dialect.placeholder_for(position, value))
        values.append(dialect.bind_value(value))

    sql = (
        f"INSERT INTO {dialect.quote_identifier(table_name)} "
        f"({', '.join(columns)}) VALUES ({', '.join(placeholders)})"
    )
    return sql, values


def compile_delete(dialect: Dialect, table_name: str) -> str:
    """Build the unconditional wipe statement for a fixture table."""
    return f"DELETE FROM {dialect.quote_identifier(table_name)}"


def quote_literal(value: str) -> str:
    """Render a string as a SQL string literal, doubling embedded quotes."""
    return "'" + value.replace("'", "''") + "'"
