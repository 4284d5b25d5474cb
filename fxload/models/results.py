"""Result models for fixture loads.

This module defines the result classes returned by a successful load.
Failed loads raise instead of returning a result.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field as PydanticField


class TableResult(BaseModel):
    """Outcome of loading one fixture table."""

    table: str = PydanticField(
        ...,
        description="Table name the fixture was loaded into",
    )

    records_loaded: int = PydanticField(
        0,
        description="Number of records inserted",
        ge=0,
    )

    model_config = {"extra": "forbid"}


class LoadResult(BaseModel):
    """Result of a fixture load.

    Contains the per-table record counts and timing of the load.
    """

    success: bool = PydanticField(
        ...,
        description="Whether the load committed",
    )

    database_name: Optional[str] = PydanticField(
        None,
        description="Database name as seen by the test database check (None when skipped)",
    )

    tables: list[TableResult] = PydanticField(
        default_factory=list,
        description="Per-table results in load order",
    )

    duration_seconds: float = PydanticField(
        0.0,
        description="Duration of the load in seconds",
        ge=0.0,
    )

    started_at: datetime = PydanticField(
        ...,
        description="Load start time",
    )

    completed_at: Optional[datetime] = PydanticField(
        None,
        description="Load completion time",
    )

    model_config = {"extra": "forbid"}

    @property
    def records_loaded(self) -> int:
        """Total records inserted across all tables."""
        return sum(table.records_loaded for table in self.tables)

    @property
    def table_count(self) -> int:
        return len(self.tables)

    def records_for(self, table: str) -> int:
        """Records inserted into ``table`` (0 if it was not part of the load)."""
        for result in self.tables:
            if result.table == table:
                return result.records_loaded
        return 0
