"""fxload models package.

This package contains the Pydantic models for fixture files and
load results.
"""

from fxload.models.fixture import FixtureFile, FixtureSet, Record, parse_records
from fxload.models.results import LoadResult, TableResult

__all__ = [
    # Fixture models
    "FixtureFile",
    "FixtureSet",
    "Record",
    "parse_records",
    # Result models
    "LoadResult",
    "TableResult",
]
