"""Fixture loader.

This module drives a fixture load: check the database is a test
database, then in one transaction wipe and refill every fixture table
with referential integrity suspended.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union

from fxload.core.compiler import compile_delete, compile_insert
from fxload.core.config import config
from fxload.core.dialect import Dialect
from fxload.core.guard import assert_test_database
from fxload.core.session import Session
from fxload.exceptions import DatabaseError, LoaderError
from fxload.models.fixture import FixtureFile, FixtureSet
from fxload.models.results import LoadResult, TableResult

logger = logging.getLogger(__name__)


class FixtureLoader:
    """Loads a fixture set into a database.

    Every call to load() replaces the contents of each fixture table with
    the fixture rows. Tables are processed in fixture set order; foreign
    key checks are suspended by the dialect for the whole batch, so that
    order does not have to follow table dependencies.

    A load either commits completely or leaves the database untouched.

    Examples:
        >>> session = SQLSession("postgresql://localhost/app_test")
        >>> loader = FixtureLoader.from_directory(
        ...     session, PostgreSQLDialect(), "testdata/fixtures"
        ... )
        >>> result = loader.load()
        >>> result.records_for("posts")
        2
    """

    def __init__(
        self,
        session: Session,
        dialect: Dialect,
        fixtures: Union[FixtureSet, Iterable[FixtureFile]],
        skip_database_name_check: Optional[bool] = None,
    ):
        """Initialize fixture loader.

        Args:
            session: Session for the target database
            dialect: Dialect matching the database engine and driver
            fixtures: Fixtures to load, in load order
            skip_database_name_check: Disable the test database check for
                this loader. None falls back to the process-wide setting
                (see fxload.skip_database_name_check()).
        """
        self.session = session
        self.dialect = dialect
        self.fixtures = fixtures if isinstance(fixtures, FixtureSet) else FixtureSet(fixtures)
        self._skip_database_name_check = skip_database_name_check

    @classmethod
    def from_directory(
        cls,
        session: Session,
        dialect: Dialect,
        directory: Union[str, Path],
        **kwargs,
    ) -> FixtureLoader:
        """Create a loader for every fixture file in ``directory``."""
        return cls(session, dialect, FixtureSet.from_directory(directory), **kwargs)

    @classmethod
    def from_files(
        cls,
        session: Session,
        dialect: Dialect,
        *paths: Union[str, Path],
        **kwargs,
    ) -> FixtureLoader:
        """Create a loader for an explicit list of fixture files."""
        return cls(session, dialect, FixtureSet.from_files(*paths), **kwargs)

    @classmethod
    def from_paths(
        cls,
        session: Session,
        dialect: Dialect,
        *paths: Union[str, Path],
        **kwargs,
    ) -> FixtureLoader:
        """Create a loader from a mix of fixture directories and files."""
        return cls(session, dialect, FixtureSet.from_paths(*paths), **kwargs)

    @property
    def skip_database_name_check(self) -> bool:
        if self._skip_database_name_check is None:
            return config.skip_database_name_check
        return self._skip_database_name_check

    def load(self) -> LoadResult:
        """Replace the contents of every fixture table with its fixture rows.

        Returns:
            LoadResult with per-table record counts

        Raises:
            NotTestDatabaseError: If the database name check fails
            FixtureError: If a fixture file or record has the wrong shape
            LoaderError: If a statement fails on a fixture table
            DatabaseError: If the transaction cannot be opened or committed
        """
        started_at = datetime.now()

        database_name = None
        if not self.skip_database_name_check:
            database_name = assert_test_database(self.session, self.dialect)

        tables: list[TableResult] = []

        def load_all() -> None:
            for fixture in self.fixtures:
                tables.append(self._load_fixture(fixture))

        self.session.begin()
        try:
            self.dialect.run_exclusive_of_referential_integrity(
                self.session, load_all, self.fixtures.table_names
            )
            self.session.commit()
        except BaseException:
            try:
                self.session.rollback()
            except DatabaseError as e:
                logger.warning("Could not roll back the failed load: %s", e)
            raise

        completed_at = datetime.now()
        result = LoadResult(
            success=True,
            database_name=database_name,
            tables=tables,
            duration_seconds=(completed_at - started_at).total_seconds(),
            started_at=started_at,
            completed_at=completed_at,
        )
        logger.info(
            "Loaded %d records into %d tables in %.3fs",
            result.records_loaded,
            result.table_count,
            result.duration_seconds,
        )
        return result

    def _load_fixture(self, fixture: FixtureFile) -> TableResult:
        """Wipe one table and insert its fixture records."""
        table_name = fixture.table_name
        counter = {"records": 0}

        def insert_records() -> None:
            for record in fixture.records():
                sql, values = compile_insert(self.dialect, table_name, record)
                self.session.execute(sql, values)
                counter["records"] += 1

        try:
            self.session.execute(compile_delete(self.dialect, table_name))
            self.dialect.around_table_insert(self.session, table_name, insert_records)
        except DatabaseError as e:
            raise LoaderError(f"Failed to load fixture {fixture.path}: {e}", table_name) from e

        logger.debug("Loaded %d records into %s", counter["records"], table_name)
        return TableResult(table=table_name, records_loaded=counter["records"])
