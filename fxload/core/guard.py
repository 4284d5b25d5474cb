"""Test database detection.

Loading fixtures deletes every row of every fixture table, so before
touching anything the loader checks that the database name looks like a
test database.
"""

from __future__ import annotations

import logging
import re

from fxload.core.dialect import Dialect
from fxload.core.session import Session
from fxload.exceptions import NotTestDatabaseError

logger = logging.getLogger(__name__)

# ASCII only, so look-alike letters from other scripts never count as "test"
DATABASE_NAME_PATTERN = re.compile(r"^[\w.\-/:\\]*(?i:test)[\w.\-/:\\]*$", re.ASCII)


def is_test_database(name: str) -> bool:
    """Whether ``name`` contains "test" (any case) among plain name characters.

    Examples:
        >>> is_test_database("db_test")
        True
        >>> is_test_database("productionTestCopy")
        True
        >>> is_test_database("t_e_s_t")
        False
    """
    return bool(DATABASE_NAME_PATTERN.match(name or ""))


def assert_test_database(session: Session, dialect: Dialect) -> str:
    """Resolve the current database name and make sure it is a test database.

    Args:
        session: Session connected to the target database
        dialect: Dialect used to query the database name

    Returns:
        The database name

    Raises:
        NotTestDatabaseError: If the name does not look like a test database
    """
    name = dialect.resolve_database_name(session) or ""
    if not is_test_database(name):
        raise NotTestDatabaseError(name)
    logger.debug("Database %r recognized as a test database", name)
    return name
