"""Tests for test database detection."""

import pytest

from conftest import RecordingSession
from fxload.core.guard import assert_test_database, is_test_database
from fxload.exceptions import NotTestDatabaseError
from fxload.operators import MySQLDialect


@pytest.mark.parametrize(
    "name,expected",
    [
        ("db_test", True),
        ("dbTEST", True),
        ("testdb", True),
        ("production", False),
        ("productionTestCopy", True),
        ("t_e_s_t", False),
        ("ТESТ", False),  # Cyrillic Te around latin ES
        ("fixtures_test.db", True),
        ("/var/lib/app_test/data.db", True),
        ("", False),
        ("my test", False),
    ],
)
def test_is_test_database(name, expected):
    assert is_test_database(name) is expected


class TestAssertTestDatabase:
    """Test the database name check."""

    def test_returns_name(self):
        session = RecordingSession(results={"DATABASE()": [("app_test",)]})
        assert assert_test_database(session, MySQLDialect()) == "app_test"

    def test_rejects_production(self):
        session = RecordingSession(results={"DATABASE()": [("production",)]})
        with pytest.raises(NotTestDatabaseError) as exc_info:
            assert_test_database(session, MySQLDialect())
        assert exc_info.value.database_name == "production"

    def test_rejects_missing_name(self):
        """Test a NULL database name is never a test database."""
        session = RecordingSession(results={"DATABASE()": [(None,)]})
        with pytest.raises(NotTestDatabaseError):
            assert_test_database(session, MySQLDialect())
