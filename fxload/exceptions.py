"""fxload exception hierarchy."""

from __future__ import annotations


class FxLoadError(Exception):
    """Base exception for all fxload errors."""

    pass


class ConfigurationError(FxLoadError):
    """Raised when configuration is invalid or missing."""

    pass


class DiscoveryError(FxLoadError):
    """Raised when fixture files cannot be found or read."""

    pass


class FixtureError(FxLoadError):
    """Raised when fixture content has an unexpected shape."""

    pass


class FileIsNotSliceOrMapError(FixtureError):
    """Raised when a fixture file's top level is not a list or a mapping."""

    def __init__(self, file_name: str = ""):
        message = "The fixture file is not a sequence or mapping"
        if file_name:
            message = f"{message}: {file_name}"
        super().__init__(message)
        self.file_name = file_name


class RecordNotMappingError(FixtureError):
    """Raised when a record is not a flat mapping of column to value."""

    pass


class KeyIsNotStringError(FixtureError):
    """Raised when a record key is not a string."""

    def __init__(self, key: object):
        super().__init__(f"Record key is not a string: {key!r}")
        self.key = key


class NotTestDatabaseError(FxLoadError):
    """Raised when the target database does not look like a test database."""

    def __init__(self, database_name: str):
        super().__init__(
            f"Loading aborted because the database name does not look like a test "
            f"database: {database_name!r}"
        )
        self.database_name = database_name


class ConnectionError(FxLoadError):
    """Raised when connection to the database fails."""

    pass


class DatabaseError(FxLoadError):
    """Raised when a statement fails on the database."""

    pass


class LoaderError(FxLoadError):
    """Raised when loading a fixture into a table fails."""

    def __init__(self, message: str, table_name: str = ""):
        super().__init__(message)
        self.table_name = table_name
