"""fxload configuration management.

This module centralizes all configuration loading from environment variables
and provides sensible defaults. All modules should import configuration
values from here rather than reading environment variables directly.

Environment Variables:
    FXLOAD_SKIP_DATABASE_NAME_CHECK: Disable the test database name check for
                                     every loader that does not set it explicitly
                                     Default: false

    FXLOAD_FIXTURE_EXTENSIONS: Comma separated extensions picked up when
                               scanning a fixture directory
                               Default: .yml,.yaml

    FXLOAD_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
                      Default: WARNING

    FXLOAD_ECHO_SQL: Echo SQL on engines created by fxload itself
                     Default: false
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _get_bool(key: str, default: bool) -> bool:
    """Get boolean from environment variable."""
    value = os.environ.get(key, "").lower()
    if not value:
        return default
    return value in ("true", "1", "yes", "on")


def _get_str(key: str, default: str) -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default)


def _get_extensions(key: str, default: str) -> tuple[str, ...]:
    """Get a tuple of normalized file extensions from environment variable."""
    raw = _get_str(key, default)
    extensions = []
    for item in raw.split(","):
        item = item.strip().lower()
        if not item:
            continue
        if not item.startswith("."):
            item = f".{item}"
        extensions.append(item)
    return tuple(extensions)


@dataclass
class FxLoadConfig:
    """fxload configuration container.

    All configuration values are loaded from environment variables
    with sensible defaults.

    Usage:
        from fxload.core.config import config

        if config.skip_database_name_check:
            ...
    """

    # Safety
    skip_database_name_check: bool = field(
        default_factory=lambda: _get_bool("FXLOAD_SKIP_DATABASE_NAME_CHECK", False)
    )

    # Discovery
    fixture_extensions: tuple[str, ...] = field(
        default_factory=lambda: _get_extensions("FXLOAD_FIXTURE_EXTENSIONS", ".yml,.yaml")
    )

    # Logging Configuration
    log_level: str = field(default_factory=lambda: _get_str("FXLOAD_LOG_LEVEL", "WARNING").upper())
    echo_sql: bool = field(default_factory=lambda: _get_bool("FXLOAD_ECHO_SQL", False))

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.fixture_extensions:
            raise ValueError("FXLOAD_FIXTURE_EXTENSIONS must list at least one extension")

        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.log_level not in valid_levels:
            raise ValueError(
                f"Invalid FXLOAD_LOG_LEVEL: {self.log_level}. "
                f"Must be one of: {valid_levels}"
            )

    def as_dict(self) -> dict:
        """Export configuration as dictionary.

        Returns:
            Dictionary of all configuration values
        """
        return {
            "skip_database_name_check": self.skip_database_name_check,
            "fixture_extensions": list(self.fixture_extensions),
            "log_level": self.log_level,
            "echo_sql": self.echo_sql,
        }


def load_config() -> FxLoadConfig:
    """Load configuration from environment.

    This function creates a new FxLoadConfig instance by reading
    current environment variables. Call this to refresh config
    if environment has changed.

    Returns:
        New FxLoadConfig instance
    """
    return FxLoadConfig()


def skip_database_name_check(skip: bool = True) -> None:
    """Turn the test database name check off (or back on) process-wide.

    Affects every FixtureLoader created afterwards that does not pass
    ``skip_database_name_check`` explicitly. Use only where the target
    database has been verified to be disposable by other means.

    Args:
        skip: True disables the check, False restores it
    """
    config.skip_database_name_check = skip


# Global configuration instance - loaded once at import time
# Use load_config() to refresh if needed
config = load_config()
