"""fxload core package.

This package contains the abstract base classes and the engine agnostic
load logic: dialect and session interfaces, the record compiler, the
test database check and the fixture loader.
"""

from fxload.core.compiler import compile_delete, compile_insert
from fxload.core.config import FxLoadConfig, load_config, skip_database_name_check
from fxload.core.dialect import Dialect, ParamStyle
from fxload.core.guard import assert_test_database, is_test_database
from fxload.core.session import Session
from fxload.core.loader import FixtureLoader

__all__ = [
    "Dialect",
    "FixtureLoader",
    "FxLoadConfig",
    "ParamStyle",
    "Session",
    "assert_test_database",
    "compile_delete",
    "compile_insert",
    "is_test_database",
    "load_config",
    "skip_database_name_check",
]
