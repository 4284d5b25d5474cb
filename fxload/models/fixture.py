"""Fixture file and fixture set models.

A fixture file holds the rows for one table, named after the file. Its
YAML content is parsed the first time the records are needed.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import date, time
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Union

import yaml
from pydantic import BaseModel, Field as PydanticField, PrivateAttr, field_validator

from fxload.core.config import config
from fxload.exceptions import (
    DiscoveryError,
    FileIsNotSliceOrMapError,
    FixtureError,
    KeyIsNotStringError,
    RecordNotMappingError,
)

logger = logging.getLogger(__name__)

# Values a record column may hold after YAML parsing
SCALAR_TYPES = (str, int, float, bool, Decimal, date, time, bytes, type(None))

Record = dict[str, Any]

INT_TAG = "tag:yaml.org,2002:int"
FLOAT_TAG = "tag:yaml.org,2002:float"


class FixtureYAMLLoader(yaml.SafeLoader):
    """SafeLoader without the YAML 1.1 base-60 numbers.

    ``12:30:00`` stays the string "12:30:00" instead of becoming 45000,
    so time-of-day values keep their shape.
    """


FixtureYAMLLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in (INT_TAG, FLOAT_TAG)]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
FixtureYAMLLoader.add_implicit_resolver(
    INT_TAG,
    re.compile(
        r"""^(?:[-+]?0b[0-1_]+
        |[-+]?0[0-7_]+
        |[-+]?(?:0|[1-9][0-9_]*)
        |[-+]?0x[0-9a-fA-F_]+)$""",
        re.X,
    ),
    list("-+0123456789"),
)
FixtureYAMLLoader.add_implicit_resolver(
    FLOAT_TAG,
    re.compile(
        r"""^(?:[-+]?(?:[0-9][0-9_]*)\.[0-9_]*(?:[eE][-+][0-9]+)?
        |\.[0-9][0-9_]*(?:[eE][-+][0-9]+)?
        |[-+]?\.(?:inf|Inf|INF)
        |\.(?:nan|NaN|NAN))$""",
        re.X,
    ),
    list("-+0123456789."),
)


def _validate_record(record: Any, file_name: str) -> Record:
    """Check that a parsed record is a flat mapping of string keys to scalars."""
    if not isinstance(record, Mapping):
        raise RecordNotMappingError(
            f"Could not cast record in {file_name}: not a mapping ({type(record).__name__})"
        )
    for key, value in record.items():
        if not isinstance(key, str):
            raise KeyIsNotStringError(key)
        if not isinstance(value, SCALAR_TYPES):
            raise RecordNotMappingError(
                f"Record in {file_name} is not a flat mapping: column {key!r} "
                f"holds a {type(value).__name__}"
            )
    return dict(record)


def parse_records(content: Union[bytes, str], file_name: str = "") -> list[Record]:
    """Parse fixture YAML into an ordered list of records.

    The top level must be a list of records or a mapping whose values are
    records. Mapping keys are only labels; records keep the order they
    appear in the file. An empty document yields no records.

    Args:
        content: Raw YAML
        file_name: Used in error messages

    Returns:
        List of records

    Raises:
        FixtureError: If the YAML cannot be parsed
        FileIsNotSliceOrMapError: If the top level is neither list nor mapping
        RecordNotMappingError: If a record is not a flat mapping
        KeyIsNotStringError: If a record key is not a string
    """
    try:
        rows = yaml.load(content, Loader=FixtureYAMLLoader)
    except yaml.YAMLError as e:
        raise FixtureError(f"Invalid YAML in {file_name}: {e}") from e

    if rows is None:
        return []
    if isinstance(rows, list):
        items: Iterable[Any] = rows
    elif isinstance(rows, Mapping):
        items = rows.values()
    else:
        raise FileIsNotSliceOrMapError(file_name)

    return [_validate_record(record, file_name) for record in items]


class FixtureFile(BaseModel):
    """The rows destined for one table.

    The table name is the file name without its extension. Records are
    parsed lazily and cached.

    Examples:
        >>> fixture = FixtureFile(path="fixtures/posts.yml", content=b"- id: 1")
        >>> fixture.table_name
        'posts'
        >>> fixture.records()
        [{'id': 1}]
    """

    path: str = PydanticField(
        ...,
        description="Path the fixture was read from",
    )

    content: bytes = PydanticField(
        b"",
        description="Raw YAML content",
    )

    model_config = {"extra": "forbid"}

    _records: Optional[list[Record]] = PrivateAttr(default=None)

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Validate that the path names a file."""
        if not Path(v).name:
            raise ValueError(f"Fixture path has no file name: {v!r}")
        return v

    @property
    def file_name(self) -> str:
        return Path(self.path).name

    @property
    def table_name(self) -> str:
        """File name with the extension removed (``posts.yml`` -> ``posts``)."""
        name = self.file_name
        suffix = Path(name).suffix
        if not suffix:
            return name
        return name.replace(suffix, "", 1)

    @classmethod
    def read(cls, path: Union[str, Path]) -> FixtureFile:
        """Read a fixture file from disk.

        Raises:
            DiscoveryError: If the file cannot be read
        """
        try:
            content = Path(path).read_bytes()
        except OSError as e:
            raise DiscoveryError(f"Cannot read fixture file {path}: {e}") from e
        return cls(path=str(path), content=content)

    def records(self) -> list[Record]:
        """Parsed records, in file order."""
        if self._records is None:
            self._records = parse_records(self.content, self.file_name)
            logger.debug("Parsed %d records from %s", len(self._records), self.path)
        return self._records


class FixtureSet:
    """Ordered collection of fixture files, one per table.

    Tables are loaded in the order the fixtures were given. Directory
    scans are sorted by file name.

    Examples:
        >>> fixtures = FixtureSet.from_directory("testdata/fixtures")
        >>> [f.table_name for f in fixtures]
        ['comments', 'posts', 'posts_tags', 'tags', 'users']
    """

    def __init__(self, fixtures: Iterable[FixtureFile] = ()):
        self._fixtures: list[FixtureFile] = []
        for fixture in fixtures:
            self.add(fixture)

    def add(self, fixture: FixtureFile) -> None:
        """Append a fixture.

        Raises:
            FixtureError: If another fixture already targets the same table
        """
        if fixture.table_name in self.table_names:
            raise FixtureError(
                f"Duplicate fixture for table {fixture.table_name!r}: {fixture.path}"
            )
        self._fixtures.append(fixture)

    @property
    def table_names(self) -> list[str]:
        return [fixture.table_name for fixture in self._fixtures]

    def __iter__(self) -> Iterator[FixtureFile]:
        return iter(self._fixtures)

    def __len__(self) -> int:
        return len(self._fixtures)

    def __repr__(self) -> str:
        return f"FixtureSet({self.table_names!r})"

    @classmethod
    def from_directory(
        cls,
        directory: Union[str, Path],
        extensions: Optional[Iterable[str]] = None,
    ) -> FixtureSet:
        """Collect the fixture files directly inside ``directory``.

        Subdirectories are ignored. Only files with a recognized extension
        are used.

        Args:
            directory: Folder holding one YAML file per table
            extensions: Extensions to accept, defaults to config.fixture_extensions

        Raises:
            DiscoveryError: If the directory does not exist or cannot be read
        """
        folder = Path(directory)
        if not folder.is_dir():
            raise DiscoveryError(f"Fixture directory does not exist: {folder}")

        accepted = {ext.lower() for ext in (extensions or config.fixture_extensions)}
        try:
            entries = sorted(folder.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise DiscoveryError(f"Cannot list fixture directory {folder}: {e}") from e

        fixtures = [
            FixtureFile.read(entry)
            for entry in entries
            if entry.is_file() and entry.suffix.lower() in accepted
        ]
        return cls(fixtures)

    @classmethod
    def from_files(cls, *paths: Union[str, Path]) -> FixtureSet:
        """Build a set from explicit fixture files, keeping their order.

        Raises:
            DiscoveryError: If a file cannot be read
        """
        return cls(FixtureFile.read(path) for path in paths)

    @classmethod
    def from_paths(
        cls,
        *paths: Union[str, Path],
        extensions: Optional[Iterable[str]] = None,
    ) -> FixtureSet:
        """Build a set from a mix of directories and files."""
        fixture_set = cls()
        for path in paths:
            if Path(path).is_dir():
                for fixture in cls.from_directory(path, extensions):
                    fixture_set.add(fixture)
            else:
                fixture_set.add(FixtureFile.read(path))
        return fixture_set
