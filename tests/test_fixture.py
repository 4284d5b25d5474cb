"""Tests for fixture files and fixture sets."""

from datetime import date

import pytest
from pydantic import ValidationError

from fxload.exceptions import (
    DiscoveryError,
    FileIsNotSliceOrMapError,
    FixtureError,
    KeyIsNotStringError,
    RecordNotMappingError,
)
from fxload.models.fixture import FixtureFile, FixtureSet, parse_records


class TestParseRecords:
    """Test YAML parsing into records."""

    def test_list(self):
        records = parse_records(b"- id: 1\n  name: Golang\n- id: 2\n  name: Python\n")
        assert records == [{"id": 1, "name": "Golang"}, {"id": 2, "name": "Python"}]

    def test_mapping_keeps_file_order(self):
        """Test mapping keys are labels and records keep file order."""
        content = "zed:\n  id: 3\nalpha:\n  id: 1\nmid:\n  id: 2\n"
        assert [r["id"] for r in parse_records(content)] == [3, 1, 2]

    def test_empty_file(self):
        assert parse_records(b"") == []

    def test_empty_list(self):
        assert parse_records(b"[]") == []

    def test_scalar_file(self):
        with pytest.raises(FileIsNotSliceOrMapError, match="tags.yml"):
            parse_records(b"42", "tags.yml")

    def test_record_not_mapping(self):
        with pytest.raises(RecordNotMappingError):
            parse_records(b"- 1\n- 2\n", "tags.yml")

    def test_nested_value(self):
        with pytest.raises(RecordNotMappingError, match="'attributes'"):
            parse_records(b"- id: 1\n  attributes:\n    admin: true\n", "users.yml")

    def test_key_not_string(self):
        with pytest.raises(KeyIsNotStringError):
            parse_records(b"- 1: one\n")

    def test_invalid_yaml(self):
        with pytest.raises(FixtureError, match="Invalid YAML"):
            parse_records(b"- id: [1\n", "posts.yml")

    def test_yaml_scalars(self):
        records = parse_records(b"- flag: true\n  ratio: 1.5\n  missing: ~\n")
        assert records == [{"flag": True, "ratio": 1.5, "missing": None}]


class TestFixtureFile:
    """Test fixture file model."""

    @pytest.mark.parametrize(
        "path,table",
        [
            ("fixtures/posts.yml", "posts"),
            ("posts_tags.yaml", "posts_tags"),
            ("fixtures/test_schema.posts.yml", "test_schema.posts"),
            ("posts", "posts"),
        ],
    )
    def test_table_name(self, path, table):
        assert FixtureFile(path=path).table_name == table

    def test_path_without_file_name(self):
        with pytest.raises(ValidationError):
            FixtureFile(path="")

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            FixtureFile(path="posts.yml", table="posts")

    def test_records_are_cached(self):
        fixture = FixtureFile(path="tags.yml", content=b"- id: 1\n")
        assert fixture.records() is fixture.records()

    def test_read(self, fixtures_dir):
        fixture = FixtureFile.read(fixtures_dir / "tags.yml")
        assert fixture.file_name == "tags.yml"
        assert len(fixture.records()) == 3

    def test_read_missing(self, tmp_path):
        with pytest.raises(DiscoveryError):
            FixtureFile.read(tmp_path / "missing.yml")


class TestFixtureSet:
    """Test fixture discovery."""

    def test_from_directory(self, fixtures_dir):
        """Test fixtures are sorted by name and other files are skipped."""
        fixtures = FixtureSet.from_directory(fixtures_dir)
        assert fixtures.table_names == ["comments", "posts", "posts_tags", "tags", "users"]
        assert len(fixtures) == 5

    def test_from_directory_ignores_subdirectories(self, tmp_path):
        (tmp_path / "nested.yml").mkdir()
        (tmp_path / "tags.yml").write_text("- id: 1\n")
        assert FixtureSet.from_directory(tmp_path).table_names == ["tags"]

    def test_from_directory_extensions(self, tmp_path):
        (tmp_path / "tags.yml").write_text("- id: 1\n")
        (tmp_path / "posts.fixture").write_text("- id: 1\n")
        fixtures = FixtureSet.from_directory(tmp_path, extensions=[".fixture"])
        assert fixtures.table_names == ["posts"]

    def test_from_directory_missing(self, tmp_path):
        with pytest.raises(DiscoveryError, match="does not exist"):
            FixtureSet.from_directory(tmp_path / "missing")

    def test_from_files_keeps_order(self, fixtures_dir):
        fixtures = FixtureSet.from_files(fixtures_dir / "tags.yml", fixtures_dir / "posts.yml")
        assert fixtures.table_names == ["tags", "posts"]

    def test_from_paths(self, fixtures_dir, tmp_path):
        extra = tmp_path / "main.accounts.yml"
        extra.write_text("- id: 1\n")
        fixtures = FixtureSet.from_paths(extra, fixtures_dir)
        assert fixtures.table_names[0] == "main.accounts"
        assert len(fixtures) == 6

    def test_duplicate_table(self, tmp_path):
        (tmp_path / "tags.yml").write_text("- id: 1\n")
        (tmp_path / "tags.yaml").write_text("- id: 2\n")
        with pytest.raises(FixtureError, match="Duplicate fixture"):
            FixtureSet.from_directory(tmp_path)

    def test_repr(self):
        fixtures = FixtureSet([FixtureFile(path="tags.yml")])
        assert repr(fixtures) == "FixtureSet(['tags'])"


class TestTimeOfDayValues:
    """Test clock-shaped values keep their shape."""

    def test_time_stays_string(self):
        records = parse_records(b"- id: 1\n  starts_at: 12:30:00\n")
        assert records == [{"id": 1, "starts_at": "12:30:00"}]

    def test_short_time_stays_string(self):
        assert parse_records(b"- t: 1:30\n") == [{"t": "1:30"}]

    def test_numbers_still_parsed(self):
        records = parse_records(b"- a: 42\n  b: -7\n  c: 0x1f\n  d: 1.5\n  e: 1_000\n  f: .inf\n")
        assert records[0]["a"] == 42
        assert records[0]["b"] == -7
        assert records[0]["c"] == 31
        assert records[0]["d"] == 1.5
        assert records[0]["e"] == 1000
        assert records[0]["f"] == float("inf")

    def test_timestamps_still_parsed(self):
        records = parse_records(b"- day: 2016-01-01\n")
        assert isinstance(records[0]["day"], date)
