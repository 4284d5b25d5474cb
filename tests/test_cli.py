"""Tests for the fxload CLI."""

from typer.testing import CliRunner

from conftest import count_rows
from fxload import __version__
from fxload.cli import app

runner = CliRunner()


class TestLoadCommand:
    """Test the load command."""

    def test_load(self, sqlite_db, sqlite_engine, fixtures_dir):
        result = runner.invoke(app, ["load", f"sqlite:///{sqlite_db}", str(fixtures_dir)])

        assert result.exit_code == 0, result.output
        assert "Fixtures loaded!" in result.output
        assert "Database: fixtures_test.db" in result.output
        assert "Total records: 13" in result.output
        assert count_rows(sqlite_engine, "comments") == 4

    def test_load_with_dialect(self, sqlite_db, fixtures_dir):
        result = runner.invoke(
            app,
            ["load", f"sqlite:///{sqlite_db}", str(fixtures_dir / "tags.yml"), "--dialect", "sqlite3"],
        )
        assert result.exit_code == 0, result.output
        assert "tags: 3 records" in result.output

    def test_rejects_production_database(self, tmp_path, fixtures_dir):
        result = runner.invoke(app, ["load", f"sqlite:///{tmp_path / 'production.db'}", str(fixtures_dir)])
        assert result.exit_code == 1
        assert "does not look like a test database" in result.output

    def test_skip_database_name_check(self, production_engine, tmp_path, fixtures_dir):
        result = runner.invoke(
            app,
            [
                "load",
                f"sqlite:///{tmp_path / 'production.db'}",
                str(fixtures_dir),
                "--dangerous-skip-database-name-check",
            ],
        )
        assert result.exit_code == 0, result.output
        assert count_rows(production_engine, "users") == 2

    def test_unknown_dialect(self, sqlite_db, fixtures_dir):
        result = runner.invoke(
            app, ["load", f"sqlite:///{sqlite_db}", str(fixtures_dir), "--dialect", "db2"]
        )
        assert result.exit_code == 1
        assert "Unsupported database" in result.output

    def test_missing_fixture_path(self, sqlite_db, tmp_path):
        result = runner.invoke(app, ["load", f"sqlite:///{sqlite_db}", str(tmp_path / "nope.yml")])
        assert result.exit_code == 1
        assert "Cannot read fixture file" in result.output


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"fxload version {__version__}" in result.output
