"""fxload CLI - Command-line interface for loading fixtures."""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

from fxload import __version__
from fxload.core.config import config
from fxload.core.dialect import ParamStyle
from fxload.core.loader import FixtureLoader
from fxload.exceptions import FxLoadError
from fxload.operators import SQLSession, dialect_for, dialect_for_engine

app = typer.Typer(
    name="fxload",
    help="fxload - Load YAML fixtures into a test database",
    add_completion=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"fxload version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.log_level)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _display_result(result) -> None:
    """Display load result to console."""
    typer.secho("Fixtures loaded!", fg=typer.colors.GREEN, bold=True)
    if result.database_name is not None:
        typer.echo(f"Database: {result.database_name}")
    for table in result.tables:
        typer.echo(f"  {table.table}: {table.records_loaded:,} records")
    typer.echo(f"Total records: {result.records_loaded:,}")
    typer.echo(f"Duration: {result.duration_seconds:.2f}s")


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """fxload - Replace test database tables with YAML fixtures."""
    pass


@app.command()
def load(
    url: Annotated[
        str,
        typer.Argument(help="SQLAlchemy database URL (e.g. postgresql://user@host/app_test)"),
    ],
    paths: Annotated[
        List[Path],
        typer.Argument(help="Fixture directories and/or files, loaded in the given order"),
    ],
    dialect: Annotated[
        Optional[str],
        typer.Option("--dialect", "-d", help="Dialect name (default: detected from the URL)"),
    ] = None,
    use_alter_constraint: Annotated[
        bool,
        typer.Option(
            "--use-alter-constraint",
            help="PostgreSQL: defer foreign keys instead of disabling triggers",
        ),
    ] = False,
    skip_check: Annotated[
        bool,
        typer.Option(
            "--dangerous-skip-database-name-check",
            help="Do not require 'test' in the database name",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose output"),
    ] = False,
) -> None:
    """Load fixtures, replacing the current contents of each fixture table."""
    _configure_logging(verbose)

    try:
        with SQLSession(url) as session:
            options = {"use_alter_constraint": True} if use_alter_constraint else {}
            if dialect:
                param_style = ParamStyle.from_dbapi(session.paramstyle)
                selected = dialect_for(dialect, param_style=param_style, **options)
            else:
                selected = dialect_for_engine(session, **options)

            loader = FixtureLoader.from_paths(
                session,
                selected,
                *paths,
                skip_database_name_check=skip_check or None,
            )
            typer.echo(f"Loading {len(loader.fixtures)} fixtures with {selected!r}")
            result = loader.load()

        _display_result(result)

    except (FxLoadError, ValueError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
