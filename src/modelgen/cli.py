"""Command line interface for modelgen."""

import logging
import sys
from importlib.metadata import PackageNotFoundError, version as package_version
from pathlib import Path
from typing import Annotated

from archive import ArchiveError
from codegen import (
    ModuleNameError,
    TemplateRenderError,
    UnrecognizedTypeError,
    generate_models,
)
from cyclopts import App, Parameter
from introspect import (
    ConnectionStringError,
    EmptySchemaError,
    SchemaInspector,
    TableDescription,
    connect,
)
from migrations import generate_migrations
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from sqlalchemy.exc import SQLAlchemyError

app = App(help="Generate data-access models and migrations from a MySQL schema.")

console = Console()
err_console = Console(stderr=True)

# Shared parameters
Connection = Annotated[
    str,
    Parameter(
        name=("--connection", "-c"),
        env_var="MODELGEN_CONNECTION",
        help="Connection string, user:pass@host:port.",
    ),
]
Database = Annotated[str, Parameter(name=("--database", "-d"), help="Name of database.")]
Output = Annotated[Path, Parameter(name=("--output", "-o"), help="Output directory.")]
Verbose = Annotated[bool, Parameter(name="--verbose", help="Log debug details.")]

DEFAULT_OUTPUT = Path("generated_models")
DEFAULT_PACKAGE = "generated_models"


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print success message to stderr."""
    err_console.print(f"[bold green]✓[/] {message}")


def print_info(message: str) -> None:
    """Print info message to stderr."""
    err_console.print(f"[bold blue]i[/] {message}")


def configure_logging(*, verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=verbose)],
        force=True,
    )


def validate(connection: str, database: str) -> None:
    """Validate connection parameters."""
    if not database:
        print_error("Please provide a database name")
        sys.exit(1)
    if not connection:
        print_error("Please provide a connection string")
        sys.exit(1)


def describe_schema(connection: str, database: str) -> list[TableDescription]:
    """Introspect every table of the database over a single connection."""
    try:
        engine = connect(connection, database)
        with engine.connect() as conn:
            return SchemaInspector(conn, database).describe_schema()
    except (ConnectionStringError, EmptySchemaError) as e:
        print_error(str(e))
        sys.exit(1)
    except SQLAlchemyError as e:
        print_error(f"Failed to read schema: {e}")
        sys.exit(1)


@app.command
def generate(
    *,
    connection: Connection = "",
    database: Database = "",
    output: Output = DEFAULT_OUTPUT,
    package: Annotated[
        str,
        Parameter(name=("--package", "-p"), help="Name of the generated package."),
    ] = DEFAULT_PACKAGE,
    verbose: Verbose = False,
) -> None:
    """Generate models from a database connection."""
    configure_logging(verbose=verbose)
    validate(connection, database)
    print_info(f"Database: {database}")
    print_info(f"Output: {output}")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
    ) as progress:
        task = progress.add_task("Reading schema...", total=None)
        tables = describe_schema(connection, database)

        progress.update(task, description="Generating models...")
        try:
            written = generate_models(tables, output, package)
        except (
            UnrecognizedTypeError,
            TemplateRenderError,
            ModuleNameError,
            ArchiveError,
        ) as e:
            print_error(str(e))
            sys.exit(1)
        except OSError as e:
            print_error(f"Failed to write models: {e}")
            sys.exit(1)

    print_success(f"Generated {len(tables)} models ({len(written)} files) in {output}")


@app.command
def migrate(
    *,
    connection: Connection = "",
    database: Database = "",
    output: Output = DEFAULT_OUTPUT,
    verbose: Verbose = False,
) -> None:
    """Generate migration files from a database connection."""
    configure_logging(verbose=verbose)
    validate(connection, database)
    print_info(f"Database: {database}")
    print_info(f"Output: {output}")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
    ) as progress:
        task = progress.add_task("Reading schema...", total=None)
        tables = describe_schema(connection, database)

        progress.update(task, description="Writing migrations...")
        try:
            written = generate_migrations(tables, output)
        except ArchiveError as e:
            print_error(str(e))
            sys.exit(1)
        except OSError as e:
            print_error(f"Failed to write migrations: {e}")
            sys.exit(1)

    print_success(f"Wrote {len(written)} migration files to {output}")


@app.command
def version() -> None:
    """Print the installed modelgen version."""
    try:
        console.print(package_version("modelgen"))
    except PackageNotFoundError:
        print_error("modelgen is not installed")
        sys.exit(1)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
