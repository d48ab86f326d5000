"""Validate command for checking catalog files.

This module provides the `validate-catalog` command that loads a catalog
(JSON document or CSV directory), reports per-kind entry counts and shows
loading errors in detail.
"""

from pathlib import Path
from typing import Annotated

import typer

from geoply.application.catalog import LoadError, load_catalog
from geoply.domain.errors import CatalogIntegrityError
from geoply.domain.resolver import resolve_admissible
from geoply.domain.value_objects import DriverValues


def validate_catalog_command(
    catalog_path: Annotated[
        Path,
        typer.Argument(help="Catalog JSON file or directory of CSV files"),
    ],
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Fail on CSV rows that would otherwise be skipped"),
    ] = False,
) -> None:
    """Validate a catalog and show what it contains.

    Exit codes:
        0 - Catalog loaded
        1 - Catalog could not be loaded or is malformed

    Example:
        geoply validate-catalog catalog/
    """
    typer.echo(f"Validating {catalog_path}...")
    typer.echo()

    try:
        catalog = load_catalog(catalog_path, strict=strict)
        resolve_admissible(catalog, DriverValues())
    except LoadError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)
    except CatalogIntegrityError as e:
        typer.echo("Errors:", err=True)
        typer.echo(f"  {e}", err=True)
        typer.echo()
        typer.echo("Validation failed.", err=True)
        raise typer.Exit(code=1)

    typer.echo("Entries:")
    for kind, count in catalog.counts().items():
        typer.echo(f"  {kind}: {count}")
    depths = catalog.wall_depths()
    typer.echo(f"Wall depths: {', '.join(depths) if depths else 'none'}")
    typer.echo()
    if catalog.is_empty:
        typer.echo("Validation passed with 1 warning(s): catalog is empty")
    else:
        typer.echo("Validation passed. Catalog is valid.")


def _display_load_error(error: LoadError) -> None:
    """Display a catalog loading error.

    Args:
        error: The LoadError to display
    """
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.source}", err=True)
    elif error.error_type in ("json_parse", "csv_parse"):
        syntax = "JSON" if error.error_type == "json_parse" else "CSV"
        typer.echo(f"  Invalid {syntax} syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            message = detail.get("message", "Unknown error")
            if "column" in detail:
                typer.echo(f"    Line {line}, Column {detail['column']}: {message}", err=True)
            else:
                typer.echo(f"    Line {line}: {message}", err=True)
    elif error.error_type == "validation":
        for detail in error.details:
            path = detail.get("path", "unknown")
            message = detail.get("message", "Unknown error")
            value = detail.get("value")
            typer.echo(f"  {path}: {message}", err=True)
            if value is not None:
                typer.echo(f"    Value: {value!r}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)

    typer.echo()
    typer.echo("Validation failed.", err=True)
