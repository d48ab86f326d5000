"""Typer CLI for inspecting catalogs and the selection engine."""

from typing import Annotated

import typer

from geoply.application.settings import configure_logging
from geoply.cli.commands import resolve_command, validate_catalog_command

app = typer.Typer(
    name="geoply",
    help="Developer tools for the building configurator's selection engine.",
)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show engine debug logging"),
    ] = False,
) -> None:
    """Inspect catalogs and admissible selections."""
    configure_logging("DEBUG" if verbose else "WARNING")


# Register commands
app.command(name="validate-catalog")(validate_catalog_command)
app.command(name="resolve")(resolve_command)


if __name__ == "__main__":
    app()
