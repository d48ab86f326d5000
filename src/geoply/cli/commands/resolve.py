"""Resolve command for inspecting admissible sets.

This module provides the `resolve` command, which applies driver values to
a catalog in dependency order and prints the admissible entries as JSON.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from geoply.application.catalog import LoadError, load_catalog
from geoply.cli.commands.validate import _display_load_error
from geoply.domain.cascade import CascadeController
from geoply.domain.errors import ConfiguratorError
from geoply.domain.selection import SelectionState
from geoply.domain.value_objects import DimensionKind, DriverName, MaterialKind, OpeningKind


def resolve_command(
    catalog_path: Annotated[
        Path,
        typer.Argument(help="Catalog JSON file or directory of CSV files"),
    ],
    project_type: Annotated[
        str | None,
        typer.Option("--project-type", help="Project type, e.g. turnkey"),
    ] = None,
    wall_depth: Annotated[
        str | None,
        typer.Option("--wall-depth", help="Wall depth, e.g. 200mm"),
    ] = None,
    roof_type: Annotated[
        str | None,
        typer.Option("--roof-type", help="mono-pitch or double-pitch"),
    ] = None,
    height: Annotated[str | None, typer.Option("--height", help="Building height")] = None,
    width: Annotated[str | None, typer.Option("--width", help="Building width")] = None,
    length: Annotated[str | None, typer.Option("--length", help="Building length")] = None,
) -> None:
    """Print the admissible catalog entries for the given drivers.

    Example:
        geoply resolve catalog/ --wall-depth 200mm --height 2400 --roof-type mono-pitch
    """
    try:
        catalog = load_catalog(catalog_path)
    except LoadError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)

    controller = CascadeController(SelectionState(), catalog)
    requested = {
        DriverName.PROJECT_TYPE: project_type,
        DriverName.WALL_DEPTH: wall_depth,
        DriverName.ROOF_TYPE: roof_type,
        DriverName.HEIGHT: height,
        DriverName.WIDTH: width,
        DriverName.LENGTH: length,
    }
    try:
        for name, value in requested.items():
            if value is not None:
                controller.set_driver(name, value)
    except ConfiguratorError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    admissible = controller.admissible
    result = {
        "drivers": controller.state.drivers.to_dict(),
        "heightSizeClass": admissible.height_size_class.value if admissible.height_size_class else None,
        "widthSizeClass": admissible.width_size_class.value if admissible.width_size_class else None,
        "dimensions": {kind.value: list(admissible.dimension_values(kind)) for kind in DimensionKind},
        "openings": {kind.value: list(admissible.ids(kind)) for kind in OpeningKind},
        "materials": {kind.value: list(admissible.ids(kind)) for kind in MaterialKind},
        "standardMaterials": [entry.id for entry in admissible.standard_materials],
        "skylightsVisible": admissible.skylights_visible,
    }
    typer.echo(json.dumps(result, indent=2))
