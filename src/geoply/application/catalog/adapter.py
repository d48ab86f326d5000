"""Convert validated catalog rows into domain CatalogEntry objects.

This module is the only place that knows how catalog rows encode entry
ids, wall depths and labels:

- Dimension ids are ``"<Kind>-<wallDepth>-<value>"``.
- An opening's wall depth comes from its model prefix
  (``SKYLARK200_WINDOW-S1`` -> ``"200"``) unless the row sets one.
- Window and door ids are ``<model>_<code>``; skylight ids are the full
  row name.
- Material ids are the row ``Value``.
"""

import logging
import re

from geoply.application.catalog.schema import (
    CatalogDocument,
    DimensionRow,
    MaterialRow,
    OpeningRow,
)
from geoply.domain.catalog import Catalog
from geoply.domain.value_objects import (
    WALL_DEPTH_ANY,
    CatalogEntry,
    OpeningKind,
)

logger = logging.getLogger(__name__)

WALL_OPENING_TYPE = "Windows and doorways"
ROOF_OPENING_TYPE = "Roof"

_MODEL_DEPTH_PATTERN = re.compile(r"(\d+)$")


def dimension_to_entry(row: DimensionRow) -> CatalogEntry:
    """Convert a dimension row to a CatalogEntry."""
    return CatalogEntry(
        id=f"{row.type.value}-{row.wall_depth}-{row.value}",
        kind=row.type,
        wall_depth_class=row.wall_depth,
        size_class=row.size,
        value=row.value,
        label=row.label,
    )


def opening_kind_of(row: OpeningRow) -> OpeningKind | None:
    """Classify an opening row, or return None for rows that are not openings.

    Examples:
        >>> opening_kind_of(OpeningRow(Type="Roof", Name="SKYLARK250_SKYLIGHT-M1"))
        <OpeningKind.SKYLIGHT: 'skylight'>
    """
    name = row.name.upper()
    if row.type == WALL_OPENING_TYPE:
        if "WINDOW" in name:
            return OpeningKind.WINDOW
        if "DOOR" in name:
            return OpeningKind.DOOR
    elif row.type == ROOF_OPENING_TYPE and "SKYLIGHT" in name:
        return OpeningKind.SKYLIGHT
    return None


def model_wall_depth(model: str) -> str:
    """Return the wall-depth class encoded in a model name ("SKYLARK200" -> "200")."""
    match = _MODEL_DEPTH_PATTERN.search(model)
    return match.group(1) if match else WALL_DEPTH_ANY


def opening_to_entry(row: OpeningRow, kind: OpeningKind) -> CatalogEntry:
    """Convert a classified opening row to a CatalogEntry."""
    model = row.name.split("_")[0]
    if kind is OpeningKind.SKYLIGHT:
        entry_id = row.name
        code = "-".join(row.name.split("-")[1:]) or row.name
    else:
        code = row.name.split("-")[-1]
        entry_id = f"{model}_{code}"

    description = row.name
    if row.opening_height or row.opening_width:
        description = f"{description}\nHeight: {row.opening_height}mm\nWidth: {row.opening_width}mm"
        if row.opening_area:
            description = f"{description} ({row.opening_area}m²)"

    return CatalogEntry(
        id=entry_id,
        kind=kind,
        wall_depth_class=row.wall_depth or model_wall_depth(model),
        size_class=row.size,
        roof_type_class=row.roof_type,
        supports_quantity=True,
        label=f"{model} {code}",
        description=description,
        image_url=row.image_url,
    )


def material_to_entry(row: MaterialRow) -> CatalogEntry:
    """Convert a material row to a CatalogEntry."""
    return CatalogEntry(
        id=row.value,
        kind=row.type,
        wall_depth_class=row.wall_depth,
        standard_for=row.standard,
        label=row.title,
        description=row.description,
        image_url=row.image_url,
    )


def document_to_catalog(document: CatalogDocument, source: str = "") -> Catalog:
    """Build a Catalog from a validated document.

    Entries keep the document order: dimensions, then openings, then
    materials. Opening rows of an unknown type are skipped.

    Args:
        document: Validated catalog document.
        source: Description of where the document came from.

    Returns:
        The populated Catalog.
    """
    entries: list[CatalogEntry] = [dimension_to_entry(row) for row in document.dimensions]

    skipped = 0
    for row in document.openings:
        kind = opening_kind_of(row)
        if kind is None:
            skipped += 1
            continue
        entries.append(opening_to_entry(row, kind))
    if skipped:
        logger.warning(f"Skipped {skipped} opening row(s) with an unrecognised type in {source or 'catalog'}")

    entries.extend(material_to_entry(row) for row in document.materials)

    catalog = Catalog.from_entries(entries, source=source)
    logger.debug(f"Built catalog from {source or 'document'}: {catalog.counts()}")
    return catalog
