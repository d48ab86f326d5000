"""Catalog schema and loading system.

This package loads the selectable catalog (dimensions, openings and
materials) from JSON documents, CSV directories or remote sources and turns
validated rows into domain CatalogEntry objects.

Public API:
    - CatalogDocument: Root model of a JSON catalog document
    - DimensionRow, OpeningRow, MaterialRow: Row models with CSV column aliases
    - SelectionPayload: Stored form of a serialized selection
    - load_catalog: Load a catalog from a JSON file or CSV directory
    - load_catalog_from_dict: Load a catalog from a dictionary
    - load_catalog_with_fallback: Fetch from the first working source
    - parse_catalog_json, parse_catalog_csv: Parse already-fetched text
    - LoadError: Exception for catalog loading errors

Example:
    >>> from pathlib import Path
    >>> from geoply.application.catalog import load_catalog, LoadError
    >>>
    >>> try:
    ...     catalog = load_catalog(Path("catalog.json"))
    ...     print(catalog.counts())
    ... except LoadError as e:
    ...     print(f"Error: {e}")
"""

from geoply.application.catalog.adapter import (
    document_to_catalog,
    opening_kind_of,
)
from geoply.application.catalog.loader import (
    CSV_SECTIONS,
    DIMENSIONS_FILE,
    MATERIALS_FILE,
    OPENINGS_FILE,
    LoadError,
    load_catalog,
    load_catalog_from_dict,
    load_catalog_with_fallback,
    parse_catalog_csv,
    parse_catalog_json,
)
from geoply.application.catalog.schema import (
    CatalogDocument,
    DimensionRow,
    MaterialRow,
    OpeningRow,
    SelectionPayload,
    SelectionSection,
)

__all__ = [
    "CSV_SECTIONS",
    "CatalogDocument",
    "DIMENSIONS_FILE",
    "DimensionRow",
    "LoadError",
    "MATERIALS_FILE",
    "MaterialRow",
    "OPENINGS_FILE",
    "OpeningRow",
    "SelectionPayload",
    "SelectionSection",
    "document_to_catalog",
    "load_catalog",
    "load_catalog_from_dict",
    "load_catalog_with_fallback",
    "opening_kind_of",
    "parse_catalog_csv",
    "parse_catalog_json",
]
