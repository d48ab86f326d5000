"""Catalog loader with comprehensive error handling.

This module loads catalog documents from JSON files, from directories of
CSV files, from already-decoded dictionaries and from a list of fallback
sources. It handles file system errors, JSON and CSV parsing errors, and
Pydantic validation errors with clear, actionable error messages.

CSV catalogs are split across three files, any of which may be absent:

- ``dimensions.csv``: Type, Value, Label, WallDepth, Size
- ``openings.csv``: Type, Name, RoofType, ImageURL and opening sizes
- ``materials.csv``: Type, Value, Title, Description, ImageURL, Price, Standard
"""

import csv
import io
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Sequence

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from geoply.application.catalog.adapter import document_to_catalog
from geoply.application.catalog.schema import (
    CatalogDocument,
    DimensionRow,
    MaterialRow,
    OpeningRow,
)
from geoply.domain.catalog import Catalog

if TYPE_CHECKING:
    from geoply.contracts.protocols import CatalogSourceProtocol

logger = logging.getLogger(__name__)

DIMENSIONS_FILE = "dimensions.csv"
OPENINGS_FILE = "openings.csv"
MATERIALS_FILE = "materials.csv"

# CSV file name -> (document section, row model)
CSV_SECTIONS: dict[str, tuple[str, type[BaseModel]]] = {
    DIMENSIONS_FILE: ("dimensions", DimensionRow),
    OPENINGS_FILE: ("openings", OpeningRow),
    MATERIALS_FILE: ("materials", MaterialRow),
}


class LoadError(Exception):
    """Exception raised when a catalog cannot be loaded.

    Attributes:
        message: The primary error message
        error_type: Category of error (file_not_found, permission_denied,
            file_read_error, unsupported_format, json_parse, csv_parse,
            validation, http_status, unreachable, all_sources_failed)
        source: Path or URL of the catalog (if applicable)
        details: Additional error details (line/column for JSON, validation
            errors, per-source failures, etc.)
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        source: str | Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.source = source
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        """Format error message for display."""
        return self.message


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Format a Pydantic location tuple as a JSON path string.

    Args:
        loc: Tuple of path segments (strings for keys, ints for array indices)

    Returns:
        Formatted JSON path like "dimensions[0].Value"

    Examples:
        >>> _format_json_path(("materials", 2, "Title"))
        'materials[2].Title'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            # Array index - append to last part with brackets
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def _extract_validation_errors(
    error: PydanticValidationError,
    prefix: tuple[str | int, ...] = (),
) -> list[dict[str, Any]]:
    """Extract and format validation errors from a Pydantic ValidationError.

    Args:
        error: The Pydantic ValidationError to process
        prefix: Location segments prepended to every error path

    Returns:
        List of error dictionaries with path, message, value, and error_type
    """
    details: list[dict[str, Any]] = []
    for err in error.errors():
        details.append(
            {
                "path": _format_json_path(prefix + tuple(err["loc"])),
                "message": err["msg"],
                "value": err.get("input"),
                "error_type": err["type"],
            }
        )
    return details


def _format_validation_error_message(
    details: list[dict[str, Any]],
    title: str = "Catalog validation failed:",
) -> str:
    """Format validation error details into a human-readable message."""
    lines = [title]
    for detail in details:
        path = detail["path"]
        message = detail["message"]
        value = detail.get("value")
        if value is not None:
            lines.append(f"  - {path}: {message} (got: {value!r})")
        else:
            lines.append(f"  - {path}: {message}")
    return "\n".join(lines)


def _read_text(path: Path) -> str:
    if not path.exists():
        raise LoadError(
            message=f"Catalog file not found: {path}",
            error_type="file_not_found",
            source=path,
        )
    try:
        return path.read_text(encoding="utf-8-sig")
    except PermissionError:
        raise LoadError(
            message=f"Permission denied reading catalog file: {path}",
            error_type="permission_denied",
            source=path,
        )
    except OSError as e:
        raise LoadError(
            message=f"Error reading catalog file: {path}: {e}",
            error_type="file_read_error",
            source=path,
        )


def parse_catalog_json(text: str, source: str = "") -> Catalog:
    """Parse and validate a JSON catalog document.

    Raises:
        LoadError: With error_type "json_parse" or "validation".
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LoadError(
            message=f"Invalid JSON in catalog: {source} (line {e.lineno}, column {e.colno}): {e.msg}",
            error_type="json_parse",
            source=source,
            details=[
                {
                    "line": e.lineno,
                    "column": e.colno,
                    "message": e.msg,
                }
            ],
        )
    return load_catalog_from_dict(data, source=source)


def load_catalog_from_dict(data: Any, source: str = "") -> Catalog:
    """Load and validate a catalog from a dictionary.

    This is useful for catalogs embedded in settings or fetched by other
    means than this module.

    Args:
        data: Dictionary with dimensions, openings and materials row lists
        source: Description of where the data came from

    Returns:
        A populated Catalog

    Raises:
        LoadError: If the data fails validation.
    """
    try:
        document = CatalogDocument.model_validate(data)
    except PydanticValidationError as e:
        details = _extract_validation_errors(e)
        raise LoadError(
            message=_format_validation_error_message(details),
            error_type="validation",
            source=source,
            details=details,
        )
    return document_to_catalog(document, source=source)


def _parse_csv_rows(text: str, file_name: str) -> list[dict[str, str]]:
    try:
        reader = csv.DictReader(io.StringIO(text))
        rows: list[dict[str, str]] = []
        for raw in reader:
            row = {
                key.strip(): (value or "").strip()
                for key, value in raw.items()
                if key is not None and not isinstance(value, list)
            }
            if any(row.values()):
                rows.append(row)
    except csv.Error as e:
        raise LoadError(
            message=f"Invalid CSV in {file_name} (line {reader.line_num}): {e}",
            error_type="csv_parse",
            source=file_name,
            details=[{"line": reader.line_num, "message": str(e)}],
        )
    return rows


def parse_catalog_csv(
    texts: dict[str, str],
    source: str = "",
    *,
    strict: bool = False,
) -> Catalog:
    """Parse the CSV files of a catalog.

    Rows that fail validation are skipped with a warning, matching how the
    catalog spreadsheets have always been consumed. With ``strict=True``
    they raise instead.

    Args:
        texts: CSV file name (see CSV_SECTIONS) -> file content
        source: Description of where the files came from
        strict: Raise on the first file with invalid rows

    Returns:
        A populated Catalog

    Raises:
        LoadError: With error_type "csv_parse", or "validation" in strict mode.
    """
    sections: dict[str, list[BaseModel]] = {"dimensions": [], "openings": [], "materials": []}
    for file_name, (section, model) in CSV_SECTIONS.items():
        if file_name not in texts:
            logger.info(f"No {file_name} in {source or 'catalog'}, leaving {section} empty")
            continue

        details: list[dict[str, Any]] = []
        for index, row in enumerate(_parse_csv_rows(texts[file_name], file_name)):
            try:
                sections[section].append(model.model_validate(row))
            except PydanticValidationError as e:
                row_details = _extract_validation_errors(e, prefix=(file_name, index))
                details.extend(row_details)
                logger.warning(f"Skipping invalid row {index} in {file_name}: {row_details[0]['message']}")

        if details and strict:
            raise LoadError(
                message=_format_validation_error_message(details),
                error_type="validation",
                source=source,
                details=details,
            )

    document = CatalogDocument.model_construct(schema_version="1", **sections)
    return document_to_catalog(document, source=source)


def load_catalog(path: Path, *, strict: bool = False) -> Catalog:
    """Load a catalog from a JSON file or a directory of CSV files.

    Args:
        path: A ``.json`` catalog document, or a directory holding any of
            dimensions.csv, openings.csv and materials.csv
        strict: Reject CSV catalogs with invalid rows instead of skipping them

    Returns:
        A populated Catalog

    Raises:
        LoadError: If the catalog cannot be loaded or validated.
            The error_type attribute indicates the specific error category.

    Example:
        >>> from pathlib import Path
        >>> try:
        ...     catalog = load_catalog(Path("catalog/"))
        ... except LoadError as e:
        ...     print(f"Error: {e}")
        ...     for detail in e.details:
        ...         print(f"  {detail['path']}: {detail['message']}")
    """
    if path.is_dir():
        texts = {
            file_name: _read_text(path / file_name)
            for file_name in CSV_SECTIONS
            if (path / file_name).exists()
        }
        catalog = parse_catalog_csv(texts, source=str(path), strict=strict)
    elif path.suffix.lower() == ".json" or not path.exists():
        catalog = parse_catalog_json(_read_text(path), source=str(path))
    else:
        raise LoadError(
            message=f"Unsupported catalog format: {path} (expected a .json file or a directory of CSV files)",
            error_type="unsupported_format",
            source=path,
        )

    logger.info(f"Loaded catalog from {path} ({len(catalog.entries)} entries)")
    return catalog


async def load_catalog_with_fallback(
    sources: "Sequence[CatalogSourceProtocol]",
) -> Catalog:
    """Fetch a catalog from the first source that succeeds.

    Sources are tried once each, in order.

    Args:
        sources: Ordered catalog sources

    Returns:
        The catalog of the first source that loaded.

    Raises:
        LoadError: With error_type "all_sources_failed" when every source
            failed. Each failure is listed in ``details``.
    """
    failures: list[dict[str, Any]] = []
    for source in sources:
        try:
            return await source.fetch()
        except LoadError as e:
            logger.warning(f"Catalog source {source.name} failed ({e.error_type}), trying next source")
            failures.append(
                {
                    "path": source.name,
                    "message": e.message,
                    "error_type": e.error_type,
                }
            )

    raise LoadError(
        message=f"All {len(failures)} catalog source(s) failed",
        error_type="all_sources_failed",
        details=failures,
    )
