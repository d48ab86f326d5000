"""Engine settings loaded from a JSON file.

Settings name the catalog sources to try at startup, the accepted project
types and where saved selections are stored.

Example settings file:

    {
        "schema_version": "1.0",
        "catalog_sources": [
            {"kind": "http", "location": "https://cdn.example.com/catalog/", "timeout": 5},
            {"kind": "file", "location": "catalog/"}
        ],
        "storage_path": "selections.json",
        "log_level": "INFO"
    }
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from geoply.application.catalog.loader import (
    _extract_validation_errors,
    _format_validation_error_message,
)
from geoply.domain.cascade import DEFAULT_PROJECT_TYPES
from geoply.domain.resolver import TURNKEY_PROJECT_TYPE

logger = logging.getLogger(__name__)

SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})


class SettingsError(Exception):
    """Exception raised for settings-related errors.

    Attributes:
        message: The primary error message
        error_type: Category of error (file_not_found, permission_denied,
            file_read_error, json_parse, validation)
        path: Path to the settings file (if applicable)
        details: Additional error details
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class SourceKind(str, Enum):
    """Catalog source kinds."""

    FILE = "file"
    HTTP = "http"


class CatalogSourceConfig(BaseModel):
    """One catalog source.

    Attributes:
        kind: "file" for a local JSON file or CSV directory, "http" for a URL.
        location: Path or URL.
        timeout: Request timeout in seconds (http only).
        strict: Reject CSV rows that fail validation instead of skipping them.
    """

    model_config = ConfigDict(extra="forbid")

    kind: SourceKind
    location: str = Field(..., min_length=1)
    timeout: float = Field(default=10.0, gt=0, le=120)
    strict: bool = False


class EngineSettings(BaseModel):
    """Root settings model.

    Attributes:
        schema_version: Settings format version.
        catalog_sources: Ordered catalog sources; the first that loads wins.
        project_types: Accepted projectType values.
        turnkey_project_type: Project type that receives standard materials.
        storage_path: JSON file for saved selections; in-memory when unset.
        log_level: Logging level name.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = "1.0"
    catalog_sources: list[CatalogSourceConfig] = Field(default_factory=list)
    project_types: list[str] = Field(default_factory=lambda: list(DEFAULT_PROJECT_TYPES), min_length=1)
    turnkey_project_type: str = TURNKEY_PROJECT_TYPE
    storage_path: Path | None = None
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    @field_validator("schema_version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        if v not in SUPPORTED_VERSIONS:
            raise ValueError(f"Unsupported schema version: {v}. Supported: {sorted(SUPPORTED_VERSIONS)}")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def turnkey_is_known(self) -> "EngineSettings":
        if self.turnkey_project_type not in self.project_types:
            raise ValueError(
                f"turnkey_project_type {self.turnkey_project_type!r} is not one of project_types"
            )
        return self


def load_settings(path: Path) -> EngineSettings:
    """Load and validate engine settings from a JSON file.

    Relative ``file`` source locations and ``storage_path`` are resolved
    against the settings file's directory.

    Raises:
        SettingsError: If the file cannot be loaded or validated.
    """
    if not path.exists():
        raise SettingsError(
            message=f"Settings file not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError:
        raise SettingsError(
            message=f"Permission denied reading settings file: {path}",
            error_type="permission_denied",
            path=path,
        )
    except OSError as e:
        raise SettingsError(
            message=f"Error reading settings file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        )

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise SettingsError(
            message=f"Invalid JSON in settings file: {path} (line {e.lineno}, column {e.colno}): {e.msg}",
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        )

    try:
        settings = EngineSettings.model_validate(data)
    except PydanticValidationError as e:
        details = _extract_validation_errors(e)
        raise SettingsError(
            message=_format_validation_error_message(details, title="Settings validation failed:"),
            error_type="validation",
            path=path,
            details=details,
        )

    return _resolve_paths(settings, path.parent)


def _resolve_paths(settings: EngineSettings, base: Path) -> EngineSettings:
    sources = [
        source.model_copy(update={"location": str(base / source.location)})
        if source.kind is SourceKind.FILE and not Path(source.location).is_absolute()
        else source
        for source in settings.catalog_sources
    ]
    storage_path = settings.storage_path
    if storage_path is not None and not storage_path.is_absolute():
        storage_path = base / storage_path
    return settings.model_copy(update={"catalog_sources": sources, "storage_path": storage_path})


def configure_logging(level: str) -> None:
    """Configure root logging for the engine's loggers."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
