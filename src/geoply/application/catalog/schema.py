"""Pydantic models for catalog documents.

Rows use the column names of the catalog CSV files as aliases, so the same
models validate CSV rows (``{"Type": "Height", "Value": "2400", ...}``) and
JSON documents written with either the column names or the field names.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from geoply.domain.value_objects import (
    WALL_DEPTH_ANY,
    DimensionKind,
    MaterialKind,
    RoofType,
    SizeClass,
    StandardFor,
    normalize_dimension_value,
    normalize_wall_depth,
)

# Version 1: dimensions, openings and materials row lists
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1"})

_ROOF_TYPE_ALIASES: dict[str, str] = {
    "mono": RoofType.MONO_PITCH.value,
    "double": RoofType.DOUBLE_PITCH.value,
}


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _to_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return normalize_dimension_value(value)
    if isinstance(value, str):
        return value.strip()
    return value


class _CatalogRow(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DimensionRow(_CatalogRow):
    """One row of the dimensions catalog.

    Attributes:
        type: Height, Width or Length.
        value: Dimension value, kept as a normalized string.
        label: Display label.
        wall_depth: Wall depth the value is offered under, or "any".
        size: Size class of the value, if the row carries one.
    """

    type: DimensionKind = Field(alias="Type")
    value: str = Field(alias="Value", min_length=1)
    label: str = Field(alias="Label", min_length=1)
    wall_depth: str = Field(default=WALL_DEPTH_ANY, alias="WallDepth")
    size: SizeClass | None = Field(default=None, alias="Size")

    @field_validator("value", mode="before")
    @classmethod
    def normalize_value(cls, v: Any) -> Any:
        if isinstance(v, str):
            return normalize_dimension_value(v) if v.strip() else v.strip()
        return _to_text(v)

    @field_validator("label", mode="before")
    @classmethod
    def label_to_text(cls, v: Any) -> Any:
        return _to_text(v)

    @field_validator("wall_depth", mode="before")
    @classmethod
    def normalize_depth(cls, v: Any) -> str:
        return normalize_wall_depth(v)

    @field_validator("size", mode="before")
    @classmethod
    def blank_size(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        return v.strip().upper() if isinstance(v, str) else v


class OpeningRow(_CatalogRow):
    """One row of the openings catalog.

    The row ``type`` and ``name`` decide the opening kind: names containing
    WINDOW or DOOR in type "Windows and doorways", names containing SKYLIGHT
    in type "Roof". Other rows are ignored by the adapter.
    """

    type: str = Field(alias="Type")
    name: str = Field(alias="Name", min_length=1)
    roof_type: RoofType | None = Field(default=None, alias="RoofType")
    wall_depth: str | None = Field(default=None, alias="WallDepth")
    size: SizeClass | None = Field(default=None, alias="Size")
    image_url: str = Field(default="", alias="ImageURL")
    opening_height: str = Field(default="", alias="Opening Height (mm)")
    opening_width: str = Field(default="", alias="Opening Width(mm)")
    opening_area: str = Field(default="", alias="Opening Area (m2)")

    @field_validator("type", "name", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return _to_text(v)

    @field_validator("roof_type", mode="before")
    @classmethod
    def normalize_roof_type(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        if isinstance(v, str):
            text = v.strip().lower()
            return _ROOF_TYPE_ALIASES.get(text, text)
        return v

    @field_validator("wall_depth", mode="before")
    @classmethod
    def normalize_depth(cls, v: Any) -> str | None:
        v = _blank_to_none(v)
        return None if v is None else normalize_wall_depth(v)

    @field_validator("size", mode="before")
    @classmethod
    def blank_size(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("image_url", "opening_height", "opening_width", "opening_area", mode="before")
    @classmethod
    def optional_text(cls, v: Any) -> Any:
        return "" if v is None else _to_text(v)


class MaterialRow(_CatalogRow):
    """One row of the materials catalog.

    Attributes:
        type: Cladding or Roofing.
        value: Material id.
        title: Display title.
        standard: Roof types for which this material is standard, if any.
        wall_depth: Wall depth the material is offered under, or "any".
    """

    type: MaterialKind = Field(alias="Type")
    value: str = Field(alias="Value", min_length=1)
    title: str = Field(alias="Title", min_length=1)
    description: str = Field(default="", alias="Description")
    image_url: str = Field(default="", alias="ImageURL")
    price: float = Field(default=0.0, ge=0, alias="Price")
    standard: StandardFor | None = Field(default=None, alias="Standard")
    wall_depth: str = Field(default=WALL_DEPTH_ANY, alias="WallDepth")

    @field_validator("value", "title", mode="before")
    @classmethod
    def required_text(cls, v: Any) -> Any:
        return _to_text(v)

    @field_validator("description", "image_url", mode="before")
    @classmethod
    def optional_text(cls, v: Any) -> Any:
        return "" if v is None else _to_text(v)

    @field_validator("price", mode="before")
    @classmethod
    def blank_price(cls, v: Any) -> Any:
        return 0.0 if _blank_to_none(v) is None else v

    @field_validator("standard", mode="before")
    @classmethod
    def normalize_standard(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("wall_depth", mode="before")
    @classmethod
    def normalize_depth(cls, v: Any) -> str:
        return normalize_wall_depth(v)


class CatalogDocument(BaseModel):
    """Root model of a JSON catalog document.

    Attributes:
        schema_version: Document format version.
        dimensions: Height, Width and Length rows.
        openings: Window, door and skylight rows.
        materials: Cladding and roofing rows.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = "1"
    dimensions: list[DimensionRow] = Field(default_factory=list)
    openings: list[OpeningRow] = Field(default_factory=list)
    materials: list[MaterialRow] = Field(default_factory=list)

    @field_validator("schema_version", mode="before")
    @classmethod
    def validate_version(cls, v: Any) -> str:
        text = str(v).strip()
        if text not in SUPPORTED_VERSIONS:
            raise ValueError(f"Unsupported catalog schema version: {text}. Supported: {sorted(SUPPORTED_VERSIONS)}")
        return text


class SelectionSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    windows: dict[str, int] = Field(default_factory=dict)
    doors: dict[str, int] = Field(default_factory=dict)
    skylights: dict[str, int] = Field(default_factory=dict)
    cladding: str | None = None
    roofing: str | None = None

    @field_validator("windows", "doors", "skylights")
    @classmethod
    def non_negative(cls, v: dict[str, int]) -> dict[str, int]:
        for entry_id, quantity in v.items():
            if quantity < 0:
                raise ValueError(f"Quantity for {entry_id} must be non-negative")
        return v


class SelectionPayload(BaseModel):
    """Stored form of a serialized selection.

    Only the shape is checked here. Whether the values are still offered
    by the catalog is decided when the payload is restored.
    """

    model_config = ConfigDict(extra="forbid")

    version: int = 1
    drivers: dict[str, str | None] = Field(default_factory=dict)
    selection: SelectionSection = Field(default_factory=SelectionSection)
