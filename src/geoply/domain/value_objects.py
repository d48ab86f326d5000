"""Value objects for the configurator domain.

This module defines the immutable building blocks shared by every layer:
the entry kinds a catalog can hold, the coarse size classes used to match
openings to the building, roof types, driver names and the two records the
engine reasons about (CatalogEntry and DriverValues).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Union

# Wall-depth class meaning "valid for every wall depth"
WALL_DEPTH_ANY = "any"

# Size code inside an entry id: "SKYLARK200_S1" -> "S", "SKYLARK200_mono_M" -> "M"
_SIZE_CODE_PATTERN = re.compile(r"[-_](XL|S|M|L)(?:\d|$)")


class DimensionKind(str, Enum):
    """Dimension catalog entry kinds."""

    HEIGHT = "Height"
    WIDTH = "Width"
    LENGTH = "Length"


class OpeningKind(str, Enum):
    """Opening catalog entry kinds (all quantity based)."""

    WINDOW = "window"
    DOOR = "door"
    SKYLIGHT = "skylight"


class MaterialKind(str, Enum):
    """Material catalog entry kinds (single-valued selections)."""

    CLADDING = "Cladding"
    ROOFING = "Roofing"


EntryKind = Union[DimensionKind, OpeningKind, MaterialKind]


class SizeClass(str, Enum):
    """Coarse size bucket used for cross-catalog matching."""

    S = "S"
    M = "M"
    L = "L"
    XL = "XL"


class RoofType(str, Enum):
    """Roof types offered by the configurator.

    Attributes:
        MONO_PITCH: Single slope roof.
        DOUBLE_PITCH: Two slopes meeting at a ridge.
    """

    MONO_PITCH = "mono-pitch"
    DOUBLE_PITCH = "double-pitch"

    @property
    def standard_key(self) -> StandardFor:
        """Return the StandardFor value that matches this roof type."""
        if self is RoofType.MONO_PITCH:
            return StandardFor.MONO
        return StandardFor.DOUBLE


class StandardFor(str, Enum):
    """Roof types for which a material comes as standard."""

    MONO = "mono"
    DOUBLE = "double"
    BOTH = "both"


class DriverName(str, Enum):
    """Names of the driver fields.

    Values use the camelCase names of the UI controls; ``attribute`` gives
    the matching DriverValues field.
    """

    PROJECT_TYPE = "projectType"
    WALL_DEPTH = "wallDepth"
    HEIGHT = "height"
    WIDTH = "width"
    LENGTH = "length"
    ROOF_TYPE = "roofType"

    @property
    def attribute(self) -> str:
        return _DRIVER_ATTRIBUTES[self]

    @property
    def dimension_kind(self) -> DimensionKind | None:
        """Return the dimension kind this driver selects from, if any."""
        return _DRIVER_DIMENSIONS.get(self)


_DRIVER_ATTRIBUTES: dict[DriverName, str] = {
    DriverName.PROJECT_TYPE: "project_type",
    DriverName.WALL_DEPTH: "wall_depth",
    DriverName.HEIGHT: "height",
    DriverName.WIDTH: "width",
    DriverName.LENGTH: "length",
    DriverName.ROOF_TYPE: "roof_type",
}

_DRIVER_DIMENSIONS: dict[DriverName, DimensionKind] = {
    DriverName.HEIGHT: DimensionKind.HEIGHT,
    DriverName.WIDTH: DimensionKind.WIDTH,
    DriverName.LENGTH: DimensionKind.LENGTH,
}


def normalize_wall_depth(value: object) -> str:
    """Normalize a wall depth to its class string.

    Accepts the forms found in catalog files and UI controls.

    Args:
        value: Wall depth such as "200mm", "200", 200, 200.0, "any" or blank.

    Returns:
        The numeric class as a string ("200") or WALL_DEPTH_ANY.

    Examples:
        >>> normalize_wall_depth("250mm")
        '250'
        >>> normalize_wall_depth(200.0)
        '200'
        >>> normalize_wall_depth("")
        'any'
    """
    if value is None:
        return WALL_DEPTH_ANY
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip().lower()
    if not text or text == WALL_DEPTH_ANY:
        return WALL_DEPTH_ANY
    if text.endswith("mm"):
        text = text[:-2].strip()
    if text.endswith(".0"):
        text = text[:-2]
    return text


def normalize_dimension_value(value: object) -> str:
    """Normalize a dimension value so "2400", 2400 and 2400.0 compare equal."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    if text.endswith(".0") and text[:-2].isdigit():
        text = text[:-2]
    return text


def parse_size_code(text: str) -> SizeClass | None:
    """Extract the size class embedded in an entry id or name.

    Returns None when the text carries no recognisable size code.
    """
    match = _SIZE_CODE_PATTERN.search(text)
    if match is None:
        return None
    return SizeClass(match.group(1))


@dataclass(frozen=True)
class CatalogEntry:
    """A selectable catalog entry.

    Entries are immutable once loaded and identified by ``id``.

    Attributes:
        id: Unique identifier within the entry's kind.
        kind: Dimension, opening or material kind.
        wall_depth_class: Wall depth the entry is valid under, or "any".
        size_class: Explicit size class, if the source provides one.
        roof_type_class: Roof type the entry is valid under (skylights).
        standard_for: Roof types for which this material is standard.
        supports_quantity: True for quantity-based entries (openings).
        value: Raw dimension value; required for dimension entries.
        label: Display label.
        description: Display description.
        image_url: Image location for the UI.
    """

    id: str
    kind: EntryKind
    wall_depth_class: str = WALL_DEPTH_ANY
    size_class: SizeClass | None = None
    roof_type_class: RoofType | None = None
    standard_for: StandardFor | None = None
    supports_quantity: bool = False
    value: str | None = None
    label: str = ""
    description: str = ""
    image_url: str = ""

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValueError("Catalog entry id must not be empty")

    @property
    def derived_size_class(self) -> SizeClass | None:
        """Size class used for matching: explicit, else parsed from the id."""
        if self.size_class is not None:
            return self.size_class
        return parse_size_code(self.id)

    def admits_wall_depth(self, wall_depth: str) -> bool:
        """Check wall-depth gating against a normalized wall depth."""
        return self.wall_depth_class in (WALL_DEPTH_ANY, wall_depth)


@dataclass(frozen=True)
class DriverValues:
    """Current values of the driver fields.

    Every field is either unset (None) or a single admissible value.
    Dimension values are kept as normalized strings and wall depth as its
    class string ("200").
    """

    project_type: str | None = None
    wall_depth: str | None = None
    height: str | None = None
    width: str | None = None
    length: str | None = None
    roof_type: RoofType | None = None

    def get(self, name: DriverName) -> str | RoofType | None:
        return getattr(self, name.attribute)

    def with_value(self, name: DriverName, value: str | RoofType | None) -> DriverValues:
        """Return a copy with one driver replaced."""
        return replace(self, **{name.attribute: value})

    def to_dict(self) -> dict[str, str | None]:
        """Return the drivers keyed by their camelCase names."""
        result: dict[str, str | None] = {}
        for name in DriverName:
            current = self.get(name)
            result[name.value] = current.value if isinstance(current, RoofType) else current
        return result
