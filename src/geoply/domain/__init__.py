"""Domain layer - catalog model, constraint resolution and selection state."""

from .cascade import DEFAULT_PROJECT_TYPES, RESTORE_ORDER, CascadeController
from .catalog import Catalog
from .errors import (
    CatalogIntegrityError,
    ConfiguratorError,
    InadmissibleSelectionWrite,
    InvalidDriverValue,
    SelectionRestoreError,
)
from .resolver import (
    TURNKEY_PROJECT_TYPE,
    AdmissibleSets,
    resolve_admissible,
    size_class_of,
)
from .selection import (
    DependentSelection,
    SelectionSnapshot,
    SelectionState,
    Subscriber,
)
from .value_objects import (
    WALL_DEPTH_ANY,
    CatalogEntry,
    DimensionKind,
    DriverName,
    DriverValues,
    EntryKind,
    MaterialKind,
    OpeningKind,
    RoofType,
    SizeClass,
    StandardFor,
    normalize_dimension_value,
    normalize_wall_depth,
    parse_size_code,
)

__all__ = [
    "AdmissibleSets",
    "CascadeController",
    "Catalog",
    "CatalogEntry",
    "CatalogIntegrityError",
    "ConfiguratorError",
    "DEFAULT_PROJECT_TYPES",
    "DependentSelection",
    "DimensionKind",
    "DriverName",
    "DriverValues",
    "EntryKind",
    "InadmissibleSelectionWrite",
    "InvalidDriverValue",
    "MaterialKind",
    "OpeningKind",
    "RESTORE_ORDER",
    "RoofType",
    "SelectionRestoreError",
    "SelectionSnapshot",
    "SelectionState",
    "SizeClass",
    "StandardFor",
    "Subscriber",
    "TURNKEY_PROJECT_TYPE",
    "WALL_DEPTH_ANY",
    "normalize_dimension_value",
    "normalize_wall_depth",
    "parse_size_code",
    "resolve_admissible",
    "size_class_of",
]
