"""Constraint resolution for dependent catalogs.

Given a catalog and the current driver values, this module computes which
entries of each dependent catalog are admissible. Every function here is
pure: the same catalog and drivers always produce the same ordered result.

Rules, applied in order:
1. Wall-depth gating. An entry passes when its wall-depth class is "any"
   or equals the driver wall depth. Without a wall depth, dimensions are
   unfiltered and opening catalogs are empty.
2. Windows and doors must match the height size class, when one is known.
3. Skylights need a roof type, a matching roof-type class, wall-depth
   gating and a width size-class match. A 200mm mono-pitch skylight is
   admitted on a 200mm mono-pitch building regardless of size class.
4. Standard materials exist only for turnkey projects with a roof type.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .catalog import Catalog
from .errors import CatalogIntegrityError
from .value_objects import (
    CatalogEntry,
    DimensionKind,
    DriverValues,
    EntryKind,
    MaterialKind,
    OpeningKind,
    RoofType,
    SizeClass,
    StandardFor,
)

logger = logging.getLogger(__name__)

TURNKEY_PROJECT_TYPE = "turnkey"

# TODO: confirm with product whether the 200mm mono-pitch skylight exception
# should stay once the skylight catalog carries size classes for every width.
_MONO_OVERRIDE_WALL_DEPTH = "200"


@dataclass(frozen=True)
class AdmissibleSets:
    """Admissible subsets of each dependent catalog.

    Attributes:
        dimensions: Height, Width and Length entries passing wall-depth gating.
        windows: Admissible window entries.
        doors: Admissible door entries.
        skylights: Admissible skylight entries.
        cladding: Admissible cladding entries.
        roofing: Admissible roofing entries.
        standard_materials: Materials included as standard for this build.
        height_size_class: Size class derived from the height driver.
        width_size_class: Size class derived from the width driver.
    """

    dimensions: tuple[CatalogEntry, ...] = ()
    windows: tuple[CatalogEntry, ...] = ()
    doors: tuple[CatalogEntry, ...] = ()
    skylights: tuple[CatalogEntry, ...] = ()
    cladding: tuple[CatalogEntry, ...] = ()
    roofing: tuple[CatalogEntry, ...] = ()
    standard_materials: tuple[CatalogEntry, ...] = ()
    height_size_class: SizeClass | None = None
    width_size_class: SizeClass | None = None

    def for_kind(self, kind: EntryKind) -> tuple[CatalogEntry, ...]:
        """Return the admissible entries of one kind."""
        if isinstance(kind, DimensionKind):
            return tuple(entry for entry in self.dimensions if entry.kind == kind)
        return {
            OpeningKind.WINDOW: self.windows,
            OpeningKind.DOOR: self.doors,
            OpeningKind.SKYLIGHT: self.skylights,
            MaterialKind.CLADDING: self.cladding,
            MaterialKind.ROOFING: self.roofing,
        }[kind]

    def ids(self, kind: EntryKind) -> tuple[str, ...]:
        return tuple(entry.id for entry in self.for_kind(kind))

    def admits(self, kind: EntryKind, entry_id: str) -> bool:
        return any(entry.id == entry_id for entry in self.for_kind(kind))

    def dimension_values(self, kind: DimensionKind) -> tuple[str, ...]:
        """Return the distinct admissible values of one dimension kind."""
        return tuple(_unique(entry.value for entry in self.for_kind(kind) if entry.value))

    @property
    def skylights_visible(self) -> bool:
        """Whether the skylight section should be shown at all."""
        return bool(self.skylights)


def size_class_of(
    dimensions: Iterable[CatalogEntry],
    kind: DimensionKind,
    value: str | None,
    wall_depth: str | None,
) -> SizeClass | None:
    """Look up the size class of a dimension value at a wall depth.

    An entry whose wall-depth class equals the wall depth wins over an
    entry valid for "any" wall depth.

    Args:
        dimensions: Dimension catalog entries.
        kind: Dimension kind to look up (Height or Width).
        value: Normalized dimension value, or None.
        wall_depth: Normalized wall depth, or None.

    Returns:
        The size class, or None when value or wall depth is unset or no
        matching entry carries a size.
    """
    if value is None or wall_depth is None:
        return None

    fallback: SizeClass | None = None
    for entry in dimensions:
        if entry.kind != kind or entry.value != value or entry.size_class is None:
            continue
        if entry.wall_depth_class == wall_depth:
            return entry.size_class
        if fallback is None and entry.admits_wall_depth(wall_depth):
            fallback = entry.size_class
    return fallback


def resolve_admissible(
    catalog: Catalog,
    drivers: DriverValues,
    *,
    turnkey_project_type: str = TURNKEY_PROJECT_TYPE,
) -> AdmissibleSets:
    """Compute the admissible subset of every dependent catalog.

    Entries sharing an id are de-duplicated, keeping the first occurrence
    in catalog load order.

    Args:
        catalog: The loaded catalog.
        drivers: Current driver values.
        turnkey_project_type: Project type that receives standard materials.

    Returns:
        AdmissibleSets for the drivers. Empty sets are valid results.

    Raises:
        CatalogIntegrityError: If a catalog entry is malformed.
    """
    for entry in catalog.entries:
        _check_entry(entry)

    wall_depth = drivers.wall_depth
    dimension_entries = _dedupe(catalog.dimensions)

    if wall_depth is None:
        dimensions = tuple(dimension_entries)
    else:
        dimensions = tuple(e for e in dimension_entries if e.admits_wall_depth(wall_depth))

    height_size_class = size_class_of(dimension_entries, DimensionKind.HEIGHT, drivers.height, wall_depth)
    width_size_class = size_class_of(dimension_entries, DimensionKind.WIDTH, drivers.width, wall_depth)

    windows = _resolve_wall_openings(catalog.get(OpeningKind.WINDOW), wall_depth, height_size_class)
    doors = _resolve_wall_openings(catalog.get(OpeningKind.DOOR), wall_depth, height_size_class)
    skylights = _resolve_skylights(
        catalog.get(OpeningKind.SKYLIGHT), wall_depth, drivers.roof_type, width_size_class
    )

    cladding = _resolve_materials(catalog.get(MaterialKind.CLADDING), wall_depth)
    roofing = _resolve_materials(catalog.get(MaterialKind.ROOFING), wall_depth)
    standard = _resolve_standard(cladding + roofing, drivers, turnkey_project_type)

    logger.debug(
        f"Resolved admissible sets for {drivers.to_dict()}: "
        f"{len(windows)} windows, {len(doors)} doors, {len(skylights)} skylights, "
        f"{len(standard)} standard materials "
        f"(height size {height_size_class}, width size {width_size_class})"
    )

    return AdmissibleSets(
        dimensions=dimensions,
        windows=windows,
        doors=doors,
        skylights=skylights,
        cladding=cladding,
        roofing=roofing,
        standard_materials=standard,
        height_size_class=height_size_class,
        width_size_class=width_size_class,
    )


def _check_entry(entry: CatalogEntry) -> None:
    if not isinstance(entry.kind, (DimensionKind, OpeningKind, MaterialKind)):
        raise CatalogIntegrityError(
            f"Catalog entry {entry.id!r} has unknown kind {entry.kind!r}", entry_id=entry.id
        )
    if isinstance(entry.kind, DimensionKind) and not entry.value:
        raise CatalogIntegrityError(
            f"Dimension entry {entry.id!r} has no value", entry_id=entry.id
        )
    if not entry.wall_depth_class:
        raise CatalogIntegrityError(
            f"Catalog entry {entry.id!r} has no wall-depth class", entry_id=entry.id
        )


def _resolve_wall_openings(
    entries: list[CatalogEntry],
    wall_depth: str | None,
    height_size_class: SizeClass | None,
) -> tuple[CatalogEntry, ...]:
    if wall_depth is None:
        return ()
    return tuple(
        entry
        for entry in _dedupe(entries)
        if entry.admits_wall_depth(wall_depth)
        and (height_size_class is None or entry.derived_size_class == height_size_class)
    )


def _resolve_skylights(
    entries: list[CatalogEntry],
    wall_depth: str | None,
    roof_type: RoofType | None,
    width_size_class: SizeClass | None,
) -> tuple[CatalogEntry, ...]:
    if wall_depth is None or roof_type is None:
        return ()

    admitted: list[CatalogEntry] = []
    for entry in _dedupe(entries):
        if _mono_pitch_override(entry, wall_depth, roof_type):
            admitted.append(entry)
            continue
        if (
            entry.roof_type_class == roof_type
            and entry.admits_wall_depth(wall_depth)
            and (width_size_class is None or entry.derived_size_class == width_size_class)
        ):
            admitted.append(entry)
    return tuple(admitted)


def _mono_pitch_override(entry: CatalogEntry, wall_depth: str, roof_type: RoofType) -> bool:
    return (
        roof_type is RoofType.MONO_PITCH
        and wall_depth == _MONO_OVERRIDE_WALL_DEPTH
        and entry.roof_type_class is RoofType.MONO_PITCH
        and entry.wall_depth_class == _MONO_OVERRIDE_WALL_DEPTH
    )


def _resolve_materials(
    entries: list[CatalogEntry], wall_depth: str | None
) -> tuple[CatalogEntry, ...]:
    return tuple(
        entry
        for entry in _dedupe(entries)
        if wall_depth is None or entry.admits_wall_depth(wall_depth)
    )


def _resolve_standard(
    materials: tuple[CatalogEntry, ...],
    drivers: DriverValues,
    turnkey_project_type: str,
) -> tuple[CatalogEntry, ...]:
    if drivers.project_type != turnkey_project_type or drivers.roof_type is None:
        return ()
    wanted = drivers.roof_type.standard_key
    return tuple(
        entry
        for entry in materials
        if entry.standard_for is StandardFor.BOTH or entry.standard_for is wanted
    )


def _dedupe(entries: Iterable[CatalogEntry]) -> list[CatalogEntry]:
    seen: set[str] = set()
    unique: list[CatalogEntry] = []
    for entry in entries:
        key = f"{entry.kind.value}:{entry.id}"
        if key in seen:
            continue
        seen.add(key)
        unique.append(entry)
    return unique


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))
