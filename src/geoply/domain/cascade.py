"""Cascade controller: the single writer of selection state.

Every mutation of drivers or dependent selections goes through
CascadeController. A driver change recomputes the admissible sets, prunes
dimension drivers and dependent selections that are no longer admissible,
then commits once so subscribers see a single (new, old) notification.

Transition for ``set_driver(name, value)``:
1. Snapshot the current state.
2. Update the driver.
3. A height change clears every window and door quantity.
4. Resolve admissible sets; clear height, width or length if the wall
   depth no longer offers them (clearing height also clears windows and
   doors) and resolve again.
5. Drop every dependent selection outside the admissible sets.
6. Commit and notify.

If resolution raises, nothing is committed.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .catalog import Catalog
from .errors import (
    ConfiguratorError,
    InadmissibleSelectionWrite,
    InvalidDriverValue,
    SelectionRestoreError,
)
from .resolver import TURNKEY_PROJECT_TYPE, AdmissibleSets, resolve_admissible
from .selection import DependentSelection, SelectionSnapshot, SelectionState
from .value_objects import (
    WALL_DEPTH_ANY,
    DimensionKind,
    DriverName,
    DriverValues,
    MaterialKind,
    OpeningKind,
    RoofType,
    normalize_dimension_value,
    normalize_wall_depth,
)

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_TYPES: tuple[str, ...] = ("turnkey", "self-build", "structureOnly")

SERIALIZATION_VERSION = 1

# Drivers are restored so that each one is validated against its parents
RESTORE_ORDER: tuple[DriverName, ...] = (
    DriverName.PROJECT_TYPE,
    DriverName.WALL_DEPTH,
    DriverName.ROOF_TYPE,
    DriverName.HEIGHT,
    DriverName.WIDTH,
    DriverName.LENGTH,
)

_DIMENSION_DRIVERS: tuple[DriverName, ...] = (
    DriverName.HEIGHT,
    DriverName.WIDTH,
    DriverName.LENGTH,
)

_HEIGHT_COUPLED: tuple[OpeningKind, ...] = (OpeningKind.WINDOW, OpeningKind.DOOR)

_SELECTION_KEYS: dict[OpeningKind, str] = {
    OpeningKind.WINDOW: "windows",
    OpeningKind.DOOR: "doors",
    OpeningKind.SKYLIGHT: "skylights",
}

_CHOICE_KEYS: dict[MaterialKind, str] = {
    MaterialKind.CLADDING: "cladding",
    MaterialKind.ROOFING: "roofing",
}


class CascadeController:
    """Orchestrates driver changes and keeps dependent selections admissible.

    Driver changes that arrive before a catalog is loaded are queued and
    replayed by ``load_catalog``.

    Attributes:
        state: The SelectionState this controller writes to.
        project_types: Accepted projectType values.
        turnkey_project_type: Project type that receives standard materials.

    Example:
        >>> state = SelectionState()
        >>> controller = CascadeController(state, catalog)
        >>> controller.set_driver("wallDepth", "200mm")
        True
        >>> controller.set_quantity(OpeningKind.WINDOW, "SKYLARK200_S1", 2)
        2
    """

    def __init__(
        self,
        state: SelectionState,
        catalog: Catalog | None = None,
        *,
        project_types: Iterable[str] = DEFAULT_PROJECT_TYPES,
        turnkey_project_type: str = TURNKEY_PROJECT_TYPE,
    ) -> None:
        self.state = state
        self.project_types = tuple(project_types)
        self.turnkey_project_type = turnkey_project_type
        self._catalog = catalog
        self._pending: list[tuple[DriverName, object]] = []
        self._admissible: AdmissibleSets | None = None
        self._admissible_for: DriverValues | None = None

    # =========================================================================
    # Catalog lifecycle
    # =========================================================================

    @property
    def catalog(self) -> Catalog | None:
        return self._catalog

    @property
    def is_ready(self) -> bool:
        """True once a catalog (possibly empty) has been loaded."""
        return self._catalog is not None

    @property
    def pending_drivers(self) -> list[tuple[DriverName, object]]:
        return list(self._pending)

    def load_catalog(self, catalog: Catalog) -> None:
        """Install a freshly loaded catalog.

        The new catalog replaces any previous one. Current selections are
        re-validated against it and queued driver changes are replayed in
        arrival order; a queued value the catalog rejects is dropped.
        """
        self._catalog = catalog
        self._invalidate_cache()
        logger.info(f"Catalog installed from {catalog.source or 'unknown source'} ({len(catalog.entries)} entries)")

        self.revalidate()

        pending, self._pending = self._pending, []
        for name, value in pending:
            try:
                self.set_driver(name, value)
            except InvalidDriverValue as e:
                logger.warning(f"Dropping queued driver change: {e}")

    def revalidate(self) -> None:
        """Re-apply pruning to the current state without changing drivers."""
        catalog = self._require_catalog()
        old = self.state.snapshot()
        drivers = old.drivers
        if drivers.wall_depth is not None and drivers.wall_depth not in catalog.wall_depths():
            drivers = drivers.with_value(DriverName.WALL_DEPTH, None)
        drivers, selection, admissible = self._settle(drivers, old.selection)
        self._cache(drivers, admissible)
        self.state.commit(drivers, selection)

    # =========================================================================
    # Admissible sets
    # =========================================================================

    @property
    def admissible(self) -> AdmissibleSets:
        """Admissible sets for the current drivers.

        Before a catalog is loaded every set is empty.
        """
        if self._catalog is None:
            return AdmissibleSets()
        drivers = self.state.drivers
        if self._admissible is None or self._admissible_for != drivers:
            self._cache(drivers, self._resolve(drivers))
        assert self._admissible is not None
        return self._admissible

    def _resolve(self, drivers: DriverValues) -> AdmissibleSets:
        return resolve_admissible(
            self._require_catalog(),
            drivers,
            turnkey_project_type=self.turnkey_project_type,
        )

    def _cache(self, drivers: DriverValues, admissible: AdmissibleSets) -> None:
        self._admissible = admissible
        self._admissible_for = drivers

    def _invalidate_cache(self) -> None:
        self._admissible = None
        self._admissible_for = None

    # =========================================================================
    # Driver mutation
    # =========================================================================

    def set_driver(self, name: DriverName | str, value: object) -> bool:
        """Change one driver and cascade the consequences.

        Args:
            name: Driver name (DriverName or its camelCase value).
            value: New value; None or "" clears the driver.

        Returns:
            True if applied, False if queued because no catalog is loaded.

        Raises:
            ValueError: If the driver name is unknown.
            InvalidDriverValue: If the value is not offered by the catalog.
                The previous value is kept.
            CatalogIntegrityError: If the catalog is malformed. The state
                is left unchanged.
        """
        driver = _coerce_driver_name(name)
        if self._catalog is None:
            logger.debug(f"Catalog not loaded, queueing {driver.value}={value!r}")
            self._pending.append((driver, value))
            return False

        old = self.state.snapshot()
        coerced = self._coerce_value(driver, value, old.drivers)

        drivers = old.drivers.with_value(driver, coerced)
        selection = old.selection
        if driver is DriverName.HEIGHT:
            selection = _clear_height_coupled(selection)

        drivers, selection, admissible = self._settle(drivers, selection)
        self._cache(drivers, admissible)
        self.state.commit(drivers, selection)
        logger.debug(f"Driver {driver.value} set to {coerced!r}")
        return True

    def _settle(
        self, drivers: DriverValues, selection: DependentSelection
    ) -> tuple[DriverValues, DependentSelection, AdmissibleSets]:
        while True:
            admissible = self._resolve(drivers)
            pruned = False
            for driver in _DIMENSION_DRIVERS:
                current = drivers.get(driver)
                kind = driver.dimension_kind
                assert kind is not None
                if current is None or current in admissible.dimension_values(kind):
                    continue
                logger.info(f"Clearing {driver.value}={current!r}: not offered for wall depth {drivers.wall_depth}")
                drivers = drivers.with_value(driver, None)
                if driver is DriverName.HEIGHT:
                    selection = _clear_height_coupled(selection)
                pruned = True
            if not pruned:
                break
        return drivers, _drop_inadmissible(selection, admissible), admissible

    def _coerce_value(
        self, driver: DriverName, value: object, drivers: DriverValues
    ) -> str | RoofType | None:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        catalog = self._require_catalog()

        if driver is DriverName.PROJECT_TYPE:
            text = str(value).strip()
            if text not in self.project_types:
                raise InvalidDriverValue(driver.value, value, f"expected one of {', '.join(self.project_types)}")
            return text

        if driver is DriverName.ROOF_TYPE:
            try:
                return RoofType(value)
            except ValueError:
                raise InvalidDriverValue(driver.value, value, "unknown roof type")

        if driver is DriverName.WALL_DEPTH:
            depth = normalize_wall_depth(value)
            if depth == WALL_DEPTH_ANY or depth not in catalog.wall_depths():
                raise InvalidDriverValue(driver.value, value, "no catalog entry for this wall depth")
            return depth

        kind = driver.dimension_kind
        assert kind is not None
        dimension = normalize_dimension_value(value)
        if not _dimension_offered(catalog, kind, dimension, drivers.wall_depth):
            raise InvalidDriverValue(driver.value, value, f"not offered for wall depth {drivers.wall_depth or 'unset'}")
        return dimension

    # =========================================================================
    # Dependent selection mutation
    # =========================================================================

    def get_quantity(self, kind: OpeningKind | str, entry_id: str) -> int:
        return self.state.selection.quantity(OpeningKind(kind), entry_id)

    def set_quantity(self, kind: OpeningKind | str, entry_id: str, quantity: int) -> int:
        """Set the quantity of an opening.

        A negative quantity is a no-op. Zero removes the entry.

        Returns:
            The quantity now stored for the entry.

        Raises:
            TypeError: If quantity is not an int.
            InadmissibleSelectionWrite: If a positive quantity targets an
                id outside the admissible set.
        """
        opening = OpeningKind(kind)
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise TypeError(f"Quantity must be an int, got {type(quantity).__name__}")

        current = self.state.selection.quantity(opening, entry_id)
        if quantity < 0:
            logger.debug(f"Ignoring negative quantity for {opening.value} {entry_id!r}")
            return current
        if quantity > 0 and not self.admissible.admits(opening, entry_id):
            raise InadmissibleSelectionWrite(opening.value, entry_id)

        self.state.commit(
            self.state.drivers,
            self.state.selection.with_quantity(opening, entry_id, quantity),
        )
        return quantity

    def increment(self, kind: OpeningKind | str, entry_id: str, step: int = 1) -> int:
        return self.set_quantity(kind, entry_id, self.get_quantity(kind, entry_id) + step)

    def decrement(self, kind: OpeningKind | str, entry_id: str, step: int = 1) -> int:
        return self.set_quantity(kind, entry_id, self.get_quantity(kind, entry_id) - step)

    def reset_openings(self, kind: OpeningKind | str) -> None:
        opening = OpeningKind(kind)
        self.state.commit(self.state.drivers, self.state.selection.cleared(opening))

    def get_choice(self, kind: MaterialKind | str) -> str | None:
        return self.state.selection.choice(MaterialKind(kind))

    def select(self, kind: MaterialKind | str, entry_id: str | None) -> None:
        """Set or clear a single-valued material selection.

        Raises:
            InadmissibleSelectionWrite: If entry_id is not admissible.
        """
        material = MaterialKind(kind)
        if entry_id is not None and not self.admissible.admits(material, entry_id):
            raise InadmissibleSelectionWrite(material.value, entry_id)
        self.state.commit(
            self.state.drivers,
            self.state.selection.with_choice(material, entry_id),
        )

    def reset(self) -> None:
        """Discard every driver and selection. The catalog is kept."""
        self._pending = []
        self._invalidate_cache()
        self.state.commit(DriverValues(), DependentSelection())

    # =========================================================================
    # Persistence and submission
    # =========================================================================

    def serialize_selection(self) -> dict[str, object]:
        """Return the state as a JSON-compatible dict."""
        return {"version": SERIALIZATION_VERSION, **self.state.snapshot().to_dict()}

    def restore_selection(self, data: Mapping[str, object]) -> list[str]:
        """Restore a state produced by ``serialize_selection``.

        Drivers are re-applied in dependency order, then selections. Values
        the current catalog no longer offers are dropped. The state changes
        in a single commit.

        Args:
            data: Serialized state.

        Returns:
            Keys of the dropped values, e.g. ["height", "windows.SKYLARK200_S1"].

        Raises:
            SelectionRestoreError: If the payload is malformed. State is unchanged.
            ConfiguratorError: If no catalog is loaded yet.
        """
        if self._catalog is None:
            raise ConfiguratorError("Cannot restore a selection before the catalog is loaded")
        raw_drivers, raw_selection = _split_payload(data)

        dropped: list[str] = []
        drivers = DriverValues()
        for driver in RESTORE_ORDER:
            raw = raw_drivers.get(driver.value)
            if raw is None or raw == "":
                continue
            try:
                drivers = drivers.with_value(driver, self._coerce_value(driver, raw, drivers))
            except InvalidDriverValue as e:
                logger.warning(f"Dropping restored driver: {e}")
                dropped.append(driver.value)

        admissible = self._resolve(drivers)
        selection = DependentSelection()
        for opening, key in _SELECTION_KEYS.items():
            for entry_id, quantity in _quantity_map(raw_selection.get(key), key).items():
                if quantity == 0:
                    continue
                if admissible.admits(opening, entry_id):
                    selection = selection.with_quantity(opening, entry_id, quantity)
                else:
                    dropped.append(f"{key}.{entry_id}")
        for material, key in _CHOICE_KEYS.items():
            choice = raw_selection.get(key)
            if choice is None or choice == "":
                continue
            if not isinstance(choice, str):
                raise SelectionRestoreError(f"'{key}' must be a string or null")
            if admissible.admits(material, choice):
                selection = selection.with_choice(material, choice)
            else:
                dropped.append(key)

        if dropped:
            logger.warning(f"Restored selection dropped {len(dropped)} value(s): {', '.join(dropped)}")
        self._cache(drivers, admissible)
        self.state.commit(drivers, selection)
        return dropped

    def submission_record(self) -> dict[str, object]:
        """Return the finalized selection as a flat record.

        Every catalog id of each opening kind is listed, defaulting to 0.
        Unset values are empty strings.
        """
        snapshot: SelectionSnapshot = self.state.snapshot()
        drivers = snapshot.drivers
        admissible = self.admissible
        catalog = self._catalog or Catalog.empty()

        record: dict[str, object] = {
            "projectType": drivers.project_type or "",
            "buildingLength": drivers.length or "",
            "buildingWidth": drivers.width or "",
            "buildingHeight": drivers.height or "",
            "wallDepth": drivers.wall_depth or "",
            "roofType": drivers.roof_type.value if drivers.roof_type else "",
            "wallBlockSuffix": admissible.height_size_class.value if admissible.height_size_class else "",
            "floorBlockSuffix": admissible.width_size_class.value if admissible.width_size_class else "",
        }
        for opening, key in _SELECTION_KEYS.items():
            quantities = {entry.id: 0 for entry in catalog.get(opening)}
            quantities.update(snapshot.selection.quantities(opening))
            record[key] = quantities
        record["cladding"] = snapshot.selection.cladding or ""
        record["roofing"] = snapshot.selection.roofing or ""
        return record

    def _require_catalog(self) -> Catalog:
        if self._catalog is None:
            raise ConfiguratorError("Catalog not loaded")
        return self._catalog


def _coerce_driver_name(name: DriverName | str) -> DriverName:
    try:
        return DriverName(name)
    except ValueError:
        raise ValueError(f"Unknown driver: {name!r}")


def _dimension_offered(
    catalog: Catalog, kind: DimensionKind, value: str, wall_depth: str | None
) -> bool:
    return any(
        entry.kind == kind
        and entry.value == value
        and (wall_depth is None or entry.admits_wall_depth(wall_depth))
        for entry in catalog.dimensions
    )


def _clear_height_coupled(selection: DependentSelection) -> DependentSelection:
    for opening in _HEIGHT_COUPLED:
        selection = selection.cleared(opening)
    return selection


def _drop_inadmissible(
    selection: DependentSelection, admissible: AdmissibleSets
) -> DependentSelection:
    for opening in _SELECTION_KEYS:
        current = selection.quantities(opening)
        kept = {key: qty for key, qty in current.items() if admissible.admits(opening, key)}
        if kept != current:
            logger.debug(f"Dropped {opening.value} selections {sorted(set(current) - set(kept))}")
            selection = selection.with_quantities(opening, kept)
    for material in _CHOICE_KEYS:
        choice = selection.choice(material)
        if choice is not None and not admissible.admits(material, choice):
            logger.debug(f"Cleared {material.value} selection {choice!r}")
            selection = selection.with_choice(material, None)
    return selection


def _split_payload(data: Mapping[str, object]) -> tuple[Mapping[str, object], Mapping[str, object]]:
    if not isinstance(data, Mapping):
        raise SelectionRestoreError("Selection payload must be a mapping")
    version = data.get("version", SERIALIZATION_VERSION)
    if version != SERIALIZATION_VERSION:
        raise SelectionRestoreError(f"Unsupported selection payload version: {version!r}")
    raw_drivers = data.get("drivers", {})
    raw_selection = data.get("selection", {})
    if not isinstance(raw_drivers, Mapping):
        raise SelectionRestoreError("'drivers' must be a mapping")
    if not isinstance(raw_selection, Mapping):
        raise SelectionRestoreError("'selection' must be a mapping")
    return raw_drivers, raw_selection


def _quantity_map(raw: object, key: str) -> dict[str, int]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise SelectionRestoreError(f"'{key}' must be a mapping of id to quantity")
    quantities: dict[str, int] = {}
    for entry_id, quantity in raw.items():
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            raise SelectionRestoreError(f"'{key}.{entry_id}' must be a non-negative integer")
        quantities[str(entry_id)] = quantity
    return quantities
