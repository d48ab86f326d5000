"""Selection state: current drivers, dependent selections and subscribers.

SelectionState is created per session and passed by reference. Only the
CascadeController writes to it (through ``commit``); everything else reads
snapshots and subscribes to changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping

from .value_objects import DriverValues, MaterialKind, OpeningKind

logger = logging.getLogger(__name__)

_OPENING_FIELDS: dict[OpeningKind, str] = {
    OpeningKind.WINDOW: "windows",
    OpeningKind.DOOR: "doors",
    OpeningKind.SKYLIGHT: "skylights",
}

_MATERIAL_FIELDS: dict[MaterialKind, str] = {
    MaterialKind.CLADDING: "cladding",
    MaterialKind.ROOFING: "roofing",
}


@dataclass(frozen=True)
class DependentSelection:
    """Current dependent selections.

    Opening maps hold only non-zero quantities; an id missing from a map
    has quantity 0. The maps are read-only views, so every change goes
    through a ``with_*`` method that returns a new instance.

    Attributes:
        windows: Window id -> quantity.
        doors: Door id -> quantity.
        skylights: Skylight id -> quantity.
        cladding: Selected cladding id, or None.
        roofing: Selected roofing id, or None.
    """

    windows: Mapping[str, int] = field(default_factory=dict)
    doors: Mapping[str, int] = field(default_factory=dict)
    skylights: Mapping[str, int] = field(default_factory=dict)
    cladding: str | None = None
    roofing: str | None = None

    def __post_init__(self) -> None:
        for name in _OPENING_FIELDS.values():
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def quantities(self, kind: OpeningKind) -> dict[str, int]:
        """Return a copy of the quantity map for an opening kind."""
        return dict(getattr(self, _OPENING_FIELDS[kind]))

    def quantity(self, kind: OpeningKind, entry_id: str) -> int:
        return getattr(self, _OPENING_FIELDS[kind]).get(entry_id, 0)

    def choice(self, kind: MaterialKind) -> str | None:
        return getattr(self, _MATERIAL_FIELDS[kind])

    def with_quantity(self, kind: OpeningKind, entry_id: str, quantity: int) -> DependentSelection:
        updated = self.quantities(kind)
        if quantity > 0:
            updated[entry_id] = quantity
        else:
            updated.pop(entry_id, None)
        return self._replace_field(_OPENING_FIELDS[kind], updated)

    def with_quantities(self, kind: OpeningKind, quantities: dict[str, int]) -> DependentSelection:
        cleaned = {key: qty for key, qty in quantities.items() if qty > 0}
        return self._replace_field(_OPENING_FIELDS[kind], cleaned)

    def with_choice(self, kind: MaterialKind, entry_id: str | None) -> DependentSelection:
        return self._replace_field(_MATERIAL_FIELDS[kind], entry_id)

    def cleared(self, kind: OpeningKind) -> DependentSelection:
        """Return a copy with every quantity of one opening kind removed."""
        return self._replace_field(_OPENING_FIELDS[kind], {})

    def to_dict(self) -> dict[str, object]:
        return {
            "windows": dict(self.windows),
            "doors": dict(self.doors),
            "skylights": dict(self.skylights),
            "cladding": self.cladding,
            "roofing": self.roofing,
        }

    def _replace_field(self, name: str, value: object) -> DependentSelection:
        data = {
            "windows": dict(self.windows),
            "doors": dict(self.doors),
            "skylights": dict(self.skylights),
            "cladding": self.cladding,
            "roofing": self.roofing,
        }
        data[name] = value
        return DependentSelection(**data)


@dataclass(frozen=True)
class SelectionSnapshot:
    """Point-in-time copy of the whole selection state."""

    drivers: DriverValues = field(default_factory=DriverValues)
    selection: DependentSelection = field(default_factory=DependentSelection)

    def to_dict(self) -> dict[str, object]:
        return {"drivers": self.drivers.to_dict(), "selection": self.selection.to_dict()}


Subscriber = Callable[[SelectionSnapshot, SelectionSnapshot], None]


class SelectionState:
    """Mutable selection record with change notification.

    Subscribers are called with ``(new_snapshot, old_snapshot)`` after each
    committed change, in subscription order.

    Example:
        >>> state = SelectionState()
        >>> unsubscribe = state.subscribe(lambda new, old: print(new.drivers))
        >>> unsubscribe()
    """

    def __init__(
        self,
        drivers: DriverValues | None = None,
        selection: DependentSelection | None = None,
    ) -> None:
        self._snapshot = SelectionSnapshot(
            drivers=drivers or DriverValues(),
            selection=selection or DependentSelection(),
        )
        self._subscribers: list[Subscriber] = []

    @property
    def drivers(self) -> DriverValues:
        return self._snapshot.drivers

    @property
    def selection(self) -> DependentSelection:
        return self._snapshot.selection

    def snapshot(self) -> SelectionSnapshot:
        return self._snapshot

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a change callback.

        Args:
            callback: Called with (new_snapshot, old_snapshot).

        Returns:
            A function that removes the subscription.

        Raises:
            TypeError: If callback is not callable.
        """
        if not callable(callback):
            raise TypeError("Subscriber callback must be callable")
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def commit(self, drivers: DriverValues, selection: DependentSelection) -> bool:
        """Replace the state and notify subscribers.

        Called by CascadeController only. A commit that changes nothing
        does not notify.

        Returns:
            True if the state changed.
        """
        new = SelectionSnapshot(drivers=drivers, selection=selection)
        old = self._snapshot
        if new == old:
            return False
        self._snapshot = new
        self._notify(new, old)
        return True

    def _notify(self, new: SelectionSnapshot, old: SelectionSnapshot) -> None:
        for callback in list(self._subscribers):
            try:
                callback(new, old)
            except Exception:
                logger.exception(f"Subscriber {callback!r} failed during state notification")
