"""Bind selection widgets to a CascadeController.

WidgetBinder is the thin adapter between UI controls and the engine. User
changes flow from a widget into the controller's public mutators; every
committed state change flows back out to all bound widgets, including the
options each one offers and whether it is visible.

Example:
    >>> binder = WidgetBinder(controller)
    >>> binder.bind_driver(DriverName.WALL_DEPTH, wall_depth_widget)
    >>> binder.bind_openings(OpeningKind.WINDOW, window_widget)
    >>> binder.sync()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from geoply.contracts.protocols import SelectionWidgetProtocol
from geoply.domain.cascade import CascadeController
from geoply.domain.selection import SelectionSnapshot
from geoply.domain.value_objects import DriverName, MaterialKind, OpeningKind, RoofType

logger = logging.getLogger(__name__)


@dataclass
class _Binding:
    widget: SelectionWidgetProtocol
    push: Callable[[SelectionWidgetProtocol], None]


class WidgetBinder:
    """Two-way binding between widgets and a CascadeController.

    State is pushed to widgets only through their programmatic setters, so
    clearing an inadmissible item never re-enters user-event handling.
    Callbacks that arrive while a push is in progress are ignored.

    If the controller rejects a user change, the widget is re-synced to
    the current state and the error is re-raised to the caller.
    """

    def __init__(self, controller: CascadeController) -> None:
        self.controller = controller
        self._bindings: list[_Binding] = []
        self._syncing = False
        self._unsubscribe = controller.state.subscribe(self._on_state_change)

    @property
    def is_syncing(self) -> bool:
        return self._syncing

    def close(self) -> None:
        """Stop pushing state changes to the bound widgets."""
        self._unsubscribe()

    def bind_driver(self, name: DriverName | str, widget: SelectionWidgetProtocol) -> None:
        """Bind a single-valued widget to a driver field."""
        driver = DriverName(name)

        def on_change(_entry_id: str | None, value: Any) -> None:
            self._handle_user_change(widget, lambda: self.controller.set_driver(driver, value))

        def push(target: SelectionWidgetProtocol) -> None:
            current = self.controller.state.drivers.get(driver)
            target.set_value(current.value if isinstance(current, RoofType) else current)
            kind = driver.dimension_kind
            if kind is not None:
                target.set_options(list(self.controller.admissible.for_kind(kind)))

        self._add(widget, push, on_change)

    def bind_openings(self, kind: OpeningKind | str, widget: SelectionWidgetProtocol) -> None:
        """Bind a quantity widget to one opening catalog."""
        opening = OpeningKind(kind)

        def on_change(entry_id: str | None, value: Any) -> None:
            if entry_id is None:
                return
            self._handle_user_change(
                widget, lambda: self.controller.set_quantity(opening, entry_id, value)
            )

        def push(target: SelectionWidgetProtocol) -> None:
            admissible = self.controller.admissible
            entries = list(admissible.for_kind(opening))
            target.reset()
            target.set_options(entries)
            for entry_id, quantity in self.controller.state.selection.quantities(opening).items():
                target.set_quantity(entry_id, quantity)
            if opening is OpeningKind.SKYLIGHT:
                target.set_visible(admissible.skylights_visible)

        self._add(widget, push, on_change)

    def bind_material(self, kind: MaterialKind | str, widget: SelectionWidgetProtocol) -> None:
        """Bind a single-valued widget to cladding or roofing."""
        material = MaterialKind(kind)

        def on_change(_entry_id: str | None, value: Any) -> None:
            self._handle_user_change(widget, lambda: self.controller.select(material, value))

        def push(target: SelectionWidgetProtocol) -> None:
            target.set_options(list(self.controller.admissible.for_kind(material)))
            target.set_value(self.controller.state.selection.choice(material))

        self._add(widget, push, on_change)

    def sync(self) -> None:
        """Push the current state to every bound widget."""
        self._syncing = True
        try:
            for binding in self._bindings:
                binding.push(binding.widget)
        finally:
            self._syncing = False

    def _add(
        self,
        widget: SelectionWidgetProtocol,
        push: Callable[[SelectionWidgetProtocol], None],
        on_change: Callable[[str | None, Any], None],
    ) -> None:
        self._bindings.append(_Binding(widget=widget, push=push))
        widget.on_change(on_change)

    def _handle_user_change(self, widget: SelectionWidgetProtocol, apply: Callable[[], Any]) -> None:
        if self._syncing:
            return
        try:
            applied = apply()
        except Exception:
            logger.debug("Rejected user change, restoring widget state", exc_info=True)
            self._push_one(widget)
            raise
        if applied is False:
            # Queued until the catalog loads; the widget keeps the user's value
            return
        # No-op changes (negative quantities) commit nothing and notify no one
        self._push_one(widget)

    def _push_one(self, widget: SelectionWidgetProtocol) -> None:
        self._syncing = True
        try:
            for binding in self._bindings:
                if binding.widget is widget:
                    binding.push(widget)
        finally:
            self._syncing = False

    def _on_state_change(self, new: SelectionSnapshot, old: SelectionSnapshot) -> None:
        self.sync()
