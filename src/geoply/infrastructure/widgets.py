"""Headless selection widgets.

InMemoryWidget implements SelectionWidgetProtocol without any UI toolkit.
It backs the CLI and tests, and documents the behaviour a real widget
adapter must reproduce: programmatic setters never fire change callbacks,
the ``user_*`` methods always do.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from geoply.contracts.protocols import ChangeCallback
    from geoply.domain.value_objects import CatalogEntry

logger = logging.getLogger(__name__)


class InMemoryWidget:
    """A selection control that keeps its state in memory.

    Attributes:
        name: Label used in log messages.
        visible: Whether the control is shown.
        options: Entries currently offered.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.visible = True
        self.options: list[CatalogEntry] = []
        self._value: str | None = None
        self._quantities: dict[str, int] = {}
        self._callbacks: list[ChangeCallback] = []

    # Programmatic interface (SelectionWidgetProtocol)

    def get_value(self) -> str | None:
        return self._value

    def set_value(self, entry_id: str | None) -> None:
        self._value = entry_id

    def get_quantity(self, entry_id: str) -> int:
        return self._quantities.get(entry_id, 0)

    def set_quantity(self, entry_id: str, quantity: int) -> None:
        if quantity > 0:
            self._quantities[entry_id] = quantity
        else:
            self._quantities.pop(entry_id, None)

    def quantities(self) -> dict[str, int]:
        return dict(self._quantities)

    def reset(self) -> None:
        self._value = None
        self._quantities = {}

    def on_change(self, callback: ChangeCallback) -> None:
        self._callbacks.append(callback)

    def set_visible(self, visible: bool) -> None:
        self.visible = visible

    def set_options(self, entries: list[CatalogEntry]) -> None:
        self.options = list(entries)

    @property
    def option_ids(self) -> list[str]:
        return [entry.id for entry in self.options]

    # Simulated user interaction

    def user_select(self, entry_id: str | None) -> None:
        """Select a value as a user would, firing change callbacks."""
        self._value = entry_id
        self._fire(None, entry_id)

    def user_set_quantity(self, entry_id: str, quantity: int) -> None:
        """Change a quantity as a user would, firing change callbacks."""
        self.set_quantity(entry_id, quantity)
        self._fire(entry_id, quantity)

    def _fire(self, entry_id: str | None, value: Any) -> None:
        logger.debug(f"Widget {self.name}: user change {entry_id!r} -> {value!r}")
        for callback in list(self._callbacks):
            callback(entry_id, value)
