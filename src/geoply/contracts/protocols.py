"""Protocols for UI widgets, catalog sources and selection stores.

This module defines the contracts between the engine and its external
collaborators. Concrete implementations live in the infrastructure layer
or in the embedding UI.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from geoply.domain.catalog import Catalog
    from geoply.domain.value_objects import CatalogEntry

# Called with (entry_id, value). For single-valued widgets value is the new
# selected id (or None); for quantity widgets it is the new quantity.
ChangeCallback = Callable[[str | None, Any], None]


@runtime_checkable
class SelectionWidgetProtocol(Protocol):
    """Protocol for a UI control bound to one catalog domain.

    A widget wraps one catalog kind. Single-valued widgets (drivers,
    cladding, roofing) use ``get_value``/``set_value``; quantity widgets
    (windows, doors, skylights) use ``get_quantity``/``set_quantity``.

    Programmatic calls to ``set_value``, ``set_quantity``, ``reset`` and
    ``set_options`` must NOT invoke the ``on_change`` callbacks. Only
    user-driven changes do, so the engine can clear a widget without
    triggering its own handlers again.

    Example:
        ```python
        class DropdownWidget:
            def get_value(self) -> str | None:
                return self._select.value or None
            ...
        ```
    """

    def get_value(self) -> str | None:
        """Return the selected id, or None if nothing is selected."""
        ...

    def set_value(self, entry_id: str | None) -> None:
        """Select an id without firing change callbacks."""
        ...

    def get_quantity(self, entry_id: str) -> int:
        """Return the quantity shown for an id (0 if absent)."""
        ...

    def set_quantity(self, entry_id: str, quantity: int) -> None:
        """Show a quantity for an id without firing change callbacks."""
        ...

    def reset(self) -> None:
        """Clear the selection or every quantity without firing callbacks."""
        ...

    def on_change(self, callback: ChangeCallback) -> None:
        """Register a callback for user-driven changes."""
        ...

    def set_visible(self, visible: bool) -> None:
        """Show or hide the whole control."""
        ...

    def set_options(self, entries: list[CatalogEntry]) -> None:
        """Replace the entries offered by the control."""
        ...


@runtime_checkable
class CatalogSourceProtocol(Protocol):
    """Protocol for an asynchronous catalog source.

    Implementations fetch and parse one catalog document. Sources are tried
    in order by ``load_catalog_with_fallback``.
    """

    @property
    def name(self) -> str:
        """Human-readable description of the source (path or URL)."""
        ...

    async def fetch(self) -> Catalog:
        """Load the catalog.

        Returns:
            A fully populated Catalog.

        Raises:
            LoadError: If the source cannot be read or parsed.
        """
        ...


@runtime_checkable
class SelectionStoreProtocol(Protocol):
    """Protocol for opaque key-value persistence of serialized selections."""

    def get(self, key: str) -> dict[str, Any] | None:
        """Return the stored document, or None if the key is absent."""
        ...

    def set(self, key: str, value: dict[str, Any]) -> None:
        """Store a JSON-compatible document under a key."""
        ...

    def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        ...
