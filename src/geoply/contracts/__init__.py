"""Contracts module - protocols shared across layers.

The engine depends on these protocols rather than on concrete widgets,
catalog sources or stores, so UI adapters and persistence backends can be
swapped without touching the domain.

Example:
    ```python
    from geoply.contracts import CatalogSourceProtocol

    async def first_catalog(source: CatalogSourceProtocol) -> Catalog:
        return await source.fetch()
    ```
"""

from .protocols import (
    CatalogSourceProtocol as CatalogSourceProtocol,
    ChangeCallback as ChangeCallback,
    SelectionStoreProtocol as SelectionStoreProtocol,
    SelectionWidgetProtocol as SelectionWidgetProtocol,
)

__all__ = [
    "CatalogSourceProtocol",
    "ChangeCallback",
    "SelectionStoreProtocol",
    "SelectionWidgetProtocol",
]
