"""Configurator session: one selection state, one controller, one catalog.

ConfiguratorSession wires the engine together for an embedding UI:

1. ``start()`` loads the catalog from ordered fallback sources. If every
   source fails the session runs on an empty catalog and keeps the error
   in ``load_error`` so the UI can say so.
2. The UI binds its widgets through ``binder`` and drives the session.
3. ``save()`` and ``resume()`` persist the selection through a store.
4. ``submission_record()`` produces the final flat record.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from pydantic import ValidationError as PydanticValidationError

from geoply.application.binding import WidgetBinder
from geoply.application.catalog import (
    LoadError,
    SelectionPayload,
    load_catalog_with_fallback,
)
from geoply.application.catalog.loader import _extract_validation_errors
from geoply.application.settings import EngineSettings
from geoply.contracts.protocols import CatalogSourceProtocol, SelectionStoreProtocol
from geoply.domain.cascade import DEFAULT_PROJECT_TYPES, CascadeController
from geoply.domain.catalog import Catalog
from geoply.domain.errors import SelectionRestoreError
from geoply.domain.resolver import TURNKEY_PROJECT_TYPE
from geoply.domain.selection import SelectionState
from geoply.infrastructure.sources import build_sources
from geoply.infrastructure.storage import InMemorySelectionStore, JsonFileSelectionStore

logger = logging.getLogger(__name__)


class ConfiguratorSession:
    """A single user's configuration session.

    Attributes:
        state: The session's SelectionState.
        controller: The CascadeController writing to ``state``.
        binder: WidgetBinder for the session's widgets.
        store: Where saved selections go.
        load_error: Why the catalog could not be loaded, if it could not.

    Example:
        >>> session = ConfiguratorSession(sources, store=InMemorySelectionStore())
        >>> await session.start()
        >>> session.controller.set_driver("wallDepth", "200mm")
        >>> session.save("abc")
    """

    def __init__(
        self,
        sources: Sequence[CatalogSourceProtocol],
        store: SelectionStoreProtocol | None = None,
        *,
        project_types: Sequence[str] = DEFAULT_PROJECT_TYPES,
        turnkey_project_type: str = TURNKEY_PROJECT_TYPE,
    ) -> None:
        self.sources = list(sources)
        self.store: SelectionStoreProtocol = store if store is not None else InMemorySelectionStore()
        self.state = SelectionState()
        self.controller = CascadeController(
            self.state,
            project_types=project_types,
            turnkey_project_type=turnkey_project_type,
        )
        self.binder = WidgetBinder(self.controller)
        self.load_error: LoadError | None = None

    @classmethod
    def from_settings(cls, settings: EngineSettings) -> ConfiguratorSession:
        """Create a session from engine settings."""
        store: SelectionStoreProtocol
        if settings.storage_path is not None:
            store = JsonFileSelectionStore(settings.storage_path)
        else:
            store = InMemorySelectionStore()
        return cls(
            build_sources(settings),
            store,
            project_types=settings.project_types,
            turnkey_project_type=settings.turnkey_project_type,
        )

    @property
    def catalog(self) -> Catalog | None:
        return self.controller.catalog

    @property
    def is_degraded(self) -> bool:
        """True when the last catalog load failed."""
        return self.load_error is not None

    async def start(self) -> Catalog:
        """Load the catalog and initialize the widgets.

        Never raises for load failures. Without a catalog installed the
        session degrades to an empty one; otherwise the current catalog and
        selection are kept.

        Returns:
            The installed catalog.
        """
        try:
            catalog = await load_catalog_with_fallback(self.sources)
            self.load_error = None
        except LoadError as e:
            self.load_error = e
            current = self.controller.catalog
            if current is not None:
                logger.warning(f"Catalog reload failed, keeping the current catalog: {e}")
                return current
            logger.warning(f"No catalog source could be loaded, continuing with an empty catalog: {e}")
            catalog = Catalog.empty()

        self.controller.load_catalog(catalog)
        self.binder.sync()
        return catalog

    async def reload(self) -> Catalog:
        """Load the catalog again and re-validate the current selection.

        If every source fails the current catalog and selection are kept
        and the failure is recorded in ``load_error``.
        """
        return await self.start()

    def reset(self) -> None:
        """Discard every driver and selection. The catalog is kept."""
        self.controller.reset()
        self.binder.sync()

    def save(self, key: str) -> dict[str, Any]:
        """Serialize the selection and store it under a key."""
        payload = self.controller.serialize_selection()
        self.store.set(key, payload)
        logger.debug(f"Saved selection {key!r}")
        return payload

    def resume(self, key: str) -> list[str] | None:
        """Restore a stored selection.

        Args:
            key: Store key used with ``save``.

        Returns:
            Dropped keys (see CascadeController.restore_selection), or None
            when nothing is stored under the key.

        Raises:
            SelectionRestoreError: If the stored document is malformed.
        """
        stored = self.store.get(key)
        if stored is None:
            logger.debug(f"No saved selection under {key!r}")
            return None

        try:
            payload = SelectionPayload.model_validate(stored)
        except PydanticValidationError as e:
            details = _extract_validation_errors(e)
            paths = ", ".join(detail["path"] for detail in details)
            raise SelectionRestoreError(f"Saved selection {key!r} is malformed: {paths}") from e

        dropped = self.controller.restore_selection(payload.model_dump())
        self.binder.sync()
        return dropped

    def forget(self, key: str) -> None:
        self.store.delete(key)

    def submission_record(self) -> dict[str, Any]:
        return self.controller.submission_record()
