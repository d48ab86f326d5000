"""Infrastructure layer - catalog sources, selection stores and headless widgets."""

from .sources import (
    FileCatalogSource,
    HttpCatalogSource,
    StaticCatalogSource,
    build_sources,
)
from .storage import InMemorySelectionStore, JsonFileSelectionStore
from .widgets import InMemoryWidget

__all__ = [
    "FileCatalogSource",
    "HttpCatalogSource",
    "InMemorySelectionStore",
    "InMemoryWidget",
    "JsonFileSelectionStore",
    "StaticCatalogSource",
    "build_sources",
]
