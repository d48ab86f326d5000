"""Catalog sources: local files, HTTP endpoints and in-memory catalogs.

Each source implements CatalogSourceProtocol. Sources never fall back on
their own; ``load_catalog_with_fallback`` tries them in order.

Classes:
    FileCatalogSource: JSON document or CSV directory on disk
    HttpCatalogSource: JSON document or CSV files served over HTTP
    StaticCatalogSource: Catalog or document already in memory
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx

from geoply.application.catalog import (
    CSV_SECTIONS,
    LoadError,
    load_catalog,
    load_catalog_from_dict,
    parse_catalog_csv,
    parse_catalog_json,
)
from geoply.application.settings import EngineSettings, SourceKind
from geoply.domain.catalog import Catalog

logger = logging.getLogger(__name__)

# Sent with every request so caches revalidate catalog files with the origin
NO_CACHE_HEADERS: dict[str, str] = {"Cache-Control": "no-cache"}


class FileCatalogSource:
    """Load a catalog from a JSON file or a directory of CSV files.

    Attributes:
        path: Catalog file or directory.
        strict: Reject CSV rows that fail validation instead of skipping them.
    """

    def __init__(self, path: Path | str, strict: bool = False) -> None:
        self.path = Path(path)
        self.strict = strict

    @property
    def name(self) -> str:
        return str(self.path)

    async def fetch(self) -> Catalog:
        return load_catalog(self.path, strict=self.strict)


class HttpCatalogSource:
    """Fetch a catalog over HTTP.

    A location ending in ``.json`` is fetched as one catalog document.
    Any other location is treated as a base URL holding dimensions.csv,
    openings.csv and materials.csv. A file that answers 404 leaves its
    section empty, as a missing file does in a catalog directory.

    Attributes:
        location: Document URL or base URL.
        timeout: Request timeout in seconds (default: 10.0)

    Example:
        >>> source = HttpCatalogSource("https://cdn.example.com/catalog/")
        >>> catalog = await source.fetch()
    """

    def __init__(self, location: str, timeout: float = 10.0, strict: bool = False) -> None:
        self.location = location
        self.timeout = timeout
        self.strict = strict

    @property
    def name(self) -> str:
        return self.location

    @property
    def is_document(self) -> bool:
        return self.location.lower().split("?")[0].endswith(".json")

    async def fetch(self) -> Catalog:
        """Fetch and parse the catalog.

        Raises:
            LoadError: "http_status" for a non-success response,
                "unreachable" when the server cannot be reached, or any
                parsing error type from the loader.
        """
        async with httpx.AsyncClient(timeout=self.timeout, headers=NO_CACHE_HEADERS) as client:
            if self.is_document:
                text = await self._get_text(client, self.location)
                catalog = parse_catalog_json(text, source=self.location)
            else:
                texts = await self._get_csv_texts(client)
                catalog = parse_catalog_csv(texts, source=self.location, strict=self.strict)

        logger.info(f"Fetched catalog from {self.location} ({len(catalog.entries)} entries)")
        return catalog

    async def _get_csv_texts(self, client: httpx.AsyncClient) -> dict[str, str]:
        """Fetch the CSV files; a file answering 404 leaves its section empty."""
        base = self.location.rstrip("/")
        texts: dict[str, str] = {}
        missing: list[dict[str, Any]] = []
        for file_name in CSV_SECTIONS:
            url = f"{base}/{file_name}"
            try:
                texts[file_name] = await self._get_text(client, url)
            except LoadError as e:
                if e.error_type != "http_status" or e.details[0]["status"] != 404:
                    raise
                logger.info(f"{url} not found, leaving its section empty")
                missing.extend(e.details)

        if not texts:
            raise LoadError(
                message=f"No catalog files found under {self.location}",
                error_type="http_status",
                source=self.location,
                details=missing,
            )
        return texts

    async def _get_text(self, client: httpx.AsyncClient, url: str) -> str:
        try:
            response = await client.get(url)
        except httpx.TimeoutException:
            raise LoadError(
                message=f"Timed out fetching catalog: {url}",
                error_type="unreachable",
                source=url,
            )
        except httpx.RequestError as e:
            raise LoadError(
                message=f"Could not reach catalog: {url}: {e}",
                error_type="unreachable",
                source=url,
            )

        if response.status_code != 200:
            raise LoadError(
                message=f"Failed to fetch catalog: {url} (status {response.status_code})",
                error_type="http_status",
                source=url,
                details=[{"path": url, "message": response.reason_phrase, "status": response.status_code}],
            )
        logger.debug(f"Fetched {url} ({len(response.content)} bytes)")
        return response.text


class StaticCatalogSource:
    """Serve a catalog held in memory.

    Useful as the last fallback (a catalog bundled with the application)
    and in tests.

    Args:
        catalog: A ready Catalog, or a dictionary document to validate on fetch.
        name: Description of the source.
    """

    def __init__(self, catalog: Catalog | dict[str, Any], name: str = "static") -> None:
        self._catalog = catalog
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    async def fetch(self) -> Catalog:
        if isinstance(self._catalog, Catalog):
            return self._catalog
        return load_catalog_from_dict(self._catalog, source=self._name)


def build_sources(settings: EngineSettings) -> list[FileCatalogSource | HttpCatalogSource]:
    """Create catalog sources from settings, keeping their order."""
    sources: list[FileCatalogSource | HttpCatalogSource] = []
    for config in settings.catalog_sources:
        if config.kind is SourceKind.HTTP:
            sources.append(HttpCatalogSource(config.location, timeout=config.timeout, strict=config.strict))
        else:
            sources.append(FileCatalogSource(config.location, strict=config.strict))
    return sources
