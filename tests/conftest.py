"""Pytest configuration and shared fixtures for selection engine tests."""

from __future__ import annotations

import pytest

from geoply.domain import (
    CascadeController,
    Catalog,
    CatalogEntry,
    DimensionKind,
    MaterialKind,
    OpeningKind,
    RoofType,
    SelectionState,
    SizeClass,
    StandardFor,
)


# =============================================================================
# pytest-httpx fixture integration
# =============================================================================

# pytest-httpx provides the httpx_mock fixture automatically once installed


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: tests exercising several layers together")
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Catalog fixtures
# =============================================================================


def _dimension(kind: DimensionKind, wall_depth: str, value: str, size: SizeClass | None = None) -> CatalogEntry:
    return CatalogEntry(
        id=f"{kind.value}-{wall_depth}-{value}",
        kind=kind,
        wall_depth_class=wall_depth,
        size_class=size,
        value=value,
        label=f"{value}mm",
    )


def _opening(kind: OpeningKind, entry_id: str, wall_depth: str, roof_type: RoofType | None = None) -> CatalogEntry:
    return CatalogEntry(
        id=entry_id,
        kind=kind,
        wall_depth_class=wall_depth,
        roof_type_class=roof_type,
        supports_quantity=True,
    )


def _material(
    kind: MaterialKind, entry_id: str, standard: StandardFor | None = None, wall_depth: str = "any"
) -> CatalogEntry:
    return CatalogEntry(
        id=entry_id,
        kind=kind,
        wall_depth_class=wall_depth,
        standard_for=standard,
        label=entry_id.title(),
    )


@pytest.fixture
def sample_entries() -> list[CatalogEntry]:
    """Entries of a two wall-depth catalog (200mm and 250mm).

    Height size classes: 200mm 2400=S 3000=M; 250mm 2400=S 3600=L.
    Width size classes: 4000=S and 6000=M at any depth, 8000=L at 250mm only.
    """
    return [
        _dimension(DimensionKind.HEIGHT, "200", "2400", SizeClass.S),
        _dimension(DimensionKind.HEIGHT, "200", "3000", SizeClass.M),
        _dimension(DimensionKind.HEIGHT, "250", "2400", SizeClass.S),
        _dimension(DimensionKind.HEIGHT, "250", "3600", SizeClass.L),
        _dimension(DimensionKind.WIDTH, "any", "4000", SizeClass.S),
        _dimension(DimensionKind.WIDTH, "any", "6000", SizeClass.M),
        _dimension(DimensionKind.WIDTH, "250", "8000", SizeClass.L),
        _dimension(DimensionKind.LENGTH, "any", "6000"),
        _dimension(DimensionKind.LENGTH, "250", "9000"),
        _opening(OpeningKind.WINDOW, "SKYLARK200_S1", "200"),
        _opening(OpeningKind.WINDOW, "SKYLARK250_S1", "250"),
        _opening(OpeningKind.WINDOW, "SKYLARK250_M1", "250"),
        _opening(OpeningKind.DOOR, "SKYLARK200_S2", "200"),
        _opening(OpeningKind.DOOR, "SKYLARK250_M3", "250"),
        _opening(OpeningKind.SKYLIGHT, "SKYLARK200_mono_M", "200", RoofType.MONO_PITCH),
        _opening(OpeningKind.SKYLIGHT, "SKYLARK200_double_S", "200", RoofType.DOUBLE_PITCH),
        _opening(OpeningKind.SKYLIGHT, "SKYLARK250_mono_S1", "250", RoofType.MONO_PITCH),
        _opening(OpeningKind.SKYLIGHT, "SKYLARK250_double_M1", "250", RoofType.DOUBLE_PITCH),
        _material(MaterialKind.CLADDING, "cedar", StandardFor.BOTH),
        _material(MaterialKind.CLADDING, "larch", StandardFor.MONO),
        _material(MaterialKind.CLADDING, "thermowood", wall_depth="250"),
        _material(MaterialKind.ROOFING, "steel", StandardFor.DOUBLE),
        _material(MaterialKind.ROOFING, "epdm"),
    ]


@pytest.fixture
def catalog(sample_entries: list[CatalogEntry]) -> Catalog:
    """The sample catalog."""
    return Catalog.from_entries(sample_entries, source="fixture")


@pytest.fixture
def state() -> SelectionState:
    return SelectionState()


@pytest.fixture
def controller(state: SelectionState, catalog: Catalog) -> CascadeController:
    """A controller with the sample catalog already loaded."""
    controller = CascadeController(state)
    controller.load_catalog(catalog)
    return controller


@pytest.fixture
def catalog_document() -> dict:
    """A JSON catalog document using the CSV column names."""
    return {
        "dimensions": [
            {"Type": "Height", "Value": 2400, "Label": "2.4m", "WallDepth": "200mm", "Size": "S"},
            {"Type": "Height", "Value": 3000, "Label": "3.0m", "WallDepth": "200mm", "Size": "M"},
            {"Type": "Width", "Value": 4000, "Label": "4m", "WallDepth": "any", "Size": "S"},
            {"Type": "Length", "Value": 6000, "Label": "6m"},
        ],
        "openings": [
            {"Type": "Windows and doorways", "Name": "SKYLARK200_WINDOW-S1"},
            {"Type": "Windows and doorways", "Name": "SKYLARK200_DOOR-S2"},
            {"Type": "Roof", "Name": "SKYLARK200_SKYLIGHT-M1", "RoofType": "mono-pitch"},
        ],
        "materials": [
            {"Type": "Cladding", "Value": "cedar", "Title": "Cedar", "Standard": "both"},
            {"Type": "Roofing", "Value": "steel", "Title": "Steel", "Standard": "double"},
        ],
    }
