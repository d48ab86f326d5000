"""Unit tests for the Catalog store."""

from geoply.domain import Catalog, CatalogEntry, DimensionKind, MaterialKind, OpeningKind


class TestCatalog:
    """Tests for Catalog queries."""

    def test_get_returns_entries_of_one_kind_in_order(self, catalog: Catalog) -> None:
        ids = [entry.id for entry in catalog.get(OpeningKind.WINDOW)]
        assert ids == ["SKYLARK200_S1", "SKYLARK250_S1", "SKYLARK250_M1"]

    def test_domain_groups(self, catalog: Catalog) -> None:
        assert len(catalog.dimensions) == 9
        assert len(catalog.openings) == 9
        assert len(catalog.materials) == 5

    def test_counts_cover_every_kind(self, catalog: Catalog) -> None:
        counts = catalog.counts()
        assert counts["Height"] == 4
        assert counts["window"] == 3
        assert counts["skylight"] == 4
        assert counts["Roofing"] == 2

    def test_wall_depths_exclude_any(self, catalog: Catalog) -> None:
        assert catalog.wall_depths() == ["200", "250"]

    def test_wall_depths_sort_numerically(self) -> None:
        catalog = Catalog.from_entries(
            [
                CatalogEntry(id="a", kind=OpeningKind.DOOR, wall_depth_class="200"),
                CatalogEntry(id="b", kind=OpeningKind.DOOR, wall_depth_class="90"),
            ]
        )
        assert catalog.wall_depths() == ["90", "200"]

    def test_empty_catalog(self) -> None:
        """An empty catalog answers every query without failing."""
        catalog = Catalog.empty()
        assert catalog.is_empty
        assert catalog.get(DimensionKind.HEIGHT) == []
        assert catalog.get(MaterialKind.CLADDING) == []
        assert catalog.wall_depths() == []
        assert set(catalog.counts().values()) == {0}
