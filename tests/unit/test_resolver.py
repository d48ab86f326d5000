"""Unit tests for the constraint resolver.

These tests verify:
- Wall-depth gating of dimensions, openings and materials
- Height and width size-class matching
- Skylight gating by roof type, including the 200mm mono-pitch exception
- Standard materials for turnkey projects
- Stable de-duplication and catalog integrity errors
"""

import pytest

from geoply.domain import (
    Catalog,
    CatalogEntry,
    CatalogIntegrityError,
    DimensionKind,
    DriverValues,
    MaterialKind,
    OpeningKind,
    RoofType,
    SizeClass,
    resolve_admissible,
    size_class_of,
)


# =============================================================================
# Wall-depth gating
# =============================================================================


class TestWallDepthGating:
    """Tests for rule 1: wall-depth gating."""

    def test_windows_for_wall_depth(self, catalog: Catalog) -> None:
        """Only windows of the selected wall depth are admissible."""
        result = resolve_admissible(catalog, DriverValues(wall_depth="200"))
        assert result.ids(OpeningKind.WINDOW) == ("SKYLARK200_S1",)

    def test_openings_empty_without_wall_depth(self, catalog: Catalog) -> None:
        result = resolve_admissible(catalog, DriverValues(roof_type=RoofType.MONO_PITCH))
        assert result.windows == ()
        assert result.doors == ()
        assert result.skylights == ()

    def test_dimensions_unfiltered_without_wall_depth(self, catalog: Catalog) -> None:
        result = resolve_admissible(catalog, DriverValues())
        assert len(result.dimensions) == 9
        assert result.dimension_values(DimensionKind.HEIGHT) == ("2400", "3000", "3600")

    def test_dimensions_for_wall_depth(self, catalog: Catalog) -> None:
        result = resolve_admissible(catalog, DriverValues(wall_depth="200"))
        assert result.dimension_values(DimensionKind.HEIGHT) == ("2400", "3000")
        assert result.dimension_values(DimensionKind.WIDTH) == ("4000", "6000")
        assert result.dimension_values(DimensionKind.LENGTH) == ("6000",)

    def test_materials_gated_by_wall_depth(self, catalog: Catalog) -> None:
        at_200 = resolve_admissible(catalog, DriverValues(wall_depth="200"))
        at_250 = resolve_admissible(catalog, DriverValues(wall_depth="250"))
        assert at_200.ids(MaterialKind.CLADDING) == ("cedar", "larch")
        assert at_250.ids(MaterialKind.CLADDING) == ("cedar", "larch", "thermowood")
        assert at_200.ids(MaterialKind.ROOFING) == ("steel", "epdm")


# =============================================================================
# Size classes
# =============================================================================


class TestSizeClassOf:
    """Tests for size_class_of()."""

    def test_lookup_by_wall_depth(self, catalog: Catalog) -> None:
        assert size_class_of(catalog.dimensions, DimensionKind.HEIGHT, "3000", "200") is SizeClass.M
        assert size_class_of(catalog.dimensions, DimensionKind.HEIGHT, "2400", "250") is SizeClass.S

    def test_any_entry_used_as_fallback(self, catalog: Catalog) -> None:
        assert size_class_of(catalog.dimensions, DimensionKind.WIDTH, "6000", "250") is SizeClass.M

    def test_exact_wall_depth_wins_over_any(self) -> None:
        dimensions = [
            CatalogEntry(id="Width-any-4000", kind=DimensionKind.WIDTH, value="4000", size_class=SizeClass.S),
            CatalogEntry(
                id="Width-250-4000",
                kind=DimensionKind.WIDTH,
                wall_depth_class="250",
                value="4000",
                size_class=SizeClass.M,
            ),
        ]
        assert size_class_of(dimensions, DimensionKind.WIDTH, "4000", "250") is SizeClass.M
        assert size_class_of(dimensions, DimensionKind.WIDTH, "4000", "200") is SizeClass.S

    def test_unset_inputs(self, catalog: Catalog) -> None:
        assert size_class_of(catalog.dimensions, DimensionKind.HEIGHT, None, "200") is None
        assert size_class_of(catalog.dimensions, DimensionKind.HEIGHT, "2400", None) is None
        assert size_class_of(catalog.dimensions, DimensionKind.HEIGHT, "9999", "200") is None


class TestOpeningSizeMatching:
    """Tests for rule 2: windows and doors follow the height size class."""

    def test_matching_height_class(self, catalog: Catalog) -> None:
        result = resolve_admissible(catalog, DriverValues(wall_depth="200", height="2400"))
        assert result.height_size_class is SizeClass.S
        assert result.ids(OpeningKind.WINDOW) == ("SKYLARK200_S1",)
        assert result.ids(OpeningKind.DOOR) == ("SKYLARK200_S2",)

    def test_no_opening_in_height_class(self, catalog: Catalog) -> None:
        """A medium height at 200mm leaves no admissible window."""
        result = resolve_admissible(catalog, DriverValues(wall_depth="200", height="3000"))
        assert result.height_size_class is SizeClass.M
        assert result.windows == ()
        assert result.doors == ()

    def test_250mm_windows_by_height(self, catalog: Catalog) -> None:
        small = resolve_admissible(catalog, DriverValues(wall_depth="250", height="2400"))
        large = resolve_admissible(catalog, DriverValues(wall_depth="250", height="3600"))
        assert small.ids(OpeningKind.WINDOW) == ("SKYLARK250_S1",)
        assert large.ids(OpeningKind.WINDOW) == ()

    def test_without_height_no_size_filter(self, catalog: Catalog) -> None:
        result = resolve_admissible(catalog, DriverValues(wall_depth="250"))
        assert result.ids(OpeningKind.WINDOW) == ("SKYLARK250_S1", "SKYLARK250_M1")


# =============================================================================
# Skylights
# =============================================================================


class TestSkylights:
    """Tests for rule 3: skylight matching."""

    @pytest.mark.parametrize("wall_depth", ["200", "250"])
    def test_hidden_without_roof_type(self, catalog: Catalog, wall_depth: str) -> None:
        """No roof type means no skylights, whatever else is set."""
        result = resolve_admissible(catalog, DriverValues(wall_depth=wall_depth, width="4000"))
        assert result.skylights == ()
        assert not result.skylights_visible

    def test_roof_and_width_match(self, catalog: Catalog) -> None:
        result = resolve_admissible(
            catalog, DriverValues(wall_depth="250", roof_type=RoofType.MONO_PITCH, width="4000")
        )
        assert result.width_size_class is SizeClass.S
        assert result.ids(OpeningKind.SKYLIGHT) == ("SKYLARK250_mono_S1",)
        assert result.skylights_visible

    def test_width_mismatch_excludes(self, catalog: Catalog) -> None:
        result = resolve_admissible(
            catalog, DriverValues(wall_depth="250", roof_type=RoofType.MONO_PITCH, width="6000")
        )
        assert result.skylights == ()

    def test_double_pitch(self, catalog: Catalog) -> None:
        result = resolve_admissible(
            catalog, DriverValues(wall_depth="250", roof_type=RoofType.DOUBLE_PITCH, width="6000")
        )
        assert result.ids(OpeningKind.SKYLIGHT) == ("SKYLARK250_double_M1",)

    def test_without_width_no_size_filter(self, catalog: Catalog) -> None:
        result = resolve_admissible(catalog, DriverValues(wall_depth="250", roof_type=RoofType.MONO_PITCH))
        assert result.ids(OpeningKind.SKYLIGHT) == ("SKYLARK250_mono_S1",)

    def test_mono_pitch_200mm_ignores_size(self, catalog: Catalog) -> None:
        """A 200mm mono-pitch skylight shows on a 200mm mono-pitch build of any width."""
        result = resolve_admissible(
            catalog, DriverValues(wall_depth="200", roof_type=RoofType.MONO_PITCH, width="4000")
        )
        assert result.width_size_class is SizeClass.S
        assert result.ids(OpeningKind.SKYLIGHT) == ("SKYLARK200_mono_M",)

    def test_200mm_double_pitch_keeps_size_check(self, catalog: Catalog) -> None:
        small = resolve_admissible(
            catalog, DriverValues(wall_depth="200", roof_type=RoofType.DOUBLE_PITCH, width="4000")
        )
        medium = resolve_admissible(
            catalog, DriverValues(wall_depth="200", roof_type=RoofType.DOUBLE_PITCH, width="6000")
        )
        assert small.ids(OpeningKind.SKYLIGHT) == ("SKYLARK200_double_S",)
        assert medium.ids(OpeningKind.SKYLIGHT) == ()


# =============================================================================
# Standard materials
# =============================================================================


class TestStandardMaterials:
    """Tests for rule 4: standard materials."""

    def test_turnkey_mono_pitch(self, catalog: Catalog) -> None:
        result = resolve_admissible(
            catalog, DriverValues(project_type="turnkey", roof_type=RoofType.MONO_PITCH)
        )
        assert [entry.id for entry in result.standard_materials] == ["cedar", "larch"]

    def test_turnkey_double_pitch(self, catalog: Catalog) -> None:
        result = resolve_admissible(
            catalog, DriverValues(project_type="turnkey", roof_type=RoofType.DOUBLE_PITCH)
        )
        assert [entry.id for entry in result.standard_materials] == ["cedar", "steel"]

    def test_structure_only_has_no_standard_materials(self, catalog: Catalog) -> None:
        result = resolve_admissible(
            catalog, DriverValues(project_type="structureOnly", roof_type=RoofType.MONO_PITCH)
        )
        assert result.standard_materials == ()

    def test_turnkey_without_roof_type(self, catalog: Catalog) -> None:
        result = resolve_admissible(catalog, DriverValues(project_type="turnkey"))
        assert result.standard_materials == ()

    def test_custom_turnkey_project_type(self, catalog: Catalog) -> None:
        result = resolve_admissible(
            catalog,
            DriverValues(project_type="full-service", roof_type=RoofType.MONO_PITCH),
            turnkey_project_type="full-service",
        )
        assert [entry.id for entry in result.standard_materials] == ["cedar", "larch"]


# =============================================================================
# Determinism, de-duplication and integrity
# =============================================================================


class TestResolverStability:
    """Tests for stable ordering and de-duplication."""

    def test_idempotent(self, catalog: Catalog) -> None:
        """Resolving twice with the same inputs yields identical results."""
        drivers = DriverValues(
            project_type="turnkey", wall_depth="250", height="2400", width="4000", roof_type=RoofType.MONO_PITCH
        )
        assert resolve_admissible(catalog, drivers) == resolve_admissible(catalog, drivers)

    def test_duplicate_ids_keep_first(self) -> None:
        catalog = Catalog.from_entries(
            [
                CatalogEntry(id="SKYLARK200_S1", kind=OpeningKind.WINDOW, wall_depth_class="200", label="first"),
                CatalogEntry(id="SKYLARK200_M1", kind=OpeningKind.WINDOW, wall_depth_class="200"),
                CatalogEntry(id="SKYLARK200_S1", kind=OpeningKind.WINDOW, wall_depth_class="200", label="second"),
            ]
        )
        result = resolve_admissible(catalog, DriverValues(wall_depth="200"))
        assert result.ids(OpeningKind.WINDOW) == ("SKYLARK200_S1", "SKYLARK200_M1")
        assert result.windows[0].label == "first"

    def test_same_id_in_different_kinds_is_not_a_duplicate(self) -> None:
        catalog = Catalog.from_entries(
            [
                CatalogEntry(id="SKYLARK200_S1", kind=OpeningKind.WINDOW, wall_depth_class="200"),
                CatalogEntry(id="SKYLARK200_S1", kind=OpeningKind.DOOR, wall_depth_class="200"),
            ]
        )
        result = resolve_admissible(catalog, DriverValues(wall_depth="200"))
        assert result.ids(OpeningKind.WINDOW) == ("SKYLARK200_S1",)
        assert result.ids(OpeningKind.DOOR) == ("SKYLARK200_S1",)

    def test_empty_catalog(self) -> None:
        result = resolve_admissible(Catalog.empty(), DriverValues(wall_depth="200", roof_type=RoofType.MONO_PITCH))
        assert result.dimensions == ()
        assert result.windows == ()
        assert result.standard_materials == ()


class TestCatalogIntegrity:
    """Tests for malformed catalog entries."""

    def test_dimension_without_value(self) -> None:
        catalog = Catalog.from_entries([CatalogEntry(id="Height-200-x", kind=DimensionKind.HEIGHT)])
        with pytest.raises(CatalogIntegrityError) as exc_info:
            resolve_admissible(catalog, DriverValues())
        assert exc_info.value.entry_id == "Height-200-x"

    def test_unknown_kind(self) -> None:
        catalog = Catalog.from_entries([CatalogEntry(id="odd", kind="chimney")])  # type: ignore[arg-type]
        with pytest.raises(CatalogIntegrityError, match="unknown kind"):
            resolve_admissible(catalog, DriverValues())

    def test_missing_wall_depth_class(self) -> None:
        catalog = Catalog.from_entries([CatalogEntry(id="w", kind=OpeningKind.WINDOW, wall_depth_class="")])
        with pytest.raises(CatalogIntegrityError, match="wall-depth class"):
            resolve_admissible(catalog, DriverValues(wall_depth="200"))
