"""Tests for the structure catalog."""

import pytest

from core.structures import (
    STRUCTURE_COUNT,
    StructureCatalog,
    StructureCatalogError,
    get_all_structures,
    get_structure_by_id,
    get_structure_by_key,
    structure_ids,
    validate_segment_percentages,
)
from tests.conftest import make_structure


class TestBuiltinCatalog:
    """Tests for the seven shipped templates."""

    def test_count(self):
        assert len(get_all_structures()) == STRUCTURE_COUNT == 7

    def test_ids_in_order(self):
        assert structure_ids() == ["surge", "climb", "pulse", "drop", "breathe", "wave", "resolve"]

    def test_percentages_sum_to_100(self):
        for structure in get_all_structures():
            assert validate_segment_percentages(structure), structure.id
            assert structure.total_percentage == 100

    def test_every_template_has_segments(self):
        for structure in get_all_structures():
            assert len(structure.segments) >= 1

    def test_surge_data(self):
        """Surge matches its documented arc."""
        surge = get_structure_by_id("surge")
        assert surge.name == "Surge"
        assert surge.pacing.start == "FAST"
        assert surge.pacing.peak_position_max == 0.6
        assert surge.pacing.silence_required is True
        assert [(s.type, s.base_percentage) for s in surge.segments] == [
            ("HOOK", 15), ("BUILD", 35), ("PEAK", 10), ("SUSTAIN", 25), ("RESOLVE", 15),
        ]

    def test_templates_are_immutable(self):
        surge = get_structure_by_id("surge")
        with pytest.raises(AttributeError):
            surge.name = "Changed"


class TestLookups:
    """Tests for catalog lookup functions."""

    def test_lookup_is_case_insensitive(self):
        assert get_structure_by_id("SURGE") is get_structure_by_id("surge")
        assert get_structure_by_id("Climb").id == "climb"

    def test_unknown_id_returns_none(self):
        assert get_structure_by_id("nonexistent") is None

    def test_get_by_key_uses_uppercase_keys(self):
        assert get_structure_by_key("WAVE").id == "wave"
        assert get_structure_by_key("wave") is None

    def test_get_all_returns_copy(self):
        """Mutating the returned list does not affect the catalog."""
        structures = get_all_structures()
        structures.clear()
        assert len(get_all_structures()) == STRUCTURE_COUNT


class TestCatalogInvariants:
    """A catalog refuses templates that break its invariants."""

    def test_bad_percentages_rejected(self):
        with pytest.raises(StructureCatalogError, match="sum to 90"):
            StructureCatalog([make_structure([("HOOK", 40), ("PEAK", 50)])])

    def test_empty_segments_rejected(self):
        with pytest.raises(StructureCatalogError, match="no segments"):
            StructureCatalog([make_structure([])])

    def test_duplicate_ids_rejected(self):
        """Ids collide case-insensitively."""
        with pytest.raises(StructureCatalogError, match="Duplicate"):
            StructureCatalog([
                make_structure([("HOOK", 100)], structure_id="twin"),
                make_structure([("PEAK", 100)], structure_id="TWIN"),
            ])

    def test_contains(self):
        catalog = StructureCatalog([make_structure([("HOOK", 100)], structure_id="solo")])
        assert "solo" in catalog
        assert "SOLO" in catalog
        assert "other" not in catalog
        assert catalog.keys() == ["SOLO"]
