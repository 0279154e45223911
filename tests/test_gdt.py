"""Tests for GD&T extraction and tier ladders."""

import pytest

from drawing_facts.extractors.gdt import (
    GdtExtractor,
    classify_gdt_tier,
    classify_position_tier,
)
from drawing_facts.models.gdt import GdtType
from drawing_facts.models.levels import CostImpact, ToleranceTier
from drawing_facts.models.routing import RoutingOp


@pytest.fixture
def extractor():
    return GdtExtractor()


# =============================================================================
# Extraction
# =============================================================================

class TestExtract:

    def test_true_position_with_mmc(self, extractor):
        callouts = extractor.extract("TRUE POSITION .005 MMC A B")
        assert len(callouts) == 1
        c = callouts[0]
        assert c.gdt_type == GdtType.POSITION
        assert c.tolerance_value == pytest.approx(0.005)
        assert c.is_mmc
        assert c.datum_references == ["A", "B"]
        # Effective 0.0075 lands past the Tight boundary
        assert c.tier == ToleranceTier.MODERATE

    def test_flatness_standard_without_cost_flags(self, extractor):
        callouts = extractor.extract("FLATNESS .010")
        assert callouts[0].gdt_type == GdtType.FLATNESS
        assert callouts[0].tier == ToleranceTier.STANDARD
        assert extractor.to_cost_flags(callouts) == []

    def test_symbols(self, extractor):
        c = extractor.extract("⌖ ⌀.010 Ⓜ A B C")[0]
        assert c.gdt_type == GdtType.POSITION
        assert c.is_diametral
        assert c.is_mmc
        assert c.datum_references == ["A", "B", "C"]

    def test_total_runout_not_read_as_circular(self, extractor):
        callouts = extractor.extract("TOTAL RUNOUT .001 A")
        assert [c.gdt_type for c in callouts] == [GdtType.TOTAL_RUNOUT]
        assert callouts[0].tier == ToleranceTier.PRECISION

    def test_deduplicated_and_sorted_tightest_first(self, extractor):
        callouts = extractor.extract("FLATNESS .003\nPERPENDICULARITY .001 A\nFLATNESS .003")
        assert [(c.gdt_type, c.tolerance_value) for c in callouts] == [
            (GdtType.PERPENDICULARITY, 0.001),
            (GdtType.FLATNESS, 0.003),
        ]

    def test_values_too_large_are_dimensions(self, extractor):
        assert extractor.extract("POSITION 2.5") == []

    def test_extraction_is_idempotent(self, extractor):
        text = "TRUE POSITION .005 MMC A B\nFLATNESS .002\nPROFILE OF A SURFACE .010 A"
        assert extractor.extract(text) == extractor.extract(text)

    def test_empty_text(self, extractor):
        assert extractor.extract("") == []


# =============================================================================
# Tier ladders
# =============================================================================

class TestTiers:

    @pytest.mark.parametrize("value, expected", [
        (0.002, ToleranceTier.PRECISION),
        (0.005, ToleranceTier.TIGHT),
        (0.010, ToleranceTier.MODERATE),
        (0.011, ToleranceTier.STANDARD),
    ])
    def test_position_ladder(self, value, expected):
        assert classify_position_tier(value, False) == expected

    @pytest.mark.parametrize("value", [0.0005, 0.001, 0.002, 0.003, 0.005, 0.0067, 0.008, 0.012])
    def test_mmc_never_tighter_than_rfs(self, value):
        assert classify_position_tier(value, True) <= classify_position_tier(value, False)

    def test_families_keep_their_own_ladders(self):
        assert classify_gdt_tier(GdtType.FLATNESS, 0.004) == ToleranceTier.MODERATE
        assert classify_gdt_tier(GdtType.PERPENDICULARITY, 0.004) == ToleranceTier.TIGHT
        assert classify_gdt_tier(GdtType.CIRCULAR_RUNOUT, 0.001) == ToleranceTier.PRECISION
        assert classify_gdt_tier(GdtType.PROFILE_OF_SURFACE, 0.001) == ToleranceTier.PRECISION
        assert classify_gdt_tier(GdtType.TOTAL_RUNOUT, 0.003) == ToleranceTier.TIGHT

    @pytest.mark.parametrize("value, expected", [
        (0.0015, ToleranceTier.PRECISION),
        (0.002, ToleranceTier.PRECISION),
        (0.0025, ToleranceTier.TIGHT),
        (0.010, ToleranceTier.MODERATE),
        (0.011, ToleranceTier.STANDARD),
    ])
    def test_runout_ladder(self, value, expected):
        assert classify_gdt_tier(GdtType.CIRCULAR_RUNOUT, value) == expected


# =============================================================================
# Cost flags and routing hints
# =============================================================================

class TestFlagsAndHints:

    def test_cost_flags_from_moderate(self, extractor):
        flags = extractor.to_cost_flags(extractor.extract("TRUE POSITION .005 MMC A B"))
        assert len(flags) == 1
        assert flags[0].impact == CostImpact.MEDIUM
        assert "(Datum A-B)" in flags[0].description
        assert "@ MMC" in flags[0].description

    def test_tight_callouts_add_cmm_fixture_and_review(self, extractor):
        callouts = extractor.extract("TRUE POSITION .002 A B\nFLATNESS .001")
        hints = extractor.to_routing_hints(callouts)
        assert [h.operation for h in hints] == [RoutingOp.INSPECT, RoutingOp.MACHINE, RoutingOp.INSPECT]
        assert hints[0].note_text == "CMM INSPECT - GD&T REQUIREMENTS"
        assert hints[1].note_text.startswith("FIXTURE MAY BE REQUIRED")
        assert "MULTIPLE TIGHT GD&T (2 CALLOUTS)" in hints[2].note_text

    def test_single_tight_callout_has_no_review_hint(self, extractor):
        hints = extractor.to_routing_hints(extractor.extract("FLATNESS .001"))
        assert len(hints) == 1

    def test_no_hints_below_tight(self, extractor):
        assert extractor.to_routing_hints(extractor.extract("FLATNESS .010")) == []
