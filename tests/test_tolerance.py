"""Tests for tolerance and surface finish analysis."""

import pytest

from drawing_facts.extractors.tolerance import (
    ToleranceAnalyzer,
    classify_dimension_tier,
    classify_surface_finish,
    parse_fraction,
)
from drawing_facts.models.levels import CostImpact, ToleranceTier
from drawing_facts.models.routing import RoutingOp
from drawing_facts.models.tolerance import FinishUnit, ToleranceType


@pytest.fixture
def analyzer():
    return ToleranceAnalyzer()


# =============================================================================
# Tier ladders
# =============================================================================

class TestTierLadders:

    @pytest.mark.parametrize("band, expected", [
        (0.0029, ToleranceTier.PRECISION),
        (0.003, ToleranceTier.TIGHT),
        (0.0059, ToleranceTier.TIGHT),
        (0.006, ToleranceTier.MODERATE),
        (0.0149, ToleranceTier.MODERATE),
        (0.015, ToleranceTier.STANDARD),
    ])
    def test_dimension_boundaries(self, band, expected):
        assert classify_dimension_tier(band) == expected

    @pytest.mark.parametrize("band", [0.0005, 0.001, 0.002, 0.004, 0.005, 0.0059])
    def test_bands_under_006_are_never_standard(self, band):
        assert classify_dimension_tier(band) >= ToleranceTier.TIGHT

    @pytest.mark.parametrize("value, expected", [
        (8, ToleranceTier.PRECISION),
        (16, ToleranceTier.PRECISION),
        (32, ToleranceTier.TIGHT),
        (63, ToleranceTier.MODERATE),
        (125, ToleranceTier.STANDARD),
    ])
    def test_surface_finish_boundaries(self, value, expected):
        assert classify_surface_finish(value) == expected

    def test_parse_fraction(self):
        assert parse_fraction("1/64") == pytest.approx(1 / 64)
        assert parse_fraction("1/0") is None
        assert parse_fraction("1-64") is None


# =============================================================================
# General tolerance block
# =============================================================================

class TestGeneralTolerance:

    def test_decimal_places_and_angles(self, analyzer):
        general = analyzer.parse_general_tolerance(".XX ±.01 .XXX ±.005 ANGLES ±1°")
        assert general.two_place == pytest.approx(0.01)
        assert general.three_place == pytest.approx(0.005)
        assert general.angular_degrees == pytest.approx(1.0)
        assert general.tier == ToleranceTier.MODERATE

    def test_word_places(self, analyzer):
        general = analyzer.parse_general_tolerance("TWO PLACE DECIMALS ±.01 THREE PLACE DECIMALS ±.005")
        assert general.place(2) == pytest.approx(0.01)
        assert general.place(3) == pytest.approx(0.005)

    def test_fractional(self, analyzer):
        general = analyzer.parse_general_tolerance("FRACTIONS ±1/64")
        assert general.fractional_text == "1/64"
        assert general.fractional == pytest.approx(1 / 64)
        assert general.tier == ToleranceTier.STANDARD

    @pytest.mark.parametrize("text", ["ANGLES ±30'", "ANGLES ±0° 30'"])
    def test_angular_minutes(self, analyzer, text):
        assert analyzer.parse_general_tolerance(text).angular_degrees == pytest.approx(0.5)

    def test_no_values(self, analyzer):
        assert analyzer.parse_general_tolerance("SEE NOTES") is None
        assert analyzer.parse_general_tolerance("") is None

    def test_tight_block_from_title_block_text(self, analyzer):
        result = analyzer.analyze("", ".XXX ±.001")
        assert result.general_tolerance.tier == ToleranceTier.PRECISION
        assert result.overall_tier == ToleranceTier.PRECISION
        assert result.cost_flags[0].source == ToleranceAnalyzer.SOURCE_GENERAL

    def test_block_located_in_page_text(self, analyzer):
        result = analyzer.analyze("UNLESS OTHERWISE SPECIFIED\nTOLERANCES: .XX ±.01")
        assert result.general_tolerance.two_place == pytest.approx(0.01)
        assert result.general_tolerance.tier == ToleranceTier.STANDARD


# =============================================================================
# Dimension tolerances
# =============================================================================

class TestDimensionTolerances:

    def test_bilateral(self, analyzer):
        result = analyzer.analyze("HOLE 0.500 ±0.002")
        tol = result.specific_tolerances[0]
        assert (tol.nominal, tol.plus, tol.minus) == (0.5, 0.002, 0.002)
        assert tol.type == ToleranceType.BILATERAL
        assert tol.tier == ToleranceTier.TIGHT
        assert result.cost_flags[0].impact == CostImpact.HIGH
        assert result.cost_flags[0].source == ToleranceAnalyzer.SOURCE_DIMENSION
        assert result.overall_tier == ToleranceTier.TIGHT

    def test_unilateral(self, analyzer):
        result = analyzer.analyze("BORE 0.750 +0.002/-0.000")
        tol = result.specific_tolerances[0]
        assert tol.type == ToleranceType.UNILATERAL
        assert tol.total_band == pytest.approx(0.002)
        assert tol.tier == ToleranceTier.PRECISION
        assert result.cost_flags[0].impact == CostImpact.CRITICAL

    def test_split_form_deduplicated_across_patterns(self, analyzer):
        result = analyzer.analyze("SHAFT 0.500 +.000 -.002")
        assert len(result.specific_tolerances) == 1
        tol = result.specific_tolerances[0]
        assert (tol.plus, tol.minus) == (0.0, 0.002)

    def test_identical_callouts_deduplicated(self, analyzer):
        result = analyzer.analyze("0.500 ±0.002 TYP\n0.500 ±0.002")
        assert len(result.specific_tolerances) == 1

    def test_tolerance_larger_than_nominal_skipped(self, analyzer):
        assert analyzer.analyze("0.25 ±0.5").specific_tolerances == []

    def test_moderate_dimensions_raise_no_flags(self, analyzer):
        result = analyzer.analyze("2.000 ±0.005")
        assert result.overall_tier == ToleranceTier.MODERATE
        assert not result.has_cost_flags


# =============================================================================
# Surface finish
# =============================================================================

class TestSurfaceFinish:

    def test_ra_precision(self, analyzer):
        result = analyzer.analyze("GRIND Ra 16")
        sf = result.surface_finish_callouts[0]
        assert (sf.value, sf.unit, sf.tier) == (16, FinishUnit.RA, ToleranceTier.PRECISION)
        assert result.cost_flags[0].impact == CostImpact.HIGH
        assert result.tightest_surface_finish == 16

    def test_rms(self, analyzer):
        result = analyzer.analyze("32 RMS")
        sf = result.surface_finish_callouts[0]
        assert sf.unit == FinishUnit.RMS
        assert result.cost_flags[0].impact == CostImpact.MEDIUM

    def test_values_over_limit_ignored(self, analyzer):
        assert analyzer.analyze("5000 RMS").surface_finish_callouts == []

    def test_moderate_finish_has_no_flag(self, analyzer):
        result = analyzer.analyze("63 Ra")
        assert result.surface_finish_callouts[0].tier == ToleranceTier.MODERATE
        assert not result.has_cost_flags


# =============================================================================
# Routing hints
# =============================================================================

class TestRoutingHints:

    def test_cmm_and_grinding(self, analyzer):
        hints = analyzer.to_routing_hints(analyzer.analyze("GRIND Ra 16"))
        assert [h.operation for h in hints] == [RoutingOp.INSPECT, RoutingOp.OUTSIDE_PROCESS]
        assert hints[0].note_text == "CMM INSPECT - TIGHT TOLERANCES"
        assert hints[1].note_text.startswith("GRINDING REQUIRED")

    def test_single_cmm_hint_for_many_flags(self, analyzer):
        hints = analyzer.to_routing_hints(analyzer.analyze("0.500 ±0.001\n0.750 ±0.002"))
        assert len(hints) == 1

    def test_nothing_to_route(self, analyzer):
        assert analyzer.to_routing_hints(analyzer.analyze("")) == []
        assert analyzer.to_routing_hints(None) == []
