"""Tests for the data models and their total mapping functions."""

import pytest

from drawing_facts.extractors.notes import default_routing_for
from drawing_facts.models import (
    BendStackupRisk,
    CostImpact,
    DimensionTolerance,
    DrawingNote,
    FabricationTier,
    GdtCallout,
    GdtFamily,
    GdtType,
    GeneralTolerance,
    NoteCategory,
    RoutingImpact,
    RoutingOp,
    SpecCategory,
    TitleBlockInfo,
    ToleranceAnalysisResult,
    ToleranceTier,
    ToleranceType,
    gdt_family,
    gdt_impact_for_tier,
    note_category_for_spec,
    routing_impact_for,
)
from drawing_facts.reconciliation.routing import op_number_for


# =============================================================================
# Ordered levels
# =============================================================================

class TestOrderedLevels:

    def test_tolerance_tiers_are_ordered_loosest_first(self):
        assert ToleranceTier.STANDARD < ToleranceTier.MODERATE < ToleranceTier.TIGHT < ToleranceTier.PRECISION

    def test_cost_impact_ordered(self):
        assert list(CostImpact) == sorted(CostImpact)
        assert max(CostImpact) == CostImpact.CRITICAL

    def test_fabrication_and_bend_levels_ordered(self):
        assert FabricationTier.SHOP_STANDARD < FabricationTier.MACHINING < FabricationTier.PRECISION_MACHINING
        assert BendStackupRisk.NONE < BendStackupRisk.LOW < BendStackupRisk.HIGH

    def test_label_is_camel_case(self):
        assert ToleranceTier.PRECISION.label == "Precision"
        assert FabricationTier.PRECISION_MACHINING.label == "PrecisionMachining"
        assert FabricationTier.SHOP_STANDARD.label == "ShopStandard"


# =============================================================================
# Total mappings (every variant has an entry)
# =============================================================================

class TestMappings:

    @pytest.mark.parametrize("category", list(NoteCategory))
    def test_every_note_category_has_routing_impact(self, category):
        assert isinstance(routing_impact_for(category), RoutingImpact)

    def test_routing_impact_rules(self):
        assert routing_impact_for(NoteCategory.PROCESS_CONSTRAINT) == RoutingImpact.MODIFY_OPERATION
        assert routing_impact_for(NoteCategory.GENERAL) == RoutingImpact.INFORMATIONAL
        others = set(NoteCategory) - {NoteCategory.PROCESS_CONSTRAINT, NoteCategory.GENERAL}
        assert all(routing_impact_for(c) == RoutingImpact.ADD_OPERATION for c in others)

    @pytest.mark.parametrize("category", list(NoteCategory))
    def test_every_note_category_has_default_routing(self, category):
        routing = default_routing_for(category)
        if category == NoteCategory.GENERAL:
            assert routing is None
        else:
            assert isinstance(routing[0], RoutingOp)

    @pytest.mark.parametrize("gdt_type", list(GdtType))
    def test_every_gdt_type_has_family(self, gdt_type):
        assert isinstance(gdt_family(gdt_type), GdtFamily)

    def test_gdt_impact_is_monotonic_in_tier(self):
        impacts = [gdt_impact_for_tier(t) for t in sorted(ToleranceTier)]
        assert impacts == sorted(impacts)
        assert gdt_impact_for_tier(ToleranceTier.PRECISION) == CostImpact.CRITICAL

    @pytest.mark.parametrize("category", list(SpecCategory))
    def test_every_spec_category_has_note_category(self, category):
        assert isinstance(note_category_for_spec(category), NoteCategory)

    @pytest.mark.parametrize("op", list(RoutingOp))
    def test_every_routing_op_has_op_number(self, op):
        assert op_number_for(op) > 0


# =============================================================================
# Derived values
# =============================================================================

class TestDerivedValues:

    def test_title_block_overall_confidence_is_mean_of_populated(self):
        info = TitleBlockInfo(
            part_number="12345-01", part_number_confidence=0.8,
            revision="B", revision_confidence=0.9,
        )
        assert info.overall_confidence == pytest.approx(0.85)

    def test_empty_title_block_has_zero_confidence(self):
        assert TitleBlockInfo().overall_confidence == 0.0
        assert not TitleBlockInfo().has_identity

    def test_total_band(self):
        tol = DimensionTolerance(nominal=0.5, plus=0.002, minus=0.001, type=ToleranceType.BILATERAL)
        assert tol.total_band == pytest.approx(0.003)

    def test_general_tolerance_tightest_place(self):
        general = GeneralTolerance(one_place=0.1, two_place=0.01, three_place=0.005)
        assert general.tightest_place == 0.005
        assert general.place(2) == 0.01
        assert general.place(4) is None

    def test_note_impact_follows_category(self):
        note = DrawingNote(text="WATERJET ONLY", category=NoteCategory.PROCESS_CONSTRAINT)
        assert note.impact == RoutingImpact.MODIFY_OPERATION
        assert note.to_dict()["impact"] == "modify_operation"

    def test_callout_to_dict_uses_labels(self):
        callout = GdtCallout(GdtType.TOTAL_RUNOUT, 0.001, tier=ToleranceTier.PRECISION)
        data = callout.to_dict()
        assert data["type"] == "total_runout"
        assert data["tier"] == "Precision"
        assert data["impact"] == "Critical"

    def test_empty_analysis_result(self):
        result = ToleranceAnalysisResult()
        assert result.tightest_dimension_band is None
        assert not result.has_cost_flags
        assert not result.has_tolerances
        assert "General: not specified" in result.summary
