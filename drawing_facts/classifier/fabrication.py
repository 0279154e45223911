"""
Fabrication Tolerance Classifier

Judges a drawing's tolerances from a sheet metal / welding shop's point of
view. Runs after the ToleranceAnalyzer and GdtExtractor.

Tiers:
- SHOP_STANDARD: Holdable on the laser, brake and weld table
- MACHINING: Total band of 0.020" or less; needs a machining operation
- PRECISION_MACHINING: Total band of 0.010" or less

ISO 13920 callouts are compared against the shop baseline (default BF).
"BEND n" callouts together with bend-referenced dimensions raise a press
brake stackup risk.
"""

import re
from typing import List, Optional

from ..config import Config, default_config
from ..models.fabrication import (
    BendStackupRisk,
    FabDimensionClassification,
    FabGdtClassification,
    FabricationResult,
    FabricationTier,
)
from ..models.gdt import GdtCallout, GdtType
from ..models.levels import CostImpact, ToleranceTier
from ..models.routing import RoutingHint, RoutingOp
from ..models.tolerance import ToleranceAnalysisResult, ToleranceCostFlag
from ..standards.iso_tolerance import (
    Iso13920Geometric,
    Iso13920Linear,
    Iso2768Class,
    class_designation,
    classify_linear_13920,
    inches_to_mm,
    is_tighter,
)


ISO_13920_PATTERN = re.compile(r"ISO\s*13920\s*[-–:]?\s*([A-D])(?:\s*[-/]?\s*([E-H]))?(?![A-Z])", re.IGNORECASE)
ISO_2768_PATTERN = re.compile(r"ISO\s*2768\s*[-–:]?\s*([fmcv])(?:\s*[-/]?\s*([HKL]))?(?![A-Z])", re.IGNORECASE)

# "BEND 1", "BEND #3"
BEND_PATTERN = re.compile(r"\bBEND\s*#?\s*\d+", re.IGNORECASE)
# "2.500 FROM BEND", "BEND TO BEND", "INSIDE OF BEND"
BEND_REF_PATTERN = re.compile(
    r"(?:FROM|TO|BETWEEN)\s+BEND|BEND\s+(?:TO|LINE)|INSIDE\s+(?:OF\s+)?BEND", re.IGNORECASE
)

SOURCE_ISO = "ISO 13920 comparison"
SOURCE_DIMENSIONS = "Fabrication tolerance analysis"
SOURCE_GDT = "Fabrication GD&T analysis"
SOURCE_BENDS = "Press brake analysis"

# GD&T fabrication ladders (mm): (precision machining, machining)
_GDT_FAB_LIMITS_MM = {
    GdtType.FLATNESS: (0.5, 1.0),
    GdtType.STRAIGHTNESS: (0.5, 1.0),
    GdtType.PERPENDICULARITY: (0.5, 1.0),
    GdtType.PARALLELISM: (0.5, 1.0),
    GdtType.ANGULARITY: (0.5, 1.0),
    GdtType.POSITION: (0.5, 1.5),
}
_DEFAULT_GDT_FAB_LIMITS_MM = (0.5, 1.0)


def classify_gdt_for_fab(gdt_type: GdtType, tolerance_mm: float) -> FabricationTier:
    """Fabrication tier of a GD&T tolerance (mm) for its characteristic."""
    precision, machining = _GDT_FAB_LIMITS_MM.get(gdt_type, _DEFAULT_GDT_FAB_LIMITS_MM)
    if tolerance_mm <= precision:
        return FabricationTier.PRECISION_MACHINING
    if tolerance_mm <= machining:
        return FabricationTier.MACHINING
    return FabricationTier.SHOP_STANDARD


def assess_bend_stackup(bend_count: int, ref_count: int, min_bends: int = 4, min_refs: int = 2) -> BendStackupRisk:
    if bend_count >= min_bends and ref_count >= min_refs:
        return BendStackupRisk.HIGH
    if bend_count > 0:
        return BendStackupRisk.LOW
    return BendStackupRisk.NONE


class FabricationToleranceClassifier:
    """Combines ISO detection, tolerance and GD&T results into one fabrication verdict."""

    def __init__(
        self,
        shop_linear: Optional[Iso13920Linear] = None,
        shop_geometric: Optional[Iso13920Geometric] = None,
        config: Optional[Config] = None,
    ):
        self.config = config or default_config
        self.shop_linear = shop_linear or Iso13920Linear[self.config.shop_linear_class.upper()]
        self.shop_geometric = shop_geometric or Iso13920Geometric[self.config.shop_geometric_class.upper()]

    def classify_dimension_band(self, band_inches: float) -> FabricationTier:
        """Fabrication tier of a total tolerance band (inches)."""
        if band_inches <= self.config.precision_machining_band_inches:
            return FabricationTier.PRECISION_MACHINING
        if band_inches <= self.config.machining_band_inches:
            return FabricationTier.MACHINING
        return FabricationTier.SHOP_STANDARD

    def classify(
        self,
        text: str,
        tolerances: Optional[ToleranceAnalysisResult] = None,
        gdt_callouts: Optional[List[GdtCallout]] = None,
    ) -> FabricationResult:
        """
        Classify a drawing's tolerances against fabrication capability.

        Args:
            text: Full drawing text (ISO callouts and bend callouts)
            tolerances: Result of ToleranceAnalyzer.analyze, if any
            gdt_callouts: Result of GdtExtractor.extract, if any

        Returns:
            FabricationResult with tier, machining verdict, bend risk and cost flags
        """
        result = FabricationResult()
        text = text or ""

        self._detect_iso_standards(text, result)
        if tolerances is not None:
            self._classify_dimensions(tolerances, result)
        if gdt_callouts:
            self._classify_gdt(gdt_callouts, result)
        self._analyze_bends(text, result)

        tiers = [d.fab_tier for d in result.dimension_classifications]
        tiers += [g.fab_tier for g in result.gdt_classifications]
        result.overall_tier = max(tiers, default=FabricationTier.SHOP_STANDARD)
        result.requires_machining = result.requires_machining or result.overall_tier >= FabricationTier.MACHINING
        if result.tighter_than_shop or result.requires_machining:
            result.requires_cmm_inspection = True

        self._generate_cost_flags(result)
        return result

    def _detect_iso_standards(self, text: str, result: FabricationResult) -> None:
        match = ISO_13920_PATTERN.search(text)
        if match:
            result.has_iso_13920 = True
            linear = Iso13920Linear[match.group(1).upper()]
            result.iso_13920_linear = linear.name
            result.linear_tighter_than_shop = is_tighter(linear, self.shop_linear)
            if match.group(2):
                geometric = Iso13920Geometric[match.group(2).upper()]
                result.iso_13920_geometric = geometric.name
                result.geometric_tighter_than_shop = is_tighter(geometric, self.shop_geometric)

        match = ISO_2768_PATTERN.search(text)
        if match:
            result.has_iso_2768 = True
            result.iso_2768_class = Iso2768Class.from_letter(match.group(1)).letter
            if match.group(2):
                result.iso_2768_geometric = match.group(2).upper()

    def _classify_dimensions(self, tolerances: ToleranceAnalysisResult, result: FabricationResult) -> None:
        for dim in tolerances.specific_tolerances:
            band_mm = inches_to_mm(dim.total_band)
            required = classify_linear_13920(inches_to_mm(dim.nominal), band_mm)
            tier = self.classify_dimension_band(dim.total_band)

            result.dimension_classifications.append(FabDimensionClassification(
                nominal_inches=dim.nominal,
                band_inches=dim.total_band,
                band_mm=band_mm,
                required_iso_class=required.name if required is not None else None,
                fab_tier=tier,
                requires_machining=tier >= FabricationTier.MACHINING,
                raw_text=dim.raw_text,
            ))
            if tier >= FabricationTier.MACHINING:
                result.requires_machining = True
            if required is not None and is_tighter(required, self.shop_linear):
                result.requires_cmm_inspection = True

    def _classify_gdt(self, callouts: List[GdtCallout], result: FabricationResult) -> None:
        for callout in callouts:
            tolerance_mm = inches_to_mm(callout.tolerance_value)
            tier = classify_gdt_for_fab(callout.gdt_type, tolerance_mm)
            result.gdt_classifications.append(FabGdtClassification(
                gdt_type=callout.gdt_type,
                tolerance_inches=callout.tolerance_value,
                tolerance_mm=tolerance_mm,
                fab_tier=tier,
                raw_text=callout.raw_text,
            ))

    def _analyze_bends(self, text: str, result: FabricationResult) -> None:
        if not text.strip():
            return
        result.bend_count = len(BEND_PATTERN.findall(text))
        result.bend_ref_dim_count = len(BEND_REF_PATTERN.findall(text))
        result.bend_stackup_risk = assess_bend_stackup(
            result.bend_count,
            result.bend_ref_dim_count,
            self.config.bend_stackup_min_bends,
            self.config.bend_stackup_min_refs,
        )

    def _generate_cost_flags(self, result: FabricationResult) -> None:
        if result.has_iso_13920:
            detected = (result.iso_13920_linear or "") + (result.iso_13920_geometric or "")
            shop = class_designation(self.shop_linear, self.shop_geometric)
            if result.tighter_than_shop:
                result.cost_flags.append(ToleranceCostFlag(
                    description=f"Drawing specifies ISO 13920-{detected}, shop standard is {shop}",
                    tier=ToleranceTier.TIGHT,
                    impact=CostImpact.HIGH,
                    suggested_action="TIGHTER THAN SHOP STANDARD - ADDITIONAL LABOR/SETUP REQUIRED",
                    source=SOURCE_ISO,
                ))
            else:
                result.cost_flags.append(ToleranceCostFlag(
                    description=f"Drawing specifies ISO 13920-{detected} (within shop standard {shop})",
                    tier=ToleranceTier.STANDARD,
                    impact=CostImpact.NONE,
                    suggested_action="STANDARD FABRICATION TOLERANCES",
                    source=SOURCE_ISO,
                ))

        machining = [d for d in result.dimension_classifications if d.requires_machining]
        if machining:
            tightest = min(machining, key=lambda d: d.band_inches)
            result.cost_flags.append(ToleranceCostFlag(
                description=f"{len(machining)} dimension(s) require machining (tightest: {tightest.raw_text})",
                tier=ToleranceTier.PRECISION,
                impact=CostImpact.CRITICAL,
                suggested_action="MACHINING OPERATIONS REQUIRED - SIGNIFICANT COST INCREASE",
                source=SOURCE_DIMENSIONS,
            ))

        tighter = [
            d for d in result.dimension_classifications
            if not d.requires_machining and d.required_iso_class is not None
            and is_tighter(Iso13920Linear[d.required_iso_class], self.shop_linear)
        ]
        if tighter:
            result.cost_flags.append(ToleranceCostFlag(
                description=f"{len(tighter)} dimension(s) tighter than shop standard (ISO 13920-A territory)",
                tier=ToleranceTier.MODERATE,
                impact=CostImpact.MEDIUM,
                suggested_action="EXTRA SETUP/LABOR FOR TIGHTER TOLERANCES",
                source=SOURCE_DIMENSIONS,
            ))

        machining_gdt = [g for g in result.gdt_classifications if g.fab_tier >= FabricationTier.MACHINING]
        if machining_gdt:
            result.cost_flags.append(ToleranceCostFlag(
                description=f"{len(machining_gdt)} GD&T callout(s) require machining",
                tier=ToleranceTier.PRECISION,
                impact=CostImpact.CRITICAL,
                suggested_action="GD&T BEYOND FAB CAPABILITY - MACHINING REQUIRED",
                source=SOURCE_GDT,
            ))

        if result.bend_stackup_risk == BendStackupRisk.HIGH:
            result.cost_flags.append(ToleranceCostFlag(
                description=(
                    f"Press brake stackup risk: {result.bend_count} bends, "
                    f"{result.bend_ref_dim_count} bend-to-bend references"
                ),
                tier=ToleranceTier.TIGHT,
                impact=CostImpact.HIGH,
                suggested_action="HIGH STACKUP RISK - MAY NEED INTERMEDIATE INSPECTION OR FIXTURE",
                source=SOURCE_BENDS,
            ))

    def to_routing_hints(self, result: Optional[FabricationResult]) -> List[RoutingHint]:
        """Machining, CMM and press brake hints for a fabrication result."""
        hints: List[RoutingHint] = []
        if result is None:
            return hints

        if result.requires_machining:
            hints.append(RoutingHint(
                operation=RoutingOp.MACHINE,
                note_text="MACHINING REQUIRED - TOLERANCES TIGHTER THAN FAB STANDARD",
                source_note=SOURCE_DIMENSIONS,
                confidence=0.85,
            ))

        if result.requires_cmm_inspection:
            hints.append(RoutingHint(
                operation=RoutingOp.INSPECT,
                note_text="CMM INSPECT - TIGHT TOLERANCES ON FABRICATED PART",
                source_note=SOURCE_DIMENSIONS,
                confidence=0.80,
            ))

        if result.bend_stackup_risk == BendStackupRisk.HIGH:
            hints.append(RoutingHint(
                operation=RoutingOp.INSPECT,
                note_text=f"PRESS BRAKE STACKUP RISK - {result.bend_count} BENDS WITH INTER-BEND DIMS",
                source_note=SOURCE_BENDS,
                confidence=0.75,
            ))

        return hints
