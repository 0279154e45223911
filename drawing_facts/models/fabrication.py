"""Fabrication tolerance classification result."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .gdt import GdtType
from .levels import OrderedLevel
from .tolerance import ToleranceCostFlag


class FabricationTier(OrderedLevel):
    """Whether a requirement fits ordinary fabrication or needs machining."""
    SHOP_STANDARD = 0
    MACHINING = 1
    PRECISION_MACHINING = 2


class BendStackupRisk(OrderedLevel):
    """Tolerance stack risk across press-brake bends."""
    NONE = 0
    LOW = 1
    HIGH = 2


@dataclass
class FabDimensionClassification:
    """One dimension tolerance classified against fabrication capability."""
    nominal_inches: float
    band_inches: float
    band_mm: float
    required_iso_class: Optional[str]
    fab_tier: FabricationTier
    requires_machining: bool
    raw_text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nominalInches": self.nominal_inches,
            "bandInches": self.band_inches,
            "bandMm": self.band_mm,
            "requiredIsoClass": self.required_iso_class,
            "fabTier": self.fab_tier.label,
            "requiresMachining": self.requires_machining,
            "rawText": self.raw_text,
        }


@dataclass
class FabGdtClassification:
    """One GD&T callout classified against fabrication capability."""
    gdt_type: GdtType
    tolerance_inches: float
    tolerance_mm: float
    fab_tier: FabricationTier
    raw_text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.gdt_type.value,
            "toleranceInches": self.tolerance_inches,
            "toleranceMm": self.tolerance_mm,
            "fabTier": self.fab_tier.label,
            "rawText": self.raw_text,
        }


@dataclass
class FabricationResult:
    """
    Fabrication verdict for one page or drawing.

    Attributes:
        has_iso_13920: An "ISO 13920-XY" callout was found
        iso_13920_linear: Linear class letter (A-D)
        iso_13920_geometric: Geometric class letter (E-H)
        has_iso_2768: An "ISO 2768-x" callout was found
        iso_2768_class: ISO 2768 class letter (f, m, c, v)
        linear_tighter_than_shop: Linear class finer than the shop baseline
        geometric_tighter_than_shop: Geometric class finer than the shop baseline
        requires_machining: Some tolerance is beyond fabrication capability
        requires_cmm_inspection: Some requirement is tighter than the shop baseline
        overall_tier: Worst fabrication tier found
        bend_count: Number of "BEND n" tokens
        bend_ref_dim_count: Dimensions referenced to bends
        bend_stackup_risk: Press-brake stack risk
    """
    has_iso_13920: bool = False
    iso_13920_linear: Optional[str] = None
    iso_13920_geometric: Optional[str] = None
    has_iso_2768: bool = False
    iso_2768_class: Optional[str] = None
    iso_2768_geometric: Optional[str] = None
    linear_tighter_than_shop: bool = False
    geometric_tighter_than_shop: bool = False
    requires_machining: bool = False
    requires_cmm_inspection: bool = False
    overall_tier: FabricationTier = FabricationTier.SHOP_STANDARD
    bend_count: int = 0
    bend_ref_dim_count: int = 0
    bend_stackup_risk: BendStackupRisk = BendStackupRisk.NONE
    dimension_classifications: List[FabDimensionClassification] = field(default_factory=list)
    gdt_classifications: List[FabGdtClassification] = field(default_factory=list)
    cost_flags: List[ToleranceCostFlag] = field(default_factory=list)

    @property
    def tighter_than_shop(self) -> bool:
        return self.linear_tighter_than_shop or self.geometric_tighter_than_shop

    @property
    def summary(self) -> str:
        if self.has_iso_13920:
            standard = f"ISO 13920-{self.iso_13920_linear or ''}{self.iso_13920_geometric or ''}"
        elif self.has_iso_2768:
            standard = f"ISO 2768-{self.iso_2768_class}"
        else:
            standard = "No ISO standard specified"

        parts = [standard, f"Tier: {self.overall_tier.label}"]
        if self.requires_machining:
            parts.append("MACHINING REQUIRED")
        if self.bend_stackup_risk != BendStackupRisk.NONE:
            parts.append(f"Bend stackup: {self.bend_stackup_risk.label}")
        parts.append(f"{len(self.cost_flags)} cost flags")
        return ", ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hasIso13920": self.has_iso_13920,
            "iso13920Linear": self.iso_13920_linear,
            "iso13920Geometric": self.iso_13920_geometric,
            "hasIso2768": self.has_iso_2768,
            "iso2768Class": self.iso_2768_class,
            "iso2768Geometric": self.iso_2768_geometric,
            "linearTighterThanShop": self.linear_tighter_than_shop,
            "geometricTighterThanShop": self.geometric_tighter_than_shop,
            "requiresMachining": self.requires_machining,
            "requiresCmmInspection": self.requires_cmm_inspection,
            "overallTier": self.overall_tier.label,
            "bendCount": self.bend_count,
            "bendRefDimCount": self.bend_ref_dim_count,
            "bendStackupRisk": self.bend_stackup_risk.label,
            "dimensionClassifications": [d.to_dict() for d in self.dimension_classifications],
            "gdtClassifications": [g.to_dict() for g in self.gdt_classifications],
            "costFlags": [f.to_dict() for f in self.cost_flags],
            "summary": self.summary,
        }
