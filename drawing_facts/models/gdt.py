"""GD&T feature control frame model."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List

from .levels import CostImpact, ToleranceTier


class GdtType(Enum):
    """Geometric characteristic of a feature control frame."""
    POSITION = "position"
    FLATNESS = "flatness"
    STRAIGHTNESS = "straightness"
    CIRCULARITY = "circularity"
    CYLINDRICITY = "cylindricity"
    PERPENDICULARITY = "perpendicularity"
    PARALLELISM = "parallelism"
    ANGULARITY = "angularity"
    CONCENTRICITY = "concentricity"
    CIRCULAR_RUNOUT = "circular_runout"
    TOTAL_RUNOUT = "total_runout"
    PROFILE_OF_SURFACE = "profile_of_surface"
    PROFILE_OF_LINE = "profile_of_line"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ")


class GdtFamily(Enum):
    """Tolerance family; each family has its own tier ladder."""
    LOCATION = "location"
    FORM = "form"
    ORIENTATION = "orientation"
    PROFILE = "profile"
    RUNOUT = "runout"


GDT_FAMILY = MappingProxyType({
    GdtType.POSITION: GdtFamily.LOCATION,
    GdtType.FLATNESS: GdtFamily.FORM,
    GdtType.STRAIGHTNESS: GdtFamily.FORM,
    GdtType.CIRCULARITY: GdtFamily.FORM,
    GdtType.CYLINDRICITY: GdtFamily.FORM,
    GdtType.PERPENDICULARITY: GdtFamily.ORIENTATION,
    GdtType.PARALLELISM: GdtFamily.ORIENTATION,
    GdtType.ANGULARITY: GdtFamily.ORIENTATION,
    GdtType.PROFILE_OF_SURFACE: GdtFamily.PROFILE,
    GdtType.PROFILE_OF_LINE: GdtFamily.PROFILE,
    GdtType.CONCENTRICITY: GdtFamily.RUNOUT,
    GdtType.CIRCULAR_RUNOUT: GdtFamily.RUNOUT,
    GdtType.TOTAL_RUNOUT: GdtFamily.RUNOUT,
})

_IMPACT_BY_TIER = MappingProxyType({
    ToleranceTier.STANDARD: CostImpact.LOW,
    ToleranceTier.MODERATE: CostImpact.MEDIUM,
    ToleranceTier.TIGHT: CostImpact.HIGH,
    ToleranceTier.PRECISION: CostImpact.CRITICAL,
})


def gdt_family(gdt_type: GdtType) -> GdtFamily:
    return GDT_FAMILY[gdt_type]


def gdt_impact_for_tier(tier: ToleranceTier) -> CostImpact:
    """Cost impact of a GD&T callout at the given tier."""
    return _IMPACT_BY_TIER[tier]


@dataclass
class GdtCallout:
    """
    A parsed feature control frame.

    Attributes:
        gdt_type: Geometric characteristic
        tolerance_value: Tolerance zone in inches
        datum_references: Datum letters in frame order
        is_mmc: Tolerance applies at maximum material condition
        is_lmc: Tolerance applies at least material condition
        is_diametral: Cylindrical tolerance zone
        tier: Tier from the family's ladder
        raw_text: Matched text
    """
    gdt_type: GdtType
    tolerance_value: float
    datum_references: List[str] = field(default_factory=list)
    is_mmc: bool = False
    is_lmc: bool = False
    is_diametral: bool = False
    tier: ToleranceTier = ToleranceTier.STANDARD
    raw_text: str = ""
    confidence: float = 0.0

    @property
    def impact(self) -> CostImpact:
        return gdt_impact_for_tier(self.tier)

    @property
    def tolerance_text(self) -> str:
        return f"{self.tolerance_value:.4f}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.gdt_type.value,
            "toleranceValue": self.tolerance_value,
            "datumReferences": list(self.datum_references),
            "isMmc": self.is_mmc,
            "isLmc": self.is_lmc,
            "isDiametral": self.is_diametral,
            "tier": self.tier.label,
            "impact": self.impact.label,
            "rawText": self.raw_text,
            "confidence": self.confidence,
        }
