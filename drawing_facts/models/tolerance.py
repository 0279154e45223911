"""Dimensional tolerance and surface finish models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .levels import CostImpact, ToleranceTier


class ToleranceType(Enum):
    """Shape of a dimension tolerance."""
    BILATERAL = "bilateral"
    UNILATERAL = "unilateral"


class FinishUnit(Enum):
    """Unit of a surface finish callout (microinches)."""
    RA = "Ra"
    RMS = "RMS"


@dataclass
class ToleranceCostFlag:
    """
    A cost-relevant tolerance finding.

    Attributes:
        description: What was found
        tier: Tolerance tier of the finding
        impact: Estimated cost impact
        suggested_action: Routing/estimating action for the reviewer
        source: Which analysis raised the flag (for attribution)
    """
    description: str
    tier: ToleranceTier
    impact: CostImpact
    suggested_action: str
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "tier": self.tier.label,
            "impact": self.impact.label,
            "suggestedAction": self.suggested_action,
            "source": self.source,
        }


@dataclass
class GeneralTolerance:
    """Title-block general tolerance block (values are the +/- amount)."""
    one_place: Optional[float] = None
    two_place: Optional[float] = None
    three_place: Optional[float] = None
    four_place: Optional[float] = None
    fractional: Optional[float] = None
    fractional_text: Optional[str] = None
    angular_degrees: Optional[float] = None
    raw_text: str = ""
    tier: ToleranceTier = ToleranceTier.STANDARD

    @property
    def tightest_place(self) -> Optional[float]:
        """The +/- value of the finest populated decimal place."""
        for value in (self.four_place, self.three_place, self.two_place, self.one_place):
            if value is not None:
                return value
        return None

    def place(self, decimal_places: int) -> Optional[float]:
        return {
            1: self.one_place,
            2: self.two_place,
            3: self.three_place,
            4: self.four_place,
        }.get(decimal_places)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "onePlace": self.one_place,
            "twoPlace": self.two_place,
            "threePlace": self.three_place,
            "fourPlace": self.four_place,
            "fractional": self.fractional,
            "fractionalText": self.fractional_text,
            "angularDegrees": self.angular_degrees,
            "rawText": self.raw_text,
            "tier": self.tier.label,
        }


@dataclass
class DimensionTolerance:
    """A toleranced dimension such as 0.500 +/-0.002 or 0.750 +0.002/-0.000."""
    nominal: float
    plus: float
    minus: float
    type: ToleranceType
    raw_text: str = ""
    tier: ToleranceTier = ToleranceTier.STANDARD

    @property
    def total_band(self) -> float:
        return self.plus + self.minus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nominal": self.nominal,
            "plus": self.plus,
            "minus": self.minus,
            "totalBand": self.total_band,
            "type": self.type.value,
            "tier": self.tier.label,
            "rawText": self.raw_text,
        }


@dataclass
class SurfaceFinishCallout:
    """A surface roughness requirement."""
    value: int
    unit: FinishUnit
    tier: ToleranceTier
    raw_text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "unit": self.unit.value,
            "tier": self.tier.label,
            "rawText": self.raw_text,
        }


@dataclass
class ToleranceAnalysisResult:
    """Everything the tolerance analyzer found on one page."""
    general_tolerance: Optional[GeneralTolerance] = None
    specific_tolerances: List[DimensionTolerance] = field(default_factory=list)
    surface_finish_callouts: List[SurfaceFinishCallout] = field(default_factory=list)
    cost_flags: List[ToleranceCostFlag] = field(default_factory=list)
    overall_tier: ToleranceTier = ToleranceTier.STANDARD

    @property
    def tightest_dimension_band(self) -> Optional[float]:
        if not self.specific_tolerances:
            return None
        return min(t.total_band for t in self.specific_tolerances)

    @property
    def tightest_surface_finish(self) -> Optional[int]:
        if not self.surface_finish_callouts:
            return None
        return min(sf.value for sf in self.surface_finish_callouts)

    @property
    def has_cost_flags(self) -> bool:
        return len(self.cost_flags) > 0

    @property
    def has_tolerances(self) -> bool:
        return bool(self.general_tolerance or self.specific_tolerances or self.surface_finish_callouts)

    @property
    def summary(self) -> str:
        general = (
            f"General: {self.general_tolerance.tier.label}"
            if self.general_tolerance else "General: not specified"
        )
        return (
            f"{general}, {len(self.specific_tolerances)} dimension callouts, "
            f"{len(self.surface_finish_callouts)} finish callouts, "
            f"{len(self.cost_flags)} cost flags, Overall: {self.overall_tier.label}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generalTolerance": self.general_tolerance.to_dict() if self.general_tolerance else None,
            "specificTolerances": [t.to_dict() for t in self.specific_tolerances],
            "surfaceFinishCallouts": [sf.to_dict() for sf in self.surface_finish_callouts],
            "costFlags": [f.to_dict() for f in self.cost_flags],
            "overallTier": self.overall_tier.label,
            "tightestDimensionBand": self.tightest_dimension_band,
            "tightestSurfaceFinish": self.tightest_surface_finish,
            "summary": self.summary,
        }
