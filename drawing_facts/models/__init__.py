"""Data models for extracted drawing facts."""

from .levels import OrderedLevel, ToleranceTier, CostImpact
from .routing import (
    NoteCategory,
    RoutingImpact,
    RoutingOp,
    DrawingNote,
    RoutingHint,
    routing_impact_for,
)
from .title_block import TitleBlockInfo
from .spec import SpecCategory, SpecMatch, note_category_for_spec
from .gdt import GdtType, GdtFamily, GdtCallout, gdt_family, gdt_impact_for_tier
from .tolerance import (
    ToleranceType,
    FinishUnit,
    ToleranceCostFlag,
    GeneralTolerance,
    DimensionTolerance,
    SurfaceFinishCallout,
    ToleranceAnalysisResult,
)
from .fabrication import (
    FabricationTier,
    BendStackupRisk,
    FabDimensionClassification,
    FabGdtClassification,
    FabricationResult,
)
from .page import PageText, WordInfo
from .drawing import BomEntry, DrawingPageInfo, DrawingData

__all__ = [
    "OrderedLevel",
    "ToleranceTier",
    "CostImpact",
    "NoteCategory",
    "RoutingImpact",
    "RoutingOp",
    "DrawingNote",
    "RoutingHint",
    "routing_impact_for",
    "TitleBlockInfo",
    "SpecCategory",
    "SpecMatch",
    "note_category_for_spec",
    "GdtType",
    "GdtFamily",
    "GdtCallout",
    "gdt_family",
    "gdt_impact_for_tier",
    "ToleranceType",
    "FinishUnit",
    "ToleranceCostFlag",
    "GeneralTolerance",
    "DimensionTolerance",
    "SurfaceFinishCallout",
    "ToleranceAnalysisResult",
    "FabricationTier",
    "BendStackupRisk",
    "FabDimensionClassification",
    "FabGdtClassification",
    "FabricationResult",
    "PageText",
    "WordInfo",
    "BomEntry",
    "DrawingPageInfo",
    "DrawingData",
]
