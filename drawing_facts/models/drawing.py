"""Per-page and per-part drawing facts."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .fabrication import FabricationResult
from .gdt import GdtCallout
from .routing import DrawingNote, RoutingHint
from .spec import SpecMatch
from .title_block import TitleBlockInfo
from .tolerance import ToleranceAnalysisResult


@dataclass
class BomEntry:
    """One row of a bill of materials table."""
    item_number: str
    part_number: str
    description: str = ""
    quantity: int = 1
    confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "itemNumber": self.item_number,
            "partNumber": self.part_number,
            "description": self.description,
            "quantity": self.quantity,
            "confidence": self.confidence,
        }


@dataclass
class DrawingPageInfo:
    """Everything extracted from a single PDF page."""
    pdf_path: str
    page_number: int
    title_block: TitleBlockInfo = field(default_factory=TitleBlockInfo)
    notes: List[DrawingNote] = field(default_factory=list)
    spec_matches: List[SpecMatch] = field(default_factory=list)
    gdt_callouts: List[GdtCallout] = field(default_factory=list)
    routing_hints: List[RoutingHint] = field(default_factory=list)
    tolerance_result: Optional[ToleranceAnalysisResult] = None
    fabrication_result: Optional[FabricationResult] = None
    bom_entries: List[BomEntry] = field(default_factory=list)
    has_text: bool = False
    has_bom: bool = False
    is_assembly_level: bool = False
    confidence: float = 0.0

    @property
    def part_number(self) -> Optional[str]:
        return self.title_block.part_number

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pdfPath": self.pdf_path,
            "pageNumber": self.page_number,
            "titleBlock": self.title_block.to_dict(),
            "notes": [n.to_dict() for n in self.notes],
            "specMatches": [s.to_dict() for s in self.spec_matches],
            "gdtCallouts": [g.to_dict() for g in self.gdt_callouts],
            "routingHints": [h.to_dict() for h in self.routing_hints],
            "tolerance": self.tolerance_result.to_dict() if self.tolerance_result else None,
            "fabrication": self.fabrication_result.to_dict() if self.fabrication_result else None,
            "bomEntries": [b.to_dict() for b in self.bom_entries],
            "hasText": self.has_text,
            "hasBom": self.has_bom,
            "isAssemblyLevel": self.is_assembly_level,
            "confidence": self.confidence,
        }


@dataclass
class DrawingData:
    """
    Facts for one part, merged from every page carrying its part number.

    Identity fields come from the first page that supplies them; notes,
    GD&T callouts and routing hints are deduplicated across pages.
    """
    part_number: Optional[str] = None
    description: Optional[str] = None
    material: Optional[str] = None
    revision: Optional[str] = None
    finish: Optional[str] = None
    thickness_inches: Optional[float] = None  # Supplied by a vision provider
    title_block: Optional[TitleBlockInfo] = None
    notes: List[DrawingNote] = field(default_factory=list)
    gdt_callouts: List[GdtCallout] = field(default_factory=list)
    routing_hints: List[RoutingHint] = field(default_factory=list)
    spec_matches: List[SpecMatch] = field(default_factory=list)
    tolerance_results: List[ToleranceAnalysisResult] = field(default_factory=list)
    fabrication_results: List[FabricationResult] = field(default_factory=list)
    bom_entries: List[BomEntry] = field(default_factory=list)
    source_pdf_path: str = ""
    page_count: int = 0
    is_assembly_level: bool = False
    overall_confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "partNumber": self.part_number,
            "description": self.description,
            "material": self.material,
            "revision": self.revision,
            "finish": self.finish,
            "thicknessInches": self.thickness_inches,
            "notes": [n.to_dict() for n in self.notes],
            "gdtCallouts": [g.to_dict() for g in self.gdt_callouts],
            "routingHints": [h.to_dict() for h in self.routing_hints],
            "specMatches": [s.to_dict() for s in self.spec_matches],
            "bomEntries": [b.to_dict() for b in self.bom_entries],
            "sourcePdfPath": self.source_pdf_path,
            "pageCount": self.page_count,
            "isAssemblyLevel": self.is_assembly_level,
            "overallConfidence": self.overall_confidence,
        }
