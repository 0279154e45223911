"""Manufacturing note and routing hint models."""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Optional


class NoteCategory(Enum):
    """Category of a manufacturing note found on a drawing."""
    DEBURR = "deburr"
    FINISH = "finish"
    HEAT_TREAT = "heat_treat"
    WELD = "weld"
    MACHINE = "machine"
    PROCESS_CONSTRAINT = "process_constraint"
    INSPECT = "inspect"
    HARDWARE = "hardware"
    GENERAL = "general"


class RoutingImpact(Enum):
    """What a note does to the routing."""
    ADD_OPERATION = "add_operation"
    MODIFY_OPERATION = "modify_operation"
    INFORMATIONAL = "informational"


class RoutingOp(Enum):
    """Routing operation proposed by a note, spec or tolerance."""
    DEBURR = "deburr"
    FINISH = "finish"
    HEAT_TREAT = "heat_treat"
    WELD = "weld"
    TAP = "tap"
    DRILL = "drill"
    MACHINE = "machine"
    INSPECT = "inspect"
    HARDWARE = "hardware"
    PROCESS_OVERRIDE = "process_override"
    OUTSIDE_PROCESS = "outside_process"


_IMPACT_BY_CATEGORY = MappingProxyType({
    NoteCategory.DEBURR: RoutingImpact.ADD_OPERATION,
    NoteCategory.FINISH: RoutingImpact.ADD_OPERATION,
    NoteCategory.HEAT_TREAT: RoutingImpact.ADD_OPERATION,
    NoteCategory.WELD: RoutingImpact.ADD_OPERATION,
    NoteCategory.MACHINE: RoutingImpact.ADD_OPERATION,
    NoteCategory.PROCESS_CONSTRAINT: RoutingImpact.MODIFY_OPERATION,
    NoteCategory.INSPECT: RoutingImpact.ADD_OPERATION,
    NoteCategory.HARDWARE: RoutingImpact.ADD_OPERATION,
    NoteCategory.GENERAL: RoutingImpact.INFORMATIONAL,
})


def routing_impact_for(category: NoteCategory) -> RoutingImpact:
    """Routing impact implied by a note category."""
    return _IMPACT_BY_CATEGORY[category]


@dataclass
class DrawingNote:
    """
    A manufacturing note extracted from drawing text.

    Attributes:
        text: Note text as it appears on the drawing
        category: Note category
        confidence: Extraction confidence (0.0-1.0)
        page_number: 1-based page the note came from
    """
    text: str
    category: NoteCategory
    confidence: float = 1.0
    page_number: int = 1

    @property
    def impact(self) -> RoutingImpact:
        return routing_impact_for(self.category)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "category": self.category.value,
            "impact": self.impact.value,
            "confidence": self.confidence,
            "pageNumber": self.page_number,
        }


@dataclass
class RoutingHint:
    """
    A proposed routing operation.

    work_center is None for outside processes the shop does not run itself.
    """
    operation: RoutingOp
    note_text: str
    work_center: Optional[str] = None
    source_note: str = ""
    confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation.value,
            "workCenter": self.work_center,
            "noteText": self.note_text,
            "sourceNote": self.source_note,
            "confidence": self.confidence,
        }
