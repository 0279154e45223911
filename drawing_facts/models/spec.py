"""Industry specification reference model."""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Optional

from .routing import NoteCategory, RoutingOp


class SpecCategory(Enum):
    """What kind of requirement a specification imposes."""
    MATERIAL = "material"
    WELDING = "welding"
    COATING = "coating"
    HEAT_TREAT = "heat_treat"
    SURFACE_FINISH = "surface_finish"
    INSPECTION = "inspection"
    QUALITY = "quality"
    CONTROLLED = "controlled"


_NOTE_CATEGORY_BY_SPEC = MappingProxyType({
    SpecCategory.MATERIAL: NoteCategory.GENERAL,
    SpecCategory.WELDING: NoteCategory.WELD,
    SpecCategory.COATING: NoteCategory.FINISH,
    SpecCategory.HEAT_TREAT: NoteCategory.HEAT_TREAT,
    SpecCategory.SURFACE_FINISH: NoteCategory.FINISH,
    SpecCategory.INSPECTION: NoteCategory.INSPECT,
    SpecCategory.QUALITY: NoteCategory.INSPECT,
    SpecCategory.CONTROLLED: NoteCategory.GENERAL,
})


def note_category_for_spec(category: SpecCategory) -> NoteCategory:
    return _NOTE_CATEGORY_BY_SPEC[category]


@dataclass
class SpecMatch:
    """A recognized specification reference (ASTM, AMS, MIL, AWS, ...)."""
    spec_id: str
    full_name: str
    category: SpecCategory
    routing_op: Optional[RoutingOp] = None
    work_center: Optional[str] = None
    routing_note: Optional[str] = None
    confidence: float = 0.0
    raw_text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "specId": self.spec_id,
            "fullName": self.full_name,
            "category": self.category.value,
            "routingOp": self.routing_op.value if self.routing_op else None,
            "workCenter": self.work_center,
            "confidence": self.confidence,
            "rawText": self.raw_text,
        }
