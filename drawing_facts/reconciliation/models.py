"""Reconciliation data models (CAD model facts vs drawing facts)."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..models.routing import RoutingOp


class ConflictSeverity(Enum):
    """How much a disagreement matters."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ConflictResolution(Enum):
    """Which source the engine recommends; a human still decides."""
    USE_MODEL = "use_model"
    USE_DRAWING = "use_drawing"
    HUMAN_REQUIRED = "human_required"


class SuggestionType(Enum):
    """What a routing suggestion does to the routing."""
    ADD_OPERATION = "add_operation"
    MODIFY_OPERATION = "modify_operation"
    ADD_NOTE = "add_note"


@dataclass
class PartData:
    """
    Facts read from the CAD model by the model walker.

    Attributes:
        file_path: CAD file path
        material: Material property
        thickness_m: Sheet thickness in metres (0 when unknown)
        description: Description property
        part_number: Part number property
        revision: Revision property
        confidence: Overall confidence of the model facts
    """
    file_path: Optional[str] = None
    material: Optional[str] = None
    thickness_m: float = 0.0
    description: Optional[str] = None
    part_number: Optional[str] = None
    revision: Optional[str] = None
    confidence: float = 1.0


@dataclass
class DataConflict:
    """A field where the model and the drawing disagree. Never auto-resolved."""
    field: str
    model_value: str
    drawing_value: str
    severity: ConflictSeverity
    recommendation: ConflictResolution
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "modelValue": self.model_value,
            "drawingValue": self.drawing_value,
            "severity": self.severity.value,
            "recommendation": self.recommendation.value,
            "reason": self.reason,
        }


@dataclass
class GapFill:
    """A value missing from the model that the drawing can supply."""
    field: str
    value: str
    source: str
    confidence: float
    auto_apply_threshold: float = 0.85

    @property
    def auto_apply(self) -> bool:
        return self.confidence >= self.auto_apply_threshold

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "value": self.value,
            "source": self.source,
            "confidence": self.confidence,
            "autoApply": self.auto_apply,
        }


@dataclass
class RoutingSuggestion:
    """A routing operation proposed by drawing notes, with its shop op number."""
    operation: RoutingOp
    op_number: int
    type: SuggestionType
    note_text: str
    work_center: Optional[str] = None
    source_note: str = ""
    confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation.value,
            "opNumber": self.op_number,
            "type": self.type.value,
            "workCenter": self.work_center,
            "noteText": self.note_text,
            "sourceNote": self.source_note,
            "confidence": self.confidence,
        }


@dataclass
class RenameSuggestion:
    """A CAD file rename to match the drawing part number."""
    old_path: str
    new_path: str
    reason: str
    confidence: float
    old_drawing_path: Optional[str] = None
    new_drawing_path: Optional[str] = None

    @property
    def requires_user_approval(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "oldPath": self.old_path,
            "newPath": self.new_path,
            "oldDrawingPath": self.old_drawing_path,
            "newDrawingPath": self.new_drawing_path,
            "reason": self.reason,
            "confidence": self.confidence,
            "requiresUserApproval": self.requires_user_approval,
        }


@dataclass
class ReconciliationResult:
    """Conflicts, gap fills, routing and rename suggestions for one part."""
    conflicts: List[DataConflict] = field(default_factory=list)
    gap_fills: List[GapFill] = field(default_factory=list)
    routing_suggestions: List[RoutingSuggestion] = field(default_factory=list)
    rename: Optional[RenameSuggestion] = None
    confirmations: List[str] = field(default_factory=list)
    field_confidence: Dict[str, float] = field(default_factory=dict)

    @property
    def has_conflicts(self) -> bool:
        return len(self.conflicts) > 0

    @property
    def has_gap_fills(self) -> bool:
        return len(self.gap_fills) > 0

    @property
    def has_routing_suggestions(self) -> bool:
        return len(self.routing_suggestions) > 0

    @property
    def has_rename_suggestion(self) -> bool:
        return self.rename is not None

    @property
    def has_actions(self) -> bool:
        return (self.has_conflicts or self.has_gap_fills
                or self.has_routing_suggestions or self.has_rename_suggestion)

    @property
    def summary(self) -> str:
        text = (
            f"{len(self.conflicts)} conflicts, {len(self.gap_fills)} gap fills, "
            f"{len(self.routing_suggestions)} routing suggestions, "
            f"{len(self.confirmations)} confirmations"
        )
        if self.has_rename_suggestion:
            text += ", 1 rename"
        return text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "conflicts": [c.to_dict() for c in self.conflicts],
            "gapFills": [g.to_dict() for g in self.gap_fills],
            "routingSuggestions": [r.to_dict() for r in self.routing_suggestions],
            "rename": self.rename.to_dict() if self.rename else None,
            "confirmations": list(self.confirmations),
            "fieldConfidence": dict(self.field_confidence),
            "summary": self.summary,
        }
