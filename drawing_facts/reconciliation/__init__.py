"""Reconciliation of CAD model facts with drawing facts."""

from .models import (
    PartData,
    ConflictSeverity,
    ConflictResolution,
    SuggestionType,
    DataConflict,
    GapFill,
    RoutingSuggestion,
    RenameSuggestion,
    ReconciliationResult,
)
from .routing import RoutingNoteInterpreter, op_number_for, suggestion_type_for
from .engine import ReconciliationEngine, normalize_material, materials_equivalent

__all__ = [
    "PartData",
    "ConflictSeverity",
    "ConflictResolution",
    "SuggestionType",
    "DataConflict",
    "GapFill",
    "RoutingSuggestion",
    "RenameSuggestion",
    "ReconciliationResult",
    "RoutingNoteInterpreter",
    "op_number_for",
    "suggestion_type_for",
    "ReconciliationEngine",
    "normalize_material",
    "materials_equivalent",
]
