"""Turn drawing routing hints into sequenced routing suggestions."""

from types import MappingProxyType
from typing import List, Optional

from ..models.routing import RoutingHint, RoutingOp
from .models import RoutingSuggestion, SuggestionType


OUTSIDE_PROCESS_OP_NUMBER = 60

# Shop routing template: operation -> op number
OP_NUMBERS = MappingProxyType({
    RoutingOp.PROCESS_OVERRIDE: 20,   # cutting (laser/waterjet/plasma)
    RoutingOp.DEBURR: 30,
    RoutingOp.TAP: 35,
    RoutingOp.DRILL: 35,
    RoutingOp.MACHINE: 35,
    RoutingOp.HARDWARE: 40,
    RoutingOp.WELD: 50,
    RoutingOp.INSPECT: 55,
    RoutingOp.HEAT_TREAT: OUTSIDE_PROCESS_OP_NUMBER,
    RoutingOp.FINISH: OUTSIDE_PROCESS_OP_NUMBER,
    RoutingOp.OUTSIDE_PROCESS: OUTSIDE_PROCESS_OP_NUMBER,
})

_OUTSIDE_OPS = frozenset({RoutingOp.HEAT_TREAT, RoutingOp.FINISH, RoutingOp.OUTSIDE_PROCESS})


def op_number_for(operation: RoutingOp) -> int:
    return OP_NUMBERS[operation]


def suggestion_type_for(operation: RoutingOp, work_center: Optional[str]) -> SuggestionType:
    """Process overrides modify an op; outside processes without a work center become notes."""
    if operation == RoutingOp.PROCESS_OVERRIDE:
        return SuggestionType.MODIFY_OPERATION
    if operation in _OUTSIDE_OPS and not work_center:
        return SuggestionType.ADD_NOTE
    return SuggestionType.ADD_OPERATION


class RoutingNoteInterpreter:
    """Maps routing hints onto the shop's op-number template."""

    def interpret(self, hints: Optional[List[RoutingHint]]) -> List[RoutingSuggestion]:
        """
        Convert routing hints to suggestions sorted by op number.

        Hints with the same op number keep their input order.
        """
        if not hints:
            return []

        suggestions = [
            RoutingSuggestion(
                operation=hint.operation,
                op_number=op_number_for(hint.operation),
                type=suggestion_type_for(hint.operation, hint.work_center),
                note_text=hint.note_text or hint.source_note,
                work_center=hint.work_center,
                source_note=hint.source_note,
                confidence=hint.confidence,
            )
            for hint in hints
        ]
        suggestions.sort(key=lambda s: s.op_number)
        return suggestions
