"""
Manufacturing note extraction.

Notes are found with an ordered table of (pattern -> category, routing op,
work center, routing note template). When patterns overlap, the longest
match wins; the first pattern in table order classifies a note.

Usage:
    from drawing_facts.extractors.notes import DrawingNoteExtractor

    extractor = DrawingNoteExtractor()
    notes = extractor.extract_notes("BREAK ALL EDGES\\nPOWDER COAT BLACK")
    hints = extractor.generate_routing_hints(notes)
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Match, Optional, Pattern, Tuple

from ..config import Config, default_config
from ..models.routing import (
    DrawingNote,
    NoteCategory,
    RoutingHint,
    RoutingImpact,
    RoutingOp,
)


@dataclass(frozen=True)
class NotePattern:
    """One row of the note table."""
    regex: Pattern
    category: NoteCategory
    routing_op: RoutingOp
    work_center: Optional[str]
    template: Optional[str]
    confidence: float


def _p(pattern: str, category: NoteCategory, op: RoutingOp, work_center: Optional[str],
       template: Optional[str], confidence: float) -> NotePattern:
    return NotePattern(
        re.compile(pattern, re.IGNORECASE | re.MULTILINE),
        category, op, work_center, template, confidence,
    )


_C = NoteCategory
_O = RoutingOp

# ===========================================================================
# Note table (order matters: first match classifies)
# ===========================================================================

NOTE_PATTERNS: Tuple[NotePattern, ...] = (
    # --- Deburr / edge break ---
    _p(r"break\s*(all)?\s*(?:sharp\s*)?edges", _C.DEBURR, _O.DEBURR, "F210", "BREAK ALL EDGES", 0.95),
    _p(r"deburr\s*(all)?", _C.DEBURR, _O.DEBURR, "F210", "DEBURR", 0.95),
    _p(r"remove\s*(all)?\s*burrs", _C.DEBURR, _O.DEBURR, "F210", "REMOVE ALL BURRS", 0.95),
    _p(r"tumble\s*deburr", _C.DEBURR, _O.DEBURR, "F210", "TUMBLE DEBURR", 0.90),
    _p(r"radius\s+all\s+edges", _C.DEBURR, _O.DEBURR, "F210", "RADIUS ALL EDGES", 0.90),

    # --- Coating / finish (outside process) ---
    _p(r"paint\s+(.+?)(?:\s*$|\s*per\s)", _C.FINISH, _O.OUTSIDE_PROCESS, None, "PAINT {1}", 0.90),
    _p(r"powder\s*coat\s*(.*?)(?:\s*$)", _C.FINISH, _O.OUTSIDE_PROCESS, None, "POWDER COAT", 0.90),
    _p(r"anodize\s*(.*?)(?:\s*$)", _C.FINISH, _O.OUTSIDE_PROCESS, None, "ANODIZE", 0.90),
    _p(r"galvanize", _C.FINISH, _O.OUTSIDE_PROCESS, None, "GALVANIZE", 0.90),
    _p(r"zinc\s*plate", _C.FINISH, _O.OUTSIDE_PROCESS, None, "ZINC PLATE", 0.90),
    _p(r"chrome\s*plate", _C.FINISH, _O.OUTSIDE_PROCESS, None, "CHROME PLATE", 0.90),
    _p(r"black\s*oxide", _C.FINISH, _O.OUTSIDE_PROCESS, None, "BLACK OXIDE", 0.90),
    _p(r"hot\s*dip\s*galv", _C.FINISH, _O.OUTSIDE_PROCESS, None, "HOT DIP GALVANIZE", 0.90),
    _p(r"e-?coat", _C.FINISH, _O.OUTSIDE_PROCESS, None, "E-COAT", 0.85),
    _p(r"prime[rd]?\s", _C.FINISH, _O.OUTSIDE_PROCESS, None, "PRIME", 0.80),

    # --- Heat treat (outside process) ---
    _p(r"heat\s*treat\s*(.*?)(?:\s*$)", _C.HEAT_TREAT, _O.OUTSIDE_PROCESS, None, "HEAT TREAT", 0.90),
    _p(r"stress\s*reliev", _C.HEAT_TREAT, _O.OUTSIDE_PROCESS, None, "STRESS RELIEVE", 0.90),
    _p(r"harden\s*(?:to|per)", _C.HEAT_TREAT, _O.OUTSIDE_PROCESS, None, "HARDEN", 0.90),
    _p(r"(?:RC|HRC|ROCKWELL)\s*(\d{2})", _C.HEAT_TREAT, _O.OUTSIDE_PROCESS, None, "HARDEN TO {0}", 0.85),
    _p(r"normalize", _C.HEAT_TREAT, _O.OUTSIDE_PROCESS, None, "NORMALIZE", 0.85),
    _p(r"anneal", _C.HEAT_TREAT, _O.OUTSIDE_PROCESS, None, "ANNEAL", 0.85),
    _p(r"carburize", _C.HEAT_TREAT, _O.OUTSIDE_PROCESS, None, "CARBURIZE", 0.85),
    _p(r"case\s*harden", _C.HEAT_TREAT, _O.OUTSIDE_PROCESS, None, "CASE HARDEN", 0.85),

    # --- Welding ---
    _p(r"weld\s*(?:all|per|as)", _C.WELD, _O.WELD, "F400", "WELD PER DWG", 0.90),
    _p(r"mig\s*weld", _C.WELD, _O.WELD, "F400", "MIG WELD", 0.90),
    _p(r"tig\s*weld", _C.WELD, _O.WELD, "F400", "TIG WELD", 0.90),
    _p(r"spot\s*weld", _C.WELD, _O.WELD, "F400", "SPOT WELD", 0.85),
    _p(r"plug\s*weld", _C.WELD, _O.WELD, "F400", "PLUG WELD", 0.85),
    _p(r"tack\s*weld", _C.WELD, _O.WELD, "F400", "TACK WELD", 0.85),
    _p(r"fillet\s*weld", _C.WELD, _O.WELD, "F400", "FILLET WELD PER DWG", 0.90),

    # --- Machining / tapping ---
    _p(r"tap\s+(\d+[/\-]\d+)", _C.MACHINE, _O.TAP, "F220", "TAP {1}", 0.90),
    _p(r"drill\s+.+?thru", _C.MACHINE, _O.DRILL, None, "DRILL PER DWG", 0.80),
    _p(r"countersink", _C.MACHINE, _O.MACHINE, None, "COUNTERSINK PER DWG", 0.85),
    _p(r"counterbore", _C.MACHINE, _O.MACHINE, None, "COUNTERBORE PER DWG", 0.85),
    _p(r"ream\s+to", _C.MACHINE, _O.MACHINE, None, "REAM PER DWG", 0.85),

    # --- Cutting process constraints ---
    _p(r"waterjet\s*only", _C.PROCESS_CONSTRAINT, _O.PROCESS_OVERRIDE, "F110", "WATERJET ONLY", 0.95),
    _p(r"laser\s*cut", _C.PROCESS_CONSTRAINT, _O.PROCESS_OVERRIDE, "F115", "LASER CUT", 0.85),
    _p(r"plasma\s*cut", _C.PROCESS_CONSTRAINT, _O.PROCESS_OVERRIDE, "F120", "PLASMA CUT", 0.85),
    _p(r"do\s*not\s*(?:laser|burn)", _C.PROCESS_CONSTRAINT, _O.PROCESS_OVERRIDE, "F110",
       "DO NOT LASER - USE WATERJET", 0.95),
    _p(r"flame\s*cut", _C.PROCESS_CONSTRAINT, _O.PROCESS_OVERRIDE, "F120", "FLAME CUT", 0.80),

    # --- Inspection ---
    _p(r"inspect\s*(?:per|to|100%|all)", _C.INSPECT, _O.INSPECT, None, "INSPECT PER DWG", 0.85),
    _p(r"cmm\s*inspect", _C.INSPECT, _O.INSPECT, None, "CMM INSPECT", 0.90),
    _p(r"first\s*article", _C.INSPECT, _O.INSPECT, None, "FIRST ARTICLE REQUIRED", 0.90),
    _p(r"ppap\s*required", _C.INSPECT, _O.INSPECT, None, "PPAP REQUIRED", 0.90),

    # --- Hardware ---
    _p(r"install\s+pem", _C.HARDWARE, _O.HARDWARE, None, "INSTALL PEM HARDWARE", 0.90),
    _p(r"press\s*fit\s*(.+?)(?:\s*$)", _C.HARDWARE, _O.HARDWARE, None, "PRESS FIT HARDWARE", 0.85),
    _p(r"insert\s+rivet\s*nut", _C.HARDWARE, _O.HARDWARE, None, "INSTALL RIVET NUT", 0.85),
    _p(r"install\s+.+?insert", _C.HARDWARE, _O.HARDWARE, None, "INSTALL INSERT PER DWG", 0.80),
)

# Routing for a note that no table row matches (e.g. text edited after extraction)
_DEFAULT_ROUTING = MappingProxyType({
    NoteCategory.DEBURR: (RoutingOp.DEBURR, "F210"),
    NoteCategory.FINISH: (RoutingOp.OUTSIDE_PROCESS, None),
    NoteCategory.HEAT_TREAT: (RoutingOp.OUTSIDE_PROCESS, None),
    NoteCategory.WELD: (RoutingOp.WELD, "F400"),
    NoteCategory.MACHINE: (RoutingOp.MACHINE, None),
    NoteCategory.PROCESS_CONSTRAINT: (RoutingOp.PROCESS_OVERRIDE, None),
    NoteCategory.INSPECT: (RoutingOp.INSPECT, None),
    NoteCategory.HARDWARE: (RoutingOp.HARDWARE, None),
    NoteCategory.GENERAL: None,
})

# "NOTES:" heading followed by numbered items
NOTES_SECTION_PATTERN = re.compile(r"NOTES?\s*:\s*\r?\n((?:\s*\d+[\.\)]\s*.+\r?\n?)+)", re.IGNORECASE)
NUMBERED_NOTE_PATTERN = re.compile(r"\d+[\.\)]\s*(.+?)(?=\r?\n\s*\d+[\.\)]|\s*$)", re.IGNORECASE)


def default_routing_for(category: NoteCategory) -> Optional[Tuple[RoutingOp, Optional[str]]]:
    """Fallback (operation, work center) for a category; None for General."""
    return _DEFAULT_ROUTING[category]


def classify_note(text: str) -> NoteCategory:
    """Category of the first table row matching the text, else General."""
    for pattern in NOTE_PATTERNS:
        if pattern.regex.search(text):
            return pattern.category
    return NoteCategory.GENERAL


def substitute_groups(template: str, match: Optional[Match]) -> str:
    """Replace {0}, {1}, ... in a template with the uppercased match groups."""
    if match is None:
        return template
    groups = [match.group(0)] + list(match.groups())
    for i, value in enumerate(groups):
        template = template.replace("{" + str(i) + "}", (value or "").strip().upper())
    return template.strip()


class DrawingNoteExtractor:
    """Extracts manufacturing notes and turns them into routing hints."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or default_config

    def extract_notes(self, text: str, page_number: int = 1) -> List[DrawingNote]:
        """
        Extract manufacturing-relevant notes from page text.

        Overlapping matches are resolved longest-first; duplicates are
        dropped case-insensitively, keeping the first occurrence.

        Args:
            text: Page or notes-region text
            page_number: 1-based page number recorded on each note

        Returns:
            Notes in the order they appear, followed by numbered notes
        """
        if not text or not text.strip():
            return []

        candidates = []
        for order, pattern in enumerate(NOTE_PATTERNS):
            for match in pattern.regex.finditer(text):
                note_text = match.group(0).strip()
                if note_text:
                    candidates.append((match.start(), match.end(), order, note_text, pattern))

        # Longest first; ties keep table order then text position
        candidates.sort(key=lambda c: (-(c[1] - c[0]), c[2], c[0]))

        seen = set()
        accepted = []
        for start, end, _, note_text, pattern in candidates:
            key = note_text.upper()
            if key in seen:
                continue
            if any(start < a_end and end > a_start for a_start, a_end, *_ in accepted):
                continue
            seen.add(key)
            accepted.append((start, end, note_text, pattern))

        accepted.sort(key=lambda a: a[0])
        notes = [
            DrawingNote(
                text=note_text,
                category=pattern.category,
                confidence=pattern.confidence,
                page_number=page_number,
            )
            for _, _, note_text, pattern in accepted
        ]

        notes.extend(self._extract_numbered_notes(text, page_number, seen, accepted))
        return notes

    def _extract_numbered_notes(self, text: str, page_number: int, seen: set, accepted: list) -> List[DrawingNote]:
        section = NOTES_SECTION_PATTERN.search(text)
        if not section:
            return []

        notes = []
        base = section.start(1)
        for match in NUMBERED_NOTE_PATTERN.finditer(section.group(1)):
            note_text = match.group(1).strip()
            if not note_text or note_text.upper() in seen:
                continue
            # A table match inside this note already covers it
            start, end = base + match.start(1), base + match.end(1)
            if any(start < a_end and end > a_start for a_start, a_end, *_ in accepted):
                continue
            seen.add(note_text.upper())
            notes.append(DrawingNote(
                text=note_text,
                category=classify_note(note_text),
                confidence=self.config.numbered_note_confidence,
                page_number=page_number,
            ))
        return notes

    def generate_routing_hints(self, notes: List[DrawingNote]) -> List[RoutingHint]:
        """
        Convert notes into routing hints.

        Informational notes produce nothing. The first table row that
        matches a note supplies its operation, work center and routing note;
        notes no row matches fall back to the category routing table. Notes
        that resolve to the same operation, work center and routing note
        yield one hint.
        """
        if not notes:
            return []

        hints = []
        seen = set()
        seen_hints = set()
        for note in notes:
            if note.impact == RoutingImpact.INFORMATIONAL:
                continue
            if note.text.upper() in seen:
                continue
            seen.add(note.text.upper())

            hint = self._hint_from_table(note)
            if hint is None:
                routing = default_routing_for(note.category)
                if routing is None:
                    continue
                operation, work_center = routing
                hint = RoutingHint(
                    operation=operation,
                    work_center=work_center,
                    note_text=note.text.upper(),
                    source_note=note.text,
                    confidence=note.confidence,
                )

            key = (hint.operation, hint.work_center, hint.note_text)
            if key in seen_hints:
                continue
            seen_hints.add(key)
            hints.append(hint)

        return hints

    def _hint_from_table(self, note: DrawingNote) -> Optional[RoutingHint]:
        for pattern in NOTE_PATTERNS:
            match = pattern.regex.search(note.text)
            if not match:
                continue
            if pattern.template:
                note_text = substitute_groups(pattern.template, match)
            else:
                note_text = note.text.upper()
            return RoutingHint(
                operation=pattern.routing_op,
                work_center=pattern.work_center,
                note_text=note_text,
                source_note=note.text,
                confidence=note.confidence,
            )
        return None
