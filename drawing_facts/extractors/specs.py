"""
Industry specification recognition.

A master pattern finds anything that looks like a spec reference (ASTM,
AMS, MIL, AWS, ASME, SAE, QQ, NADCAP, AS9100, ISO 9001, ITAR, ...); each
candidate is then classified against the spec database, first entry wins.

Usage:
    from drawing_facts.extractors.specs import SpecRecognizer

    recognizer = SpecRecognizer()
    matches = recognizer.recognize("WELD PER AWS D1.1. MATERIAL ASTM A36")
    hints = recognizer.to_routing_hints(matches)
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple

from ..models.routing import DrawingNote, NoteCategory, RoutingHint, RoutingOp
from ..models.spec import SpecCategory, SpecMatch, note_category_for_spec


@dataclass(frozen=True)
class SpecEntry:
    """One row of the spec database."""
    pattern: Pattern
    spec_id: str
    full_name: str
    category: SpecCategory
    routing_op: Optional[RoutingOp]
    work_center: Optional[str]
    routing_note: Optional[str]
    confidence: float


def _s(pattern: str, spec_id: str, full_name: str, category: SpecCategory,
       routing_op: Optional[RoutingOp] = None, work_center: Optional[str] = None,
       routing_note: Optional[str] = None, confidence: float = 0.90) -> SpecEntry:
    # Trailing digit guard keeps "ASTM A53" from claiming "ASTM A536"
    return SpecEntry(
        re.compile(pattern + r"(?!\d)", re.IGNORECASE),
        spec_id, full_name, category, routing_op, work_center, routing_note, confidence,
    )


_M = SpecCategory.MATERIAL
_OUT = RoutingOp.OUTSIDE_PROCESS

# ===========================================================================
# Master pattern: anything shaped like a spec reference
# ===========================================================================

MASTER_PATTERN = re.compile(
    r"\b(?:"
    r"ASTM\s*[A-Z][\-\s]?\d+"
    r"|AMS[\-\s]?\d{4}"
    r"|AMS[\-\s][A-Z][\-\s]?\d+"
    r"|MIL[\-\s][A-Z]{1,4}[\-\s]\d+"
    r"|AWS\s*[A-Z]\d+(?:\.\d+)?"
    r"|ASME\s*[A-Z]\d+(?:\.\d+)?"
    r"|SAE\s*[A-Z]?\d+"
    r"|AMS[\-\s]QQ[\-\s][A-Z][\-\s]\d+"
    r"|QQ[\-\s][A-Z][\-\s]\d+"
    r"|NADCAP"
    r"|AS\s*9100"
    r"|AS\s*9102"
    r"|ISO\s*9001"
    r"|ITAR"
    r"|DFARS"
    r"|CUI\b"
    r"|NIST\s*800[\-\s]\d+"
    r")"
    r"(?:[\-\s]*(?:CLASS|TYPE|GRADE|COND|GR)\s*[A-Z0-9]{1,4})?",
    re.IGNORECASE,
)

# ===========================================================================
# Spec database
# ===========================================================================

SPEC_DATABASE: Tuple[SpecEntry, ...] = (
    # --- ASTM structural steel ---
    _s(r"ASTM\s*A[\-\s]?36", "ASTM A36", "Carbon Structural Steel", _M, confidence=0.95),
    _s(r"ASTM\s*A[\-\s]?500", "ASTM A500", "Structural Tubing (Cold-Formed)", _M, confidence=0.95),
    _s(r"ASTM\s*A[\-\s]?513", "ASTM A513", "Electric-Resistance-Welded Tubing", _M, confidence=0.95),
    _s(r"ASTM\s*A[\-\s]?514", "ASTM A514", "High-Yield Quenched & Tempered Plate", _M),
    _s(r"ASTM\s*A[\-\s]?516", "ASTM A516", "Pressure Vessel Plate", _M),
    _s(r"ASTM\s*A[\-\s]?529", "ASTM A529", "High-Strength Carbon-Manganese Steel", _M),
    _s(r"ASTM\s*A[\-\s]?572", "ASTM A572", "High-Strength Low-Alloy Steel", _M, confidence=0.95),
    _s(r"ASTM\s*A[\-\s]?588", "ASTM A588", "Weathering Steel (Corten)", _M),
    _s(r"ASTM\s*A[\-\s]?53", "ASTM A53", "Pipe (Black/Galvanized)", _M),

    # --- ASTM stainless ---
    _s(r"ASTM\s*A[\-\s]?240", "ASTM A240", "Stainless Steel Plate/Sheet", _M, confidence=0.95),
    _s(r"ASTM\s*A[\-\s]?276", "ASTM A276", "Stainless Steel Bar", _M),
    _s(r"ASTM\s*A[\-\s]?312", "ASTM A312", "Stainless Steel Pipe", _M),
    _s(r"ASTM\s*A[\-\s]?269", "ASTM A269", "Stainless Steel Tubing", _M),
    _s(r"ASTM\s*A[\-\s]?554", "ASTM A554", "Stainless Welded Mechanical Tubing", _M),

    # --- ASTM aluminum ---
    _s(r"ASTM\s*B[\-\s]?209", "ASTM B209", "Aluminum Sheet/Plate", _M),
    _s(r"ASTM\s*B[\-\s]?221", "ASTM B221", "Aluminum Bar/Rod/Wire/Shape", _M),
    _s(r"ASTM\s*B[\-\s]?241", "ASTM B241", "Aluminum Seamless Pipe/Tube", _M),

    # --- AMS aerospace material ---
    _s(r"AMS[\-\s]?4027", "AMS 4027", "6061-T6 Aluminum Sheet", _M),
    _s(r"AMS[\-\s]?4041", "AMS 4041", "2024-T3 Aluminum Sheet", _M),
    _s(r"AMS[\-\s]?4044", "AMS 4044", "2024-T4 Aluminum Sheet", _M),
    _s(r"AMS[\-\s]?4911", "AMS 4911", "Titanium 6Al-4V Sheet/Plate", _M),
    _s(r"AMS[\-\s]?5510", "AMS 5510", "304 Stainless Sheet", _M),
    _s(r"AMS[\-\s]?5524", "AMS 5524", "321 Stainless Sheet", _M),
    _s(r"AMS[\-\s]?5596", "AMS 5596", "Inconel 718 Sheet", _M),
    _s(r"AMS[\-\s]?6350", "AMS 6350", "4130 Normalized Steel", _M),

    # --- Welding codes ---
    _s(r"AWS\s*D1[\.\s]?1", "AWS D1.1", "Structural Welding - Steel", SpecCategory.WELDING,
       RoutingOp.WELD, "F400", "WELD PER AWS D1.1", 0.95),
    _s(r"AWS\s*D1[\.\s]?2", "AWS D1.2", "Structural Welding - Aluminum", SpecCategory.WELDING,
       RoutingOp.WELD, "F400", "WELD PER AWS D1.2", 0.95),
    _s(r"AWS\s*D1[\.\s]?3", "AWS D1.3", "Structural Welding - Sheet Steel", SpecCategory.WELDING,
       RoutingOp.WELD, "F400", "WELD PER AWS D1.3", 0.95),
    _s(r"AWS\s*D1[\.\s]?6", "AWS D1.6", "Structural Welding - Stainless", SpecCategory.WELDING,
       RoutingOp.WELD, "F400", "WELD PER AWS D1.6", 0.95),
    _s(r"AWS\s*D17[\.\s]?1", "AWS D17.1", "Aerospace Fusion Welding", SpecCategory.WELDING,
       RoutingOp.WELD, "F400", "WELD PER AWS D17.1 (AEROSPACE)", 0.95),
    _s(r"AWS\s*D9[\.\s]?1", "AWS D9.1", "Sheet Metal Welding", SpecCategory.WELDING,
       RoutingOp.WELD, "F400", "WELD PER AWS D9.1"),

    # --- Paint / primer / powder ---
    _s(r"MIL[\-\s]PRF[\-\s]22750", "MIL-PRF-22750", "Epoxy Primer (High-Solids)", SpecCategory.COATING,
       _OUT, None, "PRIME PER MIL-PRF-22750"),
    _s(r"MIL[\-\s]PRF[\-\s]85285", "MIL-PRF-85285", "Polyurethane Topcoat", SpecCategory.COATING,
       _OUT, None, "PAINT PER MIL-PRF-85285"),
    _s(r"MIL[\-\s]DTL[\-\s]53039", "MIL-DTL-53039", "CARC Epoxy Primer", SpecCategory.COATING,
       _OUT, None, "PRIME PER MIL-DTL-53039 (CARC)"),
    _s(r"MIL[\-\s]PRF[\-\s]23377", "MIL-PRF-23377", "Epoxy Primer", SpecCategory.COATING,
       _OUT, None, "PRIME PER MIL-PRF-23377"),
    _s(r"AMS[\-\s]C[\-\s]27725", "AMS-C-27725", "Powder Coating", SpecCategory.COATING,
       _OUT, None, "POWDER COAT PER AMS-C-27725"),

    # --- Plating / conversion coating ---
    _s(r"ASTM\s*B[\-\s]?633", "ASTM B633", "Zinc Electroplating", SpecCategory.COATING,
       _OUT, None, "ZINC PLATE PER ASTM B633"),
    _s(r"ASTM\s*B[\-\s]?456", "ASTM B456", "Nickel/Chrome Plating", SpecCategory.COATING,
       _OUT, None, "NICKEL/CHROME PLATE PER ASTM B456"),
    _s(r"ASTM\s*B[\-\s]?488", "ASTM B488", "Gold Electroplating", SpecCategory.COATING,
       _OUT, None, "GOLD PLATE PER ASTM B488", 0.85),
    _s(r"ASTM\s*B[\-\s]?733", "ASTM B733", "Electroless Nickel", SpecCategory.COATING,
       _OUT, None, "ELECTROLESS NICKEL PER ASTM B733"),
    _s(r"AMS[\-\s]QQ[\-\s]N[\-\s]290", "AMS-QQ-N-290", "Nickel Plating", SpecCategory.COATING,
       _OUT, None, "NICKEL PLATE PER AMS-QQ-N-290"),
    _s(r"QQ[\-\s]N[\-\s]290", "QQ-N-290", "Nickel Plating (Legacy)", SpecCategory.COATING,
       _OUT, None, "NICKEL PLATE PER QQ-N-290", 0.85),
    _s(r"MIL[\-\s]DTL[\-\s]5541", "MIL-DTL-5541", "Chemical Film (Chem Film / Alodine)", SpecCategory.COATING,
       _OUT, None, "CHEM FILM PER MIL-DTL-5541"),
    _s(r"MIL[\-\s]DTL[\-\s]13924", "MIL-DTL-13924", "Black Oxide", SpecCategory.COATING,
       _OUT, None, "BLACK OXIDE PER MIL-DTL-13924"),
    _s(r"AMS[\-\s]?2700", "AMS 2700", "Passivation (Stainless)", SpecCategory.COATING,
       _OUT, None, "PASSIVATE PER AMS 2700"),
    _s(r"ASTM\s*A[\-\s]?967", "ASTM A967", "Passivation (Chemical)", SpecCategory.COATING,
       _OUT, None, "PASSIVATE PER ASTM A967"),

    # --- Heat treat ---
    _s(r"AMS[\-\s]?2759", "AMS 2759", "Heat Treatment of Steel Parts", SpecCategory.HEAT_TREAT,
       _OUT, None, "HEAT TREAT PER AMS 2759"),
    _s(r"AMS[\-\s]H[\-\s]6875", "AMS-H-6875", "Heat Treatment of Stainless", SpecCategory.HEAT_TREAT,
       _OUT, None, "HEAT TREAT PER AMS-H-6875"),
    _s(r"AMS[\-\s]?2750", "AMS 2750", "Pyrometry (Furnace Calibration)", SpecCategory.HEAT_TREAT,
       confidence=0.85),

    # --- Surface treatment ---
    _s(r"AMS[\-\s]?2430", "AMS 2430", "Shot Peening", SpecCategory.SURFACE_FINISH,
       _OUT, None, "SHOT PEEN PER AMS 2430"),
    _s(r"AMS[\-\s]?2431", "AMS 2431", "Shot Peening (Computer Monitored)", SpecCategory.SURFACE_FINISH,
       _OUT, None, "SHOT PEEN PER AMS 2431"),
    _s(r"MIL[\-\s]STD[\-\s]171", "MIL-STD-171", "Surface Finishing", SpecCategory.SURFACE_FINISH,
       _OUT, None, "FINISH PER MIL-STD-171", 0.85),
    _s(r"AMS[\-\s]?2470", "AMS 2470", "Anodize Type I (Chromic)", SpecCategory.SURFACE_FINISH,
       _OUT, None, "ANODIZE TYPE I PER AMS 2470"),
    _s(r"AMS[\-\s]?2471", "AMS 2471", "Anodize Type II (Sulfuric)", SpecCategory.SURFACE_FINISH,
       _OUT, None, "ANODIZE TYPE II PER AMS 2471"),
    _s(r"AMS[\-\s]?2472", "AMS 2472", "Anodize Type III (Hard)", SpecCategory.SURFACE_FINISH,
       _OUT, None, "HARD ANODIZE PER AMS 2472"),
    _s(r"MIL[\-\s]A[\-\s]8625", "MIL-A-8625", "Anodic Coatings for Aluminum", SpecCategory.SURFACE_FINISH,
       _OUT, None, "ANODIZE PER MIL-A-8625"),

    # --- Inspection / nondestructive testing ---
    _s(r"ASME\s*Y14[\.\s]?5", "ASME Y14.5", "Dimensioning & Tolerancing (GD&T)", SpecCategory.INSPECTION),
    _s(r"AS\s*9102", "AS 9102", "First Article Inspection", SpecCategory.INSPECTION,
       RoutingOp.INSPECT, None, "FIRST ARTICLE PER AS 9102", 0.95),
    _s(r"ASTM\s*E[\-\s]?1444", "ASTM E1444", "Magnetic Particle Inspection", SpecCategory.INSPECTION,
       RoutingOp.INSPECT, None, "MAG PARTICLE INSPECT PER ASTM E1444"),
    _s(r"ASTM\s*E[\-\s]?1417", "ASTM E1417", "Liquid Penetrant Inspection", SpecCategory.INSPECTION,
       RoutingOp.INSPECT, None, "LPI PER ASTM E1417"),
    _s(r"ASTM\s*E[\-\s]?94", "ASTM E94", "Radiographic Examination", SpecCategory.INSPECTION,
       RoutingOp.INSPECT, None, "RADIOGRAPHIC INSPECT PER ASTM E94"),
    _s(r"ASTM\s*E[\-\s]?164", "ASTM E164", "Ultrasonic Contact Examination", SpecCategory.INSPECTION,
       RoutingOp.INSPECT, None, "UT INSPECT PER ASTM E164"),
    _s(r"AMS[\-\s]?2644", "AMS 2644", "Fluorescent Penetrant Inspection", SpecCategory.INSPECTION,
       RoutingOp.INSPECT, None, "FPI PER AMS 2644"),
    _s(r"AMS[\-\s]?2645", "AMS 2645", "Fluorescent Penetrant Inspection (Type 1)", SpecCategory.INSPECTION,
       RoutingOp.INSPECT, None, "FPI TYPE 1 PER AMS 2645"),

    # --- Quality systems ---
    _s(r"AS\s*9100", "AS 9100", "Aerospace Quality Management System", SpecCategory.QUALITY),
    _s(r"ISO\s*9001", "ISO 9001", "Quality Management System", SpecCategory.QUALITY, confidence=0.85),
    _s(r"NADCAP", "NADCAP", "National Aerospace & Defense Contractors Accreditation Program",
       SpecCategory.QUALITY),
    _s(r"AMS[\-\s]?2175", "AMS 2175", "Classification of Castings", SpecCategory.QUALITY, confidence=0.85),

    # --- Fasteners ---
    _s(r"SAE\s*J429", "SAE J429", "Mechanical Properties of Bolts", _M, confidence=0.80),
    _s(r"ASTM\s*A[\-\s]?193", "ASTM A193", "High-Temp Bolting Material", _M, confidence=0.80),
    _s(r"ASTM\s*A[\-\s]?194", "ASTM A194", "High-Temp Nut Material", _M, confidence=0.80),
    _s(r"ASTM\s*F[\-\s]?3125", "ASTM F3125", "High-Strength Structural Bolts", _M, confidence=0.80),

    # --- Controlled information ---
    _s(r"\bITAR\b", "ITAR", "International Traffic in Arms Regulations", SpecCategory.CONTROLLED,
       confidence=0.95),
    _s(r"\bDFARS\b", "DFARS", "Defense Federal Acquisition Regulation Supplement", SpecCategory.CONTROLLED),
    _s(r"\bCUI\b", "CUI", "Controlled Unclassified Information", SpecCategory.CONTROLLED),
    _s(r"NIST\s*800[\-\s]171", "NIST 800-171", "Protecting CUI in Nonfederal Systems", SpecCategory.CONTROLLED),
)

# Material and controlled-data specs are informational only
_INFORMATIONAL_CATEGORIES = frozenset({SpecCategory.MATERIAL, SpecCategory.CONTROLLED})


def database_size() -> int:
    """Number of specs in the database."""
    return len(SPEC_DATABASE)


def classify_reference(raw: str) -> Optional[SpecEntry]:
    """First database entry matching a spec-shaped reference, or None."""
    for entry in SPEC_DATABASE:
        if entry.pattern.search(raw):
            return entry
    return None


class SpecRecognizer:
    """Recognizes specification references in drawing text."""

    def recognize(self, text: str) -> List[SpecMatch]:
        """
        Find known specification references in text.

        Args:
            text: Page text

        Returns:
            One SpecMatch per distinct spec, in order of first appearance
        """
        if not text or not text.strip():
            return []

        results = []
        seen = set()
        for candidate in MASTER_PATTERN.finditer(text):
            raw = candidate.group(0).strip()
            entry = classify_reference(raw)
            if entry is None or entry.spec_id in seen:
                continue
            seen.add(entry.spec_id)
            results.append(SpecMatch(
                spec_id=entry.spec_id,
                full_name=entry.full_name,
                category=entry.category,
                routing_op=entry.routing_op,
                work_center=entry.work_center,
                routing_note=entry.routing_note,
                confidence=entry.confidence,
                raw_text=raw,
            ))
        return results

    def to_routing_hints(self, matches: List[SpecMatch]) -> List[RoutingHint]:
        """One hint per distinct (operation, work center); informational specs yield none."""
        if not matches:
            return []

        hints = []
        seen_ops = set()
        for match in matches:
            if match.routing_op is None or match.category in _INFORMATIONAL_CATEGORIES:
                continue
            key = (match.routing_op, match.work_center)
            if key in seen_ops:
                continue
            seen_ops.add(key)
            hints.append(RoutingHint(
                operation=match.routing_op,
                work_center=match.work_center,
                note_text=match.routing_note or f"PER {match.spec_id}",
                source_note=match.raw_text,
                confidence=match.confidence,
            ))
        return hints

    def to_drawing_notes(self, matches: List[SpecMatch], page_number: int = 1) -> List[DrawingNote]:
        """Notes of the form "SpecId: FullName"; General (informational) without a routing op."""
        if not matches:
            return []
        return [
            DrawingNote(
                text=f"{m.spec_id}: {m.full_name}",
                category=note_category_for_spec(m.category) if m.routing_op else NoteCategory.GENERAL,
                confidence=m.confidence,
                page_number=page_number,
            )
            for m in matches
        ]
