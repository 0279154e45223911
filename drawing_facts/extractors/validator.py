"""Domain checks for extracted drawing data.

Rules:
- Part numbers must not contain title block label words (label leakage)
- Part numbers should look like identifiers (alphanumeric, dash, dot, slash)
- Materials should mention a known material keyword
- Materials must not contain an adjacent title block label
- Finishes should mention a known finish type
- Thickness must be positive; over 12" is flagged for a units check
- Notes shorter than 3 characters are suspicious
- Notes that are only a number are BOM leakage, not manufacturing notes

Issues are reported, never raised. validate_and_correct() clears fields
with Error-severity issues so they can be re-read or filled by a reviewer.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from ..models.drawing import DrawingData
from ..models.routing import DrawingNote


class IssueSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationIssue:
    """One problem found in extracted data."""
    field: str
    message: str
    severity: IssueSeverity
    original_value: Optional[str] = None

    def __str__(self) -> str:
        return f"[{self.severity.value}] {self.field}: {self.message} (was: '{self.original_value}')"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "message": self.message,
            "severity": self.severity.value,
            "originalValue": self.original_value,
        }


KNOWN_MATERIAL_KEYWORDS = (
    "STEEL", "STAINLESS", "ALUMINUM", "ALUMINIUM", "COPPER", "BRASS", "BRONZE",
    "TITANIUM", "INCONEL", "MONEL", "HASTELLOY", "NICKEL",
    "A36", "A53", "A500", "A513", "A514", "A572",
    "304", "304L", "316", "316L", "321", "347", "410", "430", "440",
    "1008", "1010", "1018", "1020", "1045", "1095",
    "4130", "4140", "4340", "8620",
    "6061", "5052", "3003", "2024", "7075",
    "CRS", "HRS", "HRPO", "CR", "HR", "SS", "CS", "MS", "AL",
    "GALVANIZED", "GALVANNEAL", "GALV",
    "ASTM", "SAE", "AISI", "AMS", "MIL",
    "DOM", "ERW", "SEAMLESS",
)

KNOWN_FINISH_KEYWORDS = (
    "PAINT", "POWDER COAT", "ANODIZE", "GALVANIZE", "ZINC PLATE",
    "CHROME PLATE", "BLACK OXIDE", "E-COAT", "PRIME", "PRIMER",
    "HOT DIP", "ELECTROLESS NICKEL", "HARD CHROME", "PASSIVATE",
    "CHEM FILM", "ALODINE", "CONVERSION COATING", "CLEAR COAT",
    "NONE", "N/A", "AS MACHINED", "MILL FINISH",
    "SANDBLAST", "BEAD BLAST", "TUMBLE", "POLISHED", "BRUSHED", "SATIN",
)

INVALID_PART_NUMBER_WORDS = (
    "SCALE", "MATERIAL", "FINISH", "DRAWN", "CHECKED", "DATE",
    "REVISION", "SHEET", "TITLE", "DESCRIPTION", "UNLESS",
    "TOLERANCE", "DO NOT", "BREAK", "DEBURR", "PAINT",
    "NOTES", "GENERAL", "DIMENSIONS", "SPECIFIED",
)

MIN_NOTE_LENGTH = 3
MAX_THICKNESS_INCHES = 12.0

_MATERIAL_KEYWORD_PATTERN = re.compile(
    r"(?<![A-Z0-9])(?:" + "|".join(re.escape(k) for k in KNOWN_MATERIAL_KEYWORDS) + r")(?![A-Z0-9])",
    re.IGNORECASE,
)
_FINISH_KEYWORD_PATTERN = re.compile(
    r"(?<![A-Z])(?:" + "|".join(re.escape(k) for k in KNOWN_FINISH_KEYWORDS) + r")",
    re.IGNORECASE,
)
_MATERIAL_LABEL_LEAK = re.compile(r"\b(FINISH|SCALE|DRAWN|DATE|REV|SHEET)\b", re.IGNORECASE)
_PART_NUMBER_SHAPE = re.compile(r"^[A-Za-z0-9][\w\-\./]{1,30}$")
_NUMBER_ONLY = re.compile(r"^\d+$")


class ExtractionValidator:
    """Flags likely false positives in extracted drawing data."""

    def validate(self, data: Optional[DrawingData]) -> List[ValidationIssue]:
        """
        Check extracted drawing data against domain knowledge.

        Args:
            data: Merged drawing data (None yields no issues)

        Returns:
            List of ValidationIssue, in field order
        """
        issues: List[ValidationIssue] = []
        if data is None:
            return issues

        self._check_part_number(data.part_number, issues)
        self._check_material(data.material, issues)
        self._check_finish(data.finish, issues)
        self._check_thickness(data.thickness_inches, issues)
        self._check_notes(data.notes, issues)
        return issues

    def validate_and_correct(self, data: Optional[DrawingData]) -> int:
        """
        Validate and clear fields that failed with Error severity.

        Returns:
            Number of fields cleared and notes removed
        """
        if data is None:
            return 0

        corrections = 0
        bad_notes = set()
        for issue in self.validate(data):
            if issue.severity != IssueSeverity.ERROR:
                continue
            if issue.field == "part_number":
                data.part_number = None
                corrections += 1
            elif issue.field == "material":
                data.material = None
                corrections += 1
            elif issue.field == "finish":
                data.finish = None
                corrections += 1
            elif issue.field == "thickness_inches":
                data.thickness_inches = None
                corrections += 1
            elif issue.field.startswith("notes[") and issue.original_value is not None:
                bad_notes.add(issue.original_value.upper())

        if bad_notes:
            before = len(data.notes)
            data.notes = [n for n in data.notes if n.text.upper() not in bad_notes]
            corrections += before - len(data.notes)

        return corrections

    def _check_part_number(self, part_number: Optional[str], issues: List[ValidationIssue]) -> None:
        if not part_number:
            return

        upper = part_number.upper()
        for word in INVALID_PART_NUMBER_WORDS:
            if word in upper:
                issues.append(ValidationIssue(
                    field="part_number",
                    message=f"Part number contains label text '{word}', likely a parsing error",
                    severity=IssueSeverity.ERROR,
                    original_value=part_number,
                ))
                return

        if not _PART_NUMBER_SHAPE.match(part_number):
            issues.append(ValidationIssue(
                field="part_number",
                message="Part number has unusual format",
                severity=IssueSeverity.WARNING,
                original_value=part_number,
            ))

    def _check_material(self, material: Optional[str], issues: List[ValidationIssue]) -> None:
        if not material:
            return

        if not _MATERIAL_KEYWORD_PATTERN.search(material):
            issues.append(ValidationIssue(
                field="material",
                message="Material does not match any known material keyword",
                severity=IssueSeverity.WARNING,
                original_value=material,
            ))

        if _MATERIAL_LABEL_LEAK.search(material):
            issues.append(ValidationIssue(
                field="material",
                message="Material contains an adjacent title block label, likely a parsing error",
                severity=IssueSeverity.ERROR,
                original_value=material,
            ))

    def _check_finish(self, finish: Optional[str], issues: List[ValidationIssue]) -> None:
        if finish and not _FINISH_KEYWORD_PATTERN.search(finish):
            issues.append(ValidationIssue(
                field="finish",
                message="Finish does not match any known finish type",
                severity=IssueSeverity.WARNING,
                original_value=finish,
            ))

    def _check_thickness(self, thickness: Optional[float], issues: List[ValidationIssue]) -> None:
        if thickness is None:
            return
        if thickness <= 0:
            issues.append(ValidationIssue(
                field="thickness_inches",
                message="Thickness must be positive",
                severity=IssueSeverity.ERROR,
                original_value=f"{thickness:.4f}",
            ))
        elif thickness > MAX_THICKNESS_INCHES:
            issues.append(ValidationIssue(
                field="thickness_inches",
                message="Thickness exceeds 12 inches, verify units",
                severity=IssueSeverity.WARNING,
                original_value=f"{thickness:.4f}",
            ))

    def _check_notes(self, notes: List[DrawingNote], issues: List[ValidationIssue]) -> None:
        for i, note in enumerate(notes or []):
            text = note.text or ""
            if len(text) < MIN_NOTE_LENGTH:
                issues.append(ValidationIssue(
                    field=f"notes[{i}]",
                    message="Note text is suspiciously short",
                    severity=IssueSeverity.WARNING,
                    original_value=text,
                ))
            if _NUMBER_ONLY.match(text.strip()):
                # Bare numbers are BOM item numbers
                issues.append(ValidationIssue(
                    field=f"notes[{i}]",
                    message="Note is just a number, likely a BOM entry",
                    severity=IssueSeverity.ERROR,
                    original_value=text,
                ))
