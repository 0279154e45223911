"""
Title block parsing.

Each field has an ordered list of labeled patterns; the first pattern that
yields a non-empty value wins. Labeled material callouts ("MATERIAL: ...")
are preferred over standalone material tokens ("A36", "304 SS").

Usage:
    from drawing_facts.extractors.title_block import TitleBlockParser

    info = TitleBlockParser().parse("PART NO: NM-1234-A\\nREV: C")
    info.part_number   # "NM-1234-A"
"""

import datetime
import re
from typing import List, Optional, Pattern

from ..config import Config, default_config
from ..models.page import PageText
from ..models.title_block import TitleBlockInfo
from .regions import extract_title_block_region


_IM = re.IGNORECASE | re.MULTILINE


# ===========================================================================
# Field patterns (ordered, first match wins)
# ===========================================================================

PART_NUMBER_PATTERNS: List[Pattern] = [
    re.compile(r"(?:\bPART\s*(?:NO|NUMBER|#|NUM)\.?\s*[:.]?\s*)([A-Z0-9][\w\-\.]+)", re.IGNORECASE),
    re.compile(r"(?:\bDWG\s*(?:NO|NUMBER|#|NUM)\.?\s*[:.]?\s*)([A-Z0-9][\w\-\.]+)", re.IGNORECASE),
    re.compile(r"(?:\bDRAWING\s*(?:NO|NUMBER|#|NUM)\.?\s*[:.]?\s*)([A-Z0-9][\w\-\.]+)", re.IGNORECASE),
    re.compile(r"(?:\bP/?N\b\s*[:.#]?\s*)([A-Z0-9][\w\-\.]+)", re.IGNORECASE),
    re.compile(r"(?:\bITEM\s*(?:NO|NUMBER|#)\.?\s*[:.]?\s*)([A-Z0-9][\w\-\.]+)", re.IGNORECASE),
]

# Labeled material; value stops at the next label on the same line
MATERIAL_PATTERNS: List[Pattern] = [
    re.compile(r"(?:\bMATERIAL\s*[:.]?[ \t]*)(.+?)(?:[ \t]*$|\s*FINISH|\s*SCALE|\s*UNLESS)", _IM),
    re.compile(r"(?:\bMAT(?:'?L)?\b\s*[:.]?[ \t]*)(.+?)(?:[ \t]*$|\s*FINISH|\s*SCALE)", _IM),
    re.compile(r"(?:\bMATL\s*SPEC\s*[:.]?[ \t]*)(.+?)(?:[ \t]*$)", _IM),
]

# Standalone material callouts with no label
MATERIAL_CALLOUT_PATTERNS: List[Pattern] = [
    re.compile(r"\b(ASTM\s*A[\-\s]?\d+)", re.IGNORECASE),
    re.compile(r"\b(A36|A53[12]?|A500)\b", re.IGNORECASE),
    re.compile(r"\b(\d{3,4}\s*(?:STAINLESS|SS|CRS|HRS|AL|ALUMINUM))\b", re.IGNORECASE),
    re.compile(
        r"\b(304L?|316L?|1018|1020|1045|4130|4140|6061|5052|3003)\s*"
        r"(?:SS|STAINLESS|CRS|HRS|AL|ALUMINUM|STEEL)?\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(MILD\s*STEEL|CARBON\s*STEEL|STAINLESS\s*STEEL|GALVANIZED|GALVANNEAL)\b", re.IGNORECASE),
]

REVISION_PATTERNS: List[Pattern] = [
    re.compile(r"(?:\bREV(?:ISION)?(?![A-Z])\.?\s*[:.]?\s*)([A-Z0-9]{1,3})\b", re.IGNORECASE),
    re.compile(r"\bREV\s+([A-Z])\b", re.IGNORECASE),
]

DESCRIPTION_PATTERNS: List[Pattern] = [
    re.compile(r"(?:\bDESC(?:RIPTION)?\.?\s*[:.]?[ \t]*)(.+?)(?:[ \t]*$)", _IM),
    re.compile(r"(?:\bTITLE\s*[:.]?[ \t]*)(.+?)(?:[ \t]*$)", _IM),
    re.compile(r"(?:\bNAME\s*[:.]?[ \t]*)(.+?)(?:[ \t]*$)", _IM),
]

# ===========================================================================
# Single-pattern fields
# ===========================================================================

DRAWN_BY_PATTERN = re.compile(r"(?:\bDRAWN\s*(?:BY)?\s*[:.]?[ \t]*)([A-Z][A-Z \t\.]{1,20})", re.IGNORECASE)
CHECKED_BY_PATTERN = re.compile(r"(?:\bCHE?C?KE?D?\s*(?:BY)?\s*[:.]?[ \t]*)([A-Z][A-Z \t\.]{1,20})", re.IGNORECASE)
FINISH_PATTERN = re.compile(r"(?:\bFINISH\s*[:.]?[ \t]*)(.+?)(?:[ \t]*$)", _IM)
SCALE_PATTERN = re.compile(r"(?:\bSCALE\s*[:.]?\s*)(\d+\s*[:/]\s*\d+|FULL|HALF|NTS|NONE)", re.IGNORECASE)
SHEET_PATTERN = re.compile(r"(?:\bSHEET\s*[:.]?\s*)(\d+\s*(?:OF|/)\s*\d+)", re.IGNORECASE)
DATE_PATTERN = re.compile(r"(?:\bDATE\s*[:.]?\s*)(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})", re.IGNORECASE)
TOLERANCE_PATTERN = re.compile(
    r"(?:UNLESS\s+OTHERWISE\s+(?:NOTED|SPECIFIED|STATED).*?TOLERANCES?\s*[:.]?[ \t]*)(.+?)(?:[ \t]*$)",
    re.IGNORECASE | re.MULTILINE | re.DOTALL,
)

_TRAILING_LABEL = re.compile(r"\s*(FINISH|SCALE|UNLESS|DRAWN|DATE|REV).*$", re.IGNORECASE)

_DATE_FORMATS = ("%m/%d/%Y", "%m/%d/%y")


def _try_match(text: str, patterns: List[Pattern]) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            value = match.group(1).strip()
            if value:
                return value
    return None


def _match_single(text: str, pattern: Pattern) -> Optional[str]:
    match = pattern.search(text)
    if match:
        value = match.group(1).strip()
        return value or None
    return None


def clean_value(value: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace and stray label punctuation."""
    if value is None:
        return None
    return value.strip().strip(":.,-").strip() or None


def clean_material(value: Optional[str]) -> Optional[str]:
    """Strip punctuation and any trailing label that leaked into the value."""
    if value is None:
        return None
    value = value.strip().strip(":.,")
    value = _TRAILING_LABEL.sub("", value)
    return value.strip() or None


def parse_date(text: Optional[str]) -> Optional[datetime.date]:
    """Parse m/d/y or m-d-y dates; None when the string is not a valid date."""
    if not text:
        return None
    normalized = text.replace("-", "/")
    for fmt in _DATE_FORMATS:
        try:
            return datetime.datetime.strptime(normalized, fmt).date()
        except ValueError:
            continue
    return None


class TitleBlockParser:
    """Parses identity fields from title block text."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or default_config

    def parse(self, text: str) -> TitleBlockInfo:
        """
        Parse title block fields from raw text.

        Args:
            text: Title block or full page text

        Returns:
            TitleBlockInfo; fields that are not found stay None with zero confidence
        """
        info = TitleBlockInfo()
        if not text or not text.strip():
            return info

        part_number = clean_value(_try_match(text, PART_NUMBER_PATTERNS))
        if part_number:
            info.part_number = part_number
            info.part_number_confidence = self.config.part_number_confidence

        material = clean_material(_try_match(text, MATERIAL_PATTERNS))
        if material:
            info.material = material
            info.material_confidence = self.config.material_confidence
        else:
            material = clean_material(_try_match(text, MATERIAL_CALLOUT_PATTERNS))
            if material:
                info.material = material
                info.material_confidence = self.config.material_callout_confidence

        revision = _try_match(text, REVISION_PATTERNS)
        if revision:
            info.revision = revision.upper()
            info.revision_confidence = self.config.revision_confidence

        description = clean_value(_try_match(text, DESCRIPTION_PATTERNS))
        if description:
            info.description = description
            info.description_confidence = self.config.description_confidence

        info.drawn_by = _match_single(text, DRAWN_BY_PATTERN)
        info.checked_by = _match_single(text, CHECKED_BY_PATTERN)
        info.finish = clean_value(_match_single(text, FINISH_PATTERN))
        info.scale = _match_single(text, SCALE_PATTERN)
        info.sheet = _match_single(text, SHEET_PATTERN)
        info.tolerance_general = _match_single(text, TOLERANCE_PATTERN)

        info.date_text = _match_single(text, DATE_PATTERN)
        info.date = parse_date(info.date_text)

        return info

    def parse_from_page(self, page: Optional[PageText]) -> TitleBlockInfo:
        """
        Parse the title block region of a page, falling back to full page text.

        Key fields missing from the region are filled from the full text
        at a reduced confidence.
        """
        if page is None:
            return TitleBlockInfo()

        result = self.parse(extract_title_block_region(page, self.config))
        if result.part_number and result.material:
            return result

        full = self.parse(page.full_text)
        factor = self.config.full_page_fallback_factor

        if not result.part_number and full.part_number:
            result.part_number = full.part_number
            result.part_number_confidence = full.part_number_confidence * factor
        if not result.material and full.material:
            result.material = full.material
            result.material_confidence = full.material_confidence * factor
        if not result.revision and full.revision:
            result.revision = full.revision
            result.revision_confidence = full.revision_confidence * factor
        if not result.description and full.description:
            result.description = full.description
            result.description_confidence = full.description_confidence * factor

        # Secondary fields are taken as-is when the region had none
        for name in ("finish", "drawn_by", "checked_by", "date", "date_text",
                     "scale", "sheet", "tolerance_general"):
            if getattr(result, name) is None and getattr(full, name) is not None:
                setattr(result, name, getattr(full, name))

        return result


def parse_title_block(text: str) -> TitleBlockInfo:
    """Convenience function: parse title block text with default config."""
    return TitleBlockParser().parse(text)
