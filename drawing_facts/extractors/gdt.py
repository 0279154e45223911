"""
GD&T feature control frame extraction.

Recognizes characteristic keywords and symbols followed by a tolerance
value, optional diameter symbol, material condition modifier and up to
three datum references:

    TRUE POSITION .005 MMC A B
    ⌖ ⌀.010 Ⓜ A B C
    FLATNESS .002
    TOTAL RUNOUT .001 A

Each family (location, form, orientation, profile, runout) classifies its
tolerance on its own ladder.
"""

import re
from types import MappingProxyType
from typing import Callable, List, Optional, Pattern, Tuple

from ..config import Config, default_config
from ..models.gdt import GdtCallout, GdtFamily, GdtType, gdt_family
from ..models.levels import ToleranceTier
from ..models.routing import RoutingHint, RoutingOp
from ..models.tolerance import ToleranceCostFlag


# ===========================================================================
# Characteristic keywords and symbols (ordered: specific before generic)
# ===========================================================================

_KEYWORDS: Tuple[Tuple[str, GdtType], ...] = (
    # Location
    (r"(?i:\bTRUE\s*POS(?:ITION)?\b)", GdtType.POSITION),
    (r"(?i:\bPOSITION\b)", GdtType.POSITION),
    (r"(?i:\bT/?P\b)", GdtType.POSITION),
    (r"⌖", GdtType.POSITION),
    # Form
    (r"(?i:\bFLATNESS\b)", GdtType.FLATNESS),
    (r"⏥", GdtType.FLATNESS),
    (r"(?i:\bSTRAIGHTNESS\b)", GdtType.STRAIGHTNESS),
    (r"⏤", GdtType.STRAIGHTNESS),
    (r"(?i:\bCIRCULARITY\b)", GdtType.CIRCULARITY),
    (r"(?i:\bROUNDNESS\b)", GdtType.CIRCULARITY),
    (r"○", GdtType.CIRCULARITY),
    (r"(?i:\bCYLINDRICITY\b)", GdtType.CYLINDRICITY),
    (r"⌭", GdtType.CYLINDRICITY),
    # Orientation
    (r"(?i:\bPARALLELISM\b)", GdtType.PARALLELISM),
    (r"∥", GdtType.PARALLELISM),
    (r"(?i:\bPERPENDICULARITY\b)", GdtType.PERPENDICULARITY),
    (r"⊥", GdtType.PERPENDICULARITY),
    (r"(?i:\bANGULARITY\b)", GdtType.ANGULARITY),
    (r"∠", GdtType.ANGULARITY),
    # Profile
    (r"(?i:\bPROFILE\s+OF\s+(?:A\s+)?LINE\b)", GdtType.PROFILE_OF_LINE),
    (r"⌒", GdtType.PROFILE_OF_LINE),
    (r"(?i:\bPROFILE\s+OF\s+(?:A\s+)?SURFACE\b)", GdtType.PROFILE_OF_SURFACE),
    (r"⌓", GdtType.PROFILE_OF_SURFACE),
    (r"(?i:\bPROFILE\b)", GdtType.PROFILE_OF_SURFACE),
    # Runout
    (r"(?i:\bCONCENTRICITY\b)", GdtType.CONCENTRICITY),
    (r"◎", GdtType.CONCENTRICITY),
    (r"(?i:\bTOTAL\s+RUNOUT\b)", GdtType.TOTAL_RUNOUT),
    (r"↗↗|⌰", GdtType.TOTAL_RUNOUT),
    (r"(?i:\bCIRCULAR\s+RUNOUT\b)", GdtType.CIRCULAR_RUNOUT),
    (r"(?i:\bRUNOUT\b)", GdtType.CIRCULAR_RUNOUT),
    (r"↗", GdtType.CIRCULAR_RUNOUT),
)

# Material condition modifier; single letters only when not part of a word
_MODIFIER = r"(?:MMC|LMC|Ⓜ|Ⓛ|M(?![A-Za-z])|L(?![A-Za-z]))"

# Datum letters are uppercase and stay on the frame's line
_DATUM = r"(?:[ \t]+(?:(?i:TO|W/?R/?T|REF|DATUM)[ \t]+)?(?P<d{n}>[A-Z])\b(?:[ \t]*(?P<m{n}>" + _MODIFIER + r"))?)?"

_FRAME_TAIL = (
    r"\s*(?:(?P<dia>⌀|Ø|(?i:DIA(?:METER)?\.?))\s*)?"
    r"(?P<value>\d*\.?\d+)\"?"
    r"(?:[ \t]*(?P<mod>" + _MODIFIER + r"))?"
    + _DATUM.format(n=1)
    + _DATUM.format(n=2)
    + _DATUM.format(n=3)
)

GDT_PATTERNS: Tuple[Tuple[Pattern, GdtType], ...] = tuple(
    (re.compile(keyword + _FRAME_TAIL), gdt_type) for keyword, gdt_type in _KEYWORDS
)

_MMC = {"MMC", "M", "Ⓜ"}
_LMC = {"LMC", "L", "Ⓛ"}


# ===========================================================================
# Tier ladders (inches)
# ===========================================================================

def _ladder(value: float, precision: float, tight: float, moderate: float) -> ToleranceTier:
    if value <= precision:
        return ToleranceTier.PRECISION
    if value <= tight:
        return ToleranceTier.TIGHT
    if value <= moderate:
        return ToleranceTier.MODERATE
    return ToleranceTier.STANDARD


def classify_position_tier(value: float, is_mmc: bool) -> ToleranceTier:
    """Position tier; MMC bonus tolerance relaxes the effective value by 1.5x."""
    effective = value * 1.5 if is_mmc else value
    return _ladder(effective, 0.002, 0.005, 0.010)


def classify_form_tier(value: float) -> ToleranceTier:
    return _ladder(value, 0.001, 0.003, 0.005)


def classify_orientation_tier(value: float) -> ToleranceTier:
    return _ladder(value, 0.002, 0.005, 0.010)


def classify_profile_tier(value: float) -> ToleranceTier:
    return _ladder(value, 0.002, 0.005, 0.010)


def classify_runout_tier(value: float) -> ToleranceTier:
    return _ladder(value, 0.002, 0.005, 0.010)


_LADDER_BY_FAMILY = MappingProxyType({
    GdtFamily.FORM: classify_form_tier,
    GdtFamily.ORIENTATION: classify_orientation_tier,
    GdtFamily.PROFILE: classify_profile_tier,
    GdtFamily.RUNOUT: classify_runout_tier,
})


def classify_gdt_tier(gdt_type: GdtType, value: float, is_mmc: bool = False) -> ToleranceTier:
    """Tier of a callout on its family's ladder."""
    family = gdt_family(gdt_type)
    if family == GdtFamily.LOCATION:
        return classify_position_tier(value, is_mmc)
    ladder: Callable[[float], ToleranceTier] = _LADDER_BY_FAMILY[family]
    return ladder(value)


def gdt_action(callout: GdtCallout) -> str:
    """Suggested estimating action for a callout."""
    family = gdt_family(callout.gdt_type)
    tier = callout.tier
    if family == GdtFamily.LOCATION:
        if tier >= ToleranceTier.PRECISION:
            return "CMM INSPECT + FIXTURE REQUIRED"
        if tier >= ToleranceTier.TIGHT:
            return "CMM INSPECT REQUIRED"
        return "VERIFY TRUE POSITION"
    if callout.gdt_type in (GdtType.FLATNESS, GdtType.STRAIGHTNESS):
        if tier >= ToleranceTier.PRECISION:
            return "GRINDING OR LAPPING REQUIRED"
        if tier >= ToleranceTier.TIGHT:
            return "SURFACE GRINDING MAY BE REQUIRED"
        return "VERIFY FLATNESS/STRAIGHTNESS"
    if family == GdtFamily.PROFILE:
        if tier >= ToleranceTier.TIGHT:
            return "CMM INSPECT + POSSIBLE FIXTURE"
        return "VERIFY PROFILE"
    if family == GdtFamily.RUNOUT:
        if tier >= ToleranceTier.TIGHT:
            return "CMM INSPECT - RUNOUT/CONCENTRICITY"
        return "VERIFY RUNOUT"
    if family == GdtFamily.ORIENTATION:
        if tier >= ToleranceTier.TIGHT:
            return "CMM INSPECT - ORIENTATION"
        return "VERIFY ORIENTATION"
    return "REVIEW GD&T REQUIREMENT"


def _callout_label(callout: GdtCallout) -> str:
    return f"{callout.gdt_type.display_name.upper()} {callout.tolerance_text}\""


class GdtExtractor:
    """Extracts and classifies GD&T callouts from page text."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or default_config

    def extract(self, text: str) -> List[GdtCallout]:
        """
        Extract GD&T callouts from text.

        Overlapping matches are resolved in pattern order, so "TOTAL RUNOUT"
        is never also read as a circular "RUNOUT". Callouts are deduplicated
        by (type, value) and returned tightest first.

        Args:
            text: Page text

        Returns:
            List of GdtCallout sorted by tolerance value ascending
        """
        if not text or not text.strip():
            return []

        results = []
        spans: List[Tuple[int, int]] = []
        seen = set()

        for regex, gdt_type in GDT_PATTERNS:
            for match in regex.finditer(text):
                start, end = match.span()
                if any(start < s_end and end > s_start for s_start, s_end in spans):
                    continue

                try:
                    value = float(match.group("value"))
                except ValueError:
                    continue
                if value <= 0 or value > self.config.gdt_max_tolerance_inches:
                    continue

                # Duplicates still claim their span
                spans.append((start, end))
                key = (gdt_type, round(value, 5))
                if key in seen:
                    continue
                seen.add(key)
                results.append(self._build_callout(match, gdt_type, value))

        results.sort(key=lambda c: c.tolerance_value)
        return results

    def _build_callout(self, match, gdt_type: GdtType, value: float) -> GdtCallout:
        modifier = (match.group("mod") or "").upper()
        datums = []
        for n in (1, 2, 3):
            datum = match.group(f"d{n}")
            if datum and datum not in datums:
                datums.append(datum)

        is_mmc = modifier in _MMC
        return GdtCallout(
            gdt_type=gdt_type,
            tolerance_value=value,
            datum_references=datums,
            is_mmc=is_mmc,
            is_lmc=modifier in _LMC,
            is_diametral=match.group("dia") is not None,
            tier=classify_gdt_tier(gdt_type, value, is_mmc),
            raw_text=match.group(0).strip(),
            confidence=self.config.gdt_confidence,
        )

    def to_cost_flags(self, callouts: List[GdtCallout]) -> List[ToleranceCostFlag]:
        """One flag per callout at Moderate or tighter."""
        flags = []
        for c in callouts or []:
            if c.tier < ToleranceTier.MODERATE:
                continue
            datums = f" (Datum {'-'.join(c.datum_references)})" if c.datum_references else ""
            mmc = " @ MMC" if c.is_mmc else ""
            flags.append(ToleranceCostFlag(
                description=f"{_callout_label(c)}{datums}{mmc}",
                tier=c.tier,
                impact=c.impact,
                suggested_action=gdt_action(c),
                source="GD&T callout",
            ))
        return flags

    def to_routing_hints(self, callouts: List[GdtCallout]) -> List[RoutingHint]:
        """
        Routing hints for tight GD&T.

        - CMM inspection for the first Tight-or-better callout
        - Fixture review for the first Tight-or-better true position
        - A pricing review when several callouts are Tight or better
        """
        hints = []
        needs_cmm = False
        needs_fixture = False
        tight_count = 0

        for c in callouts or []:
            if c.tier < ToleranceTier.TIGHT:
                continue
            tight_count += 1

            if not needs_cmm:
                needs_cmm = True
                hints.append(RoutingHint(
                    operation=RoutingOp.INSPECT,
                    note_text="CMM INSPECT - GD&T REQUIREMENTS",
                    source_note=_callout_label(c),
                    confidence=0.90,
                ))

            if c.gdt_type == GdtType.POSITION and not needs_fixture:
                needs_fixture = True
                hints.append(RoutingHint(
                    operation=RoutingOp.MACHINE,
                    note_text="FIXTURE MAY BE REQUIRED - TIGHT TRUE POSITION",
                    source_note=_callout_label(c),
                    confidence=0.75,
                ))

        if tight_count >= self.config.multiple_tight_gdt_threshold:
            hints.append(RoutingHint(
                operation=RoutingOp.INSPECT,
                note_text=f"MULTIPLE TIGHT GD&T ({tight_count} CALLOUTS) - REVIEW PRICING",
                source_note="Multiple callouts",
                confidence=0.85,
            ))

        return hints
