"""
Dimensional tolerance and surface finish analysis.

Reads the general tolerance block (".XX ±.01  .XXX ±.005  ANGLES ±1°"),
toleranced dimensions (bilateral, unilateral and split forms) and surface
finish callouts, classifies each on its own tier ladder and raises cost
flags for the tight ones.

Usage:
    from drawing_facts.extractors.tolerance import ToleranceAnalyzer

    result = ToleranceAnalyzer().analyze(page_text, title_block.tolerance_general)
    result.overall_tier
"""

import re
from typing import List, Optional, Tuple

from ..models.levels import CostImpact, ToleranceTier
from ..models.routing import RoutingHint, RoutingOp
from ..models.tolerance import (
    DimensionTolerance,
    FinishUnit,
    GeneralTolerance,
    SurfaceFinishCallout,
    ToleranceAnalysisResult,
    ToleranceCostFlag,
    ToleranceType,
)
from ..config import Config, default_config


_PM = r"(?:±|\+/-|\+-)"
_NUM = r"(\d*\.?\d+)"

# ===========================================================================
# General tolerance block
# ===========================================================================

DECIMAL_PLACE_PATTERN = re.compile(r"\.(?P<places>X{1,4})\s*(?:=\s*)?" + _PM + r"\s*" + _NUM, re.IGNORECASE)
WORD_PLACE_PATTERN = re.compile(
    r"\b(?P<word>ONE|TWO|THREE|FOUR)\s*(?:PLACE|PL)\.?\s*(?:DECIMALS?|DEC\.?)?\s*[:=]?\s*" + _PM + r"\s*" + _NUM,
    re.IGNORECASE,
)
FRACTION_PATTERN = re.compile(r"FRACTION(?:AL|S)?\s*[:=]?\s*" + _PM + r"\s*(\d+/\d+)", re.IGNORECASE)
ANGULAR_DEG_MIN_PATTERN = re.compile(
    r"(?:ANGLES?|ANGULAR)\s*[:=]?\s*" + _PM + r"\s*(\d+)\s*°\s*(\d+)\s*'", re.IGNORECASE
)
ANGULAR_DEG_PATTERN = re.compile(
    r"(?:ANGLES?|ANGULAR)\s*[:=]?\s*" + _PM + r"\s*(\d+(?:\.\d+)?)\s*(?:°|DEG)", re.IGNORECASE
)
ANGULAR_MIN_PATTERN = re.compile(
    r"(?:ANGLES?|ANGULAR)\s*[:=]?\s*" + _PM + r"\s*(\d+)\s*(?:'|MIN(?:UTES?)?)", re.IGNORECASE
)
UNLESS_OTHERWISE_PATTERN = re.compile(
    r"UNLESS\s+OTHERWISE\s+(?:NOTED|SPECIFIED|STATED).{0,500}", re.IGNORECASE | re.DOTALL
)

_PLACES_BY_WORD = {"ONE": 1, "TWO": 2, "THREE": 3, "FOUR": 4}

# ===========================================================================
# Dimension tolerances
# ===========================================================================

# 0.500 ±0.002
BILATERAL_PATTERN = re.compile(_NUM + r"\s*" + _PM + r"\s*" + _NUM)
# 0.750 +0.002/-0.000
UNILATERAL_PATTERN = re.compile(_NUM + r"\s*\+\s*" + _NUM + r"\s*[/\-]\s*\-?\s*" + _NUM)
# 0.500 +.000 -.002
SPLIT_PATTERN = re.compile(_NUM + r"\s+\+\s*" + _NUM + r"\s+\-\s*" + _NUM)

# ===========================================================================
# Surface finish (microinches)
# ===========================================================================

FINISH_RA_PATTERN = re.compile(r"(?:\bRa\s*=?\s*(\d+))|(?:(\d+)\s*Ra\b)", re.IGNORECASE)
FINISH_RMS_PATTERN = re.compile(r"(?:\bRMS\s*=?\s*(\d+))|(?:(\d+)\s*RMS\b)", re.IGNORECASE)
FINISH_SYMBOL_PATTERN = re.compile(
    r"\b(?:FINISH|SURFACE)\s*(?:=\s*)?(\d+)\s*(µ(?:in)?|MICRO(?:INCH)?|RMS|Ra)?", re.IGNORECASE
)


# ===========================================================================
# Tier ladders
# ===========================================================================

def classify_dimension_tier(total_band: float) -> ToleranceTier:
    """Tier of a dimension tolerance by its total band (inches)."""
    if total_band < 0.003:
        return ToleranceTier.PRECISION
    if total_band < 0.006:
        return ToleranceTier.TIGHT
    if total_band < 0.015:
        return ToleranceTier.MODERATE
    return ToleranceTier.STANDARD


def classify_surface_finish(value: int) -> ToleranceTier:
    """Tier of a surface finish by roughness (microinches)."""
    if value <= 16:
        return ToleranceTier.PRECISION
    if value <= 32:
        return ToleranceTier.TIGHT
    if value <= 63:
        return ToleranceTier.MODERATE
    return ToleranceTier.STANDARD


def classify_general_tier(general: GeneralTolerance) -> ToleranceTier:
    """Tier of a general tolerance block from its tightest decimal place."""
    tightest = general.tightest_place
    if tightest is None:
        return ToleranceTier.STANDARD
    return classify_dimension_tier(tightest * 2)


def dimension_action(tier: ToleranceTier) -> str:
    if tier == ToleranceTier.PRECISION:
        return "CMM INSPECT REQUIRED - FIXTURE MAY BE NEEDED"
    if tier == ToleranceTier.TIGHT:
        return "CMM INSPECT RECOMMENDED"
    return "NOTE ON ROUTING"


def surface_action(tier: ToleranceTier) -> str:
    if tier == ToleranceTier.PRECISION:
        return "GRINDING OR LAPPING REQUIRED"
    if tier == ToleranceTier.TIGHT:
        return "GRINDING MAY BE REQUIRED"
    return "VERIFY SURFACE FINISH ACHIEVABLE"


def _to_float(text: str) -> Optional[float]:
    try:
        return float(text)
    except (TypeError, ValueError):
        return None


def parse_fraction(text: str) -> Optional[float]:
    """Value of "n/d", or None when malformed or the denominator is zero."""
    parts = text.split("/")
    if len(parts) != 2:
        return None
    num, den = _to_float(parts[0]), _to_float(parts[1])
    if num is None or not den:
        return None
    return num / den


class ToleranceAnalyzer:
    """Extracts and classifies tolerances and surface finishes."""

    SOURCE_DIMENSION = "Dimension callout"
    SOURCE_SURFACE = "Surface finish callout"
    SOURCE_GENERAL = "Title block"

    def __init__(self, config: Optional[Config] = None):
        self.config = config or default_config

    def analyze(self, full_text: str, title_block_tolerance_text: Optional[str] = None) -> ToleranceAnalysisResult:
        """
        Analyze tolerances on a page.

        Args:
            full_text: Full page text
            title_block_tolerance_text: General tolerance text from the title
                block; located in full_text when not given

        Returns:
            ToleranceAnalysisResult with tiers and cost flags
        """
        result = ToleranceAnalysisResult()

        if title_block_tolerance_text and title_block_tolerance_text.strip():
            result.general_tolerance = self.parse_general_tolerance(title_block_tolerance_text)

        if result.general_tolerance is None and full_text and full_text.strip():
            block = UNLESS_OTHERWISE_PATTERN.search(full_text)
            if block:
                result.general_tolerance = self.parse_general_tolerance(block.group(0))

        if full_text and full_text.strip():
            result.specific_tolerances = self._extract_specific_tolerances(full_text)
            result.surface_finish_callouts = self._extract_surface_finish(full_text)

        self._classify_cost_impact(result)
        return result

    def parse_general_tolerance(self, text: str) -> Optional[GeneralTolerance]:
        """
        Parse a general tolerance block.

        Args:
            text: Block text such as ".XX ±.01 .XXX ±.005 ANGLES ±1°"

        Returns:
            GeneralTolerance, or None if the text carries no tolerance values
        """
        if not text or not text.strip():
            return None

        general = GeneralTolerance(raw_text=text.strip())
        places = {}

        for match in DECIMAL_PLACE_PATTERN.finditer(text):
            value = _to_float(match.group(2))
            if value is not None:
                places.setdefault(len(match.group("places")), value)

        for match in WORD_PLACE_PATTERN.finditer(text):
            value = _to_float(match.group(2))
            if value is not None:
                places.setdefault(_PLACES_BY_WORD[match.group("word").upper()], value)

        general.one_place = places.get(1)
        general.two_place = places.get(2)
        general.three_place = places.get(3)
        general.four_place = places.get(4)

        fraction = FRACTION_PATTERN.search(text)
        if fraction:
            general.fractional_text = fraction.group(1)
            general.fractional = parse_fraction(fraction.group(1))

        deg_min = ANGULAR_DEG_MIN_PATTERN.search(text)
        degrees = ANGULAR_DEG_PATTERN.search(text)
        minutes = ANGULAR_MIN_PATTERN.search(text)
        if deg_min:
            general.angular_degrees = int(deg_min.group(1)) + int(deg_min.group(2)) / 60.0
        elif degrees:
            general.angular_degrees = float(degrees.group(1))
        elif minutes:
            general.angular_degrees = int(minutes.group(1)) / 60.0

        if (not places and general.fractional_text is None
                and general.angular_degrees is None):
            return None

        general.tier = classify_general_tier(general)
        return general

    def _extract_specific_tolerances(self, text: str) -> List[DimensionTolerance]:
        tolerances = []
        seen = set()

        def add(nominal: float, plus: float, minus: float, raw: str) -> None:
            key = (round(nominal, 4), round(plus, 4), round(minus, 4))
            if key in seen:
                return
            seen.add(key)
            tol_type = ToleranceType.UNILATERAL if plus == 0 or minus == 0 else ToleranceType.BILATERAL
            tolerances.append(DimensionTolerance(
                nominal=nominal,
                plus=plus,
                minus=minus,
                type=tol_type,
                raw_text=raw.strip(),
                tier=classify_dimension_tier(plus + minus),
            ))

        for match in BILATERAL_PATTERN.finditer(text):
            nominal, tol = _to_float(match.group(1)), _to_float(match.group(2))
            if nominal is None or tol is None or tol <= 0 or tol >= nominal:
                continue
            add(nominal, tol, tol, match.group(0))

        for pattern in (UNILATERAL_PATTERN, SPLIT_PATTERN):
            for match in pattern.finditer(text):
                values: Tuple[Optional[float], ...] = tuple(_to_float(g) for g in match.groups())
                if any(v is None for v in values):
                    continue
                nominal, plus, minus = values
                if plus + minus <= 0:
                    continue
                add(nominal, plus, minus, match.group(0))

        return tolerances

    def _extract_surface_finish(self, text: str) -> List[SurfaceFinishCallout]:
        callouts = []
        seen = set()

        for pattern in (FINISH_RA_PATTERN, FINISH_RMS_PATTERN, FINISH_SYMBOL_PATTERN):
            for match in pattern.finditer(text):
                number = match.group(1) or (match.group(2) if pattern is not FINISH_SYMBOL_PATTERN else None)
                if not number:
                    continue
                value = int(number)
                if value <= 0 or value > self.config.surface_finish_max or value in seen:
                    continue
                seen.add(value)

                if pattern is FINISH_RMS_PATTERN:
                    unit = FinishUnit.RMS
                elif pattern is FINISH_SYMBOL_PATTERN and (match.group(2) or "").upper() == "RMS":
                    unit = FinishUnit.RMS
                else:
                    unit = FinishUnit.RA

                callouts.append(SurfaceFinishCallout(
                    value=value,
                    unit=unit,
                    tier=classify_surface_finish(value),
                    raw_text=match.group(0).strip(),
                ))

        return callouts

    def _classify_cost_impact(self, result: ToleranceAnalysisResult) -> None:
        for tol in result.specific_tolerances:
            if tol.tier >= ToleranceTier.TIGHT:
                result.cost_flags.append(ToleranceCostFlag(
                    description=f"{tol.raw_text} (band: ±{tol.total_band / 2:.4f}\")",
                    tier=tol.tier,
                    impact=CostImpact.CRITICAL if tol.tier == ToleranceTier.PRECISION else CostImpact.HIGH,
                    suggested_action=dimension_action(tol.tier),
                    source=self.SOURCE_DIMENSION,
                ))

        for sf in result.surface_finish_callouts:
            if sf.tier >= ToleranceTier.TIGHT:
                result.cost_flags.append(ToleranceCostFlag(
                    description=f"Surface finish {sf.value} {sf.unit.value}",
                    tier=sf.tier,
                    impact=CostImpact.HIGH if sf.tier == ToleranceTier.PRECISION else CostImpact.MEDIUM,
                    suggested_action=surface_action(sf.tier),
                    source=self.SOURCE_SURFACE,
                ))

        general = result.general_tolerance
        if general is not None and general.tier >= ToleranceTier.TIGHT:
            result.cost_flags.append(ToleranceCostFlag(
                description=f"General tolerance block: {general.raw_text}",
                tier=general.tier,
                impact=CostImpact.HIGH,
                suggested_action="TIGHT GENERAL TOLERANCES - REVIEW ALL DIMENSIONS",
                source=self.SOURCE_GENERAL,
            ))

        tiers = [t.tier for t in result.specific_tolerances]
        tiers += [sf.tier for sf in result.surface_finish_callouts]
        if general is not None:
            tiers.append(general.tier)
        result.overall_tier = max(tiers, default=ToleranceTier.STANDARD)

    def to_routing_hints(self, result: Optional[ToleranceAnalysisResult]) -> List[RoutingHint]:
        """CMM inspection for high-impact flags, grinding for tight surface finishes."""
        if result is None or not result.cost_flags:
            return []

        hints = []
        needs_inspect = False
        needs_grinding = False
        for flag in result.cost_flags:
            if flag.impact >= CostImpact.HIGH and not needs_inspect:
                needs_inspect = True
                hints.append(RoutingHint(
                    operation=RoutingOp.INSPECT,
                    note_text="CMM INSPECT - TIGHT TOLERANCES",
                    source_note=flag.description,
                    confidence=0.85,
                ))
            if (flag.source == self.SOURCE_SURFACE and flag.tier >= ToleranceTier.TIGHT
                    and not needs_grinding):
                needs_grinding = True
                hints.append(RoutingHint(
                    operation=RoutingOp.OUTSIDE_PROCESS,
                    note_text=f"GRINDING REQUIRED - {flag.description}",
                    source_note=flag.description,
                    confidence=0.80,
                ))
        return hints
