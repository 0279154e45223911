"""
ISO general tolerance reference tables.

ISO 13920 - general tolerances for welded constructions
  Linear classes: A (fine), B (medium), C (coarse), D (very coarse)
  Flatness/straightness/parallelism classes: E (fine), F, G, H (very coarse)

ISO 2768-1 - general tolerances for linear dimensions
  Classes: f (fine), m (medium), c (coarse), v (very coarse)

All table values are in millimetres. Rows are keyed by the upper bound of the
nominal size range; sizes beyond the last row use the last row.

Usage:
    from drawing_facts.standards.iso_tolerance import (
        Iso13920Linear, classify_linear_13920, inches_to_mm,
    )

    cls = classify_linear_13920(500, 3.0)   # Iso13920Linear.A
"""

import math
from typing import NamedTuple, Optional, Tuple

from ..models.levels import OrderedLevel


MM_PER_INCH = 25.4


class Iso13920Linear(OrderedLevel):
    """ISO 13920 linear classes, tightest first."""
    A = 0
    B = 1
    C = 2
    D = 3


class Iso13920Geometric(OrderedLevel):
    """ISO 13920 flatness/straightness classes, tightest first."""
    E = 0
    F = 1
    G = 2
    H = 3


class Iso2768Class(OrderedLevel):
    """ISO 2768-1 linear classes, tightest first."""
    FINE = 0
    MEDIUM = 1
    COARSE = 2
    VERY_COARSE = 3

    @property
    def letter(self) -> str:
        return {0: "f", 1: "m", 2: "c", 3: "v"}[self.value]

    @classmethod
    def from_letter(cls, letter: str) -> Optional["Iso2768Class"]:
        return {"f": cls.FINE, "m": cls.MEDIUM, "c": cls.COARSE, "v": cls.VERY_COARSE}.get(
            letter.strip().lower()
        )


class ToleranceRow(NamedTuple):
    """One nominal-size row; values are ordered tightest class first."""
    max_mm: float
    values: Tuple[float, float, float, float]


# ===========================================================================
# ISO 13920 Table 1: linear dimensions (+/- mm), columns A B C D
# ===========================================================================

ISO_13920_LINEAR: Tuple[ToleranceRow, ...] = (
    ToleranceRow(30, (1, 2, 3, 4)),
    ToleranceRow(120, (1, 2, 4, 7)),
    ToleranceRow(400, (1, 3, 6, 9)),
    ToleranceRow(1000, (2, 4, 8, 12)),
    ToleranceRow(2000, (3, 6, 11, 16)),
    ToleranceRow(4000, (4, 8, 14, 21)),
    ToleranceRow(8000, (5, 10, 18, 27)),
    ToleranceRow(12000, (6, 12, 21, 32)),
    ToleranceRow(16000, (7, 14, 24, 36)),
    ToleranceRow(20000, (8, 16, 27, 40)),
)

# ===========================================================================
# ISO 13920 Table 3: flatness/straightness/parallelism (mm, not +/-), E F G H
# ===========================================================================

ISO_13920_GEOMETRIC: Tuple[ToleranceRow, ...] = (
    ToleranceRow(120, (0.5, 1, 1.5, 2.5)),
    ToleranceRow(400, (1, 1.5, 3, 5)),
    ToleranceRow(1000, (1.5, 3, 5.5, 9)),
    ToleranceRow(2000, (2, 4.5, 9, 14)),
    ToleranceRow(4000, (3, 6, 11, 18)),
    ToleranceRow(8000, (4, 8, 16, 26)),
    ToleranceRow(12000, (5, 10, 20, 32)),
    ToleranceRow(16000, (6, 12, 22, 36)),
    ToleranceRow(20000, (7, 14, 25, 40)),
)

# ===========================================================================
# ISO 2768-1 Table 1: linear dimensions (+/- mm), f m c v
# NaN where the class is not defined for the size range.
# ===========================================================================

ISO_2768_LINEAR: Tuple[ToleranceRow, ...] = (
    ToleranceRow(3, (0.05, 0.1, 0.2, math.nan)),
    ToleranceRow(6, (0.05, 0.1, 0.3, 0.5)),
    ToleranceRow(30, (0.1, 0.2, 0.5, 1.0)),
    ToleranceRow(120, (0.15, 0.3, 0.8, 1.5)),
    ToleranceRow(400, (0.2, 0.5, 1.2, 2.5)),
    ToleranceRow(1000, (0.3, 0.8, 2.0, 4.0)),
    ToleranceRow(2000, (0.5, 1.2, 3.0, 6.0)),
    ToleranceRow(4000, (math.nan, 2.0, 4.0, 8.0)),
)


def _lookup(table: Tuple[ToleranceRow, ...], size_mm: float, column: int) -> float:
    for row in table:
        if size_mm <= row.max_mm:
            return row.values[column]
    return table[-1].values[column]


def get_linear_13920(nominal_mm: float, cls: Iso13920Linear) -> float:
    """ISO 13920 linear tolerance (+/- mm) for a nominal size and class."""
    return _lookup(ISO_13920_LINEAR, nominal_mm, int(cls))


def get_geometric_13920(length_mm: float, cls: Iso13920Geometric) -> float:
    """ISO 13920 flatness/straightness tolerance (mm) for a length and class."""
    return _lookup(ISO_13920_GEOMETRIC, length_mm, int(cls))


def get_linear_2768(nominal_mm: float, cls: Iso2768Class) -> float:
    """ISO 2768-1 linear tolerance (+/- mm); NaN when the class is undefined."""
    return _lookup(ISO_2768_LINEAR, nominal_mm, int(cls))


def is_tighter(a: OrderedLevel, b: OrderedLevel) -> bool:
    """True if class a is finer than class b (same standard)."""
    if type(a) is not type(b):
        raise TypeError(f"Cannot compare {type(a).__name__} with {type(b).__name__}")
    return a < b


def classify_linear_13920(nominal_mm: float, band_mm: float) -> Optional[Iso13920Linear]:
    """
    Tightest ISO 13920 linear class whose +/- value still bounds the band.

    Args:
        nominal_mm: Nominal dimension in mm
        band_mm: Total tolerance band in mm (plus + minus)

    Returns:
        The class, or None if the band is looser than class D
    """
    half_band = band_mm / 2.0
    for cls in Iso13920Linear:
        if half_band <= get_linear_13920(nominal_mm, cls):
            return cls
    return None


def classify_geometric_13920(length_mm: float, tolerance_mm: float) -> Optional[Iso13920Geometric]:
    """Tightest ISO 13920 geometric class that accepts the tolerance, else None."""
    for cls in Iso13920Geometric:
        if tolerance_mm <= get_geometric_13920(length_mm, cls):
            return cls
    return None


def classify_linear_2768(nominal_mm: float, band_mm: float) -> Optional[Iso2768Class]:
    """Tightest ISO 2768-1 class that accepts the band, else None."""
    half_band = band_mm / 2.0
    for cls in Iso2768Class:
        limit = get_linear_2768(nominal_mm, cls)
        if not math.isnan(limit) and half_band <= limit:
            return cls
    return None


def inches_to_mm(inches: float) -> float:
    return inches * MM_PER_INCH


def mm_to_inches(mm: float) -> float:
    return mm / MM_PER_INCH


def class_designation(linear: Optional[Iso13920Linear], geometric: Optional[Iso13920Geometric]) -> str:
    """Compact ISO 13920 designation such as "BF" or "A"."""
    return (linear.name if linear is not None else "") + (geometric.name if geometric is not None else "")

