"""Fabrication tolerance reference standards."""

from .iso_tolerance import (
    MM_PER_INCH,
    Iso13920Linear,
    Iso13920Geometric,
    Iso2768Class,
    get_linear_13920,
    get_geometric_13920,
    get_linear_2768,
    classify_linear_13920,
    classify_geometric_13920,
    classify_linear_2768,
    is_tighter,
    inches_to_mm,
    mm_to_inches,
    class_designation,
)

__all__ = [
    "MM_PER_INCH",
    "Iso13920Linear",
    "Iso13920Geometric",
    "Iso2768Class",
    "get_linear_13920",
    "get_geometric_13920",
    "get_linear_2768",
    "classify_linear_13920",
    "classify_geometric_13920",
    "classify_linear_2768",
    "is_tighter",
    "inches_to_mm",
    "mm_to_inches",
    "class_designation",
]
