"""Drawing package scanning and indexing."""

from .index import DrawingPackageIndex, normalize_part_number
from .scanner import DrawingPackageScanner, is_assembly_text

__all__ = [
    "DrawingPackageIndex",
    "normalize_part_number",
    "DrawingPackageScanner",
    "is_assembly_text",
]
