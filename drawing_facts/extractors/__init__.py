"""Per-page text extractors. None of these import PyMuPDF."""

from .regions import words_to_text, extract_title_block_region, extract_notes_region
from .title_block import TitleBlockParser, parse_title_block
from .notes import DrawingNoteExtractor, classify_note
from .specs import SpecRecognizer, database_size
from .gdt import GdtExtractor, classify_gdt_tier, classify_position_tier
from .tolerance import (
    ToleranceAnalyzer,
    classify_dimension_tier,
    classify_surface_finish,
)
from .validator import ExtractionValidator, ValidationIssue, IssueSeverity

__all__ = [
    "words_to_text",
    "extract_title_block_region",
    "extract_notes_region",
    "TitleBlockParser",
    "parse_title_block",
    "DrawingNoteExtractor",
    "classify_note",
    "SpecRecognizer",
    "database_size",
    "GdtExtractor",
    "classify_gdt_tier",
    "classify_position_tier",
    "ToleranceAnalyzer",
    "classify_dimension_tier",
    "classify_surface_finish",
    "ExtractionValidator",
    "ValidationIssue",
    "IssueSeverity",
]
