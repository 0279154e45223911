"""Extracted PDF page text."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class WordInfo:
    """A word with its bounding box in PDF points (origin bottom-left)."""
    text: str
    left: float
    bottom: float
    right: float
    top: float
    font_size: float = 0.0


@dataclass
class PageText:
    """
    Text recovered from one PDF page.

    Attributes:
        page_number: 1-based page number
        full_text: All text on the page in reading order
        words: Positioned words, empty when only plain text is available
        width: Page width in points
        height: Page height in points
    """
    page_number: int
    full_text: str = ""
    words: List[WordInfo] = field(default_factory=list)
    width: float = 0.0
    height: float = 0.0

    @property
    def has_text(self) -> bool:
        return bool(self.full_text and self.full_text.strip())
