"""
Page region text.

Drawings put the title block in the bottom-right corner and general notes
in the upper-left. Word coordinates use a bottom-left origin.
"""

from typing import List, Optional

from ..config import Config, default_config
from ..models.page import PageText, WordInfo

# Words whose tops are within this many points share a line
_LINE_TOLERANCE = 3.0


def words_to_text(words: List[WordInfo]) -> str:
    """Join words top-down then left-to-right, one output line per text line."""
    ordered = sorted(words, key=lambda w: (-w.top, w.left))
    lines: List[List[WordInfo]] = []
    for word in ordered:
        if lines and abs(lines[-1][0].top - word.top) <= _LINE_TOLERANCE:
            lines[-1].append(word)
        else:
            lines.append([word])
    return "\n".join(
        " ".join(w.text for w in sorted(line, key=lambda w: w.left))
        for line in lines
    )


def extract_title_block_region(page: PageText, config: Optional[Config] = None) -> str:
    """Text in the bottom-right title block region of a page."""
    if not page.words or page.width <= 0 or page.height <= 0:
        return ""
    config = config or default_config
    min_x = page.width * config.title_block_min_x
    max_y = page.height * config.title_block_max_y
    return words_to_text([w for w in page.words if w.left >= min_x and w.bottom <= max_y])


def extract_notes_region(page: PageText, config: Optional[Config] = None) -> str:
    """Text in the top-left notes region of a page."""
    if not page.words or page.width <= 0 or page.height <= 0:
        return ""
    config = config or default_config
    max_x = page.width * config.notes_max_x
    min_y = page.height * config.notes_min_y
    return words_to_text([w for w in page.words if w.left <= max_x and w.top >= min_y])
