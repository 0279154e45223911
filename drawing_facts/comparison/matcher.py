"""Match CAD assembly components to drawing pages.

Matching strategy (first success wins, in this order):
1. Exact part number: the component's part number property finds pages
2. File name: the component file stem finds pages
3. BOM reference: the part number, then the file stem, appears in a BOM row
   whose part number has its own pages
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PureWindowsPath
from typing import Any, Dict, List, Optional

from ..config import Config, default_config
from ..models.drawing import DrawingPageInfo
from ..scanning.index import DrawingPackageIndex, normalize_part_number

logger = logging.getLogger(__name__)


class MatchMethod(Enum):
    """How a component was matched to its drawing."""
    NONE = "none"
    EXACT_PART_NUMBER = "exact_part_number"
    FILE_NAME = "file_name"
    BOM = "bom"


@dataclass
class ComponentInfo:
    """A CAD component as reported by the model walker."""
    file_path: Optional[str] = None
    part_number: Optional[str] = None
    is_assembly: bool = False
    quantity: int = 1


@dataclass
class MatchResult:
    """
    Result of matching one component.

    Attributes:
        method: Strategy that produced the match (NONE when unmatched)
        confidence: Match confidence for the method
        pages: Drawing pages for the component
    """
    method: MatchMethod = MatchMethod.NONE
    confidence: float = 0.0
    pages: List[DrawingPageInfo] = field(default_factory=list)

    @property
    def is_matched(self) -> bool:
        return self.method != MatchMethod.NONE and len(self.pages) > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isMatched": self.is_matched,
            "method": self.method.value,
            "confidence": self.confidence,
            "pages": [{"pdfPath": p.pdf_path, "pageNumber": p.page_number} for p in self.pages],
        }


@dataclass
class MatchResults:
    """Matches for a component list, plus drawings nothing claimed."""
    matched: Dict[str, MatchResult] = field(default_factory=dict)
    unmatched: List[str] = field(default_factory=list)
    unmatched_drawings: List[DrawingPageInfo] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matched": {path: m.to_dict() for path, m in self.matched.items()},
            "unmatched": list(self.unmatched),
            "unmatchedDrawings": [
                {"pdfPath": p.pdf_path, "pageNumber": p.page_number, "partNumber": p.part_number}
                for p in self.unmatched_drawings
            ],
        }


def file_stem(path: Optional[str]) -> str:
    """File name without extension; handles Windows paths from CAD tools on any OS."""
    if not path:
        return ""
    return PureWindowsPath(path).stem


class ComponentDrawingMatcher:
    """
    Match CAD components to drawing pages in a DrawingPackageIndex.

    Usage:
        matcher = ComponentDrawingMatcher()
        result = matcher.match("C:/parts/12345-01.sldprt", "12345-01", index)
        results = matcher.match_all(components, index)
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or default_config

    def _result(self, method: MatchMethod, pages: List[DrawingPageInfo]) -> MatchResult:
        return MatchResult(
            method=method,
            confidence=self.config.match_confidence[method.value],
            pages=list(pages),
        )

    def match(
        self,
        component_path: Optional[str],
        part_number: Optional[str],
        index: Optional[DrawingPackageIndex],
    ) -> MatchResult:
        """
        Match one component.

        Args:
            component_path: CAD file path (may be None)
            part_number: Part number property (may be None)
            index: Drawing package index (None never matches)

        Returns:
            MatchResult; method NONE when nothing matched
        """
        if index is None:
            return MatchResult()

        stem = file_stem(component_path)

        if part_number and part_number.strip():
            pages = index.find_pages(part_number)
            if pages:
                return self._result(MatchMethod.EXACT_PART_NUMBER, pages)

        if stem:
            pages = index.find_pages(stem)
            if pages:
                return self._result(MatchMethod.FILE_NAME, pages)

        for term in (part_number, stem):
            if term and term.strip():
                pages = self._find_via_bom(term, index)
                if pages:
                    return self._result(MatchMethod.BOM, pages)

        return MatchResult()

    def _find_via_bom(self, term: str, index: DrawingPackageIndex) -> List[DrawingPageInfo]:
        query = normalize_part_number(term)
        for entry in index.all_bom_entries:
            bom_pn = normalize_part_number(entry.part_number)
            if not bom_pn:
                continue
            if bom_pn == query or query in bom_pn or bom_pn in query:
                pages = index.find_pages(entry.part_number)
                if pages:
                    return pages
        return []

    def match_all(
        self,
        components: Optional[List[ComponentInfo]],
        index: Optional[DrawingPackageIndex],
    ) -> MatchResults:
        """
        Match every component and collect the drawings none of them claimed.

        Unmatched drawings are the indexed part numbers no match used, followed
        by the pages that never had a part number.
        """
        results = MatchResults()
        if components is None or index is None:
            return results

        claimed = set()
        for component in components:
            match = self.match(component.file_path, component.part_number, index)
            key = component.file_path or component.part_number or ""
            if match.is_matched:
                results.matched[key] = match
                claimed.update(normalize_part_number(p.part_number) for p in match.pages)
            else:
                results.unmatched.append(key)

        for key, pages in index.pages_by_part_number.items():
            if key not in claimed:
                results.unmatched_drawings.extend(pages)
        results.unmatched_drawings.extend(index.unmatched_pages)

        logger.debug(
            "Matched %d of %d components, %d unmatched drawing pages",
            len(results.matched), len(components), len(results.unmatched_drawings),
        )
        return results
