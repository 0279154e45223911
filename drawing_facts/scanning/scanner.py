"""
Drawing package scanner.

Walks a folder of PDFs (or an explicit file list), runs every extractor on
each page and files the results in a DrawingPackageIndex. Customer packages
come as one PDF per part, one PDF for a whole assembly, or anything between,
so grouping is by the part number read from each page's title block.

Usage:
    from drawing_facts.scanning import DrawingPackageScanner

    index = DrawingPackageScanner().scan_folder("drawings/")
    print(index.summary)
    data = index.build_drawing_data("12345-01")
"""

import logging
import re
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from ..classifier.fabrication import FabricationToleranceClassifier
from ..config import Config, default_config
from ..extractors.gdt import GdtExtractor
from ..extractors.notes import DrawingNoteExtractor
from ..extractors.specs import SpecRecognizer
from ..extractors.title_block import TitleBlockParser
from ..extractors.tolerance import ToleranceAnalyzer
from ..models.drawing import BomEntry, DrawingPageInfo
from ..models.page import PageText
from .index import DrawingPackageIndex

logger = logging.getLogger(__name__)


BOM_HEADER_PATTERN = re.compile(
    r"\b(?:BILL\s*OF\s*MATERIALS?\b|BOM\b|PARTS?\s*LIST\b|ITEM\s+(?:NO\b|NUMBER\b|#))",
    re.IGNORECASE,
)
# ITEM  PART-NUMBER  DESCRIPTION  QTY
BOM_ROW_PATTERN = re.compile(
    r"^\s*(\d{1,3})\s+([A-Z0-9][\w\-\.]+)\s+(.+?)\s+(\d{1,4})\s*$",
    re.IGNORECASE | re.MULTILINE,
)
ASSEMBLY_PATTERN = re.compile(
    r"\b(?:ASSEMBLY|ASSY|WELDMENT|WELDED\s+ASSY|SUB[\-\s]?ASSY)\b",
    re.IGNORECASE,
)


def is_assembly_text(text: str) -> bool:
    """Heuristic: does the page text describe an assembly-level drawing?"""
    return bool(text and ASSEMBLY_PATTERN.search(text))


class DrawingPackageScanner:
    """Runs the per-page extractors over a set of PDFs."""

    def __init__(
        self,
        config: Optional[Config] = None,
        text_extractor: Optional[Callable[[str], List[PageText]]] = None,
    ):
        self.config = config or default_config
        if text_extractor is None:
            # PyMuPDF loads only when the scanner reads PDFs itself
            from ..utils.pdf_text import extract_pages
            text_extractor = extract_pages
        self.text_extractor = text_extractor
        self.title_block_parser = TitleBlockParser(self.config)
        self.note_extractor = DrawingNoteExtractor(self.config)
        self.spec_recognizer = SpecRecognizer()
        self.gdt_extractor = GdtExtractor(self.config)
        self.tolerance_analyzer = ToleranceAnalyzer(self.config)
        self.fabrication_classifier = FabricationToleranceClassifier(config=self.config)

    def scan_folder(self, folder_path: str) -> DrawingPackageIndex:
        """
        Scan every top-level PDF in a folder.

        Files are processed in case-insensitive name order so page order in
        the index is stable across platforms.
        """
        index = DrawingPackageIndex()
        folder = Path(folder_path) if folder_path else None
        if folder is None or not folder.is_dir():
            logger.warning("Drawing folder not found: %s", folder_path)
            return index

        pdf_files = sorted(
            (p for p in folder.iterdir() if p.is_file() and p.suffix.lower() == ".pdf"),
            key=lambda p: p.name.lower(),
        )
        logger.debug("Found %d PDF(s) in %s", len(pdf_files), folder)

        for pdf_file in pdf_files:
            self.scan_pdf(str(pdf_file), index)

        return index

    def scan_files(self, pdf_paths: Optional[Iterable[str]]) -> DrawingPackageIndex:
        """Scan an explicit list of PDFs (e.g. files picked by the user)."""
        index = DrawingPackageIndex()
        if pdf_paths is None:
            return index

        for pdf_path in pdf_paths:
            self.scan_pdf(pdf_path, index)
        return index

    def scan_pdf(self, pdf_path: str, index: DrawingPackageIndex) -> None:
        """Analyze every page of one PDF and add the pages to the index."""
        if not pdf_path or not Path(pdf_path).is_file():
            logger.warning("Skipping missing PDF: %s", pdf_path)
            return

        index.scanned_files.append(pdf_path)

        try:
            pages = self.text_extractor(pdf_path)
        except (RuntimeError, ValueError, OSError) as e:
            logger.warning("Failed to extract text from %s: %s", pdf_path, e)
            return

        index.total_pages += len(pages)
        for page in pages:
            page_info = self.analyze_page(page, pdf_path)
            logger.debug(
                "%s page %d: part number %s, %d notes, %d GD&T",
                Path(pdf_path).name, page.page_number, page_info.part_number,
                len(page_info.notes), len(page_info.gdt_callouts),
            )
            index.add_page(page_info)

    def analyze_page(self, page: PageText, pdf_path: str = "") -> DrawingPageInfo:
        """
        Run every extractor on one page.

        Args:
            page: Page text (and words, when available)
            pdf_path: Source PDF, recorded on the result

        Returns:
            DrawingPageInfo; a page with no text yields an empty result
        """
        info = DrawingPageInfo(pdf_path=pdf_path, page_number=page.page_number, has_text=page.has_text)
        if not page.has_text:
            return info

        text = page.full_text

        info.title_block = self.title_block_parser.parse_from_page(page)
        info.confidence = info.title_block.overall_confidence

        info.notes = self.note_extractor.extract_notes(text, page.page_number)
        info.spec_matches = self.spec_recognizer.recognize(text)
        info.gdt_callouts = self.gdt_extractor.extract(text)
        info.tolerance_result = self.tolerance_analyzer.analyze(text, info.title_block.tolerance_general)
        info.fabrication_result = self.fabrication_classifier.classify(
            text, info.tolerance_result, info.gdt_callouts
        )

        info.routing_hints.extend(self.spec_recognizer.to_routing_hints(info.spec_matches))
        info.routing_hints.extend(self.note_extractor.generate_routing_hints(info.notes))
        info.routing_hints.extend(self.gdt_extractor.to_routing_hints(info.gdt_callouts))
        info.routing_hints.extend(self.tolerance_analyzer.to_routing_hints(info.tolerance_result))
        info.routing_hints.extend(self.fabrication_classifier.to_routing_hints(info.fabrication_result))

        info.bom_entries = self.detect_bom(text)
        info.has_bom = bool(BOM_HEADER_PATTERN.search(text))
        info.is_assembly_level = info.has_bom or is_assembly_text(text)

        return info

    def detect_bom(self, text: str) -> List[BomEntry]:
        """BOM rows from page text; empty unless a BOM header is present."""
        if not text or not BOM_HEADER_PATTERN.search(text):
            return []

        entries = []
        for match in BOM_ROW_PATTERN.finditer(text):
            entries.append(BomEntry(
                item_number=match.group(1).strip(),
                part_number=match.group(2).strip(),
                description=match.group(3).strip(),
                quantity=int(match.group(4)),
                confidence=self.config.bom_row_confidence,
            ))
        return entries
