"""
PDF Text Utilities

Reads page text and word positions from PDFs with PyMuPDF (fitz) and
renders pages to images for an external vision provider.

Word coordinates are converted to a bottom-left origin so that page
regions (title block bottom-right, notes top-left) read naturally.
"""

import logging
import os
from typing import List, Optional

import fitz  # PyMuPDF
from PIL import Image

from ..config import default_config
from ..models.page import PageText, WordInfo

logger = logging.getLogger(__name__)


def extract_pages(pdf_path: str) -> List[PageText]:
    """
    Extract text and positioned words from every page of a PDF.

    Args:
        pdf_path: Path to the PDF file

    Returns:
        List of PageText, one per page; empty if the file does not exist
    """
    if not os.path.isfile(pdf_path):
        logger.warning("PDF not found: %s", pdf_path)
        return []

    pages = []
    doc = fitz.open(pdf_path)
    try:
        for page_idx in range(len(doc)):
            page = doc.load_page(page_idx)
            width = page.rect.width
            height = page.rect.height

            words = []
            for x0, y0, x1, y1, text, *_ in page.get_text("words"):
                words.append(WordInfo(
                    text=text,
                    left=x0,
                    bottom=height - y1,
                    right=x1,
                    top=height - y0,
                    font_size=y1 - y0,
                ))

            pages.append(PageText(
                page_number=page_idx + 1,
                full_text=page.get_text("text"),
                words=words,
                width=width,
                height=height,
            ))
            logger.debug("%s page %d: %d words", pdf_path, page_idx + 1, len(words))
    finally:
        doc.close()

    return pages


def get_pdf_page_count(pdf_path: str) -> int:
    """Get the number of pages in a PDF without rendering."""
    doc = fitz.open(pdf_path)
    count = len(doc)
    doc.close()
    return count


def render_page_image(pdf_path: str, page_number: int = 1, dpi: Optional[int] = None) -> Image.Image:
    """
    Render a single page for an external vision provider.

    Args:
        pdf_path: Path to the PDF file
        page_number: Page number (1-based)
        dpi: Rendering resolution (default from config)

    Returns:
        RGB PIL image of the page

    Raises:
        ValueError: If page_number is out of range
    """
    dpi = dpi or default_config.render_dpi
    doc = fitz.open(pdf_path)
    try:
        total_pages = len(doc)
        if page_number < 1 or page_number > total_pages:
            raise ValueError(f"Page {page_number} out of range (PDF has {total_pages} pages)")

        page = doc.load_page(page_number - 1)
        zoom = dpi / 72.0
        pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
        return Image.frombytes("RGB", [pix.width, pix.height], pix.samples)
    finally:
        doc.close()
