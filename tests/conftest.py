"""Shared fixtures: synthetic drawing PDFs built with PyMuPDF."""

import fitz  # PyMuPDF
import pytest

from drawing_facts.models.drawing import DrawingPageInfo
from drawing_facts.models.title_block import TitleBlockInfo

PAGE_WIDTH = 612
PAGE_HEIGHT = 792


def draw_page(doc, title_block: str = "", notes: str = "") -> None:
    """Letter page with notes top-left and a title block bottom-right."""
    page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
    if notes:
        page.insert_text((40, 80), notes, fontsize=10)
    if title_block:
        page.insert_text((360, 690), title_block, fontsize=9)


@pytest.fixture
def make_pdf(tmp_path):
    """Factory: make_pdf("name.pdf", [(title_block, notes), ...]) -> path string."""

    def _make(name, pages):
        path = tmp_path / name
        doc = fitz.open()
        for title_block, notes in pages:
            draw_page(doc, title_block, notes)
        doc.save(str(path))
        doc.close()
        return str(path)

    return _make


def page_info(part_number, pdf_path="pkg.pdf", page_number=1, **kwargs):
    """DrawingPageInfo with only a part number in its title block."""
    return DrawingPageInfo(
        pdf_path=pdf_path,
        page_number=page_number,
        title_block=TitleBlockInfo(part_number=part_number),
        **kwargs,
    )
