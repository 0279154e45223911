"""Tests for PyMuPDF text extraction and page rendering."""

import pytest
from conftest import PAGE_HEIGHT, PAGE_WIDTH

from drawing_facts.utils.pdf_text import extract_pages, get_pdf_page_count, render_page_image


class TestExtractPages:

    def test_words_use_bottom_left_origin(self, make_pdf):
        path = make_pdf("one.pdf", [("PART NO: 100", "BREAK ALL EDGES")])
        pages = extract_pages(path)

        assert len(pages) == 1
        page = pages[0]
        assert (page.page_number, page.width, page.height) == (1, PAGE_WIDTH, PAGE_HEIGHT)
        assert "BREAK ALL EDGES" in page.full_text

        words = {w.text: w for w in page.words}
        note_word, title_word = words["BREAK"], words["PART"]
        assert note_word.top > note_word.bottom
        assert note_word.font_size > 0
        assert note_word.bottom > PAGE_HEIGHT / 2
        assert title_word.top < PAGE_HEIGHT * 0.35
        assert title_word.left > PAGE_WIDTH / 2

    def test_missing_file(self, tmp_path):
        assert extract_pages(str(tmp_path / "missing.pdf")) == []

    def test_blank_page(self, make_pdf):
        page = extract_pages(make_pdf("blank.pdf", [("", "")]))[0]
        assert not page.has_text
        assert page.words == []


class TestPageCountAndRender:

    def test_page_count(self, make_pdf):
        assert get_pdf_page_count(make_pdf("three.pdf", [("", "")] * 3)) == 3

    def test_render_at_72_dpi_matches_points(self, make_pdf):
        image = render_page_image(make_pdf("one.pdf", [("PART NO: 100", "")]), 1, dpi=72)
        assert image.mode == "RGB"
        assert image.size == (PAGE_WIDTH, PAGE_HEIGHT)

    @pytest.mark.parametrize("page_number", [0, 2])
    def test_page_out_of_range(self, make_pdf, page_number):
        with pytest.raises(ValueError, match="out of range"):
            render_page_image(make_pdf("one.pdf", [("", "")]), page_number)
