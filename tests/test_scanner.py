"""Tests for package scanning and the part number index."""

import logging

import pytest
from conftest import page_info

from drawing_facts.models.page import PageText
from drawing_facts.models.routing import RoutingOp
from drawing_facts.scanning import DrawingPackageIndex, DrawingPackageScanner, normalize_part_number


class FakeExtractor:
    """Text extractor returning canned pages and recording calls."""

    def __init__(self, pages_by_name=None, error=None):
        self.pages_by_name = pages_by_name or {}
        self.error = error
        self.calls = []

    def __call__(self, pdf_path):
        self.calls.append(pdf_path)
        if self.error is not None:
            raise self.error
        for name, pages in self.pages_by_name.items():
            if pdf_path.endswith(name):
                return pages
        return []


def text_page(page_number, text):
    return PageText(page_number=page_number, full_text=text)


@pytest.fixture
def pdf_file(tmp_path):
    def _make(name):
        path = tmp_path / name
        path.write_bytes(b"%PDF-1.4\n")
        return str(path)
    return _make


# =============================================================================
# Real PDFs
# =============================================================================

class TestScanRealPdf:

    TITLE_A = "PART NO: 12345-01\nMATERIAL: A36\nREV: A"
    TITLE_B = "PART NO: 67890\nMATERIAL: 6061 AL\nREV: B"
    NOTES = "BREAK ALL EDGES\nPOWDER COAT BLACK"

    def test_pages_grouped_by_part_number(self, make_pdf):
        path = make_pdf("package.pdf", [
            (self.TITLE_A, self.NOTES),
            (self.TITLE_A, self.NOTES),
            (self.TITLE_B, ""),
        ])
        index = DrawingPackageScanner().scan_files([path])

        assert index.total_pages == 3
        assert index.unique_part_numbers == 2
        assert [p.page_number for p in index.find_pages("12345-01")] == [1, 2]
        assert index.find_pages("67890")[0].title_block.material == "6061 AL"

    def test_merged_drawing_data(self, make_pdf):
        path = make_pdf("package.pdf", [(self.TITLE_A, self.NOTES), (self.TITLE_A, self.NOTES)])
        index = DrawingPackageScanner().scan_files([path])
        first_page = index.find_pages("12345-01")[0]

        data = index.build_drawing_data("12345-01")
        assert data.page_count == 2
        assert (data.material, data.revision) == ("A36", "A")
        assert data.source_pdf_path == path
        assert len(data.notes) == len(first_page.notes) > 0
        assert [h.operation for h in data.routing_hints].count(RoutingOp.DEBURR) == 1
        assert len(data.tolerance_results) == 2


# =============================================================================
# Scanning with a stubbed text extractor
# =============================================================================

class TestScanFiles:

    def test_unmatched_pages_and_summary(self, pdf_file):
        a, b = pdf_file("a.pdf"), pdf_file("b.pdf")
        extractor = FakeExtractor({
            "a.pdf": [text_page(1, "PART NO: 100-A"), text_page(2, "GENERAL ARRANGEMENT ONLY")],
            "b.pdf": [text_page(1, "PART NO: 200-B")],
        })
        index = DrawingPackageScanner(text_extractor=extractor).scan_files([a, b])

        assert len(index.unmatched_pages) == 1
        assert index.matched_pages == 2
        assert index.summary == "2 PDF(s), 3 pages, 2 part numbers found, 1 unmatched pages"

    def test_extractor_failure_keeps_scanning(self, pdf_file, caplog):
        path = pdf_file("broken.pdf")
        scanner = DrawingPackageScanner(text_extractor=FakeExtractor(error=RuntimeError("cannot open")))
        with caplog.at_level(logging.WARNING):
            index = scanner.scan_files([path])
        assert index.scanned_files == [path]
        assert index.total_pages == 0
        assert "cannot open" in caplog.text

    def test_missing_files_skipped(self, tmp_path):
        extractor = FakeExtractor()
        index = DrawingPackageScanner(text_extractor=extractor).scan_files([str(tmp_path / "gone.pdf"), ""])
        assert index.scanned_files == []
        assert extractor.calls == []

    def test_none_file_list(self):
        assert DrawingPackageScanner(text_extractor=FakeExtractor()).scan_files(None).total_pages == 0

    def test_folder_order_and_filter(self, tmp_path, pdf_file):
        for name in ("b.pdf", "A.PDF", "c.pdf"):
            pdf_file(name)
        (tmp_path / "readme.txt").write_text("not a drawing")
        (tmp_path / "sub.pdf").mkdir()

        extractor = FakeExtractor()
        index = DrawingPackageScanner(text_extractor=extractor).scan_folder(str(tmp_path))
        assert [p.split("/")[-1].split("\\")[-1] for p in extractor.calls] == ["A.PDF", "b.pdf", "c.pdf"]
        assert len(index.scanned_files) == 3

    def test_missing_folder(self, tmp_path, caplog):
        scanner = DrawingPackageScanner(text_extractor=FakeExtractor())
        with caplog.at_level(logging.WARNING):
            index = scanner.scan_folder(str(tmp_path / "nowhere"))
        assert index.scanned_files == []
        assert "Drawing folder not found" in caplog.text


# =============================================================================
# Page analysis
# =============================================================================

class TestAnalyzePage:

    @pytest.fixture
    def scanner(self):
        return DrawingPackageScanner(text_extractor=FakeExtractor())

    def test_empty_page(self, scanner):
        info = scanner.analyze_page(text_page(2, "   "), "x.pdf")
        assert not info.has_text
        assert info.part_number is None
        assert info.routing_hints == []
        assert info.tolerance_result is None

    def test_spec_hints_come_first(self, scanner):
        info = scanner.analyze_page(text_page(1, "WELD PER AWS D1.1\nBREAK ALL EDGES"))
        assert info.routing_hints[0].note_text == "WELD PER AWS D1.1"
        assert RoutingOp.DEBURR in [h.operation for h in info.routing_hints]

    def test_assembly_with_bom(self, scanner):
        text = (
            "PART NO: ASSY-100\n"
            "BILL OF MATERIALS\n"
            "ITEM PART NO DESCRIPTION QTY\n"
            "1 7001-X BRACKET 2\n"
            "2 HW-10 BOLT HEX 4\n"
        )
        info = scanner.analyze_page(text_page(1, text))
        assert info.has_bom and info.is_assembly_level
        assert [(b.part_number, b.description, b.quantity) for b in info.bom_entries] == [
            ("7001-X", "BRACKET", 2),
            ("HW-10", "BOLT HEX", 4),
        ]

    def test_assembly_keyword_without_bom(self, scanner):
        info = scanner.analyze_page(text_page(1, "FRAME WELDMENT"))
        assert info.is_assembly_level
        assert not info.has_bom

    def test_bom_rows_need_a_header(self, scanner):
        assert scanner.detect_bom("1 7001-X BRACKET 2") == []


# =============================================================================
# Index
# =============================================================================

class TestIndex:

    @pytest.fixture
    def index(self):
        index = DrawingPackageIndex()
        index.add_page(page_info("12345-01"))
        index.add_page(page_info(" 12345-01 ", page_number=2))
        index.add_page(page_info("ABC-9"))
        index.add_page(page_info(None, page_number=4))
        return index

    def test_normalized_grouping(self, index):
        assert normalize_part_number(" abc-9 ") == "ABC-9"
        assert index.unique_part_numbers == 2
        assert len(index.find_pages("12345-01")) == 2
        assert len(index.unmatched_pages) == 1

    def test_case_insensitive_exact(self, index):
        assert index.find_pages("abc-9")[0].part_number == "ABC-9"

    @pytest.mark.parametrize("query", ["12345", "PRE-12345-01-X"])
    def test_containment_either_direction(self, index, query):
        assert len(index.find_pages(query)) == 2

    @pytest.mark.parametrize("query", [None, "", "   ", "99999"])
    def test_no_match(self, index, query):
        assert index.find_pages(query) == []
        assert index.build_drawing_data(query) is None
