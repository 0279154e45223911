"""Tests for component to drawing matching."""

import pytest
from conftest import page_info

from drawing_facts.comparison import ComponentDrawingMatcher, ComponentInfo, MatchMethod, file_stem
from drawing_facts.config import Config
from drawing_facts.models.drawing import BomEntry
from drawing_facts.scanning import DrawingPackageIndex


@pytest.fixture
def index():
    index = DrawingPackageIndex()
    index.add_page(page_info("12345-01"))
    index.add_page(page_info("ABC-9", page_number=2))
    index.add_page(page_info(
        "ASSY-100", page_number=3,
        bom_entries=[BomEntry(item_number="1", part_number="7001-X", quantity=2)],
    ))
    index.add_page(page_info("7001-X-2", page_number=4))
    index.add_page(page_info(None, page_number=5))
    return index


@pytest.fixture
def matcher():
    return ComponentDrawingMatcher()


class TestMatch:

    @pytest.mark.parametrize("path, part_number, method, confidence", [
        ("C:\\parts\\ABC-9.sldprt", "12345-01", MatchMethod.EXACT_PART_NUMBER, 0.95),
        ("C:\\CAD\\ABC-9.SLDPRT", None, MatchMethod.FILE_NAME, 0.85),
        ("C:\\CAD\\ABC-9.SLDPRT", "ZZZ", MatchMethod.FILE_NAME, 0.85),
        (None, "PRE-7001-X", MatchMethod.BOM, 0.75),
    ])
    def test_methods_in_order(self, matcher, index, path, part_number, method, confidence):
        result = matcher.match(path, part_number, index)
        assert result.method == method
        assert result.confidence == confidence
        assert result.is_matched

    def test_part_number_beats_file_name(self, matcher, index):
        result = matcher.match("/cad/ABC-9.sldprt", "12345-01", index)
        assert [p.part_number for p in result.pages] == ["12345-01"]

    def test_bom_reference_resolves_to_indexed_pages(self, matcher, index):
        result = matcher.match(None, "PRE-7001-X", index)
        assert [p.part_number for p in result.pages] == ["7001-X-2"]

    @pytest.mark.parametrize("path, part_number", [
        (None, None),
        ("", "   "),
        ("C:\\cad\\UNKNOWN.sldprt", "NOPE"),
    ])
    def test_no_match(self, matcher, index, path, part_number):
        result = matcher.match(path, part_number, index)
        assert result.method == MatchMethod.NONE
        assert not result.is_matched
        assert result.confidence == 0.0

    def test_no_index(self, matcher):
        assert matcher.match("C:\\cad\\12345-01.sldprt", "12345-01", None).method == MatchMethod.NONE

    def test_config_confidence(self, index):
        config = Config(match_confidence={"exact_part_number": 0.5, "file_name": 0.4, "bom": 0.3})
        assert ComponentDrawingMatcher(config).match(None, "ABC-9", index).confidence == 0.5

    def test_to_dict(self, matcher, index):
        data = matcher.match(None, "ABC-9", index).to_dict()
        assert data["method"] == "exact_part_number"
        assert data["pages"] == [{"pdfPath": "pkg.pdf", "pageNumber": 2}]


class TestMatchAll:

    def test_matched_unmatched_and_orphan_drawings(self, matcher, index):
        components = [
            ComponentInfo(file_path="C:\\cad\\12345-01.sldprt", part_number="12345-01"),
            ComponentInfo(part_number="NOPE"),
            ComponentInfo(file_path="C:\\cad\\ABC-9.sldprt"),
        ]
        results = matcher.match_all(components, index)

        assert set(results.matched) == {"C:\\cad\\12345-01.sldprt", "C:\\cad\\ABC-9.sldprt"}
        assert results.unmatched == ["NOPE"]
        assert [p.part_number for p in results.unmatched_drawings] == ["ASSY-100", "7001-X-2", None]

    @pytest.mark.parametrize("components, has_index", [(None, True), ([ComponentInfo(part_number="X")], False)])
    def test_missing_inputs(self, matcher, index, components, has_index):
        results = matcher.match_all(components, index if has_index else None)
        assert results.matched == {}
        assert results.unmatched_drawings == []


@pytest.mark.parametrize("path, expected", [
    ("C:\\parts\\12345-01.SLDPRT", "12345-01"),
    ("/home/cad/bracket.sldprt", "bracket"),
    ("plate", "plate"),
    (None, ""),
])
def test_file_stem(path, expected):
    assert file_stem(path) == expected
