"""Tests for title block parsing and page regions."""

import datetime

import pytest

from drawing_facts.config import Config
from drawing_facts.extractors.regions import extract_notes_region, extract_title_block_region, words_to_text
from drawing_facts.extractors.title_block import TitleBlockParser, parse_date, parse_title_block
from drawing_facts.models.page import PageText, WordInfo


def word(text, left, top, height=10.0):
    return WordInfo(text=text, left=left, bottom=top - height, right=left + 8 * len(text), top=top)


# =============================================================================
# Labeled fields
# =============================================================================

class TestParse:

    def test_identity_fields(self):
        info = parse_title_block("PART NO: NM-1234-A\nMATERIAL: 304 STAINLESS STEEL\nREV: C")
        assert info.part_number == "NM-1234-A"
        assert info.material == "304 STAINLESS STEEL"
        assert info.revision == "C"
        assert info.overall_confidence > 0.5

    def test_material_stops_at_next_label(self):
        info = parse_title_block("MATERIAL: A36 FINISH: PAINT BLACK")
        assert info.material == "A36"
        assert info.finish == "PAINT BLACK"
        assert info.material_confidence == pytest.approx(0.85)

    def test_standalone_material_has_lower_confidence(self):
        info = parse_title_block("BRACKET\n304 SS")
        assert info.material == "304 SS"
        assert info.material_confidence == pytest.approx(0.70)

    def test_secondary_fields(self):
        text = (
            "DWG NO: 55-100\n"
            "DESCRIPTION: MOUNTING BRACKET\n"
            "DRAWN BY: JSMITH\n"
            "CHECKED BY: RJONES\n"
            "SCALE: 1:2\n"
            "SHEET 1 OF 2\n"
            "DATE: 03/15/2024"
        )
        info = parse_title_block(text)
        assert info.part_number == "55-100"
        assert info.description == "MOUNTING BRACKET"
        assert info.drawn_by == "JSMITH"
        assert info.checked_by == "RJONES"
        assert info.scale == "1:2"
        assert info.sheet == "1 OF 2"
        assert info.date == datetime.date(2024, 3, 15)

    def test_general_tolerance_text(self):
        info = parse_title_block("UNLESS OTHERWISE SPECIFIED TOLERANCES: .XX ±.01")
        assert info.tolerance_general == ".XX ±.01"

    def test_empty_text_yields_empty_info(self):
        info = parse_title_block("   ")
        assert info.part_number is None
        assert info.overall_confidence == 0.0

    def test_config_overrides_confidence(self):
        info = TitleBlockParser(Config(part_number_confidence=0.5)).parse("PART NO: X-1")
        assert info.part_number_confidence == 0.5

    @pytest.mark.parametrize("text, expected", [
        ("P/N: 7001-X", "7001-X"),
        ("PN# 55-100", "55-100"),
        ("PNEUMATIC CYLINDER\nREV: A", None),
        ("SPN 4410", None),
    ])
    def test_pn_label_needs_a_word_boundary(self, text, expected):
        assert parse_title_block(text).part_number == expected


class TestParseDate:

    def test_two_digit_year(self):
        assert parse_date("1-2-24") == datetime.date(2024, 1, 2)

    def test_invalid_date_keeps_raw_text(self):
        info = parse_title_block("DATE: 13/45/2024")
        assert info.date is None
        assert info.date_text == "13/45/2024"


# =============================================================================
# Region-first parsing
# =============================================================================

class TestParseFromPage:

    def test_region_value_preferred_over_full_text(self):
        page = PageText(
            page_number=1,
            full_text="PART NO: OTHER-1\nPART NO: TB-100",
            words=[word("PART", 400, 50), word("NO:", 440, 50), word("TB-100", 480, 50)],
            width=612,
            height=792,
        )
        info = TitleBlockParser().parse_from_page(page)
        assert info.part_number == "TB-100"
        assert info.part_number_confidence == pytest.approx(0.85)

    def test_full_text_fallback_is_discounted(self):
        page = PageText(page_number=1, full_text="PART NO: 12345-01", width=612, height=792)
        info = TitleBlockParser().parse_from_page(page)
        assert info.part_number == "12345-01"
        assert info.part_number_confidence == pytest.approx(0.85 * 0.9)

    def test_none_page(self):
        assert TitleBlockParser().parse_from_page(None).part_number is None


class TestRegions:

    def test_words_grouped_into_lines(self):
        words = [word("B", 60, 100), word("A", 10, 101), word("C", 10, 80)]
        assert words_to_text(words) == "A B\nC"

    def test_title_block_and_notes_regions(self):
        page = PageText(
            page_number=1,
            full_text="x",
            words=[word("NOTES", 40, 700), word("TITLE", 400, 60)],
            width=612,
            height=792,
        )
        assert extract_title_block_region(page) == "TITLE"
        assert extract_notes_region(page) == "NOTES"

    def test_page_without_words(self):
        assert extract_title_block_region(PageText(page_number=1, full_text="x")) == ""

    def test_region_bounds_follow_parser_config(self):
        page = PageText(
            page_number=1,
            full_text="PART NO: TB-100",
            words=[word("PART", 150, 50), word("NO:", 190, 50), word("TB-100", 230, 50)],
            width=612,
            height=792,
        )
        assert extract_title_block_region(page) == ""
        assert extract_title_block_region(page, Config(title_block_min_x=0.20)) == "PART NO: TB-100"

        wide = TitleBlockParser(Config(title_block_min_x=0.20)).parse_from_page(page)
        assert wide.part_number_confidence == pytest.approx(0.85)
        narrow = TitleBlockParser().parse_from_page(page)
        assert narrow.part_number_confidence == pytest.approx(0.85 * 0.9)
