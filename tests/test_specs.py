"""Tests for industry specification recognition."""

import pytest

from drawing_facts.extractors.specs import SpecRecognizer, classify_reference, database_size
from drawing_facts.models.routing import NoteCategory, RoutingOp
from drawing_facts.models.spec import SpecCategory


@pytest.fixture
def recognizer():
    return SpecRecognizer()


class TestRecognize:

    def test_weld_and_material_specs(self, recognizer):
        matches = recognizer.recognize("WELD PER AWS D1.1. MATERIAL ASTM A36")
        assert [m.spec_id for m in matches] == ["AWS D1.1", "ASTM A36"]
        assert matches[0].category == SpecCategory.WELDING
        assert matches[1].category == SpecCategory.MATERIAL

    def test_deduplicated_by_spec_id(self, recognizer):
        matches = recognizer.recognize("AWS D1.1 ... AWS D1.1 ... AWS D1.1")
        assert len(matches) == 1

    def test_recognition_is_idempotent(self, recognizer):
        text = "PASSIVATE PER AMS 2700\nFPI PER AMS 2644\nITAR CONTROLLED"
        assert recognizer.recognize(text) == recognizer.recognize(text)

    def test_longer_designation_not_claimed_by_prefix(self, recognizer):
        assert classify_reference("ASTM A536") is None
        assert recognizer.recognize("ASTM A536") == []

    def test_empty_text(self, recognizer):
        assert recognizer.recognize("") == []

    def test_database_size(self):
        assert database_size() >= 60


class TestRoutingHints:

    def test_material_specs_yield_no_hint(self, recognizer):
        hints = recognizer.to_routing_hints(recognizer.recognize("WELD PER AWS D1.1. MATERIAL ASTM A36"))
        assert len(hints) == 1
        assert hints[0].operation == RoutingOp.WELD
        assert hints[0].work_center == "F400"
        assert hints[0].note_text == "WELD PER AWS D1.1"

    def test_specs_sharing_an_operation_collapse(self, recognizer):
        matches = recognizer.recognize("PASSIVATE PER AMS 2700 OR ASTM A967")
        assert len(matches) == 2
        hints = recognizer.to_routing_hints(matches)
        assert len(hints) == 1
        assert hints[0].operation == RoutingOp.OUTSIDE_PROCESS
        assert hints[0].note_text == "PASSIVATE PER AMS 2700"

    def test_controlled_specs_are_informational(self, recognizer):
        matches = recognizer.recognize("ITAR CONTROLLED")
        assert matches[0].category == SpecCategory.CONTROLLED
        assert recognizer.to_routing_hints(matches) == []

        notes = recognizer.to_drawing_notes(matches)
        assert notes[0].text == "ITAR: International Traffic in Arms Regulations"
        assert notes[0].category == NoteCategory.GENERAL

    def test_drawing_notes_for_routed_specs(self, recognizer):
        notes = recognizer.to_drawing_notes(recognizer.recognize("FPI PER AMS 2644"), page_number=3)
        assert notes[0].category == NoteCategory.INSPECT
        assert notes[0].page_number == 3
