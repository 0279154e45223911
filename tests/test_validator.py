"""Tests for domain validation of extracted drawing data."""

import pytest

from drawing_facts.extractors.validator import ExtractionValidator, IssueSeverity, ValidationIssue
from drawing_facts.models.drawing import DrawingData
from drawing_facts.models.routing import DrawingNote, NoteCategory


@pytest.fixture
def validator():
    return ExtractionValidator()


def issues_for(validator, **fields):
    return [(i.field, i.severity) for i in validator.validate(DrawingData(**fields))]


class TestPartNumber:

    def test_label_word_is_an_error(self, validator):
        data = DrawingData(part_number="SCALE 1:2")
        issues = validator.validate(data)
        assert issues[0].severity == IssueSeverity.ERROR
        assert "'SCALE'" in issues[0].message

        assert validator.validate_and_correct(data) == 1
        assert data.part_number is None

    def test_unusual_shape_is_a_warning(self, validator):
        assert issues_for(validator, part_number="NM 1234 A") == [("part_number", IssueSeverity.WARNING)]

    @pytest.mark.parametrize("part_number", ["NM-1234-A", "12345.01", "ABC/9"])
    def test_valid(self, validator, part_number):
        assert issues_for(validator, part_number=part_number) == []


class TestMaterialAndFinish:

    def test_unknown_material_warns(self, validator):
        assert issues_for(validator, material="UNOBTAINIUM") == [("material", IssueSeverity.WARNING)]

    def test_label_leak_is_cleared(self, validator):
        data = DrawingData(material="304 SS FINISH")
        assert [(i.field, i.severity) for i in validator.validate(data)] == [("material", IssueSeverity.ERROR)]
        assert validator.validate_and_correct(data) == 1
        assert data.material is None

    @pytest.mark.parametrize("material", ["A36", "304 STAINLESS STEEL", "6061-T6 AL"])
    def test_known_materials(self, validator, material):
        assert issues_for(validator, material=material) == []

    def test_unknown_finish_warns_but_is_kept(self, validator):
        data = DrawingData(finish="RED")
        assert [(i.field, i.severity) for i in validator.validate(data)] == [("finish", IssueSeverity.WARNING)]
        assert validator.validate_and_correct(data) == 0
        assert data.finish == "RED"

    def test_known_finish(self, validator):
        assert issues_for(validator, finish="POWDER COAT BLACK") == []


class TestThickness:

    @pytest.mark.parametrize("thickness, expected", [
        (-0.1, [("thickness_inches", IssueSeverity.ERROR)]),
        (0.0, [("thickness_inches", IssueSeverity.ERROR)]),
        (15.0, [("thickness_inches", IssueSeverity.WARNING)]),
        (0.125, []),
        (None, []),
    ])
    def test_rules(self, validator, thickness, expected):
        assert issues_for(validator, thickness_inches=thickness) == expected

    def test_non_positive_cleared(self, validator):
        data = DrawingData(thickness_inches=0.0)
        assert validator.validate_and_correct(data) == 1
        assert data.thickness_inches is None


class TestNotes:

    def test_number_only_notes_removed(self, validator):
        data = DrawingData(notes=[
            DrawingNote("12", NoteCategory.GENERAL),
            DrawingNote("BREAK ALL EDGES", NoteCategory.DEBURR),
            DrawingNote("OK", NoteCategory.GENERAL),
        ])
        assert [(i.field, i.severity) for i in validator.validate(data)] == [
            ("notes[0]", IssueSeverity.WARNING),
            ("notes[0]", IssueSeverity.ERROR),
            ("notes[2]", IssueSeverity.WARNING),
        ]
        assert validator.validate_and_correct(data) == 1
        assert [n.text for n in data.notes] == ["BREAK ALL EDGES", "OK"]


class TestMisc:

    def test_none_input(self, validator):
        assert validator.validate(None) == []
        assert validator.validate_and_correct(None) == 0

    def test_issue_rendering(self):
        issue = ValidationIssue("finish", "Finish does not match any known finish type", IssueSeverity.WARNING, "RED")
        assert str(issue) == "[warning] finish: Finish does not match any known finish type (was: 'RED')"
        assert issue.to_dict()["originalValue"] == "RED"
