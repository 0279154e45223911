"""
Reconciliation of CAD model facts with drawing facts.

The engine compares overlapping fields, fills model gaps from the drawing,
sequences routing suggestions and proposes a file rename. Disagreements are
recorded as conflicts with a recommendation; nothing is overwritten.

Usage:
    from drawing_facts.reconciliation import ReconciliationEngine, PartData

    result = ReconciliationEngine().reconcile(PartData(material="304 SS"), drawing_data)
    print(result.summary)
"""

import logging
import re
from pathlib import Path, PurePath, PureWindowsPath
from typing import Optional

from ..classifier.calibration import cross_validate_confidence
from ..comparison.matcher import file_stem
from ..config import Config, default_config
from ..models.drawing import DrawingData
from ..standards.iso_tolerance import MM_PER_INCH
from .models import (
    ConflictResolution,
    ConflictSeverity,
    DataConflict,
    GapFill,
    PartData,
    ReconciliationResult,
    RenameSuggestion,
)
from .routing import RoutingNoteInterpreter

logger = logging.getLogger(__name__)


GAP_FILL_SOURCE = "PDF title block"
GAP_FILL_CONFIDENCE = {
    "part_number": 0.85,
    "description": 0.80,
    "revision": 0.90,
    "material": 0.85,
    "finish": 0.75,
}
RENAME_CONFIDENCE = 0.85
CAD_DRAWING_EXTENSION = ".slddrw"

_MATERIAL_ABBREVIATIONS = (
    ("STAINLESS STEEL", "SS"),
    ("CARBON STEEL", "CS"),
    ("ALUMINUM", "AL"),
)
_ALLOY_CORE = re.compile(r"\b(A\d{2,4}|\d{3,5}L?)\b")
_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:")


def _blank(value: Optional[str]) -> bool:
    return not (value and value.strip())


def cad_path(file_path: str) -> PurePath:
    """Path object for a CAD file; Windows paths keep their directory on any OS."""
    if "\\" in file_path or _WINDOWS_DRIVE.match(file_path):
        return PureWindowsPath(file_path)
    return Path(file_path)


def normalize_material(material: Optional[str]) -> str:
    """Upper-case, abbreviate common families and collapse whitespace."""
    if not material:
        return ""
    value = " ".join(material.upper().split())
    for long_name, short in _MATERIAL_ABBREVIATIONS:
        value = value.replace(long_name, short)
    return " ".join(value.split())


def alloy_core(material: str) -> Optional[str]:
    """Core alloy designation ("304", "6061", "A36"), if any."""
    match = _ALLOY_CORE.search(material or "")
    return match.group(1) if match else None


def materials_equivalent(a: str, b: str) -> bool:
    """Normalized materials name the same alloy ("304" vs "304 SS")."""
    core_a, core_b = alloy_core(a), alloy_core(b)
    if core_a and core_b:
        return core_a == core_b
    return a in b or b in a


def sanitize_filename(name: str) -> str:
    value = _INVALID_FILENAME_CHARS.sub("_", name).replace(" ", "_")
    while "__" in value:
        value = value.replace("__", "_")
    return value.strip("_").upper()


class ReconciliationEngine:
    """Merges CAD PartData with drawing DrawingData."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or default_config
        self.routing_interpreter = RoutingNoteInterpreter()

    def reconcile(self, model: Optional[PartData], drawing: Optional[DrawingData]) -> ReconciliationResult:
        """
        Reconcile one part.

        Args:
            model: CAD facts (None treats every drawing field as a gap fill)
            drawing: Drawing facts (None yields an empty result)

        Returns:
            ReconciliationResult
        """
        result = ReconciliationResult()
        if drawing is None:
            return result

        if model is not None:
            self._compare_material(model, drawing, result)
            self._compare_thickness(model, drawing, result)
            self._compare_description(model, drawing, result)
            self._compare_part_number(model, drawing, result)

        model = model or PartData()
        self._fill_gap(result, "part_number", model.part_number, drawing.part_number)
        self._fill_gap(result, "description", model.description, drawing.description)
        self._fill_gap(result, "revision", model.revision, drawing.revision)
        self._fill_gap(result, "material", model.material, drawing.material)
        self._fill_gap(result, "finish", None, drawing.finish)

        result.routing_suggestions = self.routing_interpreter.interpret(drawing.routing_hints)

        if model.file_path and drawing.part_number:
            result.rename = self.suggest_rename(model.file_path, drawing)

        logger.debug("Reconciled %s: %s", drawing.part_number, result.summary)
        return result

    def _drawing_confidence(self, drawing: DrawingData, name: str) -> float:
        title_block = drawing.title_block
        if title_block is not None and hasattr(title_block, f"{name}_confidence"):
            return getattr(title_block, f"{name}_confidence")
        return drawing.overall_confidence

    def _confirm(self, result: ReconciliationResult, name: str, message: str,
                 model: PartData, drawing: DrawingData) -> None:
        result.confirmations.append(message)
        result.field_confidence[name] = cross_validate_confidence(
            self._drawing_confidence(drawing, name), True, model.confidence, True, self.config
        )

    def _conflict(self, result: ReconciliationResult, conflict: DataConflict, drawing: DrawingData) -> None:
        result.conflicts.append(conflict)
        result.field_confidence[conflict.field] = (
            self._drawing_confidence(drawing, conflict.field) * self.config.single_source_factor
        )

    def _compare_material(self, model: PartData, drawing: DrawingData, result: ReconciliationResult) -> None:
        if _blank(model.material) or _blank(drawing.material):
            return

        model_mat = normalize_material(model.material)
        drawing_mat = normalize_material(drawing.material)
        if model_mat == drawing_mat:
            self._confirm(result, "material", f"Material matches: {model.material}", model, drawing)
            return
        if materials_equivalent(model_mat, drawing_mat):
            self._confirm(
                result, "material", f"Material equivalent: {model.material} ≈ {drawing.material}", model, drawing
            )
            return

        self._conflict(result, DataConflict(
            field="material",
            model_value=model.material,
            drawing_value=drawing.material,
            severity=ConflictSeverity.HIGH,
            recommendation=ConflictResolution.HUMAN_REQUIRED,
            reason="3D model material does not match drawing material",
        ), drawing)

    def _compare_thickness(self, model: PartData, drawing: DrawingData, result: ReconciliationResult) -> None:
        if model.thickness_m <= 0 or drawing.thickness_inches is None:
            return

        model_in = model.thickness_m * 1000.0 / MM_PER_INCH
        drawing_in = drawing.thickness_inches
        if abs(model_in - drawing_in) <= self.config.thickness_tolerance_inches:
            self._confirm(result, "thickness", f"Thickness matches: {model_in:.3f}\"", model, drawing)
            return

        self._conflict(result, DataConflict(
            field="thickness",
            model_value=f"{model_in:.4f}\"",
            drawing_value=f"{drawing_in:.4f}\"",
            severity=ConflictSeverity.HIGH,
            recommendation=ConflictResolution.USE_MODEL,
            reason="3D model geometry is measured; drawing value may be nominal",
        ), drawing)

    def _compare_description(self, model: PartData, drawing: DrawingData, result: ReconciliationResult) -> None:
        if _blank(model.description) or _blank(drawing.description):
            return

        if model.description.strip().upper() == drawing.description.strip().upper():
            self._confirm(result, "description", f"Description matches: {model.description}", model, drawing)
            return

        self._conflict(result, DataConflict(
            field="description",
            model_value=model.description,
            drawing_value=drawing.description,
            severity=ConflictSeverity.LOW,
            recommendation=ConflictResolution.USE_DRAWING,
            reason="Drawing description is typically more complete than the model property",
        ), drawing)

    def _compare_part_number(self, model: PartData, drawing: DrawingData, result: ReconciliationResult) -> None:
        if _blank(model.part_number) or _blank(drawing.part_number):
            return

        if model.part_number.strip().upper() == drawing.part_number.strip().upper():
            self._confirm(result, "part_number", f"Part number matches: {model.part_number}", model, drawing)
            return

        self._conflict(result, DataConflict(
            field="part_number",
            model_value=model.part_number,
            drawing_value=drawing.part_number,
            severity=ConflictSeverity.MEDIUM,
            recommendation=ConflictResolution.USE_DRAWING,
            reason="Drawing part number is the official reference; model property may be outdated",
        ), drawing)

    def _fill_gap(self, result: ReconciliationResult, name: str,
                  model_value: Optional[str], drawing_value: Optional[str]) -> None:
        if not _blank(model_value) or _blank(drawing_value):
            return

        confidence = GAP_FILL_CONFIDENCE[name]
        result.gap_fills.append(GapFill(
            field=name,
            value=drawing_value,
            source=GAP_FILL_SOURCE,
            confidence=confidence,
            auto_apply_threshold=self.config.gap_fill_auto_apply,
        ))
        result.field_confidence.setdefault(name, confidence)

    def suggest_rename(self, file_path: str, drawing: DrawingData) -> Optional[RenameSuggestion]:
        """
        Propose renaming the CAD file after the drawing part number.

        The new stem is the part number, plus the description when it is
        short enough. A companion CAD drawing file next to the model is
        renamed along with it.

        Returns:
            RenameSuggestion, or None when the file name already matches
        """
        if not file_path or not drawing.part_number:
            return None

        path = cad_path(file_path)
        current = file_stem(file_path)
        drawing_pn = sanitize_filename(drawing.part_number)
        if current.upper() == drawing_pn:
            return None

        new_stem = drawing_pn
        if drawing.description:
            safe_desc = sanitize_filename(drawing.description)
            if len(safe_desc) <= self.config.rename_max_description_length:
                new_stem = f"{drawing_pn}_{safe_desc}"

        suggestion = RenameSuggestion(
            old_path=str(path),
            new_path=str(path.with_name(new_stem + path.suffix)),
            reason=f"Drawing part number '{drawing.part_number}' differs from filename '{current}'",
            confidence=RENAME_CONFIDENCE,
        )

        old_drawing = path.with_name(current + CAD_DRAWING_EXTENSION)
        if Path(str(old_drawing)).exists():
            suggestion.old_drawing_path = str(old_drawing)
            suggestion.new_drawing_path = str(path.with_name(new_stem + CAD_DRAWING_EXTENSION))

        return suggestion
