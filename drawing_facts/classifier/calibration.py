"""
Confidence calibration for extracted drawing facts.

Two concerns live here:
- Cross-validation of a field found by the text extractors and/or an
  external vision provider (both found boosts, one found discounts).
- Empirical precision tables for patterns and title block fields, kept as
  JSON and updated as reviewed results come back.

Usage:
    from drawing_facts.classifier.calibration import ConfidenceCalibrator

    calibrator = ConfidenceCalibrator.load("calibration.json")
    calibrator.record_pattern_result("PART_NUMBER", was_correct=True)
    calibrator.save("calibration.json")
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config import Config, default_config
from ..utils.io import load_json_robust, save_json

logger = logging.getLogger(__name__)


@dataclass
class CoverageDensityResult:
    """Advisory result of a coverage density check; never auto-corrected."""
    suspicious: bool = False
    reasons: List[str] = field(default_factory=list)

    @property
    def reason(self) -> Optional[str]:
        return "; ".join(self.reasons) if self.reasons else None

    def to_dict(self) -> Dict[str, Any]:
        return {"suspicious": self.suspicious, "reasons": list(self.reasons)}


def cross_validate_confidence(
    text_confidence: float,
    text_found: bool,
    vision_confidence: float,
    vision_found: bool,
    config: Optional[Config] = None,
) -> float:
    """
    Combine text and vision confidence for one field.

    Args:
        text_confidence: Confidence from the text extractors
        text_found: Text extractors found the field
        vision_confidence: Confidence reported by the vision provider
        vision_found: Vision provider found the field

    Returns:
        Confidence in [0, 1]
    """
    config = config or default_config
    if text_found and vision_found:
        combined = max(text_confidence, vision_confidence) * config.agreement_boost
    elif text_found:
        combined = text_confidence * config.single_source_factor
    elif vision_found:
        combined = vision_confidence * config.single_source_factor
    else:
        return 0.0
    return min(1.0, max(0.0, combined))


def check_coverage_density(
    page_count: int,
    note_count: int,
    gdt_count: int,
    has_tolerances: bool,
    has_title_block: bool = False,
) -> CoverageDensityResult:
    """Flag documents whose extracted content is implausibly thin for their size."""
    result = CoverageDensityResult()

    if page_count >= 3 and note_count <= 1:
        result.reasons.append(
            f"Multi-page drawing ({page_count} pages) has only {note_count} note(s), possible false negatives"
        )

    if page_count >= 2 and note_count == 0 and gdt_count == 0:
        tolerances = "" if has_tolerances else ", zero tolerances"
        result.reasons.append(
            f"Multi-page drawing ({page_count} pages) has zero notes{tolerances} and zero GD&T, "
            "likely extraction failure"
        )

    if has_title_block and note_count == 0 and page_count >= 1:
        result.reasons.append(
            "Title block populated but zero manufacturing notes extracted, notes section may have been missed"
        )

    result.suspicious = bool(result.reasons)
    return result


class ConfidenceCalibrator:
    """Empirical pattern precision and field accuracy, persisted as JSON."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or default_config
        self.pattern_precision: Dict[str, float] = {}
        self.field_accuracy: Dict[str, float] = {}

    @classmethod
    def load(cls, path: Union[str, Path], config: Optional[Config] = None) -> "ConfidenceCalibrator":
        """Load calibration data; a missing or unreadable file yields an empty calibrator."""
        calibrator = cls(config)
        data, err = load_json_robust(path)
        if err:
            logger.warning("Calibration data not loaded: %s", err)
            return calibrator

        for key, value in (data.get("patternPrecision") or {}).items():
            try:
                calibrator.pattern_precision[key] = float(value)
            except (TypeError, ValueError):
                logger.warning("Skipping calibration entry %r: %r", key, value)
        for key, value in (data.get("fieldAccuracy") or {}).items():
            try:
                calibrator.field_accuracy[key] = float(value)
            except (TypeError, ValueError):
                logger.warning("Skipping calibration entry %r: %r", key, value)

        logger.debug(
            "Loaded %d pattern and %d field calibration entries from %s",
            len(calibrator.pattern_precision), len(calibrator.field_accuracy), path,
        )
        return calibrator

    def save(self, path: Union[str, Path]) -> Path:
        return save_json(self.to_dict(), path)

    def get_pattern_confidence(self, pattern_key: str, default_confidence: float) -> float:
        return self.pattern_precision.get(pattern_key, default_confidence)

    def get_field_confidence(self, field_name: str, default_confidence: float) -> float:
        return self.field_accuracy.get(field_name, default_confidence)

    def update_field_accuracy(self, field_precision: Dict[str, float]) -> None:
        """Replace field accuracy values with measured precision (e.g. from a benchmark run)."""
        for name, precision in field_precision.items():
            self.field_accuracy[name] = precision

    def record_pattern_result(self, pattern_key: str, was_correct: bool) -> float:
        """
        Record one reviewed match for a pattern and recompute its precision.

        Counters are stored alongside the precision as "<key>_true" and
        "<key>_total" so they survive a save/load cycle.

        Returns:
            The updated precision
        """
        true_key = pattern_key + "_true"
        total_key = pattern_key + "_total"

        total = self.pattern_precision.get(total_key, 0.0) + 1
        correct = self.pattern_precision.get(true_key, 0.0) + (1 if was_correct else 0)
        self.pattern_precision[total_key] = total
        self.pattern_precision[true_key] = correct

        precision = correct / total
        self.pattern_precision[pattern_key] = precision
        return precision

    def cross_validate_confidence(
        self, text_confidence: float, text_found: bool, vision_confidence: float, vision_found: bool
    ) -> float:
        return cross_validate_confidence(
            text_confidence, text_found, vision_confidence, vision_found, self.config
        )

    def check_coverage_density(
        self, page_count: int, note_count: int, gdt_count: int, has_tolerances: bool,
        has_title_block: bool = False,
    ) -> CoverageDensityResult:
        return check_coverage_density(page_count, note_count, gdt_count, has_tolerances, has_title_block)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "patternPrecision": dict(self.pattern_precision),
            "fieldAccuracy": dict(self.field_accuracy),
            "lastUpdated": datetime.now(timezone.utc).isoformat(),
        }
