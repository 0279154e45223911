"""Fabrication classification and confidence calibration."""

from .fabrication import (
    FabricationToleranceClassifier,
    classify_gdt_for_fab,
    assess_bend_stackup,
)
from .calibration import (
    ConfidenceCalibrator,
    CoverageDensityResult,
    cross_validate_confidence,
    check_coverage_density,
)

__all__ = [
    "FabricationToleranceClassifier",
    "classify_gdt_for_fab",
    "assess_bend_stackup",
    "ConfidenceCalibrator",
    "CoverageDensityResult",
    "cross_validate_confidence",
    "check_coverage_density",
]
