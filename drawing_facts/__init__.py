"""
Drawing Facts v1.0

Text-based fact extraction from PDF engineering drawing packages.

Extractors:
- Title block: part number, description, material, revision, finish
- Notes: numbered manufacturing notes with routing hints
- Specs: industry specifications (ASTM, AWS, MIL, ...)
- GD&T: feature control frames classified by tightness
- Tolerances: general and dimension tolerances, surface finish

Classifiers:
- Fabrication: ISO 13920 / ISO 2768 shop capability, bend stackup
- Calibration: confidence cross-validation and coverage density

Package:
- Scanner/index: group pages by part number across PDFs
- Matcher: CAD components to drawing pages
- Reconciliation: CAD model facts vs drawing facts
"""

__version__ = "1.0.0"


def __getattr__(name):
    """Lazy imports so that text-only use never pulls in PyMuPDF."""

    _extractor_names = {
        "TitleBlockParser", "DrawingNoteExtractor", "SpecRecognizer",
        "GdtExtractor", "ToleranceAnalyzer", "ExtractionValidator",
    }
    _classifier_names = {
        "FabricationToleranceClassifier", "ConfidenceCalibrator",
        "cross_validate_confidence", "check_coverage_density",
    }
    _scanning_names = {
        "DrawingPackageScanner", "DrawingPackageIndex",
    }
    _comparison_names = {
        "ComponentDrawingMatcher", "ComponentInfo", "MatchMethod", "MatchResult", "MatchResults",
    }
    _reconciliation_names = {
        "ReconciliationEngine", "ReconciliationResult", "PartData", "RoutingNoteInterpreter",
    }

    if name in _extractor_names:
        from . import extractors
        return getattr(extractors, name)
    elif name in _classifier_names:
        from . import classifier
        return getattr(classifier, name)
    elif name in _scanning_names:
        from . import scanning
        return getattr(scanning, name)
    elif name in _comparison_names:
        from . import comparison
        return getattr(comparison, name)
    elif name in _reconciliation_names:
        from . import reconciliation
        return getattr(reconciliation, name)

    raise AttributeError(f"module 'drawing_facts' has no attribute {name!r}")
