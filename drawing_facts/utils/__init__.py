"""Utility modules (PDF text, JSON files)."""

from .io import load_json_robust, save_json

# PDF helpers import PyMuPDF, so they load on first use
_PDF_NAMES = {
    "extract_pages": ("pdf_text", "extract_pages"),
    "get_pdf_page_count": ("pdf_text", "get_pdf_page_count"),
    "render_page_image": ("pdf_text", "render_page_image"),
}


def __getattr__(name):
    """Lazy import for the PyMuPDF helpers."""
    if name in _PDF_NAMES:
        module_name, attr_name = _PDF_NAMES[name]
        import importlib
        mod = importlib.import_module(f".{module_name}", __package__)
        return getattr(mod, attr_name)
    raise AttributeError(f"module 'drawing_facts.utils' has no attribute {name!r}")


__all__ = [
    # PDF text (lazy)
    "extract_pages",
    "get_pdf_page_count",
    "render_page_image",
    # JSON (eager)
    "load_json_robust",
    "save_json",
]
