"""
Configuration for the drawing facts analyzer.

All tunable constants are centralized here. Override by creating a Config
instance with custom values and passing it to the component.

Usage:
    from drawing_facts.config import Config, default_config

    # Use defaults
    print(default_config.shop_linear_class)  # "B"

    # Override the shop baseline for a run
    my_config = Config(shop_linear_class="C", shop_geometric_class="G")
"""

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class Config:
    """
    Central configuration for drawing analysis.

    All settings have defaults matching the shop's current estimating rules.
    Create a new instance to override any setting.
    """

    # === Shop Baseline (ISO 13920) ===
    shop_linear_class: str = "B"      # A (fine) .. D (very coarse)
    shop_geometric_class: str = "F"   # E (fine) .. H (very coarse)

    # === Title Block Confidence ===
    part_number_confidence: float = 0.85
    material_confidence: float = 0.85
    material_callout_confidence: float = 0.70  # Standalone "A36", "304 SS"
    revision_confidence: float = 0.90
    description_confidence: float = 0.80
    full_page_fallback_factor: float = 0.9     # Field found outside the title block

    # === Page Regions (fractions of page size, origin bottom-left) ===
    title_block_min_x: float = 0.45
    title_block_max_y: float = 0.35
    notes_max_x: float = 0.50
    notes_min_y: float = 0.40

    # === Extraction Confidence ===
    numbered_note_confidence: float = 0.75
    gdt_confidence: float = 0.80
    bom_row_confidence: float = 0.70
    gdt_max_tolerance_inches: float = 1.0     # Larger values are dimensions, not GD&T
    surface_finish_max: int = 1000

    # === GD&T Routing ===
    multiple_tight_gdt_threshold: int = 2

    # === Fabrication Classification (inches, total band) ===
    machining_band_inches: float = 0.020
    precision_machining_band_inches: float = 0.010
    bend_stackup_min_bends: int = 4
    bend_stackup_min_refs: int = 2

    # === Component Matching ===
    match_confidence: Dict[str, float] = field(
        default_factory=lambda: {
            "exact_part_number": 0.95,
            "file_name": 0.85,
            "bom": 0.75,
        }
    )

    # === Confidence Calibration ===
    agreement_boost: float = 1.15    # Text and vision both found the field
    single_source_factor: float = 0.85

    # === Reconciliation ===
    gap_fill_auto_apply: float = 0.85
    thickness_tolerance_inches: float = 0.005
    rename_max_description_length: int = 30

    # === Rendering (vision collaborator hand-off) ===
    render_dpi: int = 200


# Default configuration instance
default_config = Config()
