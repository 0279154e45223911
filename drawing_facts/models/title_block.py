"""Title block identity model."""

from dataclasses import dataclass
import datetime
from typing import Any, Dict, Optional


@dataclass
class TitleBlockInfo:
    """
    Identity fields parsed from a drawing title block.

    Only part number, material, revision and description carry a
    confidence; OverallConfidence is the mean over those that are populated.
    """

    part_number: Optional[str] = None
    description: Optional[str] = None
    material: Optional[str] = None
    revision: Optional[str] = None
    finish: Optional[str] = None
    drawn_by: Optional[str] = None
    checked_by: Optional[str] = None
    date: Optional[datetime.date] = None
    date_text: Optional[str] = None
    scale: Optional[str] = None
    sheet: Optional[str] = None
    tolerance_general: Optional[str] = None

    part_number_confidence: float = 0.0
    description_confidence: float = 0.0
    material_confidence: float = 0.0
    revision_confidence: float = 0.0

    @property
    def overall_confidence(self) -> float:
        scores = [
            conf for value, conf in (
                (self.part_number, self.part_number_confidence),
                (self.material, self.material_confidence),
                (self.revision, self.revision_confidence),
                (self.description, self.description_confidence),
            )
            if value
        ]
        return sum(scores) / len(scores) if scores else 0.0

    @property
    def has_identity(self) -> bool:
        return bool(self.part_number or self.description or self.material or self.revision)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "partNumber": self.part_number,
            "description": self.description,
            "material": self.material,
            "revision": self.revision,
            "finish": self.finish,
            "drawnBy": self.drawn_by,
            "checkedBy": self.checked_by,
            "date": self.date.isoformat() if self.date else self.date_text,
            "scale": self.scale,
            "sheet": self.sheet,
            "toleranceGeneral": self.tolerance_general,
            "overallConfidence": self.overall_confidence,
        }
