"""
Index of analyzed drawing pages for one package scan.

Pages are grouped by normalized part number (trimmed, upper case); pages with
no readable part number go to unmatched_pages. The index is the only state
that spans pages, and it is scoped to a single scan.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..models.drawing import BomEntry, DrawingData, DrawingPageInfo


def normalize_part_number(part_number: Optional[str]) -> str:
    return (part_number or "").strip().upper()


@dataclass
class DrawingPackageIndex:
    """Part number to pages map plus scan bookkeeping."""
    scanned_files: List[str] = field(default_factory=list)
    total_pages: int = 0
    pages_by_part_number: Dict[str, List[DrawingPageInfo]] = field(default_factory=dict)
    unmatched_pages: List[DrawingPageInfo] = field(default_factory=list)
    all_bom_entries: List[BomEntry] = field(default_factory=list)

    @property
    def matched_pages(self) -> int:
        return sum(len(pages) for pages in self.pages_by_part_number.values())

    @property
    def unique_part_numbers(self) -> int:
        return len(self.pages_by_part_number)

    @property
    def summary(self) -> str:
        return (
            f"{len(self.scanned_files)} PDF(s), {self.total_pages} pages, "
            f"{self.unique_part_numbers} part numbers found, "
            f"{len(self.unmatched_pages)} unmatched pages"
        )

    def add_page(self, page: DrawingPageInfo) -> None:
        """File a page under its part number, or as unmatched, and collect its BOM rows."""
        key = normalize_part_number(page.part_number)
        if key:
            self.pages_by_part_number.setdefault(key, []).append(page)
        else:
            self.unmatched_pages.append(page)
        self.all_bom_entries.extend(page.bom_entries)

    def find_pages(self, part_number: Optional[str]) -> List[DrawingPageInfo]:
        """
        Pages for a part number.

        Tries an exact match on the normalized key first, then containment in
        either direction ("12345" finds "12345-01" and vice versa).

        Returns:
            Ordered pages, or an empty list for a blank query or no match
        """
        query = normalize_part_number(part_number)
        if not query:
            return []

        if query in self.pages_by_part_number:
            return self.pages_by_part_number[query]

        for key, pages in self.pages_by_part_number.items():
            if query in key or key in query:
                return pages

        return []

    def build_drawing_data(self, part_number: Optional[str]) -> Optional[DrawingData]:
        """
        Merge every page for a part number into one DrawingData.

        Identity fields come from the first page that supplies each one.
        Notes, GD&T callouts, routing hints and spec matches are
        deduplicated across sheets; BOM rows are concatenated.

        Returns:
            DrawingData, or None when no page matches
        """
        pages = self.find_pages(part_number)
        if not pages:
            return None

        primary = pages[0]
        data = DrawingData(
            part_number=primary.part_number,
            title_block=primary.title_block,
            source_pdf_path=primary.pdf_path,
            page_count=len(pages),
            is_assembly_level=any(p.is_assembly_level for p in pages),
            overall_confidence=primary.confidence,
        )

        for name in ("description", "material", "revision", "finish"):
            for page in pages:
                value = getattr(page.title_block, name)
                if value:
                    setattr(data, name, value)
                    break

        seen_notes = set()
        seen_gdt = set()
        seen_hints = set()
        seen_specs = set()
        for page in pages:
            for note in page.notes:
                key = note.text.upper()
                if key not in seen_notes:
                    seen_notes.add(key)
                    data.notes.append(note)

            for callout in page.gdt_callouts:
                key = (callout.gdt_type, round(callout.tolerance_value, 5))
                if key not in seen_gdt:
                    seen_gdt.add(key)
                    data.gdt_callouts.append(callout)

            for hint in page.routing_hints:
                key = (hint.operation, hint.note_text.upper())
                if key not in seen_hints:
                    seen_hints.add(key)
                    data.routing_hints.append(hint)

            for spec in page.spec_matches:
                if spec.spec_id not in seen_specs:
                    seen_specs.add(spec.spec_id)
                    data.spec_matches.append(spec)

            if page.tolerance_result is not None:
                data.tolerance_results.append(page.tolerance_result)
            if page.fabrication_result is not None:
                data.fabrication_results.append(page.fabrication_result)
            data.bom_entries.extend(page.bom_entries)

        return data
