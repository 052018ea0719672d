from dataclasses import dataclass

from solsign.placement.exceptions import OrphanedElementError
from solsign.placement.geometry import PdfRect, Size, map_to_pdf_space
from solsign.placement.models import PlacedElement


@dataclass(frozen=True)
class ElementPlacement:
    """An element plus the preview size (scale 1) it was placed against.

    Without ``preview_size`` the preview is assumed to match the PDF page.
    """

    element: PlacedElement
    preview_size: Size | None = None


def place_elements(
    placements: list[ElementPlacement], pdf_sizes: list[Size], scale: float
) -> list[tuple[PlacedElement, PdfRect]]:
    """Map every element into the PDF space of its target page.

    Raises:
        OrphanedElementError: if an element targets a page the document lacks.
    """
    mapped = []
    for placement in placements:
        element = placement.element
        if element.page_index > len(pdf_sizes):
            raise OrphanedElementError(
                f"Element {element.id} targets page {element.page_index} "
                f"but the document has {len(pdf_sizes)} pages"
            )
        pdf_size = pdf_sizes[element.page_index - 1]
        preview_size = placement.preview_size or pdf_size
        mapped.append(
            (
                element,
                map_to_pdf_space(element.position, element.size, preview_size, pdf_size, scale),
            )
        )
    return mapped
