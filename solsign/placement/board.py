import uuid
from dataclasses import replace

from solsign.placement.exceptions import ElementNotFoundError, NoRenderedPageError
from solsign.placement.geometry import PdfRect, Point, Size
from solsign.placement.mapping import ElementPlacement, place_elements
from solsign.placement.models import (
    DEFAULT_SIZES,
    MIN_SIZE,
    ElementKind,
    PlacedElement,
    RenderedPage,
)

DEFAULT_ANCHOR_X = 50
DEFAULT_ANCHOR_BOTTOM_OFFSET = 100


class ElementBoard:
    """Element list, selection and rendered-page cache for one loaded document.

    Mutations are applied in call order; the last write to an element wins.
    """

    def __init__(self, total_pages: int = 0) -> None:
        self._total_pages = total_pages
        self._elements: dict[str, PlacedElement] = {}
        self._pages: dict[int, RenderedPage] = {}
        self.selected_id: str | None = None

    @property
    def total_pages(self) -> int:
        return self._total_pages

    @property
    def elements(self) -> list[PlacedElement]:
        return list(self._elements.values())

    def get(self, element_id: str) -> PlacedElement:
        element = self._elements.get(element_id)
        if element is None:
            raise ElementNotFoundError(f"No element with id '{element_id}'")
        return element

    def register_page(self, page: RenderedPage) -> None:
        if not 1 <= page.page_number <= self._total_pages:
            raise NoRenderedPageError(
                f"Page {page.page_number} is outside 1..{self._total_pages}"
            )
        self._pages[page.page_number] = page

    def rendered_page(self, page_number: int) -> RenderedPage | None:
        return self._pages.get(page_number)

    def add_element(
        self, kind: ElementKind, payload: bytes | str, page_number: int
    ) -> PlacedElement:
        """Insert an element near the bottom-left of a rendered page and select it.

        Raises:
            NoRenderedPageError: if ``page_number`` has not been rendered yet.
        """
        page = self._pages.get(page_number)
        if page is None:
            raise NoRenderedPageError(
                f"Page {page_number} has not been rendered; cannot anchor element"
            )

        raster = page.raster_size
        element = PlacedElement(
            id=uuid.uuid4().hex,
            kind=kind,
            payload=payload,
            position=Point(
                DEFAULT_ANCHOR_X,
                max(0.0, raster.height - DEFAULT_ANCHOR_BOTTOM_OFFSET),
            ),
            size=DEFAULT_SIZES[kind],
            page_index=page_number,
        )
        self._elements[element.id] = element
        self.selected_id = element.id
        return element

    def update_position(self, element_id: str, dx: float, dy: float) -> PlacedElement:
        """Move by a raster delta. Only the lower bound (0) is clamped."""
        element = self.get(element_id)
        moved = replace(
            element,
            position=Point(
                max(0.0, element.position.x + dx),
                max(0.0, element.position.y + dy),
            ),
        )
        self._elements[element_id] = moved
        return moved

    def update_size(
        self,
        element_id: str,
        delta_left: float,
        delta_top: float,
        new_width: float,
        new_height: float,
    ) -> PlacedElement:
        """Resize from any edge; the opposite edge stays where it was."""
        element = self.get(element_id)
        width = max(MIN_SIZE.width, new_width)
        height = max(MIN_SIZE.height, new_height)

        x, y = element.position.x, element.position.y
        if delta_left:
            x = element.position.x + element.size.width - width
        if delta_top:
            y = element.position.y + element.size.height - height

        resized = replace(element, position=Point(x, y), size=Size(width, height))
        self._elements[element_id] = resized
        return resized

    def remove_element(self, element_id: str) -> None:
        self.get(element_id)
        del self._elements[element_id]
        if self.selected_id == element_id:
            self.selected_id = None

    def select(self, element_id: str | None) -> None:
        if element_id is not None:
            self.get(element_id)
        self.selected_id = element_id

    def replace_document(self, total_pages: int) -> None:
        """Bind a new document; all elements and cached pages are discarded."""
        self._total_pages = total_pages
        self._elements.clear()
        self._pages.clear()
        self.selected_id = None

    def placements(self) -> list[ElementPlacement]:
        """Elements paired with the preview size of the page they sit on."""
        result = []
        for element in self._elements.values():
            page = self._pages.get(element.page_index)
            result.append(
                ElementPlacement(element, page.pdf_size if page is not None else None)
            )
        return result

    def to_pdf_rects(
        self, pdf_sizes: list[Size], scale: float
    ) -> list[tuple[PlacedElement, PdfRect]]:
        """Map every element onto its target page of a document with ``pdf_sizes``.

        Raises:
            OrphanedElementError: if an element's page is beyond the document.
        """
        return place_elements(self.placements(), pdf_sizes, scale)
