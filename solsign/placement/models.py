import math
from dataclasses import dataclass, field
from enum import Enum

from solsign.placement.geometry import Point, Size


class ElementKind(str, Enum):
    SIGNATURE_IMAGE = "signature-image"
    FREE_TEXT = "free-text"
    DATE_STAMP = "date-stamp"


DEFAULT_SIZES: dict[ElementKind, Size] = {
    ElementKind.SIGNATURE_IMAGE: Size(160, 60),
    ElementKind.FREE_TEXT: Size(120, 30),
    ElementKind.DATE_STAMP: Size(100, 30),
}

MIN_SIZE = Size(40, 20)


@dataclass
class PlacedElement:
    """One annotation placed on a page preview, in raster pixels."""

    id: str
    kind: ElementKind
    payload: bytes | str
    position: Point
    size: Size
    page_index: int

    def __post_init__(self) -> None:
        if self.page_index < 1:
            raise ValueError(f"page_index is 1-based, got {self.page_index}")
        if not all(
            math.isfinite(value)
            for value in (self.position.x, self.position.y, self.size.width, self.size.height)
        ):
            raise ValueError(f"Element geometry must be finite, got {self.position}, {self.size}")
        if self.size.width <= 0 or self.size.height <= 0:
            raise ValueError(f"Element size must be positive, got {self.size}")
        if self.kind is ElementKind.SIGNATURE_IMAGE and not isinstance(self.payload, bytes):
            raise ValueError("Signature elements carry image bytes")
        if self.kind is not ElementKind.SIGNATURE_IMAGE and not isinstance(self.payload, str):
            raise ValueError(f"{self.kind.value} elements carry a string")


@dataclass(frozen=True)
class RenderedPage:
    """Raster preview of one page."""

    page_number: int
    scale: float
    pdf_size: Size
    image_png: bytes = field(repr=False)

    @property
    def raster_size(self) -> Size:
        return self.pdf_size.scaled(self.scale)
