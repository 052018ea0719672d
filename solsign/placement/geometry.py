"""Preview-raster <-> PDF point-space conversion.

Raster space: pixels of the page preview rendered at ``scale``, origin at the
top-left, y grows downwards. PDF space: points, origin at the bottom-left,
y grows upwards. ``preview_size`` is the page size the previewer reports at
scale 1; the raster canvas is ``preview_size * scale`` pixels.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    def scaled(self, factor: float) -> "Size":
        return Size(self.width * factor, self.height * factor)


@dataclass(frozen=True)
class PdfRect:
    """Rectangle in PDF points with a bottom-left origin."""

    x: float
    y: float
    width: float
    height: float

    def top_left_box(self, page_height: float) -> tuple[float, float, float, float]:
        """(x0, y0, x1, y1) for drawing APIs that use a top-left origin."""
        top = page_height - self.y - self.height
        return (self.x, top, self.x + self.width, top + self.height)


def _ratios(preview_size: Size, pdf_size: Size) -> tuple[float, float]:
    if preview_size.width <= 0 or preview_size.height <= 0:
        raise ValueError(f"Preview size must be positive, got {preview_size}")
    return pdf_size.width / preview_size.width, pdf_size.height / preview_size.height


def map_to_pdf_space(
    position: Point,
    size: Size,
    preview_size: Size,
    pdf_size: Size,
    scale: float,
) -> PdfRect:
    """Convert a raster-space box into a PDF-space rectangle."""
    if scale <= 0:
        raise ValueError(f"Preview scale must be positive, got {scale}")
    ratio_x, ratio_y = _ratios(preview_size, pdf_size)
    width = size.width / scale * ratio_x
    height = size.height / scale * ratio_y
    return PdfRect(
        x=position.x / scale * ratio_x,
        y=pdf_size.height - position.y / scale * ratio_y - height,
        width=width,
        height=height,
    )


def map_to_raster_space(
    rect: PdfRect,
    preview_size: Size,
    pdf_size: Size,
    scale: float,
) -> tuple[Point, Size]:
    """Inverse of map_to_pdf_space."""
    if scale <= 0:
        raise ValueError(f"Preview scale must be positive, got {scale}")
    ratio_x, ratio_y = _ratios(preview_size, pdf_size)
    top = pdf_size.height - rect.y - rect.height
    return (
        Point(rect.x / ratio_x * scale, top / ratio_y * scale),
        Size(rect.width / ratio_x * scale, rect.height / ratio_y * scale),
    )
