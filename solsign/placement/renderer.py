from enum import Enum

import pymupdf

from solsign.logging.logger import Log
from solsign.placement.exceptions import RendererNotReadyError
from solsign.placement.geometry import Size
from solsign.placement.models import RenderedPage


class RendererState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class PageRenderer:
    """Renders page previews of one loaded PDF with PyMuPDF.

    Pages are rasterized lazily on first request and cached until another
    document is loaded.
    """

    def __init__(self, scale: float = 1.2) -> None:
        if scale <= 0:
            raise ValueError(f"Preview scale must be positive, got {scale}")
        self.scale = scale
        self.state = RendererState.IDLE
        self.error: str | None = None
        self._doc: pymupdf.Document | None = None
        self._cache: dict[int, RenderedPage] = {}

    @property
    def page_count(self) -> int:
        self._require_ready()
        assert self._doc is not None
        return self._doc.page_count

    def load(self, pdf_bytes: bytes) -> int:
        """Load a document and return its page count.

        A failed load leaves the renderer in the error state; the exception
        propagates to the caller.
        """
        self.close()
        self.state = RendererState.LOADING
        try:
            doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            self.state = RendererState.ERROR
            self.error = str(exc)
            Log.error(f"Preview load failed: {exc}")
            raise
        self._doc = doc
        self.state = RendererState.READY
        Log.info(f"Preview loaded: {doc.page_count} pages at scale {self.scale}")
        return doc.page_count

    def render(self, page_number: int) -> RenderedPage:
        self._require_ready()
        assert self._doc is not None
        cached = self._cache.get(page_number)
        if cached is not None:
            return cached

        if not 1 <= page_number <= self._doc.page_count:
            raise IndexError(
                f"Page {page_number} is outside 1..{self._doc.page_count}"
            )
        page = self._doc[page_number - 1]
        pixmap = page.get_pixmap(matrix=pymupdf.Matrix(self.scale, self.scale))
        rendered = RenderedPage(
            page_number=page_number,
            scale=self.scale,
            pdf_size=Size(page.rect.width, page.rect.height),
            image_png=pixmap.tobytes("png"),
        )
        self._cache[page_number] = rendered
        return rendered

    def close(self) -> None:
        if self._doc is not None:
            self._doc.close()
        self._doc = None
        self._cache.clear()
        self.error = None
        self.state = RendererState.IDLE

    def _require_ready(self) -> None:
        if self.state is not RendererState.READY:
            raise RendererNotReadyError(
                f"Renderer is '{self.state.value}', no document is ready"
            )
