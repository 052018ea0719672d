"""Burns placed elements onto a PDF and appends the verification page."""

import pymupdf

from solsign.logging.logger import Log
from solsign.pdf.exceptions import ExportError, MalformedSourceError, QrCodeError
from solsign.pdf.qr import generate_qr_png
from solsign.placement.exceptions import OrphanedElementError
from solsign.placement.geometry import PdfRect, Size
from solsign.placement.mapping import ElementPlacement, place_elements
from solsign.placement.models import ElementKind, PlacedElement
from solsign.signing.models import DigitalProof

VERIFICATION_TITLE = "SolSign Verification Page"
QR_FALLBACK_TEXT = "QR code could not be embedded. Verify at: {url}"
SIGNATURE_PLACEHOLDER = "[signature]"

PAGE_MARGIN = 50.0
LINE_FONT_SIZE = 10.0
MIN_FONT_SIZE = 5.0
QR_SIZE = 150.0
QR_PADDING = 12.0
TEXT_COLOR = (0, 0, 0)
BORDER_COLOR = (0.2, 0.2, 0.2)


def open_source(pdf_bytes: bytes) -> pymupdf.Document:
    """Open uploaded bytes as a PDF.

    Raises:
        MalformedSourceError: if the bytes are not a loadable PDF.
    """
    try:
        doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")  # type: ignore[no-untyped-call]
    except Exception as exc:
        raise MalformedSourceError(f"Source is not a loadable PDF: {exc}") from exc
    if doc.page_count == 0:
        doc.close()
        raise MalformedSourceError("Source PDF has no pages")
    return doc


def page_sizes(doc: pymupdf.Document) -> list[Size]:
    return [Size(page.rect.width, page.rect.height) for page in doc]


def compose(
    source_pdf: bytes,
    placements: list[ElementPlacement],
    proof: DigitalProof,
    *,
    verification_url: str,
    scale: float,
    qr_png: bytes | None = None,
) -> bytes:
    """Return a new PDF with the elements drawn and a verification page appended.

    The source bytes are never modified. Either complete output is returned
    or an error is raised.

    Raises:
        MalformedSourceError: source bytes are not a PDF.
        OrphanedElementError: an element targets a missing page.
        ExportError: drawing or serialization failed.
    """
    doc = open_source(source_pdf)
    try:
        mapped = place_elements(placements, page_sizes(doc), scale)
        for element, rect in mapped:
            page = doc[element.page_index - 1]
            _draw_element(page, element, rect)

        qr_image = qr_png
        if qr_image is None:
            try:
                qr_image = generate_qr_png(verification_url)
            except QrCodeError as exc:
                Log.warning(f"QR generation failed, using text fallback: {exc}")
        _append_verification_page(doc, proof, qr_image, verification_url)

        output = doc.tobytes(garbage=3, deflate=True)
    except (MalformedSourceError, OrphanedElementError):
        raise
    except Exception as exc:
        Log.error(f"PDF export failed for {proof.document_hash}: {exc}")
        raise ExportError(f"Failed to compose signed PDF: {exc}") from exc
    finally:
        doc.close()

    Log.info(
        f"Exported {proof.document_hash}: {len(mapped)} elements, "
        f"{len(output)} bytes"
    )
    return output


def _to_fitz_rect(page: pymupdf.Page, rect: PdfRect) -> pymupdf.Rect:
    return pymupdf.Rect(*rect.top_left_box(page.rect.height))


def _fit_font_size(text: str, width: float, preferred: float, fontname: str = "helv") -> float:
    unit_width = pymupdf.get_text_length(text, fontname=fontname, fontsize=1)
    if unit_width <= 0:
        return preferred
    return max(MIN_FONT_SIZE, min(preferred, width / unit_width))


def _draw_element(page: pymupdf.Page, element: PlacedElement, rect: PdfRect) -> None:
    box = _to_fitz_rect(page, rect)
    if element.kind is ElementKind.SIGNATURE_IMAGE:
        try:
            page.insert_image(box, stream=element.payload, keep_proportion=True)
            return
        except Exception as exc:
            Log.warning(f"Signature image for {element.id} not embeddable: {exc}")
        _draw_placeholder(page, box)
        return

    text = str(element.payload)
    font_size = _fit_font_size(text, box.width, min(box.height * 0.7, 14.0))
    baseline = box.y0 + (box.height + font_size * 0.7) / 2
    page.insert_text(
        (box.x0, baseline), text, fontname="helv", fontsize=font_size, color=TEXT_COLOR
    )


def _draw_placeholder(page: pymupdf.Page, box: pymupdf.Rect) -> None:
    shape = page.new_shape()
    shape.draw_rect(box)
    shape.finish(color=BORDER_COLOR, width=0.8, dashes="[3] 0")
    shape.commit()
    font_size = _fit_font_size(SIGNATURE_PLACEHOLDER, box.width - 4, 10.0)
    page.insert_text(
        (box.x0 + 2, box.y0 + (box.height + font_size) / 2),
        SIGNATURE_PLACEHOLDER,
        fontname="helv",
        fontsize=font_size,
        color=BORDER_COLOR,
    )


def _append_verification_page(
    doc: pymupdf.Document,
    proof: DigitalProof,
    qr_png: bytes | None,
    verification_url: str,
) -> None:
    size = page_sizes(doc)[0]
    page = doc.new_page(width=size.width, height=size.height)
    text_width = size.width - 2 * PAGE_MARGIN

    y = PAGE_MARGIN + 24
    page.insert_text(
        (PAGE_MARGIN, y), VERIFICATION_TITLE, fontname="hebo", fontsize=18, color=TEXT_COLOR
    )
    y += 30

    for label, value in proof.summary_lines():
        line = f"{label}: {value}"
        font_size = _fit_font_size(line, text_width, LINE_FONT_SIZE)
        page.insert_text(
            (PAGE_MARGIN, y), line, fontname="helv", fontsize=font_size, color=TEXT_COLOR
        )
        y += LINE_FONT_SIZE + 8

    box_top = y + 10
    box = pymupdf.Rect(
        PAGE_MARGIN,
        box_top,
        PAGE_MARGIN + QR_SIZE + 2 * QR_PADDING,
        box_top + QR_SIZE + 2 * QR_PADDING,
    )
    shape = page.new_shape()
    shape.draw_rect(box)
    shape.finish(color=BORDER_COLOR, width=1.2)
    shape.commit()

    qr_rect = pymupdf.Rect(
        box.x0 + QR_PADDING, box.y0 + QR_PADDING, box.x1 - QR_PADDING, box.y1 - QR_PADDING
    )
    embedded = False
    if qr_png:
        try:
            page.insert_image(qr_rect, stream=qr_png, keep_proportion=True)
            embedded = True
        except Exception as exc:
            Log.warning(f"QR image not embeddable, using text fallback: {exc}")

    if embedded:
        caption = f"Scan to verify: {verification_url}"
    else:
        caption = QR_FALLBACK_TEXT.format(url=verification_url)
    caption_size = _fit_font_size(caption, text_width, 8.0)
    page.insert_text(
        (PAGE_MARGIN, box.y1 + 16), caption, fontname="helv", fontsize=caption_size, color=TEXT_COLOR
    )
