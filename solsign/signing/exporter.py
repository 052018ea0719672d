from dataclasses import dataclass
from datetime import datetime, timezone
from urllib.parse import urlencode

from solsign.config.settings import Settings
from solsign.pdf import composer
from solsign.pdf.base import BasePdfExtractor
from solsign.pdf.inspector import ProofInspector
from solsign.placement.geometry import Point, Size
from solsign.placement.mapping import ElementPlacement
from solsign.placement.models import ElementKind, PlacedElement
from solsign.signing.digest import document_hash
from solsign.signing.models import ANONYMOUS_SIGNER, DigitalProof

DEFAULT_PLACEMENT = {"x": 40.0, "y": 40.0, "width": 160.0, "height": 60.0}


@dataclass(frozen=True)
class SignedDocument:
    pdf_bytes: bytes
    sha256: str
    page_number: int
    placement: dict[str, float]


class DocumentExporter:
    """Composes signed PDFs and reads their proofs back.

    Pipeline: hash original -> map elements -> draw -> append verification page.
    """

    def __init__(self, settings: Settings, extractor: BasePdfExtractor) -> None:
        self._settings = settings
        self._inspector = ProofInspector(extractor)

    def verification_url(self, proof: DigitalProof) -> str:
        """Link encoded in the QR code: the explorer when a transaction exists."""
        if proof.transaction_reference:
            return self._settings.explorer_url(proof.transaction_reference)
        query = urlencode({"hash": proof.document_hash})
        return f"{self._settings.verification_base_url}?{query}"

    def sign_document(
        self,
        pdf_bytes: bytes,
        *,
        page_number: int,
        placement: dict[str, float],
        signature_image: bytes | None = None,
        signature_text: str | None = None,
        signer_identity: str | None = None,
    ) -> SignedDocument:
        """Place one signature at a raster-space rect and export.

        ``placement`` keys missing from the request fall back to the
        default 160x60 box at (40, 40).
        """
        rect = {**DEFAULT_PLACEMENT, **placement}
        if signature_image is not None:
            kind, payload = ElementKind.SIGNATURE_IMAGE, signature_image
        else:
            kind, payload = ElementKind.FREE_TEXT, signature_text or ""

        element = PlacedElement(
            id="signature",
            kind=kind,
            payload=payload,
            position=Point(rect["x"], rect["y"]),
            size=Size(rect["width"], rect["height"]),
            page_index=page_number,
        )
        proof = DigitalProof(
            document_hash=document_hash(pdf_bytes),
            signer_identity=signer_identity or ANONYMOUS_SIGNER,
            signed_at=datetime.now(timezone.utc),
        )
        output = self.export(pdf_bytes, [ElementPlacement(element)], proof)
        return SignedDocument(
            pdf_bytes=output,
            sha256=proof.document_hash,
            page_number=page_number,
            placement=rect,
        )

    def export(
        self,
        pdf_bytes: bytes,
        placements: list[ElementPlacement],
        proof: DigitalProof,
        qr_png: bytes | None = None,
    ) -> bytes:
        """Compose the signed PDF; without ``qr_png`` a QR code is generated."""
        return composer.compose(
            pdf_bytes,
            placements,
            proof,
            verification_url=self.verification_url(proof),
            scale=self._settings.preview_scale,
            qr_png=qr_png,
        )

    def inspect(self, pdf_bytes: bytes) -> DigitalProof:
        return self._inspector.inspect(pdf_bytes)
