from datetime import datetime
from decimal import Decimal, InvalidOperation

from solsign.logging.logger import Log
from solsign.pdf.base import BasePdfExtractor
from solsign.pdf.composer import VERIFICATION_TITLE
from solsign.pdf.exceptions import ProofNotFoundError
from solsign.signing.models import ANONYMOUS_SIGNER, DigitalProof

_LABELS = {
    "Document hash": "document_hash",
    "Signer": "signer_identity",
    "Signed at": "signed_at",
    "Transaction": "transaction_reference",
    "Proof amount": "proof_amount",
}


class ProofInspector:
    """Reads the proof fields back from the verification page of a signed PDF."""

    def __init__(self, extractor: BasePdfExtractor) -> None:
        self._extractor = extractor

    def inspect(self, pdf_bytes: bytes) -> DigitalProof:
        """Parse the last page of ``pdf_bytes``.

        Raises:
            PdfExtractionError: if the document cannot be read.
            ProofNotFoundError: if the last page is not a verification page.
        """
        pages = self._extractor.extract_pages(pdf_bytes)
        if not pages or VERIFICATION_TITLE not in pages[-1]:
            raise ProofNotFoundError("Document has no verification page")

        fields = parse_proof_text(pages[-1])
        if "document_hash" not in fields:
            raise ProofNotFoundError("Verification page carries no document hash")

        Log.info(f"Inspected proof for document {fields['document_hash']}")
        return DigitalProof(
            document_hash=fields["document_hash"],
            signer_identity=fields.get("signer_identity", ANONYMOUS_SIGNER),
            signed_at=_parse_datetime(fields.get("signed_at")),
            transaction_reference=fields.get("transaction_reference"),
            proof_amount=_parse_amount(fields.get("proof_amount")),
        )


def parse_proof_text(text: str) -> dict[str, str]:
    fields: dict[str, str] = {}
    for raw_line in text.splitlines():
        label, sep, value = raw_line.strip().partition(": ")
        if sep and label in _LABELS and value.strip():
            fields.setdefault(_LABELS[label], value.strip())
    return fields


def _parse_datetime(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        Log.warning(f"Unparseable signed-at value on verification page: {value}")
        return None


def _parse_amount(value: str | None) -> Decimal | None:
    if value is None:
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        Log.warning(f"Unparseable proof amount on verification page: {value}")
        return None
