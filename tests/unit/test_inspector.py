from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from solsign.pdf import composer
from solsign.pdf.base import BasePdfExtractor
from solsign.pdf.exceptions import ProofNotFoundError
from solsign.pdf.inspector import ProofInspector, parse_proof_text
from solsign.pdf.pdfplumber_adapter import PdfPlumberAdapter
from solsign.pdf.pymupdf_adapter import PyMuPdfAdapter
from solsign.signing.digest import document_hash
from solsign.signing.models import ANONYMOUS_SIGNER, DigitalProof


def _extractor(pages: list[str]) -> MagicMock:
    extractor = MagicMock(spec=BasePdfExtractor)
    extractor.extract_pages.return_value = pages
    return extractor


class TestParseProofText:
    def test_maps_known_labels(self) -> None:
        fields = parse_proof_text(
            "SolSign Verification Page\n"
            "Document hash: abc123\n"
            "Signer: anonymous\n"
            "Unrelated: value\n"
            "Transaction: 5Ht3sig\n"
        )

        assert fields == {
            "document_hash": "abc123",
            "signer_identity": "anonymous",
            "transaction_reference": "5Ht3sig",
        }

    def test_first_occurrence_wins(self) -> None:
        fields = parse_proof_text("Document hash: first\nDocument hash: second")
        assert fields["document_hash"] == "first"


class TestProofInspector:
    def test_reads_mocked_page(self) -> None:
        page = (
            f"{composer.VERIFICATION_TITLE}\n"
            "Document hash: abc123\n"
            "Signed at: 2025-03-01T09:30:00+00:00\n"
            "Proof amount: 1\n"
        )

        proof = ProofInspector(_extractor(["page one", page])).inspect(b"%PDF")

        assert proof.document_hash == "abc123"
        assert proof.signer_identity == ANONYMOUS_SIGNER
        assert proof.signed_at == datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)
        assert proof.proof_amount == Decimal("1")

    def test_unparseable_values_are_dropped(self) -> None:
        page = (
            f"{composer.VERIFICATION_TITLE}\n"
            "Document hash: abc123\n"
            "Signed at: yesterday\n"
            "Proof amount: lots\n"
        )

        proof = ProofInspector(_extractor([page])).inspect(b"%PDF")

        assert proof.signed_at is None
        assert proof.proof_amount is None

    def test_missing_verification_page(self) -> None:
        with pytest.raises(ProofNotFoundError, match="no verification page"):
            ProofInspector(_extractor(["Hello PDF World"])).inspect(b"%PDF")

    def test_missing_hash(self) -> None:
        with pytest.raises(ProofNotFoundError, match="no document hash"):
            ProofInspector(_extractor([composer.VERIFICATION_TITLE])).inspect(b"%PDF")

    @pytest.mark.parametrize("adapter_cls", [PdfPlumberAdapter, PyMuPdfAdapter])
    def test_reads_composed_document(
        self, adapter_cls: type[BasePdfExtractor], sample_pdf_bytes: bytes
    ) -> None:
        original = DigitalProof(
            document_hash=document_hash(sample_pdf_bytes),
            signer_identity="alice_01",
            transaction_reference="5Ht3sig",
            proof_amount=Decimal("1"),
        )
        signed = composer.compose(
            sample_pdf_bytes,
            [],
            original,
            verification_url="https://explorer.solana.com/tx/5Ht3sig?cluster=devnet",
            scale=1.2,
        )

        proof = ProofInspector(adapter_cls()).inspect(signed)

        assert proof.document_hash == original.document_hash
        assert proof.signer_identity == "alice_01"
        assert proof.transaction_reference == "5Ht3sig"
        assert proof.proof_amount == Decimal("1")
