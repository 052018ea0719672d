import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from solsign.logging.logger import Log
from solsign.signing.digest import document_hash
from solsign.signing.exceptions import (
    AlreadySubmittedError,
    HashAlreadyComputedError,
    SubmissionInProgressError,
)
from solsign.signing.models import ANONYMOUS_SIGNER, DigitalProof


class SubmissionState(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    COMPLETED = "completed"


class SigningSession:
    """State of one uploaded document between hashing and proof recording.

    The digest is taken once per upload. At most one submission may be in
    flight, and none is accepted after one completed.
    """

    def __init__(self, signer_identity: str | None = None) -> None:
        self._signer = signer_identity or ANONYMOUS_SIGNER
        self._lock = threading.Lock()
        self._pdf_bytes: bytes | None = None
        self._proof: DigitalProof | None = None
        self.state = SubmissionState.IDLE

    @property
    def proof(self) -> DigitalProof | None:
        return self._proof

    @property
    def pdf_bytes(self) -> bytes | None:
        return self._pdf_bytes

    def load_document(self, pdf_bytes: bytes) -> str:
        """Bind an upload and compute its digest.

        Raises:
            HashAlreadyComputedError: if a document is already bound.
        """
        with self._lock:
            if self._proof is not None:
                raise HashAlreadyComputedError(
                    "Document hash already computed for this upload"
                )
            self._pdf_bytes = pdf_bytes
            self._proof = DigitalProof(
                document_hash=document_hash(pdf_bytes),
                signer_identity=self._signer,
            )
            return self._proof.document_hash

    def submit(
        self,
        commit: Callable[[DigitalProof], tuple[str, Decimal | None]],
    ) -> DigitalProof:
        """Run ``commit`` once and record its transaction reference.

        ``commit`` receives the proof and returns ``(reference, amount)``.
        On failure the session returns to idle so the user may retry.
        """
        with self._lock:
            if self._proof is None:
                raise ValueError("No document loaded")
            if self.state is SubmissionState.IN_FLIGHT:
                raise SubmissionInProgressError("A submission is already in progress")
            if self.state is SubmissionState.COMPLETED:
                raise AlreadySubmittedError("Document already submitted")
            self.state = SubmissionState.IN_FLIGHT
            proof = self._proof

        try:
            reference, amount = commit(proof)
        except Exception:
            with self._lock:
                self.state = SubmissionState.IDLE
            raise

        with self._lock:
            self._proof = replace(
                proof,
                transaction_reference=reference,
                proof_amount=amount,
                signed_at=datetime.now(timezone.utc),
            )
            self.state = SubmissionState.COMPLETED
        Log.info(f"Document {proof.document_hash} committed in {reference}")
        return self._proof

    def reset(self) -> None:
        """Forget the current upload, e.g. when the user picks another file."""
        with self._lock:
            if self.state is SubmissionState.IN_FLIGHT:
                raise SubmissionInProgressError("A submission is already in progress")
            self._pdf_bytes = None
            self._proof = None
            self.state = SubmissionState.IDLE
