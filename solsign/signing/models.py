from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

ANONYMOUS_SIGNER = "anonymous"


@dataclass(frozen=True)
class DigitalProof:
    """Proof fields printed on the verification page of an exported document."""

    document_hash: str
    signer_identity: str = ANONYMOUS_SIGNER
    signed_at: datetime | None = None
    transaction_reference: str | None = None
    proof_amount: Decimal | None = None

    def summary_lines(self) -> list[tuple[str, str]]:
        """(label, value) pairs for every field that is present."""
        lines = [("Document hash", self.document_hash)]
        if self.signer_identity:
            lines.append(("Signer", self.signer_identity))
        if self.signed_at is not None:
            lines.append(("Signed at", self.signed_at.isoformat()))
        if self.transaction_reference:
            lines.append(("Transaction", self.transaction_reference))
        if self.proof_amount is not None:
            lines.append(("Proof amount", f"{self.proof_amount:f}"))
        return lines
