from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class TransactionRow:
    """Represents a row from the document_transactions table."""

    id: int
    tx_hash: str
    doc_hash: str
    signer_pubkey: str | None = None
    proof_amount: Decimal | None = None
    explorer_url: str | None = None
    signed_at: datetime | None = None
