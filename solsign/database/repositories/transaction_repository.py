from decimal import Decimal
from typing import Any

from psycopg import errors as pg_errors
from psycopg.rows import dict_row

from solsign.database.connection import get_connection
from solsign.database.models import TransactionRow
from solsign.signing.exceptions import DuplicateTransactionError

_COLUMNS = "id, tx_hash, doc_hash, signer_pubkey, proof_amount, explorer_url, signed_at"


def _to_row(row: dict[str, Any]) -> TransactionRow:
    return TransactionRow(
        id=row["id"],
        tx_hash=row["tx_hash"],
        doc_hash=row["doc_hash"],
        signer_pubkey=row["signer_pubkey"],
        proof_amount=row["proof_amount"],
        explorer_url=row["explorer_url"],
        signed_at=row["signed_at"],
    )


class TransactionRepository:
    """Database operations for the document_transactions table."""

    def save(
        self,
        tx_hash: str,
        doc_hash: str,
        signer_pubkey: str | None,
        proof_amount: Decimal | None,
        explorer_url: str | None,
    ) -> TransactionRow:
        """Record the on-chain proof of a signed document.

        Raises:
            DuplicateTransactionError: if ``tx_hash`` is already recorded.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO document_transactions
                        (tx_hash, doc_hash, signer_pubkey, proof_amount, explorer_url)
                        VALUES (%s, %s, %s, %s, %s)
                        RETURNING {_COLUMNS}
                        """,
                        (tx_hash, doc_hash, signer_pubkey, proof_amount, explorer_url),
                    )
                    row = cur.fetchone()
                conn.commit()
        except pg_errors.UniqueViolation as exc:
            raise DuplicateTransactionError(
                f"Transaction {tx_hash} is already recorded"
            ) from exc

        if row is None:
            raise RuntimeError("INSERT ... RETURNING produced no row")
        return _to_row(row)

    def list_all(self) -> list[TransactionRow]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM document_transactions ORDER BY signed_at DESC"
                )
                rows = cur.fetchall()
        return [_to_row(row) for row in rows]

    def find_by_hash(self, tx_hash: str) -> TransactionRow | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM document_transactions WHERE tx_hash = %s",
                    (tx_hash,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return _to_row(row)
