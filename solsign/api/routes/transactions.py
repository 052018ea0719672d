from typing import Any

from fastapi import APIRouter, Depends

from solsign.api.container import Container
from solsign.api.dependencies import get_container
from solsign.api.errors import BadRequestError
from solsign.api.schemas import SaveTransactionRequest, TransactionOut
from solsign.logging.logger import Log
from solsign.signing.exceptions import TransactionNotFoundError

router = APIRouter(tags=["transactions"])


@router.post("/save-transaction")
def save_transaction(
    body: SaveTransactionRequest,
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    if not body.tx_hash or not body.doc_hash:
        raise BadRequestError("Missing required fields")

    explorer_url = body.explorer_url or container.settings.explorer_url(body.tx_hash)
    row = container.transaction_repo.save(
        tx_hash=body.tx_hash,
        doc_hash=body.doc_hash,
        signer_pubkey=body.signer_pubkey,
        proof_amount=body.ssign_amount,
        explorer_url=explorer_url,
    )
    Log.info(f"Transaction {row.tx_hash} saved for document {row.doc_hash}")
    return {
        "success": True,
        "message": "Transaction saved successfully",
        "transactionId": row.id,
    }


@router.get("/transactions")
def list_transactions(container: Container = Depends(get_container)) -> dict[str, Any]:
    rows = container.transaction_repo.list_all()
    return {
        "success": True,
        "count": len(rows),
        "transactions": [
            TransactionOut.from_row(row).model_dump(mode="json", by_alias=True) for row in rows
        ],
    }


@router.get("/transaction/{tx_hash}")
def get_transaction(
    tx_hash: str, container: Container = Depends(get_container)
) -> dict[str, Any]:
    row = container.transaction_repo.find_by_hash(tx_hash)
    if row is None:
        raise TransactionNotFoundError("Transaction not found")
    return {
        "success": True,
        "transaction": TransactionOut.from_row(row).model_dump(mode="json", by_alias=True),
    }
