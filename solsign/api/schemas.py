from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from solsign.database.models import TransactionRow
from solsign.placement.models import ElementKind
from solsign.signing.models import DigitalProof
from solsign.verification.models import VerificationOutcome, VerificationRecord

USER_ID_MAX_LENGTH = 64


class CamelModel(BaseModel):
    """Wire models use camelCase keys; Python code uses snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VerifyRequest(CamelModel):
    username: str | None = None
    email: str | None = None
    phone: str | None = None
    wallet_address: str | None = None
    consent_given: bool | None = None


class VerifyCodeRequest(CamelModel):
    verification_code: str | None = None
    wallet_address: str | None = None


class WalletRequest(CamelModel):
    wallet_address: str | None = None


class VerifyResponse(CamelModel):
    message: str
    verification_id: int
    status: str


class RewardResponse(CamelModel):
    message: str
    status: str
    reward_amount: float
    transaction_signature: str
    explorer_url: str

    @classmethod
    def from_outcome(cls, outcome: VerificationOutcome, message: str) -> "RewardResponse":
        return cls(
            message=message,
            status=outcome.status,
            reward_amount=outcome.reward_amount,
            transaction_signature=outcome.transaction_signature,
            explorer_url=outcome.explorer_url,
        )


class StatusResponse(CamelModel):
    username: str
    email: str
    status: str
    reward_granted: bool
    transaction_signature: str | None = None
    explorer_url: str | None = None
    code_expires_at: datetime | None = None
    submitted_at: datetime | None = None


class VerificationSummary(CamelModel):
    id: int
    username: str
    email: str
    phone_number: str | None = None
    wallet_address: str
    status: str
    reward_granted: bool
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record: VerificationRecord) -> "VerificationSummary":
        return cls(
            id=record.id,
            username=record.username,
            email=record.email,
            phone_number=record.phone,
            wallet_address=record.identity,
            status=record.phase.value,
            reward_granted=record.reward_granted,
            created_at=record.created_at,
        )


class VerificationListResponse(CamelModel):
    verifications: list[VerificationSummary]
    total: int


class LivenessCompleteRequest(CamelModel):
    verified: Any = None
    snapshot_hash: str | None = Field(default=None, max_length=128)
    timestamp: datetime | None = None
    user_id: str | None = Field(default=None, max_length=USER_ID_MAX_LENGTH)


class LivenessStatusResponse(CamelModel):
    verified: bool
    last_verified_at: datetime | None = None
    snapshot_hash: str | None = None


class SaveTransactionRequest(CamelModel):
    tx_hash: str | None = Field(default=None, max_length=128)
    doc_hash: str | None = Field(default=None, max_length=128)
    signer_pubkey: str | None = Field(default=None, max_length=44)
    ssign_amount: Decimal | None = None
    signed_at: str | None = None
    explorer_url: str | None = None


class TransactionOut(CamelModel):
    id: int
    tx_hash: str
    doc_hash: str
    signer_pubkey: str | None = None
    ssign_amount: Decimal | None = None
    explorer_url: str | None = None
    signed_at: datetime | None = None

    @classmethod
    def from_row(cls, row: TransactionRow) -> "TransactionOut":
        return cls(
            id=row.id,
            tx_hash=row.tx_hash,
            doc_hash=row.doc_hash,
            signer_pubkey=row.signer_pubkey,
            ssign_amount=row.proof_amount,
            explorer_url=row.explorer_url,
            signed_at=row.signed_at,
        )


class ElementIn(CamelModel):
    """One placed element of the export form, geometry in raster pixels."""

    id: str | None = None
    kind: ElementKind = Field(alias="type")
    payload: str
    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)
    width: float = Field(gt=0, allow_inf_nan=False)
    height: float = Field(gt=0, allow_inf_nan=False)
    page_index: int = Field(ge=1)
    preview_width: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    preview_height: float | None = Field(default=None, gt=0, allow_inf_nan=False)


class DigitalProofIn(CamelModel):
    document_hash: str | None = None
    signer_identity: str | None = None
    signed_at: datetime | None = None
    transaction_reference: str | None = None
    proof_amount: Decimal | None = None


class ProofOut(CamelModel):
    document_hash: str
    signer_identity: str
    signed_at: datetime | None = None
    transaction_reference: str | None = None
    proof_amount: Decimal | None = None

    @classmethod
    def from_proof(cls, proof: DigitalProof) -> "ProofOut":
        return cls(
            document_hash=proof.document_hash,
            signer_identity=proof.signer_identity,
            signed_at=proof.signed_at,
            transaction_reference=proof.transaction_reference,
            proof_amount=proof.proof_amount,
        )


class SignDocumentResponse(CamelModel):
    signed_pdf_base64: str
    sha256: str
    meta: dict[str, Any]
