from fastapi import APIRouter, Depends, Response

from solsign.api.container import Container
from solsign.api.dependencies import get_container, verify_rate_limit
from solsign.api.schemas import (
    RewardResponse,
    StatusResponse,
    VerificationListResponse,
    VerificationSummary,
    VerifyCodeRequest,
    VerifyRequest,
    VerifyResponse,
    WalletRequest,
)
from solsign.verification.models import Phase
from solsign.verification.validation import (
    validate_code,
    validate_submission,
    validate_wallet_address,
)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.post(
    "/verify",
    status_code=201,
    dependencies=[Depends(verify_rate_limit)],
)
def verify(
    body: VerifyRequest,
    response: Response,
    container: Container = Depends(get_container),
) -> VerifyResponse:
    submission = validate_submission(
        username=body.username,
        email=body.email,
        wallet_address=body.wallet_address,
        consent_given=body.consent_given,
        phone=body.phone,
    )
    record = container.verification_service.submit(submission)
    if record.phase is Phase.CODE_SENT:
        message = "Verification code sent to your email"
    else:
        response.status_code = 202
        message = "Verification data submitted. Complete the liveness check to receive your code"
    return VerifyResponse(message=message, verification_id=record.id, status=record.phase.value)


@router.post("/verify-code", dependencies=[Depends(verify_rate_limit)])
def verify_code(
    body: VerifyCodeRequest,
    container: Container = Depends(get_container),
) -> RewardResponse:
    wallet_address = validate_wallet_address(body.wallet_address)
    code = validate_code(body.verification_code)
    outcome = container.verification_service.verify_code(wallet_address, code)
    return RewardResponse.from_outcome(outcome, "Email verified and reward granted")


@router.post("/resend-code")
def resend_code(
    body: WalletRequest,
    container: Container = Depends(get_container),
) -> dict[str, str]:
    wallet_address = validate_wallet_address(body.wallet_address)
    record = container.verification_service.resend_code(wallet_address)
    return {"message": "A new verification code was sent", "status": record.phase.value}


@router.post("/retry-reward")
def retry_reward(
    body: WalletRequest,
    container: Container = Depends(get_container),
) -> RewardResponse:
    wallet_address = validate_wallet_address(body.wallet_address)
    outcome = container.verification_service.retry_reward(wallet_address)
    return RewardResponse.from_outcome(outcome, "Reward granted")


@router.get("/status/{wallet_address}")
def status(
    wallet_address: str,
    container: Container = Depends(get_container),
) -> StatusResponse:
    record = container.verification_service.get_status(
        validate_wallet_address(wallet_address)
    )
    signature = record.reward_transaction_signature
    return StatusResponse(
        username=record.username,
        email=record.email,
        status=record.phase.value,
        reward_granted=record.reward_granted,
        transaction_signature=signature,
        explorer_url=container.settings.explorer_url(signature) if signature else None,
        code_expires_at=record.code_expires_at if record.phase is Phase.CODE_SENT else None,
        submitted_at=record.created_at,
    )


@router.get("/verifications")
def verifications(container: Container = Depends(get_container)) -> VerificationListResponse:
    records = container.verification_service.list_records()
    return VerificationListResponse(
        verifications=[VerificationSummary.from_record(record) for record in records],
        total=len(records),
    )
