import re

from solsign.verification import codes
from solsign.verification.exceptions import VerificationValidationError
from solsign.verification.models import ProfileSubmission

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]{3,20}$")
PHONE_PATTERN = re.compile(r"^\+?[1-9][0-9]{0,15}$")
PHONE_SEPARATORS = re.compile(r"[\s\-()]")

EMAIL_MAX_LENGTH = 100

WALLET_MIN_LENGTH = 32
WALLET_MAX_LENGTH = 44


def validate_wallet_address(wallet_address: str | None) -> str:
    """Return the trimmed address or raise on a length outside 32-44."""
    address = (wallet_address or "").strip()
    if not WALLET_MIN_LENGTH <= len(address) <= WALLET_MAX_LENGTH:
        raise VerificationValidationError("Invalid wallet address format")
    return address


def validate_code(code: str | None) -> str:
    code = (code or "").strip()
    if not codes.is_well_formed(code):
        raise VerificationValidationError("Verification code must be exactly 6 digits")
    return code


def validate_submission(
    *,
    username: str | None,
    email: str | None,
    wallet_address: str | None,
    consent_given: bool | None,
    phone: str | None = None,
) -> ProfileSubmission:
    """Check and sanitize profile verification data.

    Raises:
        VerificationValidationError: with a message safe to show the user.
    """
    if not username or not email or not wallet_address or not consent_given:
        raise VerificationValidationError(
            "Missing required fields: username, email, walletAddress, "
            "and consentGiven are required"
        )

    email = email.strip().lower()
    if len(email) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(email):
        raise VerificationValidationError("Invalid email format")

    username = username.strip()
    if not USERNAME_PATTERN.match(username):
        raise VerificationValidationError(
            "Username must be 3-20 characters long and contain only "
            "letters, numbers, and underscores"
        )

    wallet_address = validate_wallet_address(wallet_address)

    cleaned_phone: str | None = None
    if phone and phone.strip():
        cleaned_phone = PHONE_SEPARATORS.sub("", phone)
        if not PHONE_PATTERN.match(cleaned_phone):
            raise VerificationValidationError("Invalid phone number format")

    return ProfileSubmission(
        username=username,
        email=email,
        wallet_address=wallet_address,
        consent_given=True,
        phone=cleaned_phone,
    )
