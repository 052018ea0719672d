"""Verification code generation and checks."""

import re
import secrets
from datetime import datetime, timedelta

CODE_MIN = 100000
CODE_MAX = 999999

_CODE_PATTERN = re.compile(r"^[0-9]{6}$")


def generate_code() -> str:
    """Return a uniformly random six-digit code in [100000, 999999]."""
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


def is_well_formed(code: str | None) -> bool:
    return code is not None and _CODE_PATTERN.fullmatch(code) is not None


def code_expiry(issued_at: datetime, ttl_minutes: int) -> datetime:
    return issued_at + timedelta(minutes=ttl_minutes)


def is_expired(expires_at: datetime | None, now: datetime) -> bool:
    """A code is valid up to and including its expiry instant."""
    return expires_at is None or now > expires_at


def codes_match(expected: str | None, submitted: str) -> bool:
    if expected is None:
        return False
    return secrets.compare_digest(expected.encode(), submitted.encode())
