"""
Email Verification Codes

Six-digit, single-use codes proving ownership of an email address.
Only the SHA-256 hash of a code is stored, together with its expiry.

Failures are distinguished by exception class for logging and tests, but
all of them show the caller the same message.
"""

import hashlib
import logging
import secrets
from datetime import UTC, datetime, timedelta

from jobsphere.core.config import settings
from jobsphere.modules.shared import ValidationServiceError
from jobsphere.modules.users.models import User

logger = logging.getLogger(__name__)

CODE_DIGITS = 6
_CODE_SPACE = 10**CODE_DIGITS

INVALID_CODE_MESSAGE = "Invalid or expired verification code."


class VerificationCodeError(ValidationServiceError):
    """Base class for rejected verification codes."""

    def __init__(self, error_code: str):
        super().__init__(message=INVALID_CODE_MESSAGE, error_code=error_code)


class CodeMissingError(VerificationCodeError):
    """No code is outstanding for this account."""

    def __init__(self):
        super().__init__("CODE_MISSING")


class CodeExpiredError(VerificationCodeError):
    def __init__(self):
        super().__init__("CODE_EXPIRED")


class CodeMismatchError(VerificationCodeError):
    def __init__(self):
        super().__init__("CODE_MISMATCH")


def generate_code() -> str:
    """Return a uniformly random, zero-padded six-digit code."""
    return f"{secrets.randbelow(_CODE_SPACE):0{CODE_DIGITS}d}"


def hash_code(code: str) -> str:
    """
    Hash a code for storage.

    Args:
        code: The plain text code

    Returns:
        Hex-encoded SHA-256 hash of the code
    """
    return hashlib.sha256(code.encode()).hexdigest()


def code_expiry(now: datetime | None = None) -> datetime:
    """Expiry for a code issued at `now` (defaults to the current UTC time)."""
    now = now or datetime.now(UTC)
    return now + timedelta(minutes=settings.verification_code_ttl_minutes)


def issue_code(user: User, now: datetime | None = None) -> str:
    """
    Generate a new code and store its hash and expiry on the user.

    Any previously issued code stops working.

    Returns:
        The plain text code, to be emailed
    """
    code = generate_code()
    user.email_verification_code_hash = hash_code(code)
    user.email_verification_expires_at = code_expiry(now)
    return code


def clear_code(user: User) -> None:
    user.email_verification_code_hash = None
    user.email_verification_expires_at = None


def validate_code(user: User, submitted: str, now: datetime | None = None) -> None:
    """
    Check a submitted code against the one stored on the user.

    On success the stored code is cleared so it cannot be used twice.
    On failure the user is left untouched.

    Raises:
        CodeMissingError: If no code is outstanding
        CodeExpiredError: If the stored code has expired
        CodeMismatchError: If the code does not match
    """
    stored_hash = user.email_verification_code_hash
    expires_at = user.email_verification_expires_at

    if not stored_hash or expires_at is None:
        logger.warning(f"Verification failed for user {user.id}: no code outstanding")
        raise CodeMissingError()

    now = now or datetime.now(UTC)
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    if expires_at <= now:
        logger.warning(f"Verification failed for user {user.id}: code expired")
        raise CodeExpiredError()

    if not secrets.compare_digest(hash_code(submitted.strip()), stored_hash):
        logger.warning(f"Verification failed for user {user.id}: code mismatch")
        raise CodeMismatchError()

    clear_code(user)
