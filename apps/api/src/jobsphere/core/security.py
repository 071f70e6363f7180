"""
Security Utilities

Password hashing (bcrypt) and session credential handling (JWT).
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from jobsphere.core.config import settings

logger = logging.getLogger(__name__)

# bcrypt only considers the first 72 bytes of a secret
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """
    Hash a password with bcrypt.

    Args:
        password: Plain text password

    Returns:
        bcrypt hash string
    """
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """
    Verify a password against its bcrypt hash.

    Returns False for malformed hashes instead of raising.
    """
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except (ValueError, TypeError) as e:
        logger.warning(f"Password verification failed on malformed hash: {e}")
        return False


def create_access_token(
    subject: str,
    additional_claims: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed session token.

    Args:
        subject: User ID stored in the `sub` claim
        additional_claims: Extra claims (role, email, name)
        expires_delta: Validity window (defaults to the configured 7 days)

    Returns:
        Encoded JWT
    """
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(days=settings.access_token_expire_days))
    to_encode: dict[str, Any] = {
        "sub": subject,
        "type": "access",
        "iat": now,
        "exp": expire,
    }
    if additional_claims:
        to_encode.update(additional_claims)
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Decode and validate a session token.

    Returns:
        The claims, or None if the signature or expiry is invalid
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.debug(f"Token decode failed: {e}")
        return None
