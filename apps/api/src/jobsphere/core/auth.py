"""
Authentication and Authorization Module

FastAPI dependencies that validate the session token and enforce roles.
Token signing and decoding live in security.py.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jobsphere.core.security import decode_token
from jobsphere.modules.users.models import UserRole

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer token for authentication",
)


@dataclass
class CurrentUser:
    """
    Represents an authenticated user, populated from token claims.

    Attributes:
        id: User's unique identifier (UUID)
        email: User's email address
        role: User's role
        name: User's display name
    """

    id: UUID
    email: str
    role: UserRole
    name: str | None = None

    def __str__(self) -> str:
        return f"CurrentUser(id={self.id}, email={self.email}, role={self.role.value})"


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str) -> CurrentUser:
    """
    Validate a session token and extract its claims.

    Raises:
        HTTPException 401: If the token is invalid, expired or malformed
    """
    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    if payload.get("type", "access") != "access":
        logger.warning(f"Invalid token type: {payload.get('type')}")
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    try:
        user_id_str = payload.get("sub")
        if not user_id_str:
            raise ValueError("Missing 'sub' claim in token")

        return CurrentUser(
            id=UUID(user_id_str),
            email=payload.get("email", ""),
            role=UserRole(payload.get("role", "")),
            name=payload.get("name"),
        )
    except (ValueError, KeyError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> CurrentUser:
    """
    FastAPI dependency returning the authenticated user.

    Raises:
        HTTPException 401: If the token is missing, invalid, or expired
    """
    if credentials is None:
        raise _unauthorized("AUTHENTICATION_REQUIRED", "Authentication required.")

    user = _user_from_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id} ({user.role.value})")
    return user


def require_roles(*roles: UserRole) -> Callable:
    """
    Build a dependency that only admits the given roles.

    Usage:
        @router.post("/jobs")
        async def create_job(user: CurrentUser = Depends(require_roles(UserRole.COMPANY))):
            ...

    Raises:
        HTTPException 403: If the user's role is not allowed
    """

    async def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            logger.warning(
                f"Access denied: user {user.id} has role '{user.role.value}', "
                f"requires one of {[r.value for r in roles]}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": "FORBIDDEN",
                    "message": "You do not have permission to perform this action.",
                },
            )
        return user

    return dependency


get_current_admin_user = require_roles(UserRole.ADMIN)


__all__ = [
    "CurrentUser",
    "get_current_user",
    "get_current_admin_user",
    "require_roles",
]
