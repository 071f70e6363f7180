"""
Service Errors

Every service-layer failure carries a caller-visible message, a stable
error code and the HTTP status a router should answer with. Component
errors subclass one of the category classes below.
"""

from fastapi import HTTPException


class ServiceError(Exception):
    """Base exception for service errors."""

    status_code = 400

    def __init__(self, message: str, error_code: str, status_code: int | None = None):
        self.message = message
        self.error_code = error_code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationServiceError(ServiceError):
    """Missing or malformed input. No side effects have happened."""

    status_code = 400


class UnauthorizedError(ServiceError):
    """Bad credentials or missing session."""

    status_code = 401


class ForbiddenError(ServiceError):
    """Ownership or role violation."""

    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    """Duplicate email, duplicate application or profile-type clash."""

    status_code = 409


class TransientInfraError(ServiceError):
    """A mandatory infrastructure dependency failed."""

    status_code = 503


def to_http_exception(e: ServiceError) -> HTTPException:
    """Convert a service error to an HTTPException with a structured body."""
    return HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    )
