"""
Shared module - Base model and service error taxonomy.
"""

from jobsphere.modules.shared.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServiceError,
    TransientInfraError,
    UnauthorizedError,
    ValidationServiceError,
    to_http_exception,
)
from jobsphere.modules.shared.models import BaseModel

__all__ = [
    "BaseModel",
    "ServiceError",
    "ValidationServiceError",
    "NotFoundError",
    "ConflictError",
    "ForbiddenError",
    "UnauthorizedError",
    "TransientInfraError",
    "to_http_exception",
]
