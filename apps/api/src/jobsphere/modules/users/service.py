"""
User Presentation

Builds the public view of a user, resolving stored resume keys into
time-limited download links.
"""

import logging
import re

from jobsphere.core.storage import ResumeStorage
from jobsphere.modules.users.models import User
from jobsphere.modules.users.schemas import UserResponse

logger = logging.getLogger(__name__)

_HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)


def looks_like_url(value: str | None) -> bool:
    return bool(value) and bool(_HTTP_URL.match(value))


async def resolve_resume_url(value: str | None, storage: ResumeStorage) -> str | None:
    """
    Turn a stored resume reference into something a browser can open.

    External URLs pass through. Storage keys become presigned URLs; when
    the store cannot sign, the key is returned unchanged.
    """
    if not value or looks_like_url(value):
        return value
    signed = await storage.signed_url(value)
    return signed or value


async def to_user_response(user: User, storage: ResumeStorage) -> UserResponse:
    """Serialize a user for API responses."""
    response = UserResponse.model_validate(user)
    if response.student_profile is not None:
        response.student_profile.resume_url = await resolve_resume_url(
            response.student_profile.resume_url, storage
        )
    return response
