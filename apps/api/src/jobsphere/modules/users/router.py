"""Current user router."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jobsphere.core.auth import CurrentUser, get_current_user
from jobsphere.core.database import get_db
from jobsphere.core.storage import ResumeStorage, get_storage
from jobsphere.modules.auth.service import UserNotFoundError
from jobsphere.modules.shared import to_http_exception
from jobsphere.modules.users.repository import UserRepository
from jobsphere.modules.users.schemas import MeResponse
from jobsphere.modules.users.service import to_user_response

router = APIRouter()


@router.get("", response_model=MeResponse)
async def get_me(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: ResumeStorage = Depends(get_storage),
) -> MeResponse:
    """The signed-in user, with a fresh download link for a stored resume."""
    user = await UserRepository.get_by_id(db, current.id)
    if user is None:
        raise to_http_exception(UserNotFoundError())
    return MeResponse(user=await to_user_response(user, storage))
