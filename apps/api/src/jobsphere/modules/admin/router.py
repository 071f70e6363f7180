"""
Admin Router

Every endpoint requires an ADMIN session.

Endpoints:
- GET /admin/overview - Dashboard counters
- GET /admin/users - All users
- PATCH /admin/users/{id} - Approve, verify, re-role or reset password
- DELETE /admin/users/{id} - Delete a user and everything it owns
- GET /admin/jobs - All jobs with application counts
- PATCH /admin/jobs/{id} - Set a job's approval
- DELETE /admin/jobs/{id} - Delete a job and its applications
- GET /admin/applications - All applications
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jobsphere.core.auth import CurrentUser, get_current_admin_user
from jobsphere.core.database import get_db
from jobsphere.core.storage import ResumeStorage, get_storage
from jobsphere.modules.admin import service
from jobsphere.modules.admin.schemas import (
    AdminJobApproval,
    AdminUserResponse,
    AdminUserUpdate,
    OverviewResponse,
    UserListResponse,
)
from jobsphere.modules.applications import service as application_service
from jobsphere.modules.applications.schemas import AdminApplicationListResponse
from jobsphere.modules.jobs import service as job_service
from jobsphere.modules.jobs.cache import ListingCache, get_listing_cache
from jobsphere.modules.jobs.schemas import JobResponse, JobWithCountListResponse, MessageResponse
from jobsphere.modules.shared import ServiceError, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_admin_user)])


@router.get("/overview", response_model=OverviewResponse)
async def get_overview(db: AsyncSession = Depends(get_db)) -> OverviewResponse:
    return OverviewResponse(stats=await service.get_overview(db))


@router.get("/users", response_model=UserListResponse)
async def list_users(
    db: AsyncSession = Depends(get_db),
    storage: ResumeStorage = Depends(get_storage),
) -> UserListResponse:
    return UserListResponse(users=await service.list_users(db, storage))


@router.patch("/users/{user_id}", response_model=AdminUserResponse)
async def update_user(
    user_id: UUID,
    data: AdminUserUpdate,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
    storage: ResumeStorage = Depends(get_storage),
) -> AdminUserResponse:
    """
    Update a user's role, approval, verification or password.

    Raises:
        HTTPException 403: Primary admin protection or restricted ADMIN role
        HTTPException 404: User not found
        HTTPException 409: Role conflicts with an existing profile
    """
    try:
        user = await service.admin_update_user(db, user_id, data, storage)
    except ServiceError as e:
        logger.warning(f"Admin {admin.id} update of user {user_id} rejected: {e.error_code}")
        raise to_http_exception(e) from e
    return AdminUserResponse(user=user)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
    cache: ListingCache = Depends(get_listing_cache),
) -> MessageResponse:
    try:
        await service.admin_delete_user(db, cache, user_id)
    except ServiceError as e:
        logger.warning(f"Admin {admin.id} delete of user {user_id} rejected: {e.error_code}")
        raise to_http_exception(e) from e
    return MessageResponse(message="User deleted.")


@router.get("/jobs", response_model=JobWithCountListResponse)
async def list_jobs(db: AsyncSession = Depends(get_db)) -> JobWithCountListResponse:
    return JobWithCountListResponse(jobs=await job_service.admin_list_jobs(db))


@router.patch("/jobs/{job_id}", response_model=JobResponse)
async def set_job_approval(
    job_id: UUID,
    data: AdminJobApproval,
    db: AsyncSession = Depends(get_db),
    cache: ListingCache = Depends(get_listing_cache),
) -> JobResponse:
    try:
        job = await job_service.set_job_approval(db, cache, job_id, data.is_approved)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return JobResponse(job=job)


@router.delete("/jobs/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: UUID,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
    cache: ListingCache = Depends(get_listing_cache),
) -> MessageResponse:
    try:
        await job_service.delete_job(db, cache, job_id, admin)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return MessageResponse(message="Job deleted.")


@router.get("/applications", response_model=AdminApplicationListResponse)
async def list_applications(
    db: AsyncSession = Depends(get_db),
    storage: ResumeStorage = Depends(get_storage),
) -> AdminApplicationListResponse:
    applications = await application_service.admin_list_applications(db, storage)
    return AdminApplicationListResponse(applications=applications)
