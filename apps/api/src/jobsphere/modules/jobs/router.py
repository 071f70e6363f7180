"""Jobs router."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from jobsphere.core.auth import CurrentUser, require_roles
from jobsphere.core.database import get_db
from jobsphere.modules.jobs import service
from jobsphere.modules.jobs.cache import ListingCache, get_listing_cache
from jobsphere.modules.jobs.schemas import (
    JobCreate,
    JobListResponse,
    JobResponse,
    JobUpdate,
    JobWithCountListResponse,
    MessageResponse,
)
from jobsphere.modules.shared import ServiceError, to_http_exception
from jobsphere.modules.users.models import UserRole

logger = logging.getLogger(__name__)

router = APIRouter()

require_company = require_roles(UserRole.COMPANY)
require_company_or_admin = require_roles(UserRole.COMPANY, UserRole.ADMIN)


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.exception(f"Error {action}: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )


@router.get("", response_model=JobListResponse)
async def search_jobs(
    type: str | None = Query(None, description="JOB or INTERNSHIP"),
    location: str | None = Query(None, max_length=200),
    search: str | None = Query(None, max_length=200),
    db: AsyncSession = Depends(get_db),
    cache: ListingCache = Depends(get_listing_cache),
) -> JobListResponse:
    """Search approved jobs. Results are cached for a short time."""
    try:
        jobs = await service.search_jobs(db, cache, job_type=type, location=location, search=search)
    except Exception as e:
        raise _internal_error("searching jobs", e) from e
    return JobListResponse(jobs=jobs)


@router.get("/mine", response_model=JobWithCountListResponse)
async def list_my_jobs(
    user: CurrentUser = Depends(require_company),
    db: AsyncSession = Depends(get_db),
) -> JobWithCountListResponse:
    """The company's own postings with application counts."""
    try:
        jobs = await service.list_company_jobs(db, user.id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return JobWithCountListResponse(jobs=jobs)


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> JobResponse:
    try:
        job = await service.get_job_detail(db, job_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return JobResponse(job=job)


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    data: JobCreate,
    user: CurrentUser = Depends(require_company),
    db: AsyncSession = Depends(get_db),
    cache: ListingCache = Depends(get_listing_cache),
) -> JobResponse:
    """
    Publish a posting.

    Raises:
        HTTPException 404: Company profile not found
        HTTPException 422: Missing or blank title, location or description
    """
    try:
        job = await service.create_job(db, cache, user.id, data)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return JobResponse(job=job)


@router.patch("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: UUID,
    data: JobUpdate,
    user: CurrentUser = Depends(require_company_or_admin),
    db: AsyncSession = Depends(get_db),
    cache: ListingCache = Depends(get_listing_cache),
) -> JobResponse:
    try:
        job = await service.update_job(db, cache, job_id, user, data)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return JobResponse(job=job)


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: UUID,
    user: CurrentUser = Depends(require_company_or_admin),
    db: AsyncSession = Depends(get_db),
    cache: ListingCache = Depends(get_listing_cache),
) -> MessageResponse:
    """Delete a posting together with its applications."""
    try:
        await service.delete_job(db, cache, job_id, user)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return MessageResponse(message="Job deleted.")

