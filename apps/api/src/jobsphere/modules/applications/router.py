"""
Applications Router

Endpoints:
- POST /jobs/{job_id}/apply - Student applies to an approved job
- GET /student/applications - Student's own applications
- GET /company/applications - Applications to the company's jobs
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from jobsphere.core.auth import CurrentUser, require_roles
from jobsphere.core.database import get_db
from jobsphere.core.storage import ResumeStorage, get_storage
from jobsphere.modules.applications import service
from jobsphere.modules.applications.schemas import (
    ApplicationResponse,
    ApplyRequest,
    CompanyApplicationListResponse,
    StudentApplicationListResponse,
)
from jobsphere.modules.shared import ServiceError, to_http_exception
from jobsphere.modules.users.models import UserRole

logger = logging.getLogger(__name__)

router = APIRouter()

require_student = require_roles(UserRole.STUDENT)
require_company = require_roles(UserRole.COMPANY)


@router.post(
    "/jobs/{job_id}/apply",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def apply_to_job(
    job_id: UUID,
    data: ApplyRequest | None = None,
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    """
    Apply to a job.

    Raises:
        HTTPException 404: Job not found or not approved, or no student profile
        HTTPException 409: Already applied
    """
    cover_letter = data.cover_letter if data is not None else None
    try:
        application = await service.apply(db, user.id, job_id, cover_letter)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return ApplicationResponse(application=application)


@router.get("/student/applications", response_model=StudentApplicationListResponse)
async def list_student_applications(
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> StudentApplicationListResponse:
    try:
        applications = await service.list_student_applications(db, user.id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return StudentApplicationListResponse(applications=applications)


@router.get("/company/applications", response_model=CompanyApplicationListResponse)
async def list_company_applications(
    user: CurrentUser = Depends(require_company),
    db: AsyncSession = Depends(get_db),
    storage: ResumeStorage = Depends(get_storage),
) -> CompanyApplicationListResponse:
    try:
        applications = await service.list_company_applications(db, user.id, storage)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return CompanyApplicationListResponse(applications=applications)
