"""
Jobs Service Layer

Business logic for job postings:

1. Public search, served through the listing cache
2. Company posting lifecycle (create, edit, delete) with ownership checks
3. Admin approval toggle

Every committed write to the jobs table invalidates the whole listing
cache after the commit. Invalidation failures are logged by the cache and
never fail the write.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from jobsphere.core.auth import CurrentUser
from jobsphere.modules.applications import repository as application_repository
from jobsphere.modules.jobs import repository
from jobsphere.modules.jobs.cache import ListingCache, build_cache_key
from jobsphere.modules.jobs.models import Job, JobType
from jobsphere.modules.jobs.schemas import JobCreate, JobListItem, JobUpdate, JobWithCountItem
from jobsphere.modules.shared import ForbiddenError, NotFoundError
from jobsphere.modules.users.accounts import (
    CompanyAccount,
    ProfileMismatchError,
    ensure_active,
    resolve_account,
)
from jobsphere.modules.users.models import UserRole
from jobsphere.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


class JobNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(message="Job not found.", error_code="JOB_NOT_FOUND")


class JobForbiddenError(ForbiddenError):
    """Raised when a company touches a job it does not own."""

    def __init__(self):
        super().__init__(
            message="You do not have permission to modify this job.",
            error_code="JOB_FORBIDDEN",
        )


class CompanyProfileNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(
            message="Company profile not found.",
            error_code="COMPANY_PROFILE_NOT_FOUND",
        )


def parse_job_type(value: str | None) -> JobType | None:
    """Parse a type filter. Unknown values mean no type filter."""
    if not value or not value.strip():
        return None
    try:
        return JobType(value.strip().upper())
    except ValueError:
        return None


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


async def get_company_account(db: AsyncSession, user_id: UUID) -> CompanyAccount:
    """
    Load the company account behind a session.

    Raises:
        CompanyProfileNotFoundError: If the user is missing or not a
            company with a profile
    """
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise CompanyProfileNotFoundError()

    try:
        account = resolve_account(user)
    except ProfileMismatchError:
        logger.warning(f"User {user_id} has an inconsistent profile; treating as no company")
        raise CompanyProfileNotFoundError() from None

    if not isinstance(account, CompanyAccount):
        raise CompanyProfileNotFoundError()
    return account


async def _get_job_for_actor(db: AsyncSession, job_id: UUID, actor: CurrentUser) -> Job:
    """Fetch a job, enforcing company ownership. Admins may touch any job."""
    job = await repository.get_by_id(db, job_id)
    if job is None:
        raise JobNotFoundError()

    if actor.role == UserRole.COMPANY:
        try:
            account = await get_company_account(db, actor.id)
        except CompanyProfileNotFoundError:
            raise JobForbiddenError() from None
        if job.company_id != account.profile.id:
            logger.warning(f"User {actor.id} denied access to job {job_id}")
            raise JobForbiddenError()
        ensure_active(account)
    elif actor.role != UserRole.ADMIN:
        raise JobForbiddenError()

    return job


async def search_jobs(
    db: AsyncSession,
    cache: ListingCache,
    job_type: str | None = None,
    location: str | None = None,
    search: str | None = None,
) -> list[dict]:
    """
    Search approved jobs, read-through the listing cache.

    Args:
        db: Database session
        cache: Listing cache
        job_type: JOB or INTERNSHIP (case-insensitive; other values ignored)
        location: Location substring
        search: Substring of title, description or company name

    Returns:
        Serialized JobListItem dicts, newest first
    """
    key = build_cache_key(job_type, location, search)

    cached = await cache.get(key)
    if cached is not None:
        return cached

    jobs = await repository.search_approved(
        db,
        job_type=parse_job_type(job_type),
        location=_clean(location),
        search=_clean(search),
    )
    items = [JobListItem.model_validate(job).model_dump(mode="json") for job in jobs]

    await cache.set(key, items)
    return items


async def get_job_detail(db: AsyncSession, job_id: UUID) -> JobListItem:
    """
    Fresh read of one approved job.

    Raises:
        JobNotFoundError: If the job does not exist or is not approved
    """
    job = await repository.get_by_id(db, job_id)
    if job is None or not job.is_approved:
        raise JobNotFoundError()
    return JobListItem.model_validate(job)


async def list_company_jobs(db: AsyncSession, user_id: UUID) -> list[JobWithCountItem]:
    """A company's own postings, including unapproved ones, with application counts."""
    account = await get_company_account(db, user_id)
    rows = await repository.list_with_application_counts(db, company_id=account.profile.id)
    return [_with_count(job, count) for job, count in rows]


async def admin_list_jobs(db: AsyncSession) -> list[JobWithCountItem]:
    rows = await repository.list_with_application_counts(db)
    return [_with_count(job, count) for job, count in rows]


def _with_count(job: Job, application_count: int) -> JobWithCountItem:
    item = JobWithCountItem.model_validate(job)
    item.application_count = application_count
    return item


async def create_job(
    db: AsyncSession,
    cache: ListingCache,
    user_id: UUID,
    data: JobCreate,
) -> JobListItem:
    """
    Publish a new posting for the company behind `user_id`.

    Company postings are approved on creation.

    Raises:
        CompanyProfileNotFoundError: If the user has no company profile
        AccountNotActiveError: If the company is unverified or unapproved
    """
    account = await get_company_account(db, user_id)
    ensure_active(account)

    job = await repository.create(
        db,
        company_id=account.profile.id,
        title=data.title,
        job_type=data.type,
        location=data.location,
        salary_range=data.salary_range,
        description=data.description,
        is_approved=True,
    )
    await db.commit()
    logger.info(f"Company {account.profile.id} created job {job.id}")

    await cache.invalidate()
    return JobListItem.model_validate(job)


async def update_job(
    db: AsyncSession,
    cache: ListingCache,
    job_id: UUID,
    actor: CurrentUser,
    data: JobUpdate,
) -> JobListItem:
    """
    Edit a posting.

    Only fields present in the request are changed. Changes to
    `is_approved` from a company are ignored.

    Raises:
        JobNotFoundError: If the job does not exist
        JobForbiddenError: If a company does not own the job
        AccountNotActiveError: If the owning company is not active
    """
    job = await _get_job_for_actor(db, job_id, actor)

    changes = data.model_dump(exclude_unset=True)
    if actor.role != UserRole.ADMIN or changes.get("is_approved") is None:
        changes.pop("is_approved", None)

    for field in ("title", "type", "location", "description"):
        if changes.get(field) is not None:
            setattr(job, field, changes[field])
    if "salary_range" in changes:
        job.salary_range = _clean(changes["salary_range"])
    if "is_approved" in changes:
        job.is_approved = changes["is_approved"]

    await db.commit()
    logger.info(f"User {actor.id} updated job {job.id}: {sorted(changes)}")

    await cache.invalidate()
    return JobListItem.model_validate(job)


async def set_job_approval(
    db: AsyncSession,
    cache: ListingCache,
    job_id: UUID,
    is_approved: bool = True,
) -> JobListItem:
    """
    Admin toggle of a job's approval.

    Raises:
        JobNotFoundError: If the job does not exist
    """
    job = await repository.get_by_id(db, job_id)
    if job is None:
        raise JobNotFoundError()

    job.is_approved = is_approved
    await db.commit()
    logger.info(f"Job {job.id} approval set to {is_approved}")

    await cache.invalidate()
    return JobListItem.model_validate(job)


async def delete_job(
    db: AsyncSession,
    cache: ListingCache,
    job_id: UUID,
    actor: CurrentUser,
) -> None:
    """
    Delete a posting and its applications in one transaction.

    Raises:
        JobNotFoundError: If the job does not exist
        JobForbiddenError: If a company does not own the job
        AccountNotActiveError: If the owning company is not active
    """
    job = await _get_job_for_actor(db, job_id, actor)

    removed = await application_repository.delete_by_job(db, job.id)
    await repository.delete(db, job.id)
    await db.commit()
    logger.info(f"User {actor.id} deleted job {job_id} and {removed} applications")

    await cache.invalidate()
