"""
Jobs Repository

Database operations for job postings. Functions flush but never commit;
the service layer owns the transaction.
"""

from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobsphere.modules.applications.models import Application
from jobsphere.modules.jobs.models import Job, JobType
from jobsphere.modules.users.models import CompanyProfile


async def create(
    db: AsyncSession,
    *,
    company_id: UUID,
    title: str,
    job_type: JobType,
    location: str,
    description: str,
    salary_range: str | None = None,
    is_approved: bool = False,
) -> Job:
    """Create a new job posting."""
    job = Job(
        company_id=company_id,
        title=title,
        type=job_type,
        location=location,
        salary_range=salary_range,
        description=description,
        is_approved=is_approved,
    )
    db.add(job)
    await db.flush()
    await db.refresh(job, attribute_names=["company"])
    return job


async def get_by_id(db: AsyncSession, job_id: UUID) -> Job | None:
    result = await db.execute(select(Job).where(Job.id == job_id))
    return result.scalar_one_or_none()


async def search_approved(
    db: AsyncSession,
    *,
    job_type: JobType | None = None,
    location: str | None = None,
    search: str | None = None,
) -> list[Job]:
    """
    Approved jobs matching the filters, newest first.

    Args:
        db: Database session
        job_type: Exact type filter
        location: Case-insensitive substring of the location
        search: Case-insensitive substring of the title, description
            or company name

    Returns:
        List of jobs with their company loaded
    """
    stmt = (
        select(Job)
        .join(CompanyProfile, Job.company_id == CompanyProfile.id)
        .where(Job.is_approved.is_(True))
    )

    if job_type is not None:
        stmt = stmt.where(Job.type == job_type)

    if location:
        stmt = stmt.where(Job.location.icontains(location, autoescape=True))

    if search:
        stmt = stmt.where(
            or_(
                Job.title.icontains(search, autoescape=True),
                Job.description.icontains(search, autoescape=True),
                CompanyProfile.company_name.icontains(search, autoescape=True),
            )
        )

    result = await db.execute(stmt.order_by(Job.created_at.desc()))
    return list(result.scalars().all())


async def list_with_application_counts(
    db: AsyncSession, company_id: UUID | None = None
) -> list[tuple[Job, int]]:
    """
    Jobs with their application counts, newest first.

    Args:
        db: Database session
        company_id: Restrict to one company's jobs (all jobs when None)
    """
    stmt = (
        select(Job, func.count(Application.id))
        .outerjoin(Application, Application.job_id == Job.id)
        .group_by(Job.id)
        .order_by(Job.created_at.desc())
    )
    if company_id is not None:
        stmt = stmt.where(Job.company_id == company_id)

    result = await db.execute(stmt)
    return [(job, count) for job, count in result.all()]


async def delete(db: AsyncSession, job_id: UUID) -> None:
    """Delete one job. Its applications must already be gone."""
    await db.execute(delete(Job).where(Job.id == job_id))


async def delete_by_company(db: AsyncSession, company_id: UUID) -> int:
    """Delete every job owned by a company. Returns the number deleted."""
    result = await db.execute(delete(Job).where(Job.company_id == company_id))
    return result.rowcount or 0


async def count(db: AsyncSession, *, pending_only: bool = False) -> int:
    """Count jobs, optionally only those awaiting approval."""
    stmt = select(func.count()).select_from(Job)
    if pending_only:
        stmt = stmt.where(Job.is_approved.is_(False))
    result = await db.execute(stmt)
    return result.scalar_one()
