"""
Applications Repository

Database operations for job applications. Functions flush but never
commit. Duplicate applications are rejected by the
``uq_applications_job_student`` constraint, surfacing as IntegrityError
on flush.
"""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobsphere.modules.applications.models import Application
from jobsphere.modules.jobs.models import Job
from jobsphere.modules.users.models import StudentProfile


def _with_student_user():
    return selectinload(Application.student).selectinload(StudentProfile.user)


async def create(
    db: AsyncSession,
    *,
    job_id: UUID,
    student_id: UUID,
    cover_letter: str | None = None,
) -> Application:
    """
    Insert an application and flush it.

    Raises:
        IntegrityError: If the student already applied to this job
    """
    application = Application(
        job_id=job_id,
        student_id=student_id,
        cover_letter=cover_letter,
    )
    db.add(application)
    await db.flush()
    return application


async def list_by_student(db: AsyncSession, student_id: UUID) -> list[Application]:
    """A student's applications with job and company, newest first."""
    result = await db.execute(
        select(Application)
        .where(Application.student_id == student_id)
        .order_by(Application.created_at.desc())
    )
    return list(result.scalars().all())


async def list_by_company(db: AsyncSession, company_id: UUID) -> list[Application]:
    """Applications to any of a company's jobs, with applicant details."""
    result = await db.execute(
        select(Application)
        .join(Job, Application.job_id == Job.id)
        .where(Job.company_id == company_id)
        .options(_with_student_user())
        .order_by(Application.created_at.desc())
    )
    return list(result.scalars().all())


async def list_all(db: AsyncSession) -> list[Application]:
    result = await db.execute(
        select(Application).options(_with_student_user()).order_by(Application.created_at.desc())
    )
    return list(result.scalars().all())


async def count(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(Application))
    return result.scalar_one()


async def delete_by_job(db: AsyncSession, job_id: UUID) -> int:
    result = await db.execute(delete(Application).where(Application.job_id == job_id))
    return result.rowcount or 0


async def delete_by_student(db: AsyncSession, student_id: UUID) -> int:
    result = await db.execute(delete(Application).where(Application.student_id == student_id))
    return result.rowcount or 0


async def delete_by_company(db: AsyncSession, company_id: UUID) -> int:
    """Delete every application to any of the company's jobs."""
    company_jobs = select(Job.id).where(Job.company_id == company_id)
    result = await db.execute(
        delete(Application)
        .where(Application.job_id.in_(company_jobs))
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0
