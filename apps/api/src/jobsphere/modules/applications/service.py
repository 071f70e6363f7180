"""
Applications Service Layer

The application ledger: students apply to approved jobs, companies see
applications to their jobs, admins see everything.

A student can apply to a job at most once. The database unique
constraint is the only guard, so two concurrent submissions for the same
pair produce exactly one row and one AlreadyAppliedError.
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobsphere.core.storage import ResumeStorage
from jobsphere.modules.applications import repository
from jobsphere.modules.applications.models import UNIQUE_APPLICATION_CONSTRAINT, Application
from jobsphere.modules.applications.schemas import (
    AdminApplicationItem,
    ApplicationRecord,
    CompanyApplicationItem,
    StudentApplicationItem,
)
from jobsphere.modules.jobs import repository as job_repository
from jobsphere.modules.jobs.service import JobNotFoundError, get_company_account
from jobsphere.modules.shared import ConflictError, NotFoundError
from jobsphere.modules.users.accounts import (
    ProfileMismatchError,
    StudentAccount,
    ensure_active,
    resolve_account,
)
from jobsphere.modules.users.repository import UserRepository
from jobsphere.modules.users.service import resolve_resume_url

logger = logging.getLogger(__name__)


class AlreadyAppliedError(ConflictError):
    def __init__(self):
        super().__init__(
            message="You already applied to this job.",
            error_code="ALREADY_APPLIED",
        )


class StudentProfileNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(
            message="Student profile not found.",
            error_code="STUDENT_PROFILE_NOT_FOUND",
        )


def is_duplicate_application(error: IntegrityError) -> bool:
    """True when `error` comes from the one-application-per-job constraint."""
    return UNIQUE_APPLICATION_CONSTRAINT in str(error.orig)


async def get_student_account(db: AsyncSession, user_id: UUID) -> StudentAccount:
    """
    Load the student account behind a session.

    Raises:
        StudentProfileNotFoundError: If the user is missing or not a
            student with a profile
    """
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise StudentProfileNotFoundError()

    try:
        account = resolve_account(user)
    except ProfileMismatchError:
        logger.warning(f"User {user_id} has an inconsistent profile; treating as no student")
        raise StudentProfileNotFoundError() from None

    if not isinstance(account, StudentAccount):
        raise StudentProfileNotFoundError()
    return account


async def apply(
    db: AsyncSession,
    user_id: UUID,
    job_id: UUID,
    cover_letter: str | None = None,
) -> ApplicationRecord:
    """
    Record a student's application to an approved job.

    Args:
        db: Database session
        user_id: The applying student's user id
        job_id: Job being applied to
        cover_letter: Optional cover letter

    Returns:
        The new application, status PENDING

    Raises:
        JobNotFoundError: If the job does not exist or is not approved
        StudentProfileNotFoundError: If the user is not a student
        AccountNotActiveError: If the student is unverified or unapproved
        AlreadyAppliedError: If the student already applied to this job
    """
    job = await job_repository.get_by_id(db, job_id)
    if job is None or not job.is_approved:
        raise JobNotFoundError()

    account = await get_student_account(db, user_id)
    ensure_active(account)
    student_id = account.profile.id

    try:
        application = await repository.create(
            db,
            job_id=job.id,
            student_id=student_id,
            cover_letter=(cover_letter or "").strip() or None,
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if not is_duplicate_application(e):
            # The job was deleted after the approval check
            logger.warning(f"Application to job {job_id} rejected by the store: {e.orig}")
            raise JobNotFoundError() from e
        logger.warning(f"Duplicate application by student {student_id} to job {job_id}")
        raise AlreadyAppliedError() from e

    logger.info(f"Student {student_id} applied to job {job_id}")
    return ApplicationRecord.model_validate(application)


async def list_student_applications(
    db: AsyncSession, user_id: UUID
) -> list[StudentApplicationItem]:
    account = await get_student_account(db, user_id)
    applications = await repository.list_by_student(db, account.profile.id)
    return [StudentApplicationItem.model_validate(a) for a in applications]


async def _with_resume_link(item, application: Application, storage: ResumeStorage):
    item.student.resume_url = await resolve_resume_url(application.student.resume_url, storage)
    return item


async def list_company_applications(
    db: AsyncSession, user_id: UUID, storage: ResumeStorage
) -> list[CompanyApplicationItem]:
    """
    Applications to any of the company's jobs, newest first.

    Applicant resumes stored in S3 are returned as presigned links.
    """
    account = await get_company_account(db, user_id)
    applications = await repository.list_by_company(db, account.profile.id)
    return [
        await _with_resume_link(CompanyApplicationItem.model_validate(a), a, storage)
        for a in applications
    ]


async def admin_list_applications(
    db: AsyncSession, storage: ResumeStorage
) -> list[AdminApplicationItem]:
    applications = await repository.list_all(db)
    return [
        await _with_resume_link(AdminApplicationItem.model_validate(a), a, storage)
        for a in applications
    ]
