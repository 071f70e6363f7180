"""
Admin Service Layer

Administrator operations on accounts:

1. Approve, verify, re-role or reset the password of a user
2. Delete a user with everything it owns
3. Dashboard statistics and listings

The primary administrator is the account whose email equals the
configured ADMIN_EMAIL. It can never be demoted, disapproved or deleted,
and it is the only account that may hold the ADMIN role.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from jobsphere.core.security import hash_password
from jobsphere.core.storage import ResumeStorage
from jobsphere.modules.admin.schemas import AdminUserUpdate, OverviewStats
from jobsphere.modules.applications import repository as application_repository
from jobsphere.modules.auth import verification
from jobsphere.modules.auth.service import UserNotFoundError, is_primary_admin_email
from jobsphere.modules.jobs import repository as job_repository
from jobsphere.modules.jobs.cache import ListingCache
from jobsphere.modules.shared import ConflictError, ForbiddenError
from jobsphere.modules.users.models import UserRole
from jobsphere.modules.users.repository import UserRepository
from jobsphere.modules.users.schemas import UserResponse
from jobsphere.modules.users.service import to_user_response

logger = logging.getLogger(__name__)

DEFAULT_COMPANY_NAME = "New Company"


class ProtectedAccountError(ForbiddenError):
    """Raised on attempts to demote, disapprove or delete the primary admin."""

    def __init__(self, message: str = "The primary admin account cannot be changed this way."):
        super().__init__(message=message, error_code="PROTECTED_ACCOUNT")


class AdminRoleRestrictedError(ForbiddenError):
    def __init__(self):
        super().__init__(
            message="Admin role is restricted to the configured admin email.",
            error_code="ADMIN_ROLE_RESTRICTED",
        )


class ConflictingProfileError(ConflictError):
    """Raised when a role change would leave a user with the other role's profile."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code="CONFLICTING_PROFILE")


async def admin_update_user(
    db: AsyncSession,
    target_id: UUID,
    data: AdminUserUpdate,
    storage: ResumeStorage,
) -> UserResponse:
    """
    Apply an admin edit to a user.

    All checks run before anything is changed; the edit is committed once.

    Raises:
        UserNotFoundError: If the user does not exist
        ProtectedAccountError: Demoting or disapproving the primary admin
        AdminRoleRestrictedError: Granting ADMIN to any other account
        ConflictingProfileError: The user holds the other role's profile
    """
    user = await UserRepository.get_by_id(db, target_id)
    if user is None:
        raise UserNotFoundError()

    primary = is_primary_admin_email(user.email)

    if primary:
        if data.role is not None and data.role != UserRole.ADMIN:
            raise ProtectedAccountError("Cannot change role of the primary admin.")
        if data.is_approved is False:
            raise ProtectedAccountError("Cannot disable the primary admin.")

    if data.role == UserRole.ADMIN and not primary:
        logger.warning(f"Refused ADMIN role for user {user.id}")
        raise AdminRoleRestrictedError()

    if data.role == UserRole.STUDENT and user.company_profile is not None:
        raise ConflictingProfileError("Remove company profile before changing to STUDENT.")
    if data.role == UserRole.COMPANY and user.student_profile is not None:
        raise ConflictingProfileError("Remove student profile before changing to COMPANY.")

    # Mutations
    if data.role == UserRole.STUDENT and user.student_profile is None:
        await UserRepository.create_student_profile(db, user)
    if data.role == UserRole.COMPANY and user.company_profile is None:
        await UserRepository.create_company_profile(db, user, company_name=DEFAULT_COMPANY_NAME)
    if data.role is not None:
        user.role = data.role

    if data.is_approved is not None:
        user.is_approved = data.is_approved

    if data.email_verified is not None:
        user.email_verified = data.email_verified
        if data.email_verified:
            verification.clear_code(user)

    if data.new_password:
        user.password_hash = hash_password(data.new_password)

    await db.commit()

    changed = sorted(data.model_dump(exclude_unset=True, exclude={"new_password"}))
    if data.new_password:
        changed.append("password")
    logger.info(f"Admin updated user {user.id}: {changed}")

    return await to_user_response(user, storage)


async def admin_delete_user(db: AsyncSession, cache: ListingCache, target_id: UUID) -> None:
    """
    Delete a user and everything it owns, in one transaction.

    Order: the student's applications, the student profile, applications
    to the company's jobs, the company's jobs, the company profile, then
    the user. The listing cache is invalidated when jobs were removed.

    Raises:
        UserNotFoundError: If the user does not exist
        ProtectedAccountError: If the user is the primary admin
    """
    user = await UserRepository.get_by_id(db, target_id)
    if user is None:
        raise UserNotFoundError()

    if is_primary_admin_email(user.email):
        raise ProtectedAccountError("Cannot delete the primary admin account.")

    user_id = user.id
    student = user.student_profile
    company = user.company_profile
    jobs_deleted = 0

    if student is not None:
        await application_repository.delete_by_student(db, student.id)
        await UserRepository.delete_student_profile(db, student.id)

    if company is not None:
        await application_repository.delete_by_company(db, company.id)
        jobs_deleted = await job_repository.delete_by_company(db, company.id)
        await UserRepository.delete_company_profile(db, company.id)

    await UserRepository.delete(db, user_id)
    await db.commit()
    logger.info(f"Deleted user {user_id} ({jobs_deleted} jobs removed)")

    if jobs_deleted:
        await cache.invalidate()


async def get_overview(db: AsyncSession) -> OverviewStats:
    return OverviewStats(
        users=await UserRepository.count(db),
        jobs=await job_repository.count(db),
        applications=await application_repository.count(db),
        pending_jobs=await job_repository.count(db, pending_only=True),
        pending_users=await UserRepository.count(db, pending_only=True),
    )


async def list_users(db: AsyncSession, storage: ResumeStorage) -> list[UserResponse]:
    """All users, newest first, with resume links resolved."""
    users = await UserRepository.list_all(db)
    return [await to_user_response(user, storage) for user in users]
