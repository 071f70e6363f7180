"""
User Repository

Database operations for users and their role profiles. Methods flush but
never commit; the calling service owns the transaction.
"""

import logging
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from jobsphere.modules.users.models import CompanyProfile, StudentProfile, User, UserRole

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: UserRole,
        is_approved: bool = False,
        email_verified: bool = False,
    ) -> User:
        """
        Create a new user record.

        Args:
            db: Database session
            name: Display name
            email: Email address (stored lower-cased)
            password_hash: Hashed password
            role: User's role
            is_approved: Whether an admin has approved the account
            email_verified: Whether the email address is verified

        Returns:
            Created User instance
        """
        user = User(
            name=name,
            email=email.strip().lower(),
            password_hash=password_hash,
            role=role,
            is_approved=is_approved,
            email_verified=email_verified,
        )

        db.add(user)
        await db.flush()

        # A brand-new user owns no profile yet; record that without a lazy load
        set_committed_value(user, "student_profile", None)
        set_committed_value(user, "company_profile", None)

        logger.info(f"Created user: {user.id} ({user.role.value})")
        return user

    @staticmethod
    async def create_student_profile(
        db: AsyncSession,
        user: User,
        *,
        skills: str = "",
        bio: str = "",
        resume_url: str | None = None,
    ) -> StudentProfile:
        """Create the student profile owned by `user`."""
        profile = StudentProfile(
            user_id=user.id,
            skills=skills,
            bio=bio,
            resume_url=resume_url,
        )
        db.add(profile)
        await db.flush()
        set_committed_value(user, "student_profile", profile)
        return profile

    @staticmethod
    async def create_company_profile(
        db: AsyncSession,
        user: User,
        *,
        company_name: str,
        website: str | None = None,
        description: str = "",
    ) -> CompanyProfile:
        """Create the company profile owned by `user`."""
        profile = CompanyProfile(
            user_id=user.id,
            company_name=company_name,
            website=website,
            description=description,
        )
        db.add(profile)
        await db.flush()
        set_committed_value(user, "company_profile", profile)
        return profile

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: str | UUID) -> User | None:
        """
        Get a user by ID.

        Args:
            db: Database session
            user_id: User UUID

        Returns:
            User instance or None if not found
        """
        if isinstance(user_id, str):
            user_id = UUID(user_id)
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """
        Get a user by email address, ignoring case.

        Args:
            db: Database session
            email: Email address

        Returns:
            User instance or None if not found
        """
        result = await db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(db: AsyncSession, email: str) -> bool:
        """Check if an email address is already registered (case-insensitive)."""
        user = await UserRepository.get_by_email(db, email)
        return user is not None

    @staticmethod
    async def list_all(db: AsyncSession) -> list[User]:
        """All users, newest first."""
        result = await db.execute(select(User).order_by(User.created_at.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def count(db: AsyncSession, *, pending_only: bool = False) -> int:
        """Count users, optionally only those awaiting approval."""
        stmt = select(func.count()).select_from(User)
        if pending_only:
            stmt = stmt.where(User.is_approved.is_(False))
        result = await db.execute(stmt)
        return result.scalar_one()

    @staticmethod
    async def delete_student_profile(db: AsyncSession, profile_id: UUID) -> None:
        await db.execute(delete(StudentProfile).where(StudentProfile.id == profile_id))

    @staticmethod
    async def delete_company_profile(db: AsyncSession, profile_id: UUID) -> None:
        await db.execute(delete(CompanyProfile).where(CompanyProfile.id == profile_id))

    @staticmethod
    async def delete(db: AsyncSession, user_id: UUID) -> None:
        """Delete the user row. Profiles must already be gone."""
        await db.execute(delete(User).where(User.id == user_id))
        logger.info(f"Deleted user: {user_id}")
