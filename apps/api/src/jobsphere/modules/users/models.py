"""
User Models

Identity records and the two role profiles. A STUDENT owns exactly one
StudentProfile, a COMPANY exactly one CompanyProfile, an ADMIN neither.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, Uuid, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobsphere.modules.shared import BaseModel

if TYPE_CHECKING:
    from jobsphere.modules.jobs.models import Job


class UserRole(str, Enum):
    """User roles in the system."""

    STUDENT = "STUDENT"
    COMPANY = "COMPANY"
    ADMIN = "ADMIN"


class User(BaseModel):
    """
    User model for authentication and authorization.

    Email is stored lower-cased. Verification code fields are only set
    while an emailed code is outstanding.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)

    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.STUDENT,
    )

    # Approval gate and email ownership
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    email_verification_code_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)
    email_verification_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    student_profile: Mapped["StudentProfile | None"] = relationship(
        "StudentProfile",
        back_populates="user",
        uselist=False,
        lazy="selectin",
    )
    company_profile: Mapped["CompanyProfile | None"] = relationship(
        "CompanyProfile",
        back_populates="user",
        uselist=False,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"


# Case-insensitive uniqueness, independent of how callers normalise input
Index("ix_users_email_lower", func.lower(User.email), unique=True)


class StudentProfile(BaseModel):
    """Student-specific data. `resume_url` is an http(s) URL or an S3 key."""

    __tablename__ = "student_profiles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), unique=True, nullable=False
    )
    skills: Mapped[str] = mapped_column(Text, nullable=False, default="")
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    resume_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="student_profile")


class CompanyProfile(BaseModel):
    """Company-specific data. Owns the company's job postings."""

    __tablename__ = "company_profiles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), unique=True, nullable=False
    )
    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    user: Mapped["User"] = relationship("User", back_populates="company_profile")
    jobs: Mapped[list["Job"]] = relationship("Job", back_populates="company", lazy="raise")
