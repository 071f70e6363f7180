"""
Job Models

Job and internship postings owned by a company profile.
"""

import uuid
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, Uuid
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobsphere.modules.shared import BaseModel

if TYPE_CHECKING:
    from jobsphere.modules.applications.models import Application
    from jobsphere.modules.users.models import CompanyProfile


class JobType(str, Enum):
    """Kinds of posting."""

    JOB = "JOB"
    INTERNSHIP = "INTERNSHIP"


class Job(BaseModel):
    """
    A posting visible on the public board once `is_approved` is set.

    Deleting a job must delete its applications first; the foreign key
    does not cascade.
    """

    __tablename__ = "jobs"

    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("company_profiles.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[JobType] = mapped_column(SAEnum(JobType, name="job_type"), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    salary_range: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Relationships
    company: Mapped["CompanyProfile"] = relationship(
        "CompanyProfile", back_populates="jobs", lazy="selectin"
    )
    applications: Mapped[list["Application"]] = relationship(
        "Application", back_populates="job", lazy="raise"
    )

    __table_args__ = (
        Index("ix_jobs_company_id", "company_id"),
        Index("ix_jobs_is_approved_created_at", "is_approved", "created_at"),
    )
