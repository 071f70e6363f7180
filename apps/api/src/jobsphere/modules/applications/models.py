"""
Application Models

A student's application to a job. At most one per (job, student) pair,
enforced by the database.
"""

import uuid
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Text, UniqueConstraint, Uuid
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobsphere.modules.shared import BaseModel

if TYPE_CHECKING:
    from jobsphere.modules.jobs.models import Job
    from jobsphere.modules.users.models import StudentProfile

UNIQUE_APPLICATION_CONSTRAINT = "uq_applications_job_student"


class ApplicationStatus(str, Enum):
    """Status of a job application."""

    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class Application(BaseModel):
    """Links one job and one student profile."""

    __tablename__ = "applications"

    job_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("jobs.id"), nullable=False)
    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("student_profiles.id"), nullable=False
    )
    cover_letter: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[ApplicationStatus] = mapped_column(
        SAEnum(ApplicationStatus, name="application_status"),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )

    # Relationships
    job: Mapped["Job"] = relationship("Job", back_populates="applications", lazy="selectin")
    student: Mapped["StudentProfile"] = relationship("StudentProfile", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("job_id", "student_id", name=UNIQUE_APPLICATION_CONSTRAINT),
        Index("ix_applications_student_id", "student_id"),
    )
