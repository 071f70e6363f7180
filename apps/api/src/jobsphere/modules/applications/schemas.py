"""Application schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from jobsphere.modules.applications.models import ApplicationStatus
from jobsphere.modules.jobs.models import JobType
from jobsphere.modules.jobs.schemas import JobListItem


class ApplyRequest(BaseModel):
    """Request body for POST /jobs/{id}/apply."""

    cover_letter: str | None = Field(None, max_length=10000)


class ApplicationRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    job_id: UUID
    student_id: UUID
    cover_letter: str | None = None
    status: ApplicationStatus
    created_at: datetime | None = None


class ApplicationResponse(BaseModel):
    application: ApplicationRecord


class JobSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    type: JobType
    location: str


class ApplicantUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str


class ApplicantProfile(BaseModel):
    """The applying student. `resume_url` is a browser-openable link."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    skills: str
    bio: str
    resume_url: str | None = None
    user: ApplicantUser


class StudentApplicationItem(ApplicationRecord):
    """An application as its student sees it."""

    job: JobListItem


class CompanyApplicationItem(ApplicationRecord):
    """An application as the hiring company sees it."""

    job: JobSummary
    student: ApplicantProfile


class AdminApplicationItem(ApplicationRecord):
    job: JobListItem
    student: ApplicantProfile


class StudentApplicationListResponse(BaseModel):
    applications: list[StudentApplicationItem]


class CompanyApplicationListResponse(BaseModel):
    applications: list[CompanyApplicationItem]


class AdminApplicationListResponse(BaseModel):
    applications: list[AdminApplicationItem]
