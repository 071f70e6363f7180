"""
Jobs Schemas

Request bodies for creating and editing postings, and the read models
returned by the search, detail and dashboard endpoints.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jobsphere.modules.jobs.models import JobType


def _require_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class JobCreate(BaseModel):
    """Request body for POST /jobs."""

    title: str = Field(..., max_length=200)
    type: JobType
    location: str = Field(..., max_length=200)
    salary_range: str | None = Field(None, max_length=100)
    description: str

    @field_validator("title", "location", "description")
    @classmethod
    def strip_required(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("salary_range")
    @classmethod
    def empty_salary_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class JobUpdate(BaseModel):
    """
    Request body for PATCH /jobs/{id}.

    Omitted fields are left unchanged. Sending `salary_range` as null or
    empty clears it. `is_approved` is only honoured for admins.
    """

    title: str | None = Field(None, max_length=200)
    type: JobType | None = None
    location: str | None = Field(None, max_length=200)
    salary_range: str | None = Field(None, max_length=100)
    description: str | None = None
    is_approved: bool | None = None

    @field_validator("title", "location", "description")
    @classmethod
    def strip_optional(cls, value: str | None) -> str | None:
        return _require_text(value)


class CompanySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_name: str
    website: str | None = None
    description: str | None = None


class JobListItem(BaseModel):
    """A job with its company. This is also the cached representation."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    title: str
    type: JobType
    location: str
    salary_range: str | None = None
    description: str
    is_approved: bool
    created_at: datetime | None = None
    company: CompanySummary | None = None


class JobWithCountItem(JobListItem):
    """A job plus the number of applications it has received."""

    application_count: int = 0


class JobListResponse(BaseModel):
    jobs: list[JobListItem]


class JobWithCountListResponse(BaseModel):
    jobs: list[JobWithCountItem]


class JobResponse(BaseModel):
    job: JobListItem


class MessageResponse(BaseModel):
    message: str
