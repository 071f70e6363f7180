"""User schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from jobsphere.modules.users.models import UserRole


class StudentProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    skills: str
    bio: str
    resume_url: str | None = None


class CompanyProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_name: str
    website: str | None = None
    description: str


class UserResponse(BaseModel):
    """Public view of a user. Never includes password or code hashes."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: UserRole
    is_approved: bool
    email_verified: bool
    created_at: datetime | None = None
    student_profile: StudentProfileResponse | None = None
    company_profile: CompanyProfileResponse | None = None


class MeResponse(BaseModel):
    user: UserResponse
