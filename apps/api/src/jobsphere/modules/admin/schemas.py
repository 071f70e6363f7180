"""Admin schemas."""

from pydantic import BaseModel, Field, field_validator

from jobsphere.modules.users.models import UserRole
from jobsphere.modules.users.schemas import UserResponse


class AdminUserUpdate(BaseModel):
    """
    Request body for PATCH /admin/users/{id}.

    Every field is optional; omitted fields are left unchanged.
    """

    role: UserRole | None = None
    is_approved: bool | None = None
    email_verified: bool | None = None
    new_password: str | None = Field(None, min_length=1, max_length=128)

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value


class AdminJobApproval(BaseModel):
    is_approved: bool


class OverviewStats(BaseModel):
    users: int
    jobs: int
    applications: int
    pending_jobs: int
    pending_users: int


class OverviewResponse(BaseModel):
    stats: OverviewStats


class UserListResponse(BaseModel):
    users: list[UserResponse]


class AdminUserResponse(BaseModel):
    user: UserResponse
