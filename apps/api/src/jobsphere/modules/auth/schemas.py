"""Authentication schemas."""

from dataclasses import dataclass

from pydantic import BaseModel, EmailStr, Field, field_validator

from jobsphere.modules.users.models import UserRole
from jobsphere.modules.users.schemas import UserResponse


class RegisterRequest(BaseModel):
    """
    Registration fields.

    Profile fields are role specific: skills/bio/resume_url for students,
    company_name/website/description for companies.
    """

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    role: UserRole

    # Student profile
    skills: str | None = None
    bio: str | None = None
    resume_url: str | None = Field(None, max_length=1024)

    # Company profile
    company_name: str | None = Field(None, max_length=200)
    website: str | None = Field(None, max_length=500)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value):
        if isinstance(value, str):
            value = value.strip().upper()
        if value in (UserRole.ADMIN, UserRole.ADMIN.value):
            raise ValueError("Role must be STUDENT or COMPANY.")
        return value


@dataclass
class ResumeUpload:
    """An uploaded resume file held in memory."""

    filename: str
    content_type: str
    data: bytes


class RegisterResponse(BaseModel):
    user: UserResponse
    needs_verification: bool = True


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Login response schema."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class VerifyEmailRequest(BaseModel):
    email: EmailStr
    code: str = Field(..., min_length=1, max_length=16)


class VerifyEmailResponse(BaseModel):
    """
    Result of an email verification.

    `access_token` is only present once the account is also approved.
    """

    user: UserResponse
    access_token: str | None = None
    token_type: str | None = None
    needs_approval: bool = False
    already_verified: bool = False


class ResendVerificationRequest(BaseModel):
    email: EmailStr


class MessageResponse(BaseModel):
    message: str
