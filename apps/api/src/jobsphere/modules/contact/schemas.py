"""Contact form schemas."""

from pydantic import BaseModel, EmailStr, Field, field_validator


class ContactRequest(BaseModel):
    name: str = Field(..., max_length=200)
    email: EmailStr
    message: str = Field(..., max_length=5000)

    @field_validator("name", "message")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class ContactResponse(BaseModel):
    message: str = "Message sent."
