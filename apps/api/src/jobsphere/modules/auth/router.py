"""
Authentication Router

Public endpoints for the account lifecycle.

Endpoints:
- POST /auth/register - Register a student or company (multipart form)
- POST /auth/verify-email - Confirm an email address with its code
- POST /auth/resend-verification - Email a fresh verification code
- POST /auth/login - Exchange credentials for a session token
"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from jobsphere.core.database import get_db
from jobsphere.core.storage import ResumeStorage, get_storage
from jobsphere.modules.auth import service
from jobsphere.modules.auth.schemas import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    ResendVerificationRequest,
    ResumeUpload,
    VerifyEmailRequest,
    VerifyEmailResponse,
)
from jobsphere.modules.shared import ServiceError, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter()


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.exception(f"Error during {action}: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Account",
)
async def register(
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    role: str = Form(...),
    skills: str | None = Form(None),
    bio: str | None = Form(None),
    resume_url: str | None = Form(None),
    company_name: str | None = Form(None),
    website: str | None = Form(None),
    description: str | None = Form(None),
    resume: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    storage: ResumeStorage = Depends(get_storage),
) -> RegisterResponse:
    """
    Register a new student or company account.

    Students may attach a resume PDF (max 5 MB). The account must verify
    its email and be approved by an admin before it can log in.
    """
    try:
        data = RegisterRequest(
            name=name,
            email=email,
            password=password,
            role=role,
            skills=skills,
            bio=bio,
            resume_url=resume_url,
            company_name=company_name,
            website=website,
            description=description,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False),
        ) from e

    upload = None
    if resume is not None and resume.filename:
        upload = ResumeUpload(
            filename=resume.filename,
            content_type=resume.content_type or "",
            data=await resume.read(),
        )

    try:
        return await service.register(db, data, storage, upload)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise _internal_error("registration", e) from e


@router.post("/verify-email", response_model=VerifyEmailResponse)
async def verify_email(
    request: VerifyEmailRequest,
    db: AsyncSession = Depends(get_db),
    storage: ResumeStorage = Depends(get_storage),
) -> VerifyEmailResponse:
    """
    Verify an email address.

    A session token is returned only when the account is already approved.
    """
    try:
        return await service.verify_email(db, request.email, request.code, storage)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise _internal_error("email verification", e) from e


@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(
    request: ResendVerificationRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Send a new verification code. The response is the same for every email."""
    try:
        return await service.resend_verification(db, request.email)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise _internal_error("resend verification", e) from e


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
    storage: ResumeStorage = Depends(get_storage),
) -> LoginResponse:
    """
    Authenticate user and return a JWT session token.

    Raises:
        HTTPException 401: Invalid credentials
        HTTPException 403: Email unverified or account pending approval
    """
    try:
        return await service.login(db, credentials.email, credentials.password, storage)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise _internal_error("login", e) from e
