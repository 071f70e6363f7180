"""
Authentication Service Layer

Account lifecycle for self-service users:

1. Registration:
   - Reject duplicate emails (case-insensitive)
   - Create the user and its role profile in one transaction
   - Upload an optional resume; an upload failure aborts the registration
   - Email a six-digit verification code

2. Email Verification:
   - Validate the code (single use, 15 minute expiry)
   - Unapproved accounts get no session until an admin approves them

3. Resend Verification:
   - Same response whether or not the account exists

4. Login:
   - One generic error for unknown email, wrong password and
     admin accounts other than the configured primary administrator
   - Verified and approved accounts receive a 7-day session token

Account states: registered (unverified, unapproved) -> verified
(unapproved) -> active (approved).
"""

import asyncio
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobsphere.core.config import settings
from jobsphere.core.email import send_verification_email
from jobsphere.core.security import create_access_token, hash_password, verify_password
from jobsphere.core.storage import ResumeStorage, StorageError
from jobsphere.modules.auth import verification
from jobsphere.modules.auth.schemas import (
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    ResumeUpload,
    VerifyEmailResponse,
)
from jobsphere.modules.shared import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    TransientInfraError,
    UnauthorizedError,
    ValidationServiceError,
)
from jobsphere.modules.users.models import User, UserRole
from jobsphere.modules.users.repository import UserRepository
from jobsphere.modules.users.service import to_user_response

logger = logging.getLogger(__name__)

# Constants
MAX_RESUME_BYTES = 5 * 1024 * 1024
RESEND_MESSAGE = "If the account exists, a code was sent."


class DuplicateEmailError(ConflictError):
    def __init__(self):
        super().__init__(message="Email already in use.", error_code="DUPLICATE_EMAIL")


class MissingRoleFieldError(ValidationServiceError):
    """Raised when a role-specific required field is absent."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message=message, error_code="MISSING_ROLE_FIELD")


class InvalidResumeError(ValidationServiceError):
    def __init__(self, message: str):
        super().__init__(message=message, error_code="INVALID_RESUME")


class ResumeUploadError(TransientInfraError):
    """Raised when the resume could not be stored. The account is not created."""

    def __init__(self):
        super().__init__(
            message="Resume upload failed. Please try again later.",
            error_code="RESUME_UPLOAD_FAILED",
        )


class UserNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(message="User not found.", error_code="USER_NOT_FOUND")


class InvalidCredentialsError(UnauthorizedError):
    def __init__(self):
        super().__init__(message="Invalid credentials.", error_code="INVALID_CREDENTIALS")


class EmailNotVerifiedError(ForbiddenError):
    def __init__(self):
        super().__init__(
            message="Please verify your email before logging in.",
            error_code="EMAIL_NOT_VERIFIED",
        )


class PendingApprovalError(ForbiddenError):
    def __init__(self):
        super().__init__(
            message="Your account is pending admin approval.",
            error_code="PENDING_APPROVAL",
        )


def is_primary_admin_email(email: str) -> bool:
    """True when `email` is the configured primary administrator address."""
    admin_email = settings.normalized_admin_email
    return admin_email is not None and email.strip().lower() == admin_email


def ensure_session_allowed(user: User) -> None:
    """
    Refuse sessions for ADMIN accounts other than the primary administrator.

    Raises:
        InvalidCredentialsError: Same error as a wrong password
    """
    if user.role == UserRole.ADMIN and not is_primary_admin_email(user.email):
        logger.warning(f"Session refused for non-primary admin account {user.id}")
        raise InvalidCredentialsError()


def build_session_token(user: User) -> str:
    """
    Issue a session token bound to the user's id, role, email and name.

    Raises:
        InvalidCredentialsError: If the account may not hold a session
    """
    ensure_session_allowed(user)
    return create_access_token(
        subject=str(user.id),
        additional_claims={
            "role": user.role.value,
            "email": user.email,
            "name": user.name,
        },
    )


def _validate_resume(resume: ResumeUpload) -> None:
    is_pdf = resume.content_type == "application/pdf" or resume.filename.lower().endswith(".pdf")
    if not is_pdf:
        raise InvalidResumeError("Resume must be a PDF file.")
    if len(resume.data) > MAX_RESUME_BYTES:
        raise InvalidResumeError("Resume must be 5 MB or smaller.")


async def _send_code(email: str, code: str) -> None:
    """
    Email a verification code without letting mail problems fail the request.

    The send is bounded by the configured timeout.
    """
    try:
        sent = await asyncio.wait_for(
            send_verification_email(to_email=email, code=code),
            timeout=settings.email_send_timeout_seconds,
        )
        if not sent:
            logger.error(f"Failed to send verification email to {email}")
    except TimeoutError:
        logger.error(f"Timed out sending verification email to {email}")
    except Exception as e:
        logger.error(f"Exception sending verification email to {email}: {e}")


async def register(
    db: AsyncSession,
    data: RegisterRequest,
    storage: ResumeStorage,
    resume: ResumeUpload | None = None,
) -> RegisterResponse:
    """
    Register a new student or company account.

    Args:
        db: Database session
        data: Registration fields
        storage: Resume blob store
        resume: Optional resume PDF (students only)

    Returns:
        RegisterResponse with the new user, awaiting verification

    Raises:
        DuplicateEmailError: If the email is already registered
        MissingRoleFieldError: If a company registers without a company name
        InvalidResumeError: If the resume is not an acceptable PDF
        ResumeUploadError: If the resume could not be stored
    """
    logger.info(f"Processing registration for role {data.role.value}")

    if data.role == UserRole.COMPANY and not (data.company_name or "").strip():
        raise MissingRoleFieldError("company_name", "Company name is required.")

    if resume is not None and data.role == UserRole.STUDENT:
        _validate_resume(resume)

    if await UserRepository.email_exists(db, data.email):
        logger.warning("Registration rejected: email already in use")
        raise DuplicateEmailError()

    try:
        user = await UserRepository.create(
            db,
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            role=data.role,
        )
        code = verification.issue_code(user)

        if data.role == UserRole.STUDENT:
            profile = await UserRepository.create_student_profile(
                db,
                user,
                skills=data.skills or "",
                bio=data.bio or "",
                resume_url=data.resume_url or None,
            )
            if resume is not None:
                try:
                    profile.resume_url = await storage.put(
                        owner_id=str(user.id),
                        data=resume.data,
                        content_type=resume.content_type or "application/pdf",
                        filename=resume.filename or "resume.pdf",
                    )
                except StorageError as e:
                    raise ResumeUploadError() from e
        else:
            await UserRepository.create_company_profile(
                db,
                user,
                company_name=data.company_name.strip(),
                website=data.website or None,
                description=data.description or "",
            )

        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Registration rejected by unique constraint: {e.orig}")
        raise DuplicateEmailError() from e
    except ResumeUploadError:
        await db.rollback()
        logger.error("Registration aborted: resume upload failed")
        raise

    logger.info(f"Registered user {user.id} ({user.role.value})")

    await _send_code(user.email, code)

    return RegisterResponse(user=await to_user_response(user, storage), needs_verification=True)


async def verify_email(
    db: AsyncSession,
    email: str,
    code: str,
    storage: ResumeStorage,
) -> VerifyEmailResponse:
    """
    Verify an account's email address with an emailed code.

    Already verified accounts succeed again without checking the code.

    Raises:
        UserNotFoundError: If no account uses this email
        VerificationCodeError: If the code is missing, expired or wrong
        InvalidCredentialsError: If the account is an ADMIN other than
            the primary administrator
    """
    user = await UserRepository.get_by_email(db, email)
    if not user:
        raise UserNotFoundError()

    ensure_session_allowed(user)

    if user.email_verified:
        return _verified_response(user, await to_user_response(user, storage), True)

    verification.validate_code(user, code)
    user.email_verified = True
    await db.commit()
    logger.info(f"Email verified for user {user.id}")

    return _verified_response(user, await to_user_response(user, storage), False)


def _verified_response(user: User, user_view, already_verified: bool) -> VerifyEmailResponse:
    if not user.is_approved:
        return VerifyEmailResponse(
            user=user_view,
            needs_approval=True,
            already_verified=already_verified,
        )
    return VerifyEmailResponse(
        user=user_view,
        access_token=build_session_token(user),
        token_type="bearer",
        already_verified=already_verified,
    )


async def resend_verification(db: AsyncSession, email: str) -> MessageResponse:
    """
    Issue and email a fresh verification code.

    The response never reveals whether the account exists or is verified.
    """
    user = await UserRepository.get_by_email(db, email)
    if not user or user.email_verified:
        return MessageResponse(message=RESEND_MESSAGE)

    code = verification.issue_code(user)
    await db.commit()
    logger.info(f"Reissued verification code for user {user.id}")

    await _send_code(user.email, code)
    return MessageResponse(message=RESEND_MESSAGE)


async def login(
    db: AsyncSession,
    email: str,
    password: str,
    storage: ResumeStorage,
) -> LoginResponse:
    """
    Authenticate a user and issue a session token.

    Raises:
        InvalidCredentialsError: Unknown email, wrong password, or an admin
            account that is not the primary administrator
        EmailNotVerifiedError: If the email is not verified
        PendingApprovalError: If an admin has not approved the account
    """
    user = await UserRepository.get_by_email(db, email)

    if not user or not verify_password(password, user.password_hash):
        logger.warning("Login failed: invalid credentials")
        raise InvalidCredentialsError()

    ensure_session_allowed(user)

    if not user.email_verified:
        raise EmailNotVerifiedError()

    if not user.is_approved:
        raise PendingApprovalError()

    logger.info(f"User logged in: {user.id} (role: {user.role.value})")

    return LoginResponse(
        access_token=build_session_token(user),
        token_type="bearer",
        user=await to_user_response(user, storage),
    )
