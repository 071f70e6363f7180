"""
Unit tests for the authentication service layer.

These tests cover:
- Registration (students, companies, resumes, duplicate emails)
- Email verification
- Resend verification (no account enumeration)
- Login gates (credentials, admin restriction, verification, approval)
- The full register -> verify -> approve -> login lifecycle
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from jobsphere.core.config import settings
from jobsphere.core.security import decode_token
from jobsphere.core.storage import StorageError
from jobsphere.modules.admin.schemas import AdminUserUpdate
from jobsphere.modules.admin.service import admin_update_user
from jobsphere.modules.auth.schemas import RegisterRequest, ResumeUpload
from jobsphere.modules.auth.service import (
    RESEND_MESSAGE,
    DuplicateEmailError,
    EmailNotVerifiedError,
    InvalidCredentialsError,
    InvalidResumeError,
    MissingRoleFieldError,
    PendingApprovalError,
    ResumeUploadError,
    UserNotFoundError,
    login,
    register,
    resend_verification,
    verify_email,
)
from jobsphere.modules.auth.verification import CodeMismatchError, hash_code, issue_code
from jobsphere.modules.users.models import UserRole

PASSWORD = "correct horse battery staple"


class TestRegisterRequest:
    def test_role_is_case_insensitive(self):
        data = RegisterRequest(name="Jane", email="jane@x.com", password=PASSWORD, role="student")
        assert data.role == UserRole.STUDENT

    def test_admin_role_rejected(self):
        with pytest.raises(ValidationError):
            RegisterRequest(name="Eve", email="eve@x.com", password=PASSWORD, role="ADMIN")

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            RegisterRequest(name="   ", email="jane@x.com", password=PASSWORD, role="STUDENT")


class TestRegister:
    """Tests for register function."""

    @pytest.mark.asyncio
    async def test_register_student_success(
        self, mock_db, user_repo, mock_send_code, storage, student_registration
    ):
        result = await register(mock_db, student_registration, storage)

        assert result.needs_verification is True
        assert result.user.email == "jane@x.com"
        assert result.user.role == UserRole.STUDENT
        assert result.user.email_verified is False
        assert result.user.is_approved is False
        assert result.user.student_profile.skills == "Python, SQL"

        user_repo.create_student_profile.assert_awaited_once()
        user_repo.create_company_profile.assert_not_called()
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_register_emails_code_matching_stored_hash(
        self, mock_db, user_repo, mock_send_code, storage, student_registration
    ):
        await register(mock_db, student_registration, storage)

        user = user_repo.created_users[0]
        mock_send_code.assert_awaited_once()
        sent_code = mock_send_code.await_args.kwargs["code"]
        assert mock_send_code.await_args.kwargs["to_email"] == "jane@x.com"
        assert user.email_verification_code_hash == hash_code(sent_code)
        assert user.email_verification_expires_at is not None

    @pytest.mark.asyncio
    async def test_register_company_success(
        self, mock_db, user_repo, mock_send_code, storage, company_registration
    ):
        result = await register(mock_db, company_registration, storage)

        assert result.user.role == UserRole.COMPANY
        assert result.user.company_profile.company_name == "Acme Corp"
        assert result.user.student_profile is None
        user_repo.create_student_profile.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_company_requires_company_name(
        self, mock_db, user_repo, mock_send_code, storage
    ):
        data = RegisterRequest(
            name="Acme HR", email="acme@x.com", password=PASSWORD, role="COMPANY", company_name=" "
        )

        with pytest.raises(MissingRoleFieldError) as exc_info:
            await register(mock_db, data, storage)

        assert exc_info.value.field == "company_name"
        assert exc_info.value.status_code == 400
        user_repo.create.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_duplicate_email(
        self, mock_db, user_repo, mock_send_code, storage, student_registration
    ):
        user_repo.email_exists.return_value = True

        with pytest.raises(DuplicateEmailError) as exc_info:
            await register(mock_db, student_registration, storage)

        assert exc_info.value.status_code == 409
        user_repo.create.assert_not_called()
        mock_send_code.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_unique_violation_maps_to_duplicate(
        self, mock_db, user_repo, mock_send_code, storage, student_registration
    ):
        user_repo.create.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))

        with pytest.raises(DuplicateEmailError):
            await register(mock_db, student_registration, storage)

        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_called()
        mock_send_code.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_uploads_resume(
        self, mock_db, user_repo, mock_send_code, s3_storage, student_registration, pdf_resume
    ):
        result = await register(mock_db, student_registration, s3_storage, pdf_resume)

        user = user_repo.created_users[0]
        s3_storage.put.assert_awaited_once()
        assert s3_storage.put.await_args.kwargs["owner_id"] == str(user.id)
        assert user.student_profile.resume_url == "resumes/owner/1700000000000-cv.pdf"
        # The response carries a download link, not the storage key
        assert result.user.student_profile.resume_url == "https://bucket.s3.amazonaws.com/signed"
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_register_fails_when_resume_upload_fails(
        self, mock_db, user_repo, mock_send_code, s3_storage, student_registration, pdf_resume
    ):
        s3_storage.put.side_effect = StorageError("Resume upload failed.")

        with pytest.raises(ResumeUploadError) as exc_info:
            await register(mock_db, student_registration, s3_storage, pdf_resume)

        assert exc_info.value.status_code == 503
        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_called()
        mock_send_code.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_rejects_non_pdf_resume(
        self, mock_db, user_repo, mock_send_code, s3_storage, student_registration
    ):
        resume = ResumeUpload(filename="cv.docx", content_type="application/msword", data=b"doc")

        with pytest.raises(InvalidResumeError):
            await register(mock_db, student_registration, s3_storage, resume)

        user_repo.create.assert_not_called()
        s3_storage.put.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_rejects_oversized_resume(
        self, mock_db, user_repo, mock_send_code, s3_storage, student_registration
    ):
        resume = ResumeUpload(
            filename="cv.pdf", content_type="application/pdf", data=b"0" * (5 * 1024 * 1024 + 1)
        )

        with pytest.raises(InvalidResumeError):
            await register(mock_db, student_registration, s3_storage, resume)

        user_repo.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_succeeds_when_email_fails(
        self, mock_db, user_repo, storage, student_registration
    ):
        with patch(
            "jobsphere.modules.auth.service.send_verification_email",
            new_callable=AsyncMock,
            side_effect=RuntimeError("Resend is down"),
        ):
            result = await register(mock_db, student_registration, storage)

        assert result.needs_verification is True
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_register_does_not_wait_past_email_timeout(
        self, mock_db, user_repo, storage, student_registration
    ):
        async def slow_send(**kwargs):
            await asyncio.sleep(5)
            return True

        with (
            patch("jobsphere.modules.auth.service.send_verification_email", side_effect=slow_send),
            patch.object(settings, "email_send_timeout_seconds", 0.01),
        ):
            result = await asyncio.wait_for(
                register(mock_db, student_registration, storage), timeout=2
            )

        assert result.needs_verification is True


class TestVerifyEmail:
    """Tests for verify_email function."""

    @pytest.mark.asyncio
    async def test_verify_unapproved_user_needs_approval(
        self, mock_db, user_repo, storage, make_user
    ):
        user = make_user()
        code = issue_code(user)
        user_repo.get_by_email.return_value = user

        result = await verify_email(mock_db, "jane@x.com", code, storage)

        assert result.needs_approval is True
        assert result.access_token is None
        assert user.email_verified is True
        assert user.email_verification_code_hash is None
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_verify_approved_user_gets_session(
        self, mock_db, user_repo, storage, make_user
    ):
        user = make_user(is_approved=True)
        code = issue_code(user)
        user_repo.get_by_email.return_value = user

        result = await verify_email(mock_db, "jane@x.com", code, storage)

        assert result.needs_approval is False
        assert result.token_type == "bearer"
        assert decode_token(result.access_token)["sub"] == str(user.id)

    @pytest.mark.asyncio
    async def test_verify_wrong_code(self, mock_db, user_repo, storage, make_user):
        user = make_user()
        code = issue_code(user)
        user_repo.get_by_email.return_value = user
        wrong = "000000" if code != "000000" else "111111"

        with pytest.raises(CodeMismatchError):
            await verify_email(mock_db, "jane@x.com", wrong, storage)

        assert user.email_verified is False
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_verify_unknown_email(self, mock_db, user_repo, storage):
        with pytest.raises(UserNotFoundError):
            await verify_email(mock_db, "nobody@x.com", "123456", storage)

    @pytest.mark.asyncio
    async def test_verify_already_verified_is_idempotent(
        self, mock_db, user_repo, storage, make_user
    ):
        user = make_user(email_verified=True, is_approved=True)
        user_repo.get_by_email.return_value = user

        result = await verify_email(mock_db, "jane@x.com", "whatever", storage)

        assert result.already_verified is True
        assert result.access_token is not None
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_verified_non_primary_admin_gets_no_session(
        self, mock_db, user_repo, storage, make_user
    ):
        rogue = make_user(
            email="mallory@x.com", role=UserRole.ADMIN, email_verified=True, is_approved=True
        )
        user_repo.get_by_email.return_value = rogue

        with patch.object(settings, "admin_email", "boss@x.com"):
            with pytest.raises(InvalidCredentialsError):
                await verify_email(mock_db, "mallory@x.com", "000000", storage)

    @pytest.mark.asyncio
    async def test_unverified_non_primary_admin_is_refused_before_code_check(
        self, mock_db, user_repo, storage, make_user
    ):
        rogue = make_user(email="mallory@x.com", role=UserRole.ADMIN, is_approved=True)
        code = issue_code(rogue)
        user_repo.get_by_email.return_value = rogue

        with patch.object(settings, "admin_email", "boss@x.com"):
            with pytest.raises(InvalidCredentialsError):
                await verify_email(mock_db, "mallory@x.com", code, storage)

        assert rogue.email_verified is False
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_primary_admin_verifies(self, mock_db, user_repo, storage, make_user):
        admin = make_user(
            email="boss@x.com", role=UserRole.ADMIN, email_verified=True, is_approved=True
        )
        user_repo.get_by_email.return_value = admin

        with patch.object(settings, "admin_email", "boss@x.com"):
            result = await verify_email(mock_db, "boss@x.com", "000000", storage)

        assert decode_token(result.access_token)["role"] == "ADMIN"


class TestResendVerification:
    """Tests for resend_verification function."""

    @pytest.mark.asyncio
    async def test_unknown_email_gets_generic_message(self, mock_db, user_repo, mock_send_code):
        result = await resend_verification(mock_db, "nobody@x.com")

        assert result.message == RESEND_MESSAGE
        mock_send_code.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_verified_user_gets_generic_message(
        self, mock_db, user_repo, mock_send_code, make_user
    ):
        user_repo.get_by_email.return_value = make_user(email_verified=True)

        result = await resend_verification(mock_db, "jane@x.com")

        assert result.message == RESEND_MESSAGE
        mock_send_code.assert_not_called()

    @pytest.mark.asyncio
    async def test_unverified_user_gets_new_code(
        self, mock_db, user_repo, mock_send_code, make_user
    ):
        user = make_user()
        issue_code(user)
        user_repo.get_by_email.return_value = user

        result = await resend_verification(mock_db, "jane@x.com")

        assert result.message == RESEND_MESSAGE
        mock_db.commit.assert_awaited_once()
        mock_send_code.assert_awaited_once()
        new_code = mock_send_code.await_args.kwargs["code"]
        assert user.email_verification_code_hash == hash_code(new_code)


class TestLogin:
    """Tests for login function."""

    @pytest.mark.asyncio
    async def test_unknown_email(self, mock_db, user_repo, storage):
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await login(mock_db, "nobody@x.com", PASSWORD, storage)
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_password_same_error_as_unknown_email(
        self, mock_db, user_repo, storage, make_user
    ):
        user_repo.get_by_email.return_value = make_user(email_verified=True, is_approved=True)

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await login(mock_db, "jane@x.com", "wrong", storage)

        user_repo.get_by_email.return_value = None
        with pytest.raises(InvalidCredentialsError) as unknown:
            await login(mock_db, "nobody@x.com", PASSWORD, storage)

        assert wrong_password.value.message == unknown.value.message

    @pytest.mark.asyncio
    async def test_unverified(self, mock_db, user_repo, storage, make_user):
        user_repo.get_by_email.return_value = make_user()

        with pytest.raises(EmailNotVerifiedError) as exc_info:
            await login(mock_db, "jane@x.com", PASSWORD, storage)
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_pending_approval(self, mock_db, user_repo, storage, make_user):
        user_repo.get_by_email.return_value = make_user(email_verified=True)

        with pytest.raises(PendingApprovalError):
            await login(mock_db, "jane@x.com", PASSWORD, storage)

    @pytest.mark.asyncio
    async def test_success_issues_seven_day_session(
        self, mock_db, user_repo, storage, make_user
    ):
        user = make_user(email_verified=True, is_approved=True)
        user_repo.get_by_email.return_value = user

        result = await login(mock_db, "jane@x.com", PASSWORD, storage)

        claims = decode_token(result.access_token)
        assert claims["sub"] == str(user.id)
        assert claims["role"] == "STUDENT"
        assert claims["email"] == "jane@x.com"
        assert claims["name"] == "Jane"
        assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60
        assert result.user.id == user.id

    @pytest.mark.asyncio
    async def test_admin_login_rejected_for_other_emails(
        self, mock_db, user_repo, storage, make_user
    ):
        rogue = make_user(
            email="rogue@x.com", role=UserRole.ADMIN, email_verified=True, is_approved=True
        )
        user_repo.get_by_email.return_value = rogue

        with patch.object(settings, "admin_email", "admin@x.com"):
            with pytest.raises(InvalidCredentialsError):
                await login(mock_db, "rogue@x.com", PASSWORD, storage)

    @pytest.mark.asyncio
    async def test_admin_login_rejected_when_admin_email_unset(
        self, mock_db, user_repo, storage, make_user
    ):
        user_repo.get_by_email.return_value = make_user(
            email="admin@x.com", role=UserRole.ADMIN, email_verified=True, is_approved=True
        )

        with patch.object(settings, "admin_email", None):
            with pytest.raises(InvalidCredentialsError):
                await login(mock_db, "admin@x.com", PASSWORD, storage)

    @pytest.mark.asyncio
    async def test_primary_admin_login(self, mock_db, user_repo, storage, make_user):
        user_repo.get_by_email.return_value = make_user(
            email="admin@x.com", role=UserRole.ADMIN, email_verified=True, is_approved=True
        )

        with patch.object(settings, "admin_email", "Admin@X.com"):
            result = await login(mock_db, "admin@x.com", PASSWORD, storage)

        assert decode_token(result.access_token)["role"] == "ADMIN"


class TestAccountLifecycle:
    """Register -> login refused -> verify -> admin approves -> login succeeds."""

    @pytest.mark.asyncio
    async def test_student_lifecycle(
        self, mock_db, user_repo, mock_send_code, storage, student_registration
    ):
        await register(mock_db, student_registration, storage)
        jane = user_repo.created_users[0]
        user_repo.get_by_email.return_value = jane

        assert jane.email_verified is False
        assert jane.is_approved is False

        with pytest.raises(EmailNotVerifiedError):
            await login(mock_db, "jane@x.com", PASSWORD, storage)

        code = mock_send_code.await_args.kwargs["code"]
        verified = await verify_email(mock_db, "jane@x.com", code, storage)
        assert verified.needs_approval is True
        assert verified.access_token is None

        with patch("jobsphere.modules.admin.service.UserRepository") as admin_repo:
            admin_repo.get_by_id = AsyncMock(return_value=jane)
            await admin_update_user(mock_db, jane.id, AdminUserUpdate(is_approved=True), storage)

        session = await login(mock_db, "jane@x.com", PASSWORD, storage)
        assert decode_token(session.access_token)["sub"] == str(jane.id)
