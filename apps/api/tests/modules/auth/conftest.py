"""
Fixtures for authentication tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from jobsphere.core.storage import ResumeStorage
from jobsphere.modules.auth.schemas import RegisterRequest, ResumeUpload
from jobsphere.modules.users.models import CompanyProfile, StudentProfile, User, UserRole


@pytest.fixture
def user_repo():
    """
    Patch UserRepository in the auth service.

    create/create_*_profile build real transient objects, so the service
    sees what a flushed row would look like.
    """
    with patch("jobsphere.modules.auth.service.UserRepository") as repo:

        async def create(
            db, *, name, email, password_hash, role, is_approved=False, email_verified=False
        ):
            user = User(
                id=uuid4(),
                name=name,
                email=email.strip().lower(),
                password_hash=password_hash,
                role=role,
                is_approved=is_approved,
                email_verified=email_verified,
                created_at=datetime.now(UTC),
            )
            repo.created_users.append(user)
            return user

        async def create_student_profile(db, user, *, skills="", bio="", resume_url=None):
            profile = StudentProfile(
                id=uuid4(), user_id=user.id, skills=skills, bio=bio, resume_url=resume_url
            )
            user.student_profile = profile
            return profile

        async def create_company_profile(db, user, *, company_name, website=None, description=""):
            profile = CompanyProfile(
                id=uuid4(),
                user_id=user.id,
                company_name=company_name,
                website=website,
                description=description,
            )
            user.company_profile = profile
            return profile

        repo.created_users = []
        repo.email_exists = AsyncMock(return_value=False)
        repo.get_by_email = AsyncMock(return_value=None)
        repo.create = AsyncMock(side_effect=create)
        repo.create_student_profile = AsyncMock(side_effect=create_student_profile)
        repo.create_company_profile = AsyncMock(side_effect=create_company_profile)
        yield repo


@pytest.fixture
def mock_send_code():
    """Patch the verification email sender."""
    with patch(
        "jobsphere.modules.auth.service.send_verification_email",
        new_callable=AsyncMock,
        return_value=True,
    ) as send:
        yield send


@pytest.fixture
def s3_storage():
    """A resume store whose S3 calls are mocked."""
    store = MagicMock(spec=ResumeStorage)
    store.put = AsyncMock(return_value="resumes/owner/1700000000000-cv.pdf")
    store.signed_url = AsyncMock(return_value="https://bucket.s3.amazonaws.com/signed")
    return store


@pytest.fixture
def student_registration():
    return RegisterRequest(
        name="Jane",
        email="Jane@X.com",
        password="correct horse battery staple",
        role="student",
        skills="Python, SQL",
        bio="CS junior",
    )


@pytest.fixture
def company_registration():
    return RegisterRequest(
        name="Acme HR",
        email="acme@x.com",
        password="correct horse battery staple",
        role=UserRole.COMPANY,
        company_name="Acme Corp",
        website="https://acme.example.com",
    )


@pytest.fixture
def pdf_resume():
    return ResumeUpload(filename="cv.pdf", content_type="application/pdf", data=b"%PDF-1.4 test")
