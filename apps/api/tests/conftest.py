"""
Shared test fixtures.

Services are tested against a mocked AsyncSession and patched
repositories, as in the module tests. ORM objects are real, transient
instances so they serialize through the response schemas unchanged.
"""

from datetime import UTC, datetime
from fnmatch import fnmatchcase
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from jobsphere.core.security import hash_password
from jobsphere.core.storage import ResumeStorage
from jobsphere.modules.jobs.models import Job, JobType
from jobsphere.modules.users.models import CompanyProfile, StudentProfile, User, UserRole

TEST_PASSWORD = "correct horse battery staple"

# bcrypt is slow on purpose; hash once per session
_TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis covering the calls the cache makes."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}
        self.delete_calls: list[tuple[str, ...]] = []
        self.scan_calls = 0

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        self.ttls[key] = ex
        return True

    async def scan(self, cursor=0, match=None, count=None):
        self.scan_calls += 1
        keys = sorted(k for k in self.store if fnmatchcase(k, match or "*"))
        start = int(cursor)
        end = start + (count or 10)
        next_cursor = 0 if end >= len(keys) else end
        return next_cursor, keys[start:end]

    async def delete(self, *keys):
        self.delete_calls.append(keys)
        return sum(1 for key in keys if self.store.pop(key, None) is not None)


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.flush = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def storage():
    """A resume store with no S3 client behind it."""
    return ResumeStorage(None, None)


@pytest.fixture
def make_user():
    """
    Factory for transient users.

    Students and companies get their profile unless `with_profile=False`.
    """

    def _make_user(
        *,
        email: str = "jane@x.com",
        name: str = "Jane",
        role: UserRole = UserRole.STUDENT,
        is_approved: bool = False,
        email_verified: bool = False,
        with_profile: bool = True,
        company_name: str = "Acme Corp",
    ) -> User:
        user = User(
            id=uuid4(),
            name=name,
            email=email,
            password_hash=_TEST_PASSWORD_HASH,
            role=role,
            is_approved=is_approved,
            email_verified=email_verified,
            created_at=datetime.now(UTC),
        )
        if with_profile and role == UserRole.STUDENT:
            user.student_profile = StudentProfile(
                id=uuid4(), user_id=user.id, skills="", bio="", resume_url=None
            )
        if with_profile and role == UserRole.COMPANY:
            user.company_profile = CompanyProfile(
                id=uuid4(),
                user_id=user.id,
                company_name=company_name,
                website=None,
                description="",
            )
        return user

    return _make_user


@pytest.fixture
def make_job():
    """Factory for transient jobs owned by a company profile."""

    def _make_job(
        company: CompanyProfile,
        *,
        title: str = "Backend Intern",
        job_type: JobType = JobType.INTERNSHIP,
        location: str = "Remote",
        description: str = "Build APIs.",
        is_approved: bool = True,
    ) -> Job:
        job = Job(
            id=uuid4(),
            company_id=company.id,
            title=title,
            type=job_type,
            location=location,
            salary_range=None,
            description=description,
            is_approved=is_approved,
            created_at=datetime.now(UTC),
        )
        job.company = company
        return job

    return _make_job
