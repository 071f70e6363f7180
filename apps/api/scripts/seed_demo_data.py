"""
Seed Demo Data

Creates the primary admin, a demo company with three approved postings
and a demo student. Existing accounts are left alone; the demo company's
postings (and their applications) are recreated on every run.

The admin account uses ADMIN_EMAIL so that it can log in.

Usage:
    cd apps/api
    SEED_PASSWORD=... python scripts/seed_demo_data.py
"""

import asyncio
import os
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from jobsphere.core.config import settings  # noqa: E402
from jobsphere.core.database import async_session_maker, close_db  # noqa: E402
from jobsphere.core.redis import close_redis, get_redis, init_redis  # noqa: E402
from jobsphere.core.security import hash_password  # noqa: E402
from jobsphere.modules.applications import repository as application_repository  # noqa: E402
from jobsphere.modules.jobs import repository as job_repository  # noqa: E402
from jobsphere.modules.jobs.cache import ListingCache  # noqa: E402
from jobsphere.modules.jobs.models import JobType  # noqa: E402
from jobsphere.modules.users.models import UserRole  # noqa: E402
from jobsphere.modules.users.repository import UserRepository  # noqa: E402

COMPANY_EMAIL = "company@portal.com"
STUDENT_EMAIL = "student@portal.com"

DEMO_JOBS = [
    {
        "title": "Frontend Engineer",
        "job_type": JobType.JOB,
        "location": "Remote",
        "salary_range": "$90k - $120k",
        "description": "Build modern UI experiences with React and Tailwind.",
    },
    {
        "title": "Backend Intern",
        "job_type": JobType.INTERNSHIP,
        "location": "New York, NY",
        "salary_range": "$25/hr",
        "description": "Support API development using Python and PostgreSQL.",
    },
    {
        "title": "Product Design Intern",
        "job_type": JobType.INTERNSHIP,
        "location": "San Francisco, CA",
        "salary_range": "$30/hr",
        "description": "Collaborate with product and engineering to shape UX.",
    },
]


async def seed_demo_data() -> None:
    """Create demo accounts and postings if they don't exist."""
    password_hash = hash_password(os.getenv("SEED_PASSWORD", "password123"))

    admin_email = settings.normalized_admin_email
    if not admin_email:
        print("ADMIN_EMAIL is not set; skipping the admin account (it could never log in).")

    async with async_session_maker() as db:
        if admin_email and not await UserRepository.email_exists(db, admin_email):
            await UserRepository.create(
                db,
                name="Admin User",
                email=admin_email,
                password_hash=password_hash,
                role=UserRole.ADMIN,
                is_approved=True,
                email_verified=True,
            )
            print(f"Admin created: {admin_email}")

        company_user = await UserRepository.get_by_email(db, COMPANY_EMAIL)
        if company_user is None:
            company_user = await UserRepository.create(
                db,
                name="Acme HR",
                email=COMPANY_EMAIL,
                password_hash=password_hash,
                role=UserRole.COMPANY,
                is_approved=True,
                email_verified=True,
            )
            await UserRepository.create_company_profile(
                db,
                company_user,
                company_name="Acme Corp",
                website="https://acme.example.com",
                description="We build delightful products for modern teams.",
            )
            print(f"Company created: {COMPANY_EMAIL}")

        if await UserRepository.get_by_email(db, STUDENT_EMAIL) is None:
            student_user = await UserRepository.create(
                db,
                name="Jamie Student",
                email=STUDENT_EMAIL,
                password_hash=password_hash,
                role=UserRole.STUDENT,
                is_approved=True,
                email_verified=True,
            )
            await UserRepository.create_student_profile(
                db,
                student_user,
                skills="React, Python, SQL",
                bio="Computer science junior passionate about full-stack development.",
                resume_url="https://example.com/resume.pdf",
            )
            print(f"Student created: {STUDENT_EMAIL}")

        company = company_user.company_profile
        if company is None:
            raise RuntimeError(f"{COMPANY_EMAIL} exists without a company profile")

        # Applications first; foreign keys do not cascade
        await application_repository.delete_by_company(db, company.id)
        await job_repository.delete_by_company(db, company.id)
        for job in DEMO_JOBS:
            await job_repository.create(db, company_id=company.id, is_approved=True, **job)

        await db.commit()
        print(f"Seeded {len(DEMO_JOBS)} jobs for {company.company_name}")

    # Drop stale listings so the new postings show up immediately
    try:
        await init_redis()
        await ListingCache(await get_redis()).invalidate()
    except Exception as e:
        print(f"Redis unavailable, listing cache not cleared: {e}")
    finally:
        await close_redis()

    await close_db()


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
