"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 12:00:00.000000

This migration creates:
1. users, with a case-insensitive unique index on email
2. student_profiles and company_profiles (one per user)
3. jobs, owned by a company profile
4. applications, unique per (job_id, student_id)

Foreign keys do not cascade. Deleting a user removes its dependents
explicitly, in order, inside one transaction.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create all tables, constraints and indexes."""
    op.create_table(
        "users",
        *_audit_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column(
            "role",
            sa.Enum("STUDENT", "COMPANY", "ADMIN", name="user_role"),
            nullable=False,
        ),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("email_verification_code_hash", sa.String(length=64), nullable=True),
        sa.Column(
            "email_verification_expires_at", sa.DateTime(timezone=True), nullable=True
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index(
        "ix_users_email_lower",
        "users",
        [sa.text("lower(email)")],
        unique=True,
    )

    op.create_table(
        "student_profiles",
        *_audit_columns(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("skills", sa.Text(), nullable=False, server_default=""),
        sa.Column("bio", sa.Text(), nullable=False, server_default=""),
        sa.Column("resume_url", sa.String(length=1024), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "company_profiles",
        *_audit_columns(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("company_name", sa.String(length=200), nullable=False),
        sa.Column("website", sa.String(length=500), nullable=True),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "jobs",
        *_audit_columns(),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("type", sa.Enum("JOB", "INTERNSHIP", name="job_type"), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=False),
        sa.Column("salary_range", sa.String(length=100), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default="false"),
        sa.ForeignKeyConstraint(["company_id"], ["company_profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_jobs_company_id", "jobs", ["company_id"])
    op.create_index("ix_jobs_is_approved_created_at", "jobs", ["is_approved", "created_at"])

    op.create_table(
        "applications",
        *_audit_columns(),
        sa.Column("job_id", sa.Uuid(), nullable=False),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("cover_letter", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("PENDING", "REVIEWED", "ACCEPTED", "REJECTED", name="application_status"),
            nullable=False,
            server_default="PENDING",
        ),
        sa.ForeignKeyConstraint(["job_id"], ["jobs.id"]),
        sa.ForeignKeyConstraint(["student_id"], ["student_profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("job_id", "student_id", name="uq_applications_job_student"),
    )
    op.create_index("ix_applications_student_id", "applications", ["student_id"])


def downgrade() -> None:
    """Drop everything in reverse dependency order."""
    op.drop_index("ix_applications_student_id", table_name="applications")
    op.drop_table("applications")
    op.drop_index("ix_jobs_is_approved_created_at", table_name="jobs")
    op.drop_index("ix_jobs_company_id", table_name="jobs")
    op.drop_table("jobs")
    op.drop_table("company_profiles")
    op.drop_table("student_profiles")
    op.drop_index("ix_users_email_lower", table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    sa.Enum(name="application_status").drop(bind, checkfirst=True)
    sa.Enum(name="job_type").drop(bind, checkfirst=True)
    sa.Enum(name="user_role").drop(bind, checkfirst=True)
