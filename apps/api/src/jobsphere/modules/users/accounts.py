"""
Account Variants

A user's role decides which profile it owns. At the domain layer a User
row is resolved into exactly one of the variants below, so code holding a
CompanyAccount always has a company profile and never a student one.
"""

from dataclasses import dataclass

from jobsphere.modules.shared import ConflictError, ForbiddenError
from jobsphere.modules.users.models import CompanyProfile, StudentProfile, User, UserRole


class ProfileMismatchError(ConflictError):
    """Raised when stored rows do not form a legal role/profile combination."""

    def __init__(self, user: User):
        super().__init__(
            message="Account profile does not match its role.",
            error_code="PROFILE_MISMATCH",
        )
        self.user_id = user.id


class AccountNotActiveError(ForbiddenError):
    """Raised when an unverified or unapproved account attempts a write."""

    def __init__(self):
        super().__init__(
            message="Your account is not active. Verify your email and wait for approval.",
            error_code="ACCOUNT_NOT_ACTIVE",
        )


@dataclass(frozen=True)
class StudentAccount:
    user: User
    profile: StudentProfile


@dataclass(frozen=True)
class CompanyAccount:
    user: User
    profile: CompanyProfile


@dataclass(frozen=True)
class AdminAccount:
    user: User


Account = StudentAccount | CompanyAccount | AdminAccount


def resolve_account(user: User) -> Account:
    """
    Resolve a user into its account variant.

    Raises:
        ProfileMismatchError: If the user holds both profiles, lacks the
            profile its role requires, or is an admin holding a profile
    """
    student = user.student_profile
    company = user.company_profile

    if student is not None and company is not None:
        raise ProfileMismatchError(user)

    if user.role == UserRole.STUDENT and student is not None:
        return StudentAccount(user=user, profile=student)
    if user.role == UserRole.COMPANY and company is not None:
        return CompanyAccount(user=user, profile=company)
    if user.role == UserRole.ADMIN and student is None and company is None:
        return AdminAccount(user=user)

    raise ProfileMismatchError(user)


def ensure_active(account: StudentAccount | CompanyAccount) -> None:
    """
    Require a verified and approved account.

    Sessions outlive approval changes, so writes check the stored state.

    Raises:
        AccountNotActiveError: If the email is unverified or the account
            is not approved
    """
    user = account.user
    if not (user.email_verified and user.is_approved):
        raise AccountNotActiveError()
