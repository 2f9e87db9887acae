"""
Authentication Service Layer

Credential checks, token issuance and self-registration.

Security considerations:
- Unknown email and wrong password produce the same error, and a dummy
  hash comparison runs for unknown emails so response time does not
  reveal which accounts exist
- The approval check happens only after the password is verified
- Passwords and tokens are never logged
"""

import logging
from functools import lru_cache

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.exceptions import (
    AuthorizationError,
    ConflictError,
    ValidationError,
)
from eduportal.core.security import create_access_token, hash_password, verify_password
from eduportal.modules.auth.schemas import RegisterRequest
from eduportal.modules.users.models import AccountStatus, User, UserRole
from eduportal.modules.users.repository import UserRepository
from eduportal.modules.users.service import validate_profile

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid Email or Password!"

# Roles that can sign up through POST /auth/register. Institutions have
# their own multipart registration; admins are seeded.
SELF_REGISTRATION_ROLES = frozenset({UserRole.STUDENT, UserRole.TEACHER, UserRole.CENTER})

# Roles whose new accounts wait for an admin before they can log in
APPROVAL_REQUIRED_ROLES = frozenset({UserRole.INSTITUTION, UserRole.CENTER})

_STATUS_MESSAGES = {
    AccountStatus.PENDING: "Your account is not approved yet!",
    AccountStatus.REJECTED: "Your account registration was rejected.",
}


@lru_cache
def _dummy_password_hash() -> str:
    return hash_password("dummy-password-for-timing")


def initial_status(role: UserRole) -> AccountStatus:
    """Status a newly registered account of this role starts in."""
    if role in APPROVAL_REQUIRED_ROLES:
        return AccountStatus.PENDING
    return AccountStatus.APPROVED


def issue_token(user: User) -> str:
    """Create a session token for a user."""
    return create_access_token(subject=str(user.id), role=user.role.value)


async def ensure_email_available(db: AsyncSession, email: str) -> None:
    """
    Raises:
        ConflictError: If the email is already registered
    """
    if await UserRepository.email_exists(db, email):
        logger.warning("Registration attempt with an already registered email")
        raise ConflictError("Email is already registered")


async def register_account(db: AsyncSession, data: RegisterRequest) -> tuple[User, str]:
    """
    Register a student, teacher or center account.

    Returns:
        The created user and a session token

    Raises:
        ValidationError: If the role cannot self-register or the profile is invalid
        ConflictError: If the email is already registered
    """
    if data.role not in SELF_REGISTRATION_ROLES:
        raise ValidationError(f"Role ({data.role.value}) cannot register through this endpoint")

    profile = validate_profile(data.role, data.profile)
    await ensure_email_available(db, data.email)

    password_hash = await run_in_threadpool(hash_password, data.password)
    user = await UserRepository.create(
        db,
        role=data.role,
        email=data.email,
        password_hash=password_hash,
        name=data.name,
        phone=data.phone,
        status=initial_status(data.role),
        profile=profile,
    )

    logger.info(f"Registered {user.role.value} account {user.id}")
    return user, issue_token(user)


async def authenticate(
    db: AsyncSession,
    email: str | None,
    password: str | None,
) -> tuple[User, str]:
    """
    Check credentials and issue a session token.

    Returns:
        The authenticated user and a session token

    Raises:
        ValidationError 400: Missing fields, unknown email or wrong password
        AuthorizationError 403: Correct credentials but the account is not approved
    """
    if not email or not password:
        raise ValidationError("Please provide email and password!")

    user = await UserRepository.get_by_email(db, email)

    if user is None:
        await run_in_threadpool(verify_password, password, _dummy_password_hash())
        logger.warning("Login attempt for unknown email")
        raise ValidationError(INVALID_CREDENTIALS_MESSAGE)

    if not await run_in_threadpool(verify_password, password, user.password_hash):
        logger.warning(f"Invalid password for user {user.id}")
        raise ValidationError(INVALID_CREDENTIALS_MESSAGE)

    if user.status != AccountStatus.APPROVED:
        logger.warning(f"Login attempt for {user.status.value} account {user.id}")
        raise AuthorizationError(_STATUS_MESSAGES[user.status])

    logger.info(f"User logged in: {user.id} (role: {user.role.value})")
    return user, issue_token(user)
