"""
Authentication and Authorization Module

Provides authentication dependencies for FastAPI endpoints.

- ``get_current_user`` resolves the session token (cookie, or a Bearer
  header for API clients) to a stored user of any role.
- ``require_roles`` builds a guard that restricts an endpoint to an
  allow-list of roles, optionally only for approved accounts.
- ``set_session_cookie`` / ``clear_session_cookie`` manage the cookie
  issued on login and registration.
"""

import logging

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.config import settings
from eduportal.core.database import get_db
from eduportal.core.exceptions import AuthenticationError, AuthorizationError
from eduportal.core.security import decode_token
from eduportal.modules.users.models import AccountStatus, User, UserRole
from eduportal.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation; the cookie is checked first
security = HTTPBearer(
    auto_error=False,
    description="JWT session token (also accepted from the session cookie)",
)


def _extract_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    if credentials:
        return credentials.credentials
    return None


async def resolve_user(db: AsyncSession, token: str) -> User:
    """
    Resolve a session token to the stored user it was issued for.

    Raises:
        AuthenticationError: If the token is invalid or expired, carries an
            unknown role, or no matching user exists
        AuthorizationError: If the account has been rejected
    """
    payload = decode_token(token)
    if payload is None:
        logger.warning("Invalid or expired session token")
        raise AuthenticationError("User not authorized")

    if payload.get("type", "access") != "access":
        raise AuthenticationError("User not authorized")

    try:
        role = UserRole(payload.get("role"))
    except ValueError:
        logger.warning(f"Session token carries unknown role: {payload.get('role')!r}")
        raise AuthenticationError("Invalid user type") from None

    user = await UserRepository.get_by_id(db, payload["sub"])
    if user is None or user.role != role:
        logger.warning(f"No {role.value} found for token subject {payload['sub']}")
        raise AuthenticationError("User not found based on token")

    # Tokens issued at registration outlive a rejection
    if user.status == AccountStatus.REJECTED:
        logger.warning(f"Session token used by rejected account {user.id}")
        raise AuthorizationError("Your account registration was rejected.")

    return user


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    FastAPI dependency that validates the session token and returns the user.

    The resolved user is also stored on ``request.state.user``.

    Raises:
        AuthenticationError 401: If the token is missing, invalid or expired,
            or does not resolve to a user
    """
    token = _extract_token(request, credentials)
    if not token:
        raise AuthenticationError("Please login to access this resource")

    user = await resolve_user(db, token)
    request.state.user = user

    logger.debug(f"Authenticated {user.role.value}: {user.id}")
    return user


def require_roles(*roles: UserRole, approved_only: bool = False):
    """
    Build a dependency restricting an endpoint to the given roles.

    Usage:
        @router.post("/admissions")
        async def create(
            user: User = Depends(require_roles(UserRole.INSTITUTION, approved_only=True)),
        ):
            ...

    Args:
        *roles: Roles allowed to continue
        approved_only: Also require the account to be approved

    Raises:
        AuthorizationError 403: If the user's role is not allowed, or the
            account is not approved when ``approved_only`` is set
    """
    allowed = frozenset(roles)

    async def guard(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            logger.warning(
                f"Access denied: user {user.id} has role '{user.role.value}', "
                f"requires one of {sorted(r.value for r in allowed)}"
            )
            raise AuthorizationError(
                f"Role ({user.role.value}) is not allowed to access this resource"
            )

        if approved_only and not user.is_approved:
            logger.warning(f"Access denied: account {user.id} is {user.status.value}")
            raise AuthorizationError("Your account has not been approved yet.")

        return user

    return guard


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session token cookie to a response."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.cookie_max_age_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    """Expire the session token cookie."""
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


__all__ = [
    "clear_session_cookie",
    "get_current_user",
    "require_roles",
    "resolve_user",
    "set_session_cookie",
]
