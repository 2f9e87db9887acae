"""
Account Review Service

Admins review accounts that registered into the ``pending`` state
(institutions and centers) and approve or reject them. Only pending
accounts can be decided; a decision is final.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.exceptions import ConflictError, NotFoundError
from eduportal.modules.users.models import AccountStatus, User, UserRole
from eduportal.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


async def list_accounts(
    db: AsyncSession,
    *,
    role: UserRole | None = None,
    status: AccountStatus | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[User], int]:
    return await UserRepository.list_users(db, role=role, status=status, skip=skip, limit=limit)


async def get_account(db: AsyncSession, user_id: str) -> User:
    """
    Raises:
        NotFoundError: If no user has this ID
    """
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


async def _decide(db: AsyncSession, admin: User, user_id: str, decision: AccountStatus) -> User:
    user = await get_account(db, user_id)

    if user.status != AccountStatus.PENDING:
        logger.warning(
            f"Admin {admin.id} cannot move account {user.id} from {user.status.value} "
            f"to {decision.value}"
        )
        raise ConflictError(
            f"Cannot change account in status: {user.status.value}. "
            "Only pending accounts can be approved or rejected."
        )

    user = await UserRepository.update(db, user, status=decision)
    logger.info(f"Admin {admin.id} set account {user.id} ({user.role.value}) to {decision.value}")
    return user


async def approve_account(db: AsyncSession, admin: User, user_id: str) -> User:
    """
    Approve a pending account so it can log in and publish.

    Raises:
        NotFoundError: If no user has this ID
        ConflictError: If the account is not pending
    """
    return await _decide(db, admin, user_id, AccountStatus.APPROVED)


async def reject_account(db: AsyncSession, admin: User, user_id: str) -> User:
    """
    Reject a pending account; it will not be able to log in.

    Raises:
        NotFoundError: If no user has this ID
        ConflictError: If the account is not pending
    """
    return await _decide(db, admin, user_id, AccountStatus.REJECTED)
