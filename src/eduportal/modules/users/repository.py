"""
User Repository

Database operations for user management.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.exceptions import ConflictError
from eduportal.modules.shared import parse_uuid
from eduportal.modules.users.models import AccountStatus, User, UserRole

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        role: UserRole,
        email: str,
        password_hash: str,
        name: str,
        profile: dict[str, Any],
        phone: str | None = None,
        status: AccountStatus = AccountStatus.APPROVED,
    ) -> User:
        """
        Create a new user record.

        Args:
            db: Database session
            role: User's role
            email: User's email address (unique, stored lower-cased)
            password_hash: Hashed password
            name: Display name
            profile: Role-specific data, already validated
            phone: Phone number (optional)
            status: Initial account status

        Returns:
            Created User instance

        Raises:
            ConflictError: If the email was registered by a concurrent request
        """
        user = User(
            role=role,
            email=email.lower(),
            password_hash=password_hash,
            name=name,
            phone=phone,
            status=status,
            profile=profile,
        )

        db.add(user)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning(f"Insert rejected by unique email index: {e.orig}")
            raise ConflictError("Email is already registered") from e
        await db.refresh(user)

        logger.info(f"Created user: {user.id} ({user.role.value}, status={user.status.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: str | UUID) -> User | None:
        """
        Get a user by ID.

        Returns:
            User instance or None if not found (or the ID is malformed)
        """
        user_id_str = parse_uuid(user_id)
        if user_id_str is None:
            return None
        result = await db.execute(select(User).where(User.id == user_id_str))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """Get a user by email address (case-insensitive)."""
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(db: AsyncSession, email: str) -> bool:
        """Check if an email address is already registered."""
        user = await UserRepository.get_by_email(db, email)
        return user is not None

    @staticmethod
    async def update(db: AsyncSession, user: User, **fields: Any) -> User:
        """
        Write already-validated field values to a user.

        Args:
            db: Database session
            user: The user to modify
            **fields: Column values to set

        Returns:
            The refreshed User instance
        """
        for field, value in fields.items():
            setattr(user, field, value)

        await db.commit()
        await db.refresh(user)

        logger.info(f"Updated user {user.id}: {sorted(fields)}")
        return user

    @staticmethod
    async def list_users(
        db: AsyncSession,
        *,
        role: UserRole | None = None,
        status: AccountStatus | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[User], int]:
        """
        List users with optional role/status filters.

        Returns:
            Tuple of (users for the requested page, total matching count)
        """
        conditions = []
        if role is not None:
            conditions.append(User.role == role)
        if status is not None:
            conditions.append(User.status == status)

        total = await db.scalar(select(func.count()).select_from(User).where(*conditions))

        result = await db.execute(
            select(User)
            .where(*conditions)
            .order_by(User.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0
