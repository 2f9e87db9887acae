"""
User Models

A single user table for all five roles. Role-specific data lives in the
``profile`` JSONB column and is validated by the role's profile schema
(see ``users.schemas``) before every write.
"""

from enum import Enum
from typing import Any

from sqlalchemy import String, Text
from sqlalchemy.dialects.postgresql import ENUM, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from eduportal.modules.shared import BaseModel


class UserRole(str, Enum):
    """User roles in the system."""

    STUDENT = "student"
    TEACHER = "teacher"
    INSTITUTION = "institution"
    CENTER = "center"
    ADMIN = "admin"


class AccountStatus(str, Enum):
    """Approval state of an account. Only approved accounts can log in."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class User(BaseModel):
    """
    User model for authentication and authorization.

    This is the core identity model shared by students, teachers,
    institutions, centers and admins.
    """

    __tablename__ = "users"

    role: Mapped[UserRole] = mapped_column(
        ENUM(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )

    # Authentication fields
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # Profile fields
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    phone: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
    )

    # Account status
    status: Mapped[AccountStatus] = mapped_column(
        ENUM(AccountStatus, name="account_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=AccountStatus.APPROVED,
        index=True,
    )

    # Role-specific extension data
    profile: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"

    @property
    def is_approved(self) -> bool:
        return self.status == AccountStatus.APPROVED
