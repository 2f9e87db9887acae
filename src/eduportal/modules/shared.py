"""
Shared model base.

Every table gets a UUID primary key and audit timestamps. Also holds small
helpers used by several resource services.
"""

import uuid
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from eduportal.core.database import Base
from eduportal.core.exceptions import ValidationError


class BaseModel(Base):
    """Abstract base with id, created_at and updated_at columns."""

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


def reject_null_updates(changes: dict[str, Any], required: Iterable[str]) -> None:
    """
    Refuse partial updates that clear a required column.

    Raises:
        ValidationError: If any required field is explicitly set to null
    """
    cleared = sorted(field for field in required if field in changes and changes[field] is None)
    if cleared:
        raise ValidationError(f"Fields cannot be empty: {', '.join(cleared)}")


def parse_uuid(value: str | uuid.UUID) -> str | None:
    """Normalise a path ID to its canonical string form, or None if malformed."""
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        return None
