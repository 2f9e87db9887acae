"""
Material Models

Study materials shared by institutions, teachers and centers.
"""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import ENUM, UUID
from sqlalchemy.orm import Mapped, mapped_column

from eduportal.modules.shared import BaseModel
from eduportal.modules.users.models import UserRole


class Material(BaseModel):
    """A study material posted by one account."""

    __tablename__ = "materials"

    posted_by_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Shares the user_role type created with the users table
    posted_by_role: Mapped[UserRole] = mapped_column(
        ENUM(
            UserRole,
            name="user_role",
            values_callable=lambda e: [m.value for m in e],
            create_type=False,
        ),
        nullable=False,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    subject: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    resource_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<Material(id={self.id}, title={self.title}, posted_by={self.posted_by_id})>"
