"""
Vacancy Models

Teaching vacancies advertised by institutions and centers.
"""

from datetime import date

from sqlalchemy import Boolean, Date, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import ENUM, UUID
from sqlalchemy.orm import Mapped, mapped_column

from eduportal.modules.shared import BaseModel
from eduportal.modules.users.models import UserRole


class Vacancy(BaseModel):
    """A vacancy advertised by one institution or center."""

    __tablename__ = "vacancies"

    posted_by_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
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
    subject: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    qualification: Mapped[str | None] = mapped_column(String(200), nullable=True)
    salary: Mapped[int | None] = mapped_column(Integer, nullable=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    openings: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    deadline: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_open: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Vacancy(id={self.id}, title={self.title}, posted_by={self.posted_by_id})>"
