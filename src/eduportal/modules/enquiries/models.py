"""
Enquiry Models

Enquiries sent by students about admissions and by teachers about
vacancies. Each enquiry targets exactly one admission or one vacancy and
records the target's owner so owners can list what they received.
"""

from enum import Enum

from sqlalchemy import CheckConstraint, ForeignKey, Index, Text, text
from sqlalchemy.dialects.postgresql import ENUM, UUID
from sqlalchemy.orm import Mapped, mapped_column

from eduportal.modules.shared import BaseModel


class EnquiryType(str, Enum):
    ADMISSION = "admission"
    VACANCY = "vacancy"


class EnquiryStatus(str, Enum):
    """Owner's decision on an enquiry."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Enquiry(BaseModel):
    """An enquiry from a student or teacher to the owner of a posting."""

    __tablename__ = "enquiries"
    __table_args__ = (
        CheckConstraint(
            "(admission_id IS NULL) <> (vacancy_id IS NULL)",
            name="ck_enquiries_single_target",
        ),
        Index("ix_enquiries_owner_status", "owner_id", "status"),
        # At most one pending enquiry per enquirer and target
        Index(
            "uq_enquiries_pending_admission",
            "enquirer_id",
            "admission_id",
            unique=True,
            postgresql_where=text("status = 'pending' AND admission_id IS NOT NULL"),
        ),
        Index(
            "uq_enquiries_pending_vacancy",
            "enquirer_id",
            "vacancy_id",
            unique=True,
            postgresql_where=text("status = 'pending' AND vacancy_id IS NOT NULL"),
        ),
    )

    enquiry_type: Mapped[EnquiryType] = mapped_column(
        ENUM(EnquiryType, name="enquiry_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    # Target (exactly one is set)
    admission_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("admissions.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    vacancy_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("vacancies.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    # Parties
    owner_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    enquirer_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[EnquiryStatus] = mapped_column(
        ENUM(EnquiryStatus, name="enquiry_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=EnquiryStatus.PENDING,
    )

    def __repr__(self) -> str:
        return f"<Enquiry(id={self.id}, type={self.enquiry_type.value}, status={self.status.value})>"
