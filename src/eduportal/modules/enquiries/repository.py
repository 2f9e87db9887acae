"""
Enquiries Repository

Database operations for enquiries. Reads are always scoped to one party
of the enquiry, either its owner or its enquirer.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.exceptions import ConflictError
from eduportal.modules.enquiries.models import Enquiry, EnquiryStatus, EnquiryType
from eduportal.modules.shared import parse_uuid

logger = logging.getLogger(__name__)


async def create(
    db: AsyncSession,
    *,
    enquiry_type: EnquiryType,
    owner_id: str,
    enquirer_id: str,
    message: str,
    admission_id: str | None = None,
    vacancy_id: str | None = None,
) -> Enquiry:
    """
    Insert a pending enquiry.

    Raises:
        ConflictError: If a concurrent request already stored a pending
            enquiry from the same enquirer for the same target
    """
    enquiry = Enquiry(
        enquiry_type=enquiry_type,
        admission_id=admission_id,
        vacancy_id=vacancy_id,
        owner_id=owner_id,
        enquirer_id=enquirer_id,
        message=message,
        status=EnquiryStatus.PENDING,
    )

    db.add(enquiry)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Pending enquiry insert rejected by unique index: {e.orig}")
        raise ConflictError(
            f"You already have a pending enquiry for this {enquiry_type.value}"
        ) from e
    await db.refresh(enquiry)

    return enquiry


async def has_pending(
    db: AsyncSession,
    enquirer_id: str,
    *,
    admission_id: str | None = None,
    vacancy_id: str | None = None,
) -> bool:
    """Check whether the enquirer already has a pending enquiry for the target."""
    query = select(Enquiry.id).where(
        Enquiry.enquirer_id == enquirer_id,
        Enquiry.status == EnquiryStatus.PENDING,
    )
    if admission_id is not None:
        query = query.where(Enquiry.admission_id == admission_id)
    if vacancy_id is not None:
        query = query.where(Enquiry.vacancy_id == vacancy_id)

    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none() is not None


async def get_for_owner(
    db: AsyncSession,
    enquiry_id: str,
    owner_id: str,
    enquiry_type: EnquiryType | None = None,
) -> Enquiry | None:
    """Get an enquiry only if it was addressed to the given owner."""
    enquiry_id = parse_uuid(enquiry_id)
    if enquiry_id is None:
        return None

    query = select(Enquiry).where(Enquiry.id == enquiry_id, Enquiry.owner_id == owner_id)
    if enquiry_type is not None:
        query = query.where(Enquiry.enquiry_type == enquiry_type)

    result = await db.execute(query)
    return result.scalar_one_or_none()


async def list_enquiries(
    db: AsyncSession,
    *,
    owner_id: str | None = None,
    enquirer_id: str | None = None,
    enquiry_type: EnquiryType | None = None,
    status: EnquiryStatus | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Enquiry], int]:
    """
    List enquiries, newest first.

    Returns:
        Tuple of (enquiries for the requested page, total matching count)
    """
    conditions = []
    if owner_id is not None:
        conditions.append(Enquiry.owner_id == owner_id)
    if enquirer_id is not None:
        conditions.append(Enquiry.enquirer_id == enquirer_id)
    if enquiry_type is not None:
        conditions.append(Enquiry.enquiry_type == enquiry_type)
    if status is not None:
        conditions.append(Enquiry.status == status)

    total = await db.scalar(select(func.count()).select_from(Enquiry).where(*conditions))

    result = await db.execute(
        select(Enquiry)
        .where(*conditions)
        .order_by(Enquiry.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def update_status(db: AsyncSession, enquiry: Enquiry, status: EnquiryStatus) -> Enquiry:
    enquiry.status = status

    await db.commit()
    await db.refresh(enquiry)

    return enquiry
