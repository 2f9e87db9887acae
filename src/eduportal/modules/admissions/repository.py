"""
Admissions Repository

Database operations for admission notices. Ownership checks are expressed
in the queries so an institution can never load another institution's row.
"""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.modules.admissions.models import Admission
from eduportal.modules.shared import parse_uuid


async def create(db: AsyncSession, institution_id: str, fields: dict[str, Any]) -> Admission:
    """Create an admission notice for an institution."""
    admission = Admission(institution_id=institution_id, **fields)

    db.add(admission)
    await db.commit()
    await db.refresh(admission)

    return admission


async def get_by_id(db: AsyncSession, admission_id: str) -> Admission | None:
    """Get an admission by ID, or None for unknown or malformed IDs."""
    admission_id = parse_uuid(admission_id)
    if admission_id is None:
        return None
    return await db.get(Admission, admission_id)


async def get_owned(db: AsyncSession, admission_id: str, institution_id: str) -> Admission | None:
    """Get an admission only if it belongs to the given institution."""
    admission_id = parse_uuid(admission_id)
    if admission_id is None:
        return None
    result = await db.execute(
        select(Admission).where(
            Admission.id == admission_id,
            Admission.institution_id == institution_id,
        )
    )
    return result.scalar_one_or_none()


async def list_admissions(
    db: AsyncSession,
    *,
    institution_id: str | None = None,
    open_only: bool = False,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Admission], int]:
    """
    List admissions, newest first.

    Returns:
        Tuple of (admissions for the requested page, total matching count)
    """
    conditions = []
    if institution_id is not None:
        conditions.append(Admission.institution_id == institution_id)
    if open_only:
        conditions.append(Admission.is_open.is_(True))

    total = await db.scalar(select(func.count()).select_from(Admission).where(*conditions))

    result = await db.execute(
        select(Admission)
        .where(*conditions)
        .order_by(Admission.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def update(db: AsyncSession, admission: Admission, fields: dict[str, Any]) -> Admission:
    """Apply validated field values to an admission."""
    for field, value in fields.items():
        setattr(admission, field, value)

    await db.commit()
    await db.refresh(admission)

    return admission


async def delete(db: AsyncSession, admission: Admission) -> None:
    """Delete an admission notice."""
    await db.delete(admission)
    await db.commit()
