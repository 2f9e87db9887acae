"""
Vacancies Repository

Database operations for vacancies.
"""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.modules.shared import parse_uuid
from eduportal.modules.users.models import UserRole
from eduportal.modules.vacancies.models import Vacancy


async def create(
    db: AsyncSession,
    posted_by_id: str,
    posted_by_role: UserRole,
    fields: dict[str, Any],
) -> Vacancy:
    vacancy = Vacancy(posted_by_id=posted_by_id, posted_by_role=posted_by_role, **fields)

    db.add(vacancy)
    await db.commit()
    await db.refresh(vacancy)

    return vacancy


async def get_by_id(db: AsyncSession, vacancy_id: str) -> Vacancy | None:
    """Get a vacancy by ID, or None for unknown or malformed IDs."""
    vacancy_id = parse_uuid(vacancy_id)
    if vacancy_id is None:
        return None
    return await db.get(Vacancy, vacancy_id)


async def get_owned(db: AsyncSession, vacancy_id: str, posted_by_id: str) -> Vacancy | None:
    """Get a vacancy only if the given account posted it."""
    vacancy_id = parse_uuid(vacancy_id)
    if vacancy_id is None:
        return None
    result = await db.execute(
        select(Vacancy).where(
            Vacancy.id == vacancy_id,
            Vacancy.posted_by_id == posted_by_id,
        )
    )
    return result.scalar_one_or_none()


async def list_vacancies(
    db: AsyncSession,
    *,
    posted_by_id: str | None = None,
    open_only: bool = False,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Vacancy], int]:
    """
    List vacancies, newest first.

    Returns:
        Tuple of (vacancies for the requested page, total matching count)
    """
    conditions = []
    if posted_by_id is not None:
        conditions.append(Vacancy.posted_by_id == posted_by_id)
    if open_only:
        conditions.append(Vacancy.is_open.is_(True))

    total = await db.scalar(select(func.count()).select_from(Vacancy).where(*conditions))

    result = await db.execute(
        select(Vacancy)
        .where(*conditions)
        .order_by(Vacancy.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def update(db: AsyncSession, vacancy: Vacancy, fields: dict[str, Any]) -> Vacancy:
    for field, value in fields.items():
        setattr(vacancy, field, value)

    await db.commit()
    await db.refresh(vacancy)

    return vacancy


async def delete(db: AsyncSession, vacancy: Vacancy) -> None:
    await db.delete(vacancy)
    await db.commit()
