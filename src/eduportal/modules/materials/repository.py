"""
Materials Repository

Database operations for study materials.
"""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.modules.materials.models import Material
from eduportal.modules.shared import parse_uuid
from eduportal.modules.users.models import UserRole


async def create(
    db: AsyncSession,
    posted_by_id: str,
    posted_by_role: UserRole,
    fields: dict[str, Any],
) -> Material:
    material = Material(posted_by_id=posted_by_id, posted_by_role=posted_by_role, **fields)

    db.add(material)
    await db.commit()
    await db.refresh(material)

    return material


async def get_by_id(db: AsyncSession, material_id: str) -> Material | None:
    """Get a material by ID, or None for unknown or malformed IDs."""
    material_id = parse_uuid(material_id)
    if material_id is None:
        return None
    return await db.get(Material, material_id)


async def get_owned(db: AsyncSession, material_id: str, posted_by_id: str) -> Material | None:
    """Get a material only if the given account posted it."""
    material_id = parse_uuid(material_id)
    if material_id is None:
        return None
    result = await db.execute(
        select(Material).where(
            Material.id == material_id,
            Material.posted_by_id == posted_by_id,
        )
    )
    return result.scalar_one_or_none()


async def list_materials(
    db: AsyncSession,
    *,
    posted_by_id: str | None = None,
    subject: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Material], int]:
    """
    List materials, newest first. The subject filter is case-insensitive.

    Returns:
        Tuple of (materials for the requested page, total matching count)
    """
    conditions = []
    if posted_by_id is not None:
        conditions.append(Material.posted_by_id == posted_by_id)
    if subject:
        conditions.append(func.lower(Material.subject) == subject.lower())

    total = await db.scalar(select(func.count()).select_from(Material).where(*conditions))

    result = await db.execute(
        select(Material)
        .where(*conditions)
        .order_by(Material.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def delete(db: AsyncSession, material: Material) -> None:
    await db.delete(material)
    await db.commit()
