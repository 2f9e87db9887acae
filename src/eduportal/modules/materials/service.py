"""
Materials Service Layer

Anyone can browse materials. Institutions, teachers and centers post them
and can remove only their own.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.exceptions import AuthorizationError, NotFoundError
from eduportal.modules.materials import repository
from eduportal.modules.materials.models import Material
from eduportal.modules.materials.schemas import MaterialCreate
from eduportal.modules.users.models import User, UserRole

logger = logging.getLogger(__name__)

POSTING_ROLES = frozenset({UserRole.INSTITUTION, UserRole.TEACHER, UserRole.CENTER})


async def create_material(db: AsyncSession, poster: User, data: MaterialCreate) -> Material:
    """
    Post a material on behalf of an account.

    Raises:
        AuthorizationError: If the account's role cannot post materials
    """
    if poster.role not in POSTING_ROLES:
        raise AuthorizationError(f"Role ({poster.role.value}) cannot post materials")

    material = await repository.create(db, poster.id, poster.role, data.model_dump(mode="json"))
    logger.info(f"{poster.role.value} {poster.id} posted material {material.id}")
    return material


async def get_material(db: AsyncSession, material_id: str) -> Material:
    """
    Get any material by ID.

    Raises:
        NotFoundError: If no material has this ID
    """
    material = await repository.get_by_id(db, material_id)
    if material is None:
        raise NotFoundError("Material", material_id)
    return material


async def list_materials(
    db: AsyncSession,
    *,
    subject: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Material], int]:
    return await repository.list_materials(db, subject=subject, skip=skip, limit=limit)


async def list_posted_materials(
    db: AsyncSession,
    poster: User,
    *,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Material], int]:
    return await repository.list_materials(db, posted_by_id=poster.id, skip=skip, limit=limit)


async def get_owned_material(db: AsyncSession, poster: User, material_id: str) -> Material:
    """
    Get a material the account posted.

    Raises:
        NotFoundError: If the material does not exist or was posted by someone else
    """
    material = await repository.get_owned(db, material_id, poster.id)
    if material is None:
        raise NotFoundError("Material", material_id)
    return material


async def delete_material(db: AsyncSession, poster: User, material_id: str) -> None:
    """
    Delete a material the account posted.

    Raises:
        NotFoundError: If the material does not exist or was posted by someone else
    """
    material = await get_owned_material(db, poster, material_id)
    await repository.delete(db, material)
    logger.info(f"{poster.role.value} {poster.id} deleted material {material_id}")
