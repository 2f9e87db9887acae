"""
Materials Router

Public browsing plus posting for teachers and centers. Institutions manage
their materials under ``/institutions/me/materials``.

Endpoints:
- GET /materials - List materials (optional subject filter)
- GET /materials/mine - List the caller's materials
- GET /materials/{id} - Get one material
- POST /materials - Post a material (approved teachers and centers)
- DELETE /materials/{id} - Delete one of the caller's materials
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.auth import require_roles
from eduportal.core.database import get_db
from eduportal.modules.auth.schemas import MessageResponse
from eduportal.modules.materials import service
from eduportal.modules.materials.schemas import (
    MaterialCreate,
    MaterialEnvelope,
    MaterialListResponse,
    MaterialResponse,
)
from eduportal.modules.users.models import User, UserRole

router = APIRouter()

POSTERS = (UserRole.TEACHER, UserRole.CENTER)


@router.get("", response_model=MaterialListResponse, summary="List Materials")
async def list_materials(
    subject: str | None = Query(None, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> MaterialListResponse:
    materials, total = await service.list_materials(db, subject=subject, skip=skip, limit=limit)
    return MaterialListResponse(
        materials=[MaterialResponse.model_validate(m) for m in materials],
        total=total,
    )


@router.get("/mine", response_model=MaterialListResponse, summary="List My Materials")
async def list_my_materials(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    user: User = Depends(require_roles(*POSTERS)),
    db: AsyncSession = Depends(get_db),
) -> MaterialListResponse:
    materials, total = await service.list_posted_materials(db, user, skip=skip, limit=limit)
    return MaterialListResponse(
        materials=[MaterialResponse.model_validate(m) for m in materials],
        total=total,
    )


@router.get("/{material_id}", response_model=MaterialEnvelope, summary="Get Material")
async def get_material(
    material_id: str,
    db: AsyncSession = Depends(get_db),
) -> MaterialEnvelope:
    material = await service.get_material(db, material_id)
    return MaterialEnvelope(material=MaterialResponse.model_validate(material))


@router.post(
    "",
    response_model=MaterialEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Post Material",
)
async def create_material(
    data: MaterialCreate,
    user: User = Depends(require_roles(*POSTERS, approved_only=True)),
    db: AsyncSession = Depends(get_db),
) -> MaterialEnvelope:
    """Post a study material. Requires an approved teacher or center account."""
    material = await service.create_material(db, user, data)
    return MaterialEnvelope(
        message="Material Posted!",
        material=MaterialResponse.model_validate(material),
    )


@router.delete("/{material_id}", response_model=MessageResponse, summary="Delete Material")
async def delete_material(
    material_id: str,
    user: User = Depends(require_roles(*POSTERS)),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Delete one of the caller's materials; other posters' materials are reported as 404."""
    await service.delete_material(db, user, material_id)
    return MessageResponse(message="Material Deleted!")
