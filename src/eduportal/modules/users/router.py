"""Self-service account endpoints shared by every role."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.auth import get_current_user
from eduportal.core.database import get_db
from eduportal.modules.users import service
from eduportal.modules.users.models import User
from eduportal.modules.users.schemas import UserEnvelope, UserResponse

router = APIRouter()


@router.get("/me", response_model=UserEnvelope, summary="Get My Profile")
async def get_my_profile(user: User = Depends(get_current_user)) -> UserEnvelope:
    """Return the authenticated user's account."""
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.patch("/me", response_model=UserEnvelope, summary="Update My Profile")
async def update_my_profile(
    changes: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UserEnvelope:
    """
    Update the authenticated user's account.

    Only ``name``, ``phone`` and the role's mutable profile fields are
    accepted; any other field fails the request with 400.
    """
    updated = await service.update_profile(db, user, changes)
    return UserEnvelope(user=UserResponse.model_validate(updated), message="Profile Updated!")
