"""
Admin Router

Account review endpoints. All endpoints require the admin role.

Endpoints:
- GET /admin/users - List accounts (filter by role and status)
- GET /admin/users/{id} - Get one account
- POST /admin/users/{id}/approve - Approve a pending account
- POST /admin/users/{id}/reject - Reject a pending account
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.auth import require_roles
from eduportal.core.database import get_db
from eduportal.core.rate_limit import client_ip_key, rate_limit
from eduportal.modules.admin import service
from eduportal.modules.users.models import AccountStatus, User, UserRole
from eduportal.modules.users.schemas import UserEnvelope, UserListResponse, UserResponse

router = APIRouter()

RATE_LIMIT_DECIDE = (30, 60)  # 30 decisions per minute

current_admin = require_roles(UserRole.ADMIN)


@router.get("/users", response_model=UserListResponse, summary="List Accounts")
async def list_accounts(
    role: UserRole | None = Query(None),
    account_status: AccountStatus | None = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    _admin: User = Depends(current_admin),
    db: AsyncSession = Depends(get_db),
) -> UserListResponse:
    """List accounts, newest first. Use ``status=pending`` for the review queue."""
    users, total = await service.list_accounts(
        db, role=role, status=account_status, skip=skip, limit=limit
    )
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in users],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/users/{user_id}", response_model=UserEnvelope, summary="Get Account")
async def get_account(
    user_id: str,
    _admin: User = Depends(current_admin),
    db: AsyncSession = Depends(get_db),
) -> UserEnvelope:
    user = await service.get_account(db, user_id)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.post(
    "/users/{user_id}/approve",
    response_model=UserEnvelope,
    summary="Approve Account",
    dependencies=[Depends(rate_limit(*RATE_LIMIT_DECIDE, key_func=client_ip_key("admin-decide")))],
)
async def approve_account(
    user_id: str,
    admin: User = Depends(current_admin),
    db: AsyncSession = Depends(get_db),
) -> UserEnvelope:
    """
    Raises:
        404: Account not found
        409: Account is not pending
    """
    user = await service.approve_account(db, admin, user_id)
    return UserEnvelope(message="Account Approved!", user=UserResponse.model_validate(user))


@router.post(
    "/users/{user_id}/reject",
    response_model=UserEnvelope,
    summary="Reject Account",
    dependencies=[Depends(rate_limit(*RATE_LIMIT_DECIDE, key_func=client_ip_key("admin-decide")))],
)
async def reject_account(
    user_id: str,
    admin: User = Depends(current_admin),
    db: AsyncSession = Depends(get_db),
) -> UserEnvelope:
    """
    Raises:
        404: Account not found
        409: Account is not pending
    """
    user = await service.reject_account(db, admin, user_id)
    return UserEnvelope(message="Account Rejected!", user=UserResponse.model_validate(user))
