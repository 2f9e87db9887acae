"""Authentication router."""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.auth import clear_session_cookie, set_session_cookie
from eduportal.core.database import get_db
from eduportal.core.rate_limit import client_ip_key, rate_limit
from eduportal.modules.auth import service
from eduportal.modules.auth.schemas import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
)
from eduportal.modules.users.schemas import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_LOGIN = (10, 60)  # 10 attempts per minute per IP
RATE_LIMIT_REGISTER = (5, 60)  # 5 signups per minute per IP


@router.post(
    "/login",
    response_model=AuthResponse,
    dependencies=[Depends(rate_limit(*RATE_LIMIT_LOGIN, key_func=client_ip_key("login")))],
)
async def login(
    credentials: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """
    Authenticate a user of any role and start a session.

    Raises:
        400: Missing credentials, or invalid email/password
        403: Account not approved
    """
    user, token = await service.authenticate(db, credentials.email, credentials.password)
    set_session_cookie(response, token)

    return AuthResponse(
        message="Logged In Successfully!",
        user=UserResponse.model_validate(user),
        token=token,
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit(*RATE_LIMIT_REGISTER, key_func=client_ip_key("register")))],
)
async def register(
    data: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """Register a student, teacher or center account."""
    user, token = await service.register_account(db, data)
    set_session_cookie(response, token)

    message = "Registration Successful!"
    if not user.is_approved:
        message = "Registration Pending Approval"

    return AuthResponse(message=message, user=UserResponse.model_validate(user), token=token)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    """End the session by clearing the session cookie."""
    clear_session_cookie(response)
    return MessageResponse(message="Logged Out Successfully!")
