"""Authentication schemas."""

from typing import Any

from pydantic import BaseModel, Field

from eduportal.modules.users.models import UserRole
from eduportal.modules.users.schemas import AccountCreate, UserResponse


class LoginRequest(BaseModel):
    """
    Login request schema.

    Both fields are optional here so that a missing value is reported
    with the login-specific message rather than a schema error.
    """

    email: str | None = None
    password: str | None = None


class RegisterRequest(AccountCreate):
    """Self-registration for students, teachers and centers."""

    role: UserRole
    profile: dict[str, Any] = Field(default_factory=dict)


class AuthResponse(BaseModel):
    """Response for login and registration; the token is also set as a cookie."""

    success: bool = True
    message: str
    user: UserResponse
    token: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str
