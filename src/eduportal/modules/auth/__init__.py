"""Authentication module."""

from eduportal.modules.auth.router import router
from eduportal.modules.auth.schemas import AuthResponse, LoginRequest, RegisterRequest

__all__ = ["router", "AuthResponse", "LoginRequest", "RegisterRequest"]
