"""
Users module - Unified identity for students, teachers, institutions, centers and admins.
"""

from eduportal.modules.users.models import AccountStatus, User, UserRole
from eduportal.modules.users.repository import UserRepository

__all__ = ["AccountStatus", "User", "UserRole", "UserRepository"]
