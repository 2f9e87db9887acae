"""
Shared test fixtures.

Environment variables are set before any ``eduportal`` import so the
cached settings pick them up.
"""

import copy
import os

os.environ.setdefault("PYTHON_ENV", "testing")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-unit-tests-only")

from datetime import UTC, datetime  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from eduportal.core.database import get_db  # noqa: E402
from eduportal.core.security import create_access_token  # noqa: E402
from eduportal.main import app  # noqa: E402
from eduportal.modules.users.models import AccountStatus, User, UserRole  # noqa: E402

VALID_INSTITUTION_PROFILE = {
    "address": "12 MG Road, Bengaluru",
    "website": "https://greenfield.example.edu",
    "description": "A co-educational school with science and arts streams.",
    "institution_type": "School",
    "gender": None,
    "age": None,
    "institution_details": {
        "name": "Greenfield Public School",
        "contact_number": "9876543210",
        "images": [
            {"public_id": f"eduportal/img{i}", "url": f"https://res.cloudinary.com/img{i}.png"}
            for i in range(5)
        ],
    },
}


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.rollback = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.scalar = AsyncMock()
    db.delete = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def make_user():
    """Factory for mock users of any role."""

    def _make_user(
        role: UserRole = UserRole.STUDENT,
        status: AccountStatus = AccountStatus.APPROVED,
        profile: dict | None = None,
        **overrides,
    ) -> MagicMock:
        user = MagicMock(spec=User)
        user.id = str(uuid4())
        user.role = role
        user.status = status
        user.is_approved = status == AccountStatus.APPROVED
        user.name = overrides.get("name", "Test User")
        user.email = overrides.get("email", f"{role.value}@example.com")
        user.phone = overrides.get("phone")
        user.password_hash = overrides.get("password_hash", "$2b$10$not-a-real-hash")
        user.profile = profile if profile is not None else {}
        user.created_at = datetime.now(UTC)
        user.updated_at = datetime.now(UTC)
        return user

    return _make_user


@pytest.fixture
def institution_profile():
    """A complete, valid institution profile (a fresh copy per test)."""
    return copy.deepcopy(VALID_INSTITUTION_PROFILE)


@pytest.fixture
def institution(make_user, institution_profile):
    """An approved institution with a complete profile."""
    return make_user(
        UserRole.INSTITUTION,
        profile=institution_profile,
        name="Greenfield",
        email="admin@greenfield.example.edu",
    )


@pytest.fixture
def client(mock_db):
    """Test client with the database dependency replaced by ``mock_db``."""

    async def override_get_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build a Bearer header for a (mock) user."""

    def _auth_headers(user) -> dict[str, str]:
        token = create_access_token(subject=str(user.id), role=user.role.value)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
