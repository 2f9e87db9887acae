"""
Unit tests for the session resolver and role guards.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from eduportal.core.auth import _extract_token, require_roles, resolve_user
from eduportal.core.exceptions import AuthenticationError, AuthorizationError
from eduportal.core.security import create_access_token
from eduportal.modules.users.models import AccountStatus, UserRole


class TestResolveUser:
    """Tests for resolve_user."""

    @pytest.mark.asyncio
    async def test_resolves_matching_user(self, mock_db, make_user):
        user = make_user(UserRole.TEACHER)
        token = create_access_token(subject=user.id, role="teacher")

        with patch("eduportal.core.auth.UserRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=user)
            result = await resolve_user(mock_db, token)

        assert result is user
        mock_repo.get_by_id.assert_called_once_with(mock_db, user.id)

    @pytest.mark.asyncio
    async def test_rejected_account_token_is_refused(self, mock_db, make_user):
        user = make_user(UserRole.INSTITUTION, status=AccountStatus.REJECTED)
        token = create_access_token(subject=user.id, role="institution")

        with patch("eduportal.core.auth.UserRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=user)

            with pytest.raises(AuthorizationError) as exc_info:
                await resolve_user(mock_db, token)

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Your account registration was rejected."

    @pytest.mark.asyncio
    async def test_pending_account_token_still_resolves(self, mock_db, make_user):
        user = make_user(UserRole.INSTITUTION, status=AccountStatus.PENDING)
        token = create_access_token(subject=user.id, role="institution")

        with patch("eduportal.core.auth.UserRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=user)
            result = await resolve_user(mock_db, token)

        assert result is user

    @pytest.mark.asyncio
    async def test_invalid_token(self, mock_db):
        with pytest.raises(AuthenticationError) as exc_info:
            await resolve_user(mock_db, "garbage")

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "User not authorized"

    @pytest.mark.asyncio
    async def test_expired_token(self, mock_db):
        token = create_access_token(
            subject="user-1", role="student", expires_delta=timedelta(minutes=-5)
        )
        with pytest.raises(AuthenticationError):
            await resolve_user(mock_db, token)

    @pytest.mark.asyncio
    async def test_unknown_role_claim(self, mock_db):
        token = create_access_token(subject="user-1", role="principal")

        with pytest.raises(AuthenticationError) as exc_info:
            await resolve_user(mock_db, token)

        assert exc_info.value.message == "Invalid user type"

    @pytest.mark.asyncio
    async def test_wrong_token_type(self, mock_db):
        token = create_access_token(
            subject="user-1", role="student", additional_claims={"type": "refresh"}
        )
        with pytest.raises(AuthenticationError):
            await resolve_user(mock_db, token)

    @pytest.mark.asyncio
    async def test_nonexistent_user(self, mock_db):
        token = create_access_token(subject="0b7c7c1e-3f4d-4c55-9a57-8d2f0e1b2c3d", role="student")

        with patch("eduportal.core.auth.UserRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)
            with pytest.raises(AuthenticationError) as exc_info:
                await resolve_user(mock_db, token)

        assert exc_info.value.message == "User not found based on token"

    @pytest.mark.asyncio
    async def test_role_mismatch(self, mock_db, make_user):
        """A token claiming a different role than the stored user is rejected."""
        user = make_user(UserRole.STUDENT)
        token = create_access_token(subject=user.id, role="admin")

        with patch("eduportal.core.auth.UserRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=user)
            with pytest.raises(AuthenticationError):
                await resolve_user(mock_db, token)


class TestExtractToken:
    """Tests for token lookup order."""

    def test_cookie_wins_over_header(self):
        request = MagicMock()
        request.cookies = {"token": "from-cookie"}
        credentials = MagicMock(credentials="from-header")

        assert _extract_token(request, credentials) == "from-cookie"

    def test_falls_back_to_header(self):
        request = MagicMock()
        request.cookies = {}
        credentials = MagicMock(credentials="from-header")

        assert _extract_token(request, credentials) == "from-header"

    def test_no_token(self):
        request = MagicMock()
        request.cookies = {}

        assert _extract_token(request, None) is None


class TestRequireRoles:
    """Tests for the role guard factory."""

    @pytest.mark.asyncio
    async def test_allowed_role_passes(self, make_user):
        user = make_user(UserRole.CENTER)
        guard = require_roles(UserRole.TEACHER, UserRole.CENTER)

        assert await guard(user=user) is user

    @pytest.mark.asyncio
    async def test_disallowed_role_is_forbidden(self, make_user):
        user = make_user(UserRole.STUDENT)
        guard = require_roles(UserRole.INSTITUTION)

        with pytest.raises(AuthorizationError) as exc_info:
            await guard(user=user)

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Role (student) is not allowed to access this resource"

    @pytest.mark.asyncio
    async def test_pending_account_passes_without_approval_requirement(self, make_user):
        user = make_user(UserRole.INSTITUTION, status=AccountStatus.PENDING)
        guard = require_roles(UserRole.INSTITUTION)

        assert await guard(user=user) is user

    @pytest.mark.asyncio
    async def test_pending_account_blocked_when_approval_required(self, make_user):
        user = make_user(UserRole.INSTITUTION, status=AccountStatus.PENDING)
        guard = require_roles(UserRole.INSTITUTION, approved_only=True)

        with pytest.raises(AuthorizationError) as exc_info:
            await guard(user=user)

        assert exc_info.value.message == "Your account has not been approved yet."
