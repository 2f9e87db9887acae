"""
Unit tests for the materials service layer.
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from eduportal.core.exceptions import AuthorizationError, NotFoundError
from eduportal.modules.materials.models import Material
from eduportal.modules.materials.schemas import MaterialCreate
from eduportal.modules.materials.service import (
    create_material,
    delete_material,
    list_materials,
)
from eduportal.modules.users.models import UserRole

DATA = MaterialCreate(
    title="Organic Chemistry Notes",
    subject="Chemistry",
    resource_url="https://notes.example.com/organic.pdf",
)


class TestCreateMaterial:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [UserRole.INSTITUTION, UserRole.TEACHER, UserRole.CENTER])
    async def test_posting_roles(self, mock_db, make_user, role):
        poster = make_user(role)

        with patch("eduportal.modules.materials.service.repository") as mock_repo:
            mock_repo.create = AsyncMock(return_value=MagicMock(spec=Material))
            await create_material(mock_db, poster, DATA)

        args = mock_repo.create.call_args.args
        assert args[1] == poster.id
        assert args[2] == role
        assert args[3]["resource_url"] == "https://notes.example.com/organic.pdf"

    @pytest.mark.asyncio
    async def test_student_cannot_post(self, mock_db, make_user):
        with pytest.raises(AuthorizationError):
            await create_material(mock_db, make_user(UserRole.STUDENT), DATA)

    def test_resource_url_must_be_a_url(self):
        with pytest.raises(ValueError):
            MaterialCreate(title="Notes", subject="Maths", resource_url="not a url")


class TestListMaterials:
    @pytest.mark.asyncio
    async def test_subject_filter_is_forwarded(self, mock_db):
        with patch("eduportal.modules.materials.service.repository") as mock_repo:
            mock_repo.list_materials = AsyncMock(return_value=([], 0))
            await list_materials(mock_db, subject="chemistry", skip=20, limit=10)

        mock_repo.list_materials.assert_called_once_with(
            mock_db, subject="chemistry", skip=20, limit=10
        )


class TestDeleteMaterial:
    @pytest.mark.asyncio
    async def test_only_own_materials(self, mock_db, make_user):
        teacher = make_user(UserRole.TEACHER)

        with patch("eduportal.modules.materials.service.repository") as mock_repo:
            mock_repo.get_owned = AsyncMock(return_value=None)
            mock_repo.delete = AsyncMock()

            with pytest.raises(NotFoundError):
                await delete_material(mock_db, teacher, str(uuid4()))

            mock_repo.delete.assert_not_called()
