"""
Unit tests for the admissions service layer.
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from eduportal.core.exceptions import NotFoundError, ValidationError
from eduportal.modules.admissions.models import Admission
from eduportal.modules.admissions.schemas import AdmissionCreate, AdmissionUpdate
from eduportal.modules.admissions.service import (
    create_admission,
    delete_admission,
    get_admission,
    list_admissions,
    update_admission,
)


@pytest.fixture
def admission(institution):
    admission = MagicMock(spec=Admission)
    admission.id = str(uuid4())
    admission.institution_id = institution.id
    admission.is_open = True
    return admission


class TestCreateAdmission:
    @pytest.mark.asyncio
    async def test_owner_is_the_calling_institution(self, mock_db, institution, admission):
        data = AdmissionCreate(title="B.Sc Admissions", course="B.Sc", description="Apply now")

        with patch("eduportal.modules.admissions.service.repository") as mock_repo:
            mock_repo.create = AsyncMock(return_value=admission)
            result = await create_admission(mock_db, institution, data)

        assert result is admission
        args = mock_repo.create.call_args.args
        assert args[1] == institution.id
        assert args[2]["title"] == "B.Sc Admissions"
        assert args[2]["is_open"] is True

    def test_owner_cannot_be_supplied_by_client(self):
        with pytest.raises(ValueError):
            AdmissionCreate(
                title="B.Sc Admissions",
                course="B.Sc",
                description="Apply now",
                institution_id=str(uuid4()),
            )


class TestReadAdmissions:
    @pytest.mark.asyncio
    async def test_get_missing_admission(self, mock_db):
        with patch("eduportal.modules.admissions.service.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await get_admission(mock_db, "missing-id")

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_public_list_defaults_to_open_only(self, mock_db, admission):
        with patch("eduportal.modules.admissions.service.repository") as mock_repo:
            mock_repo.list_admissions = AsyncMock(return_value=([admission], 1))
            admissions, total = await list_admissions(mock_db)

        assert total == 1
        assert mock_repo.list_admissions.call_args.kwargs["open_only"] is True


class TestUpdateAdmission:
    @pytest.mark.asyncio
    async def test_updates_only_sent_fields(self, mock_db, institution, admission):
        with patch("eduportal.modules.admissions.service.repository") as mock_repo:
            mock_repo.get_owned = AsyncMock(return_value=admission)
            mock_repo.update = AsyncMock(return_value=admission)
            await update_admission(
                mock_db, institution, admission.id, AdmissionUpdate(is_open=False)
            )

        assert mock_repo.update.call_args.args[2] == {"is_open": False}

    @pytest.mark.asyncio
    async def test_other_institutions_admission_is_not_found(self, mock_db, institution):
        with patch("eduportal.modules.admissions.service.repository") as mock_repo:
            mock_repo.get_owned = AsyncMock(return_value=None)
            mock_repo.update = AsyncMock()

            with pytest.raises(NotFoundError):
                await update_admission(
                    mock_db, institution, str(uuid4()), AdmissionUpdate(title="New title")
                )

            mock_repo.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_required_field_cannot_be_cleared(self, mock_db, institution, admission):
        with patch("eduportal.modules.admissions.service.repository") as mock_repo:
            mock_repo.get_owned = AsyncMock(return_value=admission)

            with pytest.raises(ValidationError) as exc_info:
                await update_admission(
                    mock_db, institution, admission.id, AdmissionUpdate(title=None)
                )

        assert "title" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_empty_update_returns_unchanged(self, mock_db, institution, admission):
        with patch("eduportal.modules.admissions.service.repository") as mock_repo:
            mock_repo.get_owned = AsyncMock(return_value=admission)
            mock_repo.update = AsyncMock()
            result = await update_admission(mock_db, institution, admission.id, AdmissionUpdate())

        assert result is admission
        mock_repo.update.assert_not_called()


class TestDeleteAdmission:
    @pytest.mark.asyncio
    async def test_deletes_owned_admission(self, mock_db, institution, admission):
        with patch("eduportal.modules.admissions.service.repository") as mock_repo:
            mock_repo.get_owned = AsyncMock(return_value=admission)
            mock_repo.delete = AsyncMock()
            await delete_admission(mock_db, institution, admission.id)

        mock_repo.delete.assert_called_once_with(mock_db, admission)

    @pytest.mark.asyncio
    async def test_cannot_delete_others(self, mock_db, institution):
        with patch("eduportal.modules.admissions.service.repository") as mock_repo:
            mock_repo.get_owned = AsyncMock(return_value=None)
            mock_repo.delete = AsyncMock()

            with pytest.raises(NotFoundError):
                await delete_admission(mock_db, institution, str(uuid4()))

            mock_repo.delete.assert_not_called()
