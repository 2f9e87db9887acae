"""
Unit tests for institution registration.

The media client and user repository are patched; the ordering of checks
(local validation before upload, cleanup after upload) is the focus.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from eduportal.core.exceptions import ConflictError, UpstreamError, ValidationError
from eduportal.core.media import UploadedImage
from eduportal.modules.institutions.service import REQUIRED_FORM_FIELDS, register_institution
from eduportal.modules.users.models import AccountStatus, UserRole


def _image(content_type: str = "image/png") -> MagicMock:
    upload = MagicMock()
    upload.filename = "campus.png"
    upload.content_type = content_type
    return upload


def _uploaded(count: int) -> list[UploadedImage]:
    return [
        UploadedImage(public_id=f"eduportal/img{i}", url=f"https://res.cloudinary.com/img{i}.png")
        for i in range(count)
    ]


@pytest.fixture
def form():
    return {
        "name": "Greenfield",
        "email": "Admin@Greenfield.example.edu",
        "password": "password123",
        "phone": "9876543210",
        "address": "12 MG Road, Bengaluru",
        "website": "https://greenfield.example.edu",
        "description": "A co-educational school.",
        "institution_type": "School",
        "institution_details": json.dumps(
            {"name": "Greenfield Public School", "contact_number": "9876543210"}
        ),
        "gender": None,
        "age": None,
    }


@pytest.fixture
def mock_media():
    with patch("eduportal.modules.institutions.service.media") as media:
        media.find_invalid_image_types = MagicMock(return_value=[])
        media.upload_images = AsyncMock(return_value=_uploaded(5))
        media.delete_images = AsyncMock()
        yield media


@pytest.fixture
def mock_repo():
    with patch("eduportal.modules.institutions.service.UserRepository") as repo:
        repo.email_exists = AsyncMock(return_value=False)
        repo.create = AsyncMock()
        yield repo


class TestRegisterInstitution:
    @pytest.mark.asyncio
    async def test_success_creates_pending_institution(
        self, mock_db, form, mock_media, mock_repo, make_user
    ):
        created = make_user(UserRole.INSTITUTION, status=AccountStatus.PENDING)
        mock_repo.create.return_value = created

        user, token = await register_institution(mock_db, form, [_image()] * 5)

        assert user is created
        assert token
        kwargs = mock_repo.create.call_args.kwargs
        assert kwargs["role"] == UserRole.INSTITUTION
        assert kwargs["status"] == AccountStatus.PENDING
        assert kwargs["email"] == "admin@greenfield.example.edu"
        assert kwargs["password_hash"] != "password123"
        images = kwargs["profile"]["institution_details"]["images"]
        assert [image["public_id"] for image in images] == [f"eduportal/img{i}" for i in range(5)]
        mock_media.delete_images.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", REQUIRED_FORM_FIELDS)
    async def test_each_missing_field_is_named(self, mock_db, form, mock_media, mock_repo, field):
        form[field] = None

        with pytest.raises(ValidationError) as exc_info:
            await register_institution(mock_db, form, [_image()] * 5)

        assert exc_info.value.message == f"Missing required fields: {field}"
        mock_media.upload_images.assert_not_called()

    @pytest.mark.asyncio
    async def test_blank_values_count_as_missing(self, mock_db, form, mock_media, mock_repo):
        form["website"] = "   "
        form["address"] = ""

        with pytest.raises(ValidationError) as exc_info:
            await register_institution(mock_db, form, [_image()] * 5)

        assert exc_info.value.message == "Missing required fields: address, website"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("images", [None, []])
    async def test_images_required(self, mock_db, form, mock_media, mock_repo, images):
        with pytest.raises(ValidationError) as exc_info:
            await register_institution(mock_db, form, images)

        assert exc_info.value.message == "Images Required!"

    @pytest.mark.asyncio
    async def test_invalid_image_type_is_named(self, mock_db, form, mock_media, mock_repo):
        mock_media.find_invalid_image_types.return_value = ["image/gif"]

        with pytest.raises(ValidationError) as exc_info:
            await register_institution(mock_db, form, [_image()] * 4 + [_image("image/gif")])

        assert exc_info.value.message == (
            "Invalid image formats: image/gif. Please upload PNG, JPEG, or WEBP."
        )
        mock_media.upload_images.assert_not_called()

    @pytest.mark.asyncio
    async def test_details_must_be_json_object(self, mock_db, form, mock_media, mock_repo):
        form["institution_details"] = "not json"

        with pytest.raises(ValidationError) as exc_info:
            await register_institution(mock_db, form, [_image()] * 5)

        assert "institution_details" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_field_errors_are_caught_before_upload(
        self, mock_db, form, mock_media, mock_repo
    ):
        form["password"] = "short"

        with pytest.raises(ValidationError) as exc_info:
            await register_institution(mock_db, form, [_image()] * 5)

        assert "password" in exc_info.value.message
        mock_media.upload_images.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_email_is_caught_before_upload(
        self, mock_db, form, mock_media, mock_repo
    ):
        mock_repo.email_exists.return_value = True

        with pytest.raises(ConflictError):
            await register_institution(mock_db, form, [_image()] * 5)

        mock_media.upload_images.assert_not_called()

    @pytest.mark.asyncio
    async def test_four_images_are_refused_before_upload(
        self, mock_db, form, mock_media, mock_repo
    ):
        with pytest.raises(ValidationError) as exc_info:
            await register_institution(mock_db, form, [_image()] * 4)

        assert "at least 5 images" in exc_info.value.message
        mock_media.upload_images.assert_not_called()
        mock_repo.email_exists.assert_not_called()

    @pytest.mark.asyncio
    async def test_short_upload_fails_profile_check_and_is_deleted(
        self, mock_db, form, mock_media, mock_repo
    ):
        mock_media.upload_images.return_value = _uploaded(4)

        with pytest.raises(ValidationError) as exc_info:
            await register_institution(mock_db, form, [_image()] * 5)

        assert "at least 5 images" in exc_info.value.message
        mock_media.delete_images.assert_called_once_with(_uploaded(4))
        mock_repo.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_email_taken_during_registration_deletes_images(
        self, mock_db, form, mock_media, mock_repo
    ):
        mock_repo.create.side_effect = ConflictError("Email is already registered")

        with pytest.raises(ConflictError) as exc_info:
            await register_institution(mock_db, form, [_image()] * 5)

        assert exc_info.value.status_code == 409
        mock_media.delete_images.assert_called_once_with(_uploaded(5))

    @pytest.mark.asyncio
    async def test_storage_failure_deletes_images(self, mock_db, form, mock_media, mock_repo):
        mock_repo.create.side_effect = RuntimeError("database unavailable")

        with pytest.raises(RuntimeError):
            await register_institution(mock_db, form, [_image()] * 5)

        mock_media.delete_images.assert_called_once_with(_uploaded(5))

    @pytest.mark.asyncio
    async def test_upload_failure_propagates(self, mock_db, form, mock_media, mock_repo):
        mock_media.upload_images.side_effect = UpstreamError(
            "Failed to upload images to Cloudinary"
        )

        with pytest.raises(UpstreamError) as exc_info:
            await register_institution(mock_db, form, [_image()] * 5)

        assert exc_info.value.status_code == 500
        mock_repo.create.assert_not_called()
