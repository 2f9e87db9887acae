"""
Unit tests for profile validation and self-service profile updates.
"""

import copy
from unittest.mock import AsyncMock, patch

import pytest

from eduportal.core.exceptions import ValidationError
from eduportal.modules.users.models import UserRole
from eduportal.modules.users.service import update_profile, validate_profile


class TestValidateProfile:
    """Tests for role profile validation."""

    def test_valid_institution_profile(self, institution_profile):
        profile = validate_profile(UserRole.INSTITUTION, institution_profile)
        assert profile["institution_type"] == "School"
        assert len(profile["institution_details"]["images"]) == 5

    def test_institution_needs_five_images(self, institution_profile):
        data = institution_profile
        data["institution_details"]["images"] = data["institution_details"]["images"][:4]

        with pytest.raises(ValidationError) as exc_info:
            validate_profile(UserRole.INSTITUTION, data)

        assert "at least 5 images" in exc_info.value.message

    @pytest.mark.parametrize("number", ["5876543210", "98765", "98765432101", "98765abcde"])
    def test_invalid_contact_numbers(self, institution_profile, number):
        data = institution_profile
        data["institution_details"]["contact_number"] = number

        with pytest.raises(ValidationError) as exc_info:
            validate_profile(UserRole.INSTITUTION, data)

        assert "contact_number" in exc_info.value.message

    def test_institution_age_minimum(self, institution_profile):
        data = {**institution_profile, "age": 18}

        with pytest.raises(ValidationError):
            validate_profile(UserRole.INSTITUTION, data)

    def test_unknown_institution_type(self, institution_profile):
        data = {**institution_profile, "institution_type": "University"}

        with pytest.raises(ValidationError):
            validate_profile(UserRole.INSTITUTION, data)

    def test_center_requires_address(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_profile(UserRole.CENTER, {"website": "https://center.example"})

        assert "address" in exc_info.value.message

    def test_student_profile_may_be_empty(self):
        assert validate_profile(UserRole.STUDENT, {})["age"] is None

    def test_unknown_profile_keys_are_rejected(self):
        with pytest.raises(ValidationError):
            validate_profile(UserRole.TEACHER, {"salary": 100})


class TestUpdateProfile:
    """Tests for the update allow-list."""

    @pytest.mark.asyncio
    async def test_empty_body(self, mock_db, institution):
        with pytest.raises(ValidationError) as exc_info:
            await update_profile(mock_db, institution, {})

        assert exc_info.value.message == "No fields to update"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["status", "email", "password", "role", "password_hash"])
    async def test_protected_fields_are_rejected(self, mock_db, institution, field):
        with patch("eduportal.modules.users.service.UserRepository") as mock_repo:
            mock_repo.update = AsyncMock()

            with pytest.raises(ValidationError) as exc_info:
                await update_profile(mock_db, institution, {field: "x", "name": "New Name"})

            mock_repo.update.assert_not_called()

        assert field in exc_info.value.message

    @pytest.mark.asyncio
    async def test_images_cannot_be_replaced(self, mock_db, institution):
        changes = {"institution_details": {"images": []}}

        with pytest.raises(ValidationError) as exc_info:
            await update_profile(mock_db, institution, changes)

        assert "institution_details.images" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_updates_name_and_nested_details(self, mock_db, institution):
        changes = {
            "name": "Greenfield High",
            "institution_details": {"contact_number": "7000000000"},
        }

        with patch("eduportal.modules.users.service.UserRepository") as mock_repo:
            mock_repo.update = AsyncMock(return_value=institution)
            await update_profile(mock_db, institution, changes)

        fields = mock_repo.update.call_args.kwargs
        assert fields["name"] == "Greenfield High"
        details = fields["profile"]["institution_details"]
        assert details["contact_number"] == "7000000000"
        # Untouched nested values survive the merge
        assert details["name"] == "Greenfield Public School"
        assert len(details["images"]) == 5

    @pytest.mark.asyncio
    async def test_merged_profile_is_revalidated(self, mock_db, institution):
        with pytest.raises(ValidationError):
            await update_profile(mock_db, institution, {"description": "x" * 501})

    @pytest.mark.asyncio
    async def test_stored_profile_is_not_mutated_on_failure(self, mock_db, institution):
        before = copy.deepcopy(institution.profile)

        with pytest.raises(ValidationError):
            await update_profile(
                mock_db, institution, {"institution_details": {"contact_number": "123"}}
            )

        assert institution.profile == before

    @pytest.mark.asyncio
    async def test_student_cannot_set_teacher_fields(self, mock_db, make_user):
        student = make_user(UserRole.STUDENT)

        with pytest.raises(ValidationError) as exc_info:
            await update_profile(mock_db, student, {"subjects": ["Maths"]})

        assert "subjects" in exc_info.value.message
