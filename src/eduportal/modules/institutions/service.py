"""
Institutions Service Layer

Multipart institution registration.

Registration order matters: everything that can be checked locally
(required fields, image count and types, field formats, email uniqueness)
is checked before any image is sent to Cloudinary. Once images are
uploaded, any later failure destroys them again so the media host never
keeps images for an account that was not created.
"""

import json
import logging
from typing import Any

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core import media
from eduportal.core.exceptions import ConflictError, ValidationError, format_errors
from eduportal.core.security import hash_password
from eduportal.modules.auth.service import issue_token
from eduportal.modules.users.models import AccountStatus, User, UserRole
from eduportal.modules.users.repository import UserRepository
from eduportal.modules.users.schemas import (
    MIN_INSTITUTION_IMAGES,
    AccountCreate,
    InstitutionProfileInput,
)
from eduportal.modules.users.service import validate_profile

logger = logging.getLogger(__name__)

REQUIRED_FORM_FIELDS = (
    "name",
    "email",
    "password",
    "address",
    "phone",
    "institution_type",
    "institution_details",
    "website",
    "description",
)

ACCOUNT_FIELDS = ("name", "email", "password", "phone")
PROFILE_FIELDS = (
    "address",
    "website",
    "description",
    "institution_type",
    "gender",
    "age",
)


def _clean_form(form: dict[str, Any]) -> dict[str, Any]:
    """Drop blank form values so they count as missing."""
    cleaned = {}
    for key, value in form.items():
        if isinstance(value, str):
            value = value.strip()
        if value not in (None, ""):
            cleaned[key] = value
    return cleaned


def _parse_details(raw: Any) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    try:
        details = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ValidationError("institution_details must be a valid JSON object") from e
    if not isinstance(details, dict):
        raise ValidationError("institution_details must be a valid JSON object")
    return details


def check_images(images: list[UploadFile] | None) -> None:
    """
    Raises:
        ValidationError: If the image set is incomplete or contains a
            disallowed type
    """
    if not images:
        raise ValidationError("Images Required!")

    if len(images) < MIN_INSTITUTION_IMAGES:
        raise ValidationError(
            f"An institution must have at least {MIN_INSTITUTION_IMAGES} images."
        )

    invalid = media.find_invalid_image_types(images)
    if invalid:
        raise ValidationError(
            f"Invalid image formats: {', '.join(invalid)}. Please upload PNG, JPEG, or WEBP."
        )


async def register_institution(
    db: AsyncSession,
    form: dict[str, Any],
    images: list[UploadFile] | None,
) -> tuple[User, str]:
    """
    Register an institution account from a multipart form.

    Args:
        db: Database session
        form: Submitted form fields; ``institution_details`` is a JSON string
        images: Uploaded image files

    Returns:
        The created (pending) institution and a session token

    Raises:
        ValidationError 400: Missing fields, missing/invalid images, invalid
            field values, or fewer images than an institution needs
        ConflictError 409: Email already registered
        UpstreamError 500: The media host failed an upload
    """
    form = _clean_form(form)

    missing = [field for field in REQUIRED_FORM_FIELDS if field not in form]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    check_images(images)

    details = _parse_details(form["institution_details"])
    try:
        account = AccountCreate.model_validate({k: form[k] for k in ACCOUNT_FIELDS})
        profile_input = InstitutionProfileInput.model_validate(
            {
                **{k: form[k] for k in PROFILE_FIELDS if k in form},
                "institution_details": details,
            }
        )
    except PydanticValidationError as e:
        raise ValidationError(format_errors(e.errors())) from e

    if await UserRepository.email_exists(db, account.email):
        logger.warning("Institution registration with an already registered email")
        raise ConflictError("Email is already registered")

    uploaded = await media.upload_images(images)

    try:
        profile_data = profile_input.model_dump(mode="json")
        profile_data["institution_details"]["images"] = [image.to_dict() for image in uploaded]
        profile = validate_profile(UserRole.INSTITUTION, profile_data)

        password_hash = await run_in_threadpool(hash_password, account.password)
        user = await UserRepository.create(
            db,
            role=UserRole.INSTITUTION,
            email=account.email,
            password_hash=password_hash,
            name=account.name,
            phone=account.phone,
            status=AccountStatus.PENDING,
            profile=profile,
        )
    except Exception:
        logger.warning(
            f"Institution registration failed after upload; removing {len(uploaded)} image(s)"
        )
        await media.delete_images(uploaded)
        raise

    logger.info(f"Registered institution {user.id} (pending approval)")
    return user, issue_token(user)
