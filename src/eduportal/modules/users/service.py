"""
User Service Layer

Profile validation and self-service profile updates.

Profile updates are restricted to an explicit allow-list per role
(``UPDATABLE_ACCOUNT_FIELDS`` / ``UPDATABLE_PROFILE_FIELDS``). Fields such
as ``status``, ``role``, ``email``, ``password`` or institution images can
never be changed through this path.
"""

import copy
import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.exceptions import ValidationError, format_errors
from eduportal.modules.users.models import User, UserRole
from eduportal.modules.users.repository import UserRepository
from eduportal.modules.users.schemas import (
    PROFILE_SCHEMAS,
    UPDATABLE_ACCOUNT_FIELDS,
    UPDATABLE_NESTED_FIELDS,
    UPDATABLE_PROFILE_FIELDS,
    AccountUpdate,
)

logger = logging.getLogger(__name__)


def validate_profile(role: UserRole, data: dict[str, Any]) -> dict[str, Any]:
    """
    Validate role-specific profile data.

    Returns:
        The profile as JSON-compatible data, ready for storage

    Raises:
        ValidationError: If the data violates the role's profile schema
    """
    schema = PROFILE_SCHEMAS[role]
    try:
        return schema.model_validate(data).model_dump(mode="json")
    except PydanticValidationError as e:
        raise ValidationError(format_errors(e.errors())) from e


def _find_rejected_fields(role: UserRole, changes: dict[str, Any]) -> list[str]:
    allowed = UPDATABLE_ACCOUNT_FIELDS | UPDATABLE_PROFILE_FIELDS[role]
    rejected = sorted(set(changes) - allowed)

    for field, nested_allowed in UPDATABLE_NESTED_FIELDS.items():
        nested = changes.get(field)
        if field in allowed and isinstance(nested, dict):
            rejected.extend(f"{field}.{key}" for key in sorted(set(nested) - nested_allowed))

    return rejected


def _merge_profile(current: dict[str, Any], changes: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(current)
    for key, value in changes.items():
        if key in UPDATABLE_NESTED_FIELDS and isinstance(value, dict):
            merged[key] = {**merged.get(key, {}), **value}
        else:
            merged[key] = value
    return merged


async def update_profile(db: AsyncSession, user: User, changes: dict[str, Any]) -> User:
    """
    Apply a self-service profile update.

    Args:
        db: Database session
        user: The authenticated user updating their own account
        changes: Client-supplied field values

    Returns:
        The updated User

    Raises:
        ValidationError: If the body is empty, names a field outside the
            role's allow-list, or the merged result fails validation
    """
    if not changes:
        raise ValidationError("No fields to update")

    rejected = _find_rejected_fields(user.role, changes)
    if rejected:
        logger.warning(f"User {user.id} attempted to update protected fields: {rejected}")
        raise ValidationError(f"Fields cannot be updated: {', '.join(rejected)}")

    account_changes = {k: v for k, v in changes.items() if k in UPDATABLE_ACCOUNT_FIELDS}
    profile_changes = {k: v for k, v in changes.items() if k not in UPDATABLE_ACCOUNT_FIELDS}

    try:
        account = AccountUpdate.model_validate(account_changes)
    except PydanticValidationError as e:
        raise ValidationError(format_errors(e.errors())) from e

    fields = account.model_dump(exclude_unset=True)
    if "name" in fields and fields["name"] is None:
        raise ValidationError("name: Name cannot be empty")

    if profile_changes:
        fields["profile"] = validate_profile(user.role, _merge_profile(user.profile, profile_changes))

    return await UserRepository.update(db, user, **fields)
