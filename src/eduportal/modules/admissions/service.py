"""
Admissions Service Layer

Public browsing of admission notices plus the institution-owned CRUD that
the institution router delegates to. Every write is scoped to the calling
institution: a notice owned by someone else is reported as not found.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.exceptions import NotFoundError
from eduportal.modules.admissions import repository
from eduportal.modules.admissions.models import Admission
from eduportal.modules.admissions.schemas import AdmissionCreate, AdmissionUpdate
from eduportal.modules.shared import reject_null_updates
from eduportal.modules.users.models import User

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "course", "description", "is_open")


async def create_admission(db: AsyncSession, institution: User, data: AdmissionCreate) -> Admission:
    """Publish a new admission notice for an institution."""
    admission = await repository.create(db, institution.id, data.model_dump())
    logger.info(f"Institution {institution.id} published admission {admission.id}")
    return admission


async def get_admission(db: AsyncSession, admission_id: str) -> Admission:
    """
    Get any admission notice by ID.

    Raises:
        NotFoundError: If no admission has this ID
    """
    admission = await repository.get_by_id(db, admission_id)
    if admission is None:
        raise NotFoundError("Admission", admission_id)
    return admission


async def list_admissions(
    db: AsyncSession,
    *,
    open_only: bool = True,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Admission], int]:
    return await repository.list_admissions(db, open_only=open_only, skip=skip, limit=limit)


async def list_institution_admissions(
    db: AsyncSession,
    institution: User,
    *,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Admission], int]:
    return await repository.list_admissions(
        db, institution_id=institution.id, skip=skip, limit=limit
    )


async def get_owned_admission(db: AsyncSession, institution: User, admission_id: str) -> Admission:
    """
    Get an admission that belongs to the institution.

    Raises:
        NotFoundError: If the admission does not exist or has another owner
    """
    admission = await repository.get_owned(db, admission_id, institution.id)
    if admission is None:
        raise NotFoundError("Admission", admission_id)
    return admission


async def update_admission(
    db: AsyncSession,
    institution: User,
    admission_id: str,
    data: AdmissionUpdate,
) -> Admission:
    """
    Apply a partial update to one of the institution's admissions.

    Raises:
        NotFoundError: If the admission does not exist or has another owner
        ValidationError: If a required field is cleared
    """
    changes = data.model_dump(exclude_unset=True)
    reject_null_updates(changes, REQUIRED_FIELDS)

    admission = await get_owned_admission(db, institution, admission_id)
    if not changes:
        return admission

    admission = await repository.update(db, admission, changes)
    logger.info(f"Institution {institution.id} updated admission {admission.id}: {sorted(changes)}")
    return admission


async def delete_admission(db: AsyncSession, institution: User, admission_id: str) -> None:
    """
    Delete one of the institution's admissions.

    Raises:
        NotFoundError: If the admission does not exist or has another owner
    """
    admission = await get_owned_admission(db, institution, admission_id)
    await repository.delete(db, admission)
    logger.info(f"Institution {institution.id} deleted admission {admission_id}")
