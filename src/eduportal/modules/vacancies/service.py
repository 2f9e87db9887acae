"""
Vacancies Service Layer

Public browsing of vacancies and poster-scoped CRUD for institutions and
centers. A vacancy posted by another account is reported as not found.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.exceptions import AuthorizationError, NotFoundError
from eduportal.modules.shared import reject_null_updates
from eduportal.modules.users.models import User, UserRole
from eduportal.modules.vacancies import repository
from eduportal.modules.vacancies.models import Vacancy
from eduportal.modules.vacancies.schemas import VacancyCreate, VacancyUpdate

logger = logging.getLogger(__name__)

POSTING_ROLES = frozenset({UserRole.INSTITUTION, UserRole.CENTER})
REQUIRED_FIELDS = ("title", "description", "openings", "is_open")


async def create_vacancy(db: AsyncSession, poster: User, data: VacancyCreate) -> Vacancy:
    """
    Advertise a vacancy on behalf of an institution or center.

    Raises:
        AuthorizationError: If the account's role cannot post vacancies
    """
    if poster.role not in POSTING_ROLES:
        raise AuthorizationError(f"Role ({poster.role.value}) cannot post vacancies")

    vacancy = await repository.create(db, poster.id, poster.role, data.model_dump())
    logger.info(f"{poster.role.value} {poster.id} posted vacancy {vacancy.id}")
    return vacancy


async def get_vacancy(db: AsyncSession, vacancy_id: str) -> Vacancy:
    """
    Get any vacancy by ID.

    Raises:
        NotFoundError: If no vacancy has this ID
    """
    vacancy = await repository.get_by_id(db, vacancy_id)
    if vacancy is None:
        raise NotFoundError("Vacancy", vacancy_id)
    return vacancy


async def list_vacancies(
    db: AsyncSession,
    *,
    open_only: bool = True,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Vacancy], int]:
    return await repository.list_vacancies(db, open_only=open_only, skip=skip, limit=limit)


async def list_posted_vacancies(
    db: AsyncSession,
    poster: User,
    *,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Vacancy], int]:
    return await repository.list_vacancies(db, posted_by_id=poster.id, skip=skip, limit=limit)


async def get_owned_vacancy(db: AsyncSession, poster: User, vacancy_id: str) -> Vacancy:
    """
    Get a vacancy the account posted.

    Raises:
        NotFoundError: If the vacancy does not exist or was posted by someone else
    """
    vacancy = await repository.get_owned(db, vacancy_id, poster.id)
    if vacancy is None:
        raise NotFoundError("Vacancy", vacancy_id)
    return vacancy


async def update_vacancy(
    db: AsyncSession,
    poster: User,
    vacancy_id: str,
    data: VacancyUpdate,
) -> Vacancy:
    """
    Apply a partial update to one of the account's vacancies.

    Raises:
        NotFoundError: If the vacancy does not exist or was posted by someone else
        ValidationError: If a required field is cleared
    """
    changes = data.model_dump(exclude_unset=True)
    reject_null_updates(changes, REQUIRED_FIELDS)

    vacancy = await get_owned_vacancy(db, poster, vacancy_id)
    if not changes:
        return vacancy

    vacancy = await repository.update(db, vacancy, changes)
    logger.info(f"{poster.role.value} {poster.id} updated vacancy {vacancy.id}: {sorted(changes)}")
    return vacancy


async def delete_vacancy(db: AsyncSession, poster: User, vacancy_id: str) -> None:
    """
    Delete one of the account's vacancies.

    Raises:
        NotFoundError: If the vacancy does not exist or was posted by someone else
    """
    vacancy = await get_owned_vacancy(db, poster, vacancy_id)
    await repository.delete(db, vacancy)
    logger.info(f"{poster.role.value} {poster.id} deleted vacancy {vacancy_id}")
