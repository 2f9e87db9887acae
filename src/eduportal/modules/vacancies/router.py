"""
Vacancies Router

Public browsing, center-owned CRUD, and the teacher endpoint for enquiring
about a vacancy. Institutions manage their vacancies under
``/institutions/me/vacancies``.

Endpoints:
- GET /vacancies - List vacancies (open ones by default)
- GET /vacancies/mine - List the caller's vacancies (centers)
- GET /vacancies/{id} - Get one vacancy
- POST /vacancies - Advertise a vacancy (approved centers)
- PATCH /vacancies/{id} - Update one of the caller's vacancies
- DELETE /vacancies/{id} - Delete one of the caller's vacancies
- POST /vacancies/{id}/enquiries - Enquire about an open vacancy (approved teachers)
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.auth import require_roles
from eduportal.core.database import get_db
from eduportal.modules.auth.schemas import MessageResponse
from eduportal.modules.enquiries import service as enquiries_service
from eduportal.modules.enquiries.schemas import EnquiryCreate, EnquiryEnvelope, EnquiryResponse
from eduportal.modules.users.models import User, UserRole
from eduportal.modules.vacancies import service
from eduportal.modules.vacancies.schemas import (
    VacancyCreate,
    VacancyEnvelope,
    VacancyListResponse,
    VacancyResponse,
    VacancyUpdate,
)

router = APIRouter()


@router.get("", response_model=VacancyListResponse, summary="List Vacancies")
async def list_vacancies(
    open_only: bool = Query(True),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> VacancyListResponse:
    vacancies, total = await service.list_vacancies(db, open_only=open_only, skip=skip, limit=limit)
    return VacancyListResponse(
        vacancies=[VacancyResponse.model_validate(v) for v in vacancies],
        total=total,
    )


@router.get("/mine", response_model=VacancyListResponse, summary="List My Vacancies")
async def list_my_vacancies(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    user: User = Depends(require_roles(UserRole.CENTER)),
    db: AsyncSession = Depends(get_db),
) -> VacancyListResponse:
    vacancies, total = await service.list_posted_vacancies(db, user, skip=skip, limit=limit)
    return VacancyListResponse(
        vacancies=[VacancyResponse.model_validate(v) for v in vacancies],
        total=total,
    )


@router.get("/{vacancy_id}", response_model=VacancyEnvelope, summary="Get Vacancy")
async def get_vacancy(
    vacancy_id: str,
    db: AsyncSession = Depends(get_db),
) -> VacancyEnvelope:
    vacancy = await service.get_vacancy(db, vacancy_id)
    return VacancyEnvelope(vacancy=VacancyResponse.model_validate(vacancy))


@router.post(
    "",
    response_model=VacancyEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Advertise Vacancy",
)
async def create_vacancy(
    data: VacancyCreate,
    user: User = Depends(require_roles(UserRole.CENTER, approved_only=True)),
    db: AsyncSession = Depends(get_db),
) -> VacancyEnvelope:
    vacancy = await service.create_vacancy(db, user, data)
    return VacancyEnvelope(
        message="Vacancy Posted!",
        vacancy=VacancyResponse.model_validate(vacancy),
    )


@router.patch("/{vacancy_id}", response_model=VacancyEnvelope, summary="Update Vacancy")
async def update_vacancy(
    vacancy_id: str,
    data: VacancyUpdate,
    user: User = Depends(require_roles(UserRole.CENTER, approved_only=True)),
    db: AsyncSession = Depends(get_db),
) -> VacancyEnvelope:
    vacancy = await service.update_vacancy(db, user, vacancy_id, data)
    return VacancyEnvelope(
        message="Vacancy Updated!",
        vacancy=VacancyResponse.model_validate(vacancy),
    )


@router.delete("/{vacancy_id}", response_model=MessageResponse, summary="Delete Vacancy")
async def delete_vacancy(
    vacancy_id: str,
    user: User = Depends(require_roles(UserRole.CENTER)),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    await service.delete_vacancy(db, user, vacancy_id)
    return MessageResponse(message="Vacancy Deleted!")


@router.post(
    "/{vacancy_id}/enquiries",
    response_model=EnquiryEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Enquire About Vacancy",
)
async def create_vacancy_enquiry(
    vacancy_id: str,
    data: EnquiryCreate,
    user: User = Depends(require_roles(UserRole.TEACHER, approved_only=True)),
    db: AsyncSession = Depends(get_db),
) -> EnquiryEnvelope:
    """
    Send an enquiry to the institution or center that advertised the vacancy.

    Raises:
        400: Vacancy is closed
        404: Vacancy not found
        409: A pending enquiry for this vacancy already exists
    """
    enquiry = await enquiries_service.create_vacancy_enquiry(db, user, vacancy_id, data)
    return EnquiryEnvelope(
        message="Enquiry Sent!",
        enquiry=EnquiryResponse.model_validate(enquiry),
    )
