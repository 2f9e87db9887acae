"""
Institutions Router

Registration and everything an institution manages about itself. The
``/me/...`` routes inject the calling institution as owner and delegate to
the admissions, vacancies, materials and enquiries services, so an
institution only ever reads or changes its own records.

Endpoints:
- POST /institutions/register - Multipart registration with images
- GET, PATCH /institutions/me - Own profile
- /institutions/me/admissions[/{id}] - Admission CRUD
- /institutions/me/admission-enquiries[/{id}] - Received admission enquiries
- /institutions/me/vacancies[/{id}] - Vacancy CRUD
- /institutions/me/vacancy-enquiries[/{id}] - Received vacancy enquiries
- /institutions/me/materials[/{id}] - Materials

Publishing (create and update) requires an approved account; a pending
institution can still read and edit its profile.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, File, Form, Query, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.auth import require_roles, set_session_cookie
from eduportal.core.database import get_db
from eduportal.core.rate_limit import client_ip_key, rate_limit
from eduportal.modules.admissions import service as admissions_service
from eduportal.modules.admissions.schemas import (
    AdmissionCreate,
    AdmissionEnvelope,
    AdmissionListResponse,
    AdmissionResponse,
    AdmissionUpdate,
)
from eduportal.modules.auth.schemas import AuthResponse, MessageResponse
from eduportal.modules.enquiries import service as enquiries_service
from eduportal.modules.enquiries.models import EnquiryStatus, EnquiryType
from eduportal.modules.enquiries.schemas import (
    EnquiryEnvelope,
    EnquiryListResponse,
    EnquiryResponse,
    EnquiryStatusUpdate,
)
from eduportal.modules.institutions import service
from eduportal.modules.materials import service as materials_service
from eduportal.modules.materials.schemas import (
    MaterialCreate,
    MaterialEnvelope,
    MaterialListResponse,
    MaterialResponse,
)
from eduportal.modules.users import service as users_service
from eduportal.modules.users.models import User, UserRole
from eduportal.modules.users.schemas import UserEnvelope, UserResponse
from eduportal.modules.vacancies import service as vacancies_service
from eduportal.modules.vacancies.schemas import (
    VacancyCreate,
    VacancyEnvelope,
    VacancyListResponse,
    VacancyResponse,
    VacancyUpdate,
)

router = APIRouter()

RATE_LIMIT_REGISTER = (5, 60)  # 5 signups per minute per IP

current_institution = require_roles(UserRole.INSTITUTION)
approved_institution = require_roles(UserRole.INSTITUTION, approved_only=True)


# ============================================
# Registration & Profile
# ============================================


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Institution",
    dependencies=[
        Depends(rate_limit(*RATE_LIMIT_REGISTER, key_func=client_ip_key("institution-register")))
    ],
)
async def register_institution(
    response: Response,
    name: str | None = Form(None),
    email: str | None = Form(None),
    password: str | None = Form(None),
    phone: str | None = Form(None),
    address: str | None = Form(None),
    website: str | None = Form(None),
    description: str | None = Form(None),
    institution_type: str | None = Form(None),
    institution_details: str | None = Form(None),
    gender: str | None = Form(None),
    age: str | None = Form(None),
    images: list[UploadFile] | None = File(None),
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """
    Register an institution with at least 5 PNG, JPEG or WEBP images.

    ``institution_details`` is a JSON object with ``name`` and
    ``contact_number``. The account starts pending; the returned session
    token (also set as a cookie) works for profile access until an admin
    approves it.

    Raises:
        400: Missing fields, missing or invalid images, invalid values
        409: Email already registered
        500: Image upload failed
    """
    form = {
        "name": name,
        "email": email,
        "password": password,
        "phone": phone,
        "address": address,
        "website": website,
        "description": description,
        "institution_type": institution_type,
        "institution_details": institution_details,
        "gender": gender,
        "age": age,
    }
    user, token = await service.register_institution(db, form, images)
    set_session_cookie(response, token)

    return AuthResponse(
        message="Institution Registration Pending Approval",
        user=UserResponse.model_validate(user),
        token=token,
    )


@router.get("/me", response_model=UserEnvelope, summary="Get Institution Profile")
async def get_profile(user: User = Depends(current_institution)) -> UserEnvelope:
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.patch("/me", response_model=UserEnvelope, summary="Update Institution Profile")
async def update_profile(
    changes: dict[str, Any] = Body(...),
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> UserEnvelope:
    """
    Update the institution's profile.

    Accepts ``name``, ``phone``, ``address``, ``website``, ``description``,
    ``institution_type``, ``gender``, ``age`` and
    ``institution_details.name`` / ``institution_details.contact_number``.
    Anything else (status, email, password, images...) is rejected with 400.
    """
    updated = await users_service.update_profile(db, user, changes)
    return UserEnvelope(user=UserResponse.model_validate(updated), message="Profile Updated!")


# ============================================
# Admissions
# ============================================


@router.post(
    "/me/admissions",
    response_model=AdmissionEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create Admission",
)
async def create_admission(
    data: AdmissionCreate,
    user: User = Depends(approved_institution),
    db: AsyncSession = Depends(get_db),
) -> AdmissionEnvelope:
    admission = await admissions_service.create_admission(db, user, data)
    return AdmissionEnvelope(
        message="Admission Created!",
        admission=AdmissionResponse.model_validate(admission),
    )


@router.get("/me/admissions", response_model=AdmissionListResponse, summary="List My Admissions")
async def list_admissions(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> AdmissionListResponse:
    admissions, total = await admissions_service.list_institution_admissions(
        db, user, skip=skip, limit=limit
    )
    return AdmissionListResponse(
        admissions=[AdmissionResponse.model_validate(a) for a in admissions],
        total=total,
    )


@router.get(
    "/me/admissions/{admission_id}",
    response_model=AdmissionEnvelope,
    summary="Get My Admission",
)
async def get_admission(
    admission_id: str,
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> AdmissionEnvelope:
    admission = await admissions_service.get_owned_admission(db, user, admission_id)
    return AdmissionEnvelope(admission=AdmissionResponse.model_validate(admission))


@router.patch(
    "/me/admissions/{admission_id}",
    response_model=AdmissionEnvelope,
    summary="Update Admission",
)
async def update_admission(
    admission_id: str,
    data: AdmissionUpdate,
    user: User = Depends(approved_institution),
    db: AsyncSession = Depends(get_db),
) -> AdmissionEnvelope:
    admission = await admissions_service.update_admission(db, user, admission_id, data)
    return AdmissionEnvelope(
        message="Admission Updated!",
        admission=AdmissionResponse.model_validate(admission),
    )


@router.delete(
    "/me/admissions/{admission_id}",
    response_model=MessageResponse,
    summary="Delete Admission",
)
async def delete_admission(
    admission_id: str,
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    await admissions_service.delete_admission(db, user, admission_id)
    return MessageResponse(message="Admission Deleted!")


# ============================================
# Vacancies
# ============================================


@router.post(
    "/me/vacancies",
    response_model=VacancyEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create Vacancy",
)
async def create_vacancy(
    data: VacancyCreate,
    user: User = Depends(approved_institution),
    db: AsyncSession = Depends(get_db),
) -> VacancyEnvelope:
    vacancy = await vacancies_service.create_vacancy(db, user, data)
    return VacancyEnvelope(
        message="Vacancy Posted!",
        vacancy=VacancyResponse.model_validate(vacancy),
    )


@router.get("/me/vacancies", response_model=VacancyListResponse, summary="List My Vacancies")
async def list_vacancies(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> VacancyListResponse:
    vacancies, total = await vacancies_service.list_posted_vacancies(
        db, user, skip=skip, limit=limit
    )
    return VacancyListResponse(
        vacancies=[VacancyResponse.model_validate(v) for v in vacancies],
        total=total,
    )


@router.get("/me/vacancies/{vacancy_id}", response_model=VacancyEnvelope, summary="Get My Vacancy")
async def get_vacancy(
    vacancy_id: str,
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> VacancyEnvelope:
    vacancy = await vacancies_service.get_owned_vacancy(db, user, vacancy_id)
    return VacancyEnvelope(vacancy=VacancyResponse.model_validate(vacancy))


@router.patch(
    "/me/vacancies/{vacancy_id}",
    response_model=VacancyEnvelope,
    summary="Update Vacancy",
)
async def update_vacancy(
    vacancy_id: str,
    data: VacancyUpdate,
    user: User = Depends(approved_institution),
    db: AsyncSession = Depends(get_db),
) -> VacancyEnvelope:
    vacancy = await vacancies_service.update_vacancy(db, user, vacancy_id, data)
    return VacancyEnvelope(
        message="Vacancy Updated!",
        vacancy=VacancyResponse.model_validate(vacancy),
    )


@router.delete(
    "/me/vacancies/{vacancy_id}",
    response_model=MessageResponse,
    summary="Delete Vacancy",
)
async def delete_vacancy(
    vacancy_id: str,
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    await vacancies_service.delete_vacancy(db, user, vacancy_id)
    return MessageResponse(message="Vacancy Deleted!")


# ============================================
# Materials
# ============================================


@router.post(
    "/me/materials",
    response_model=MaterialEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Post Material",
)
async def create_material(
    data: MaterialCreate,
    user: User = Depends(approved_institution),
    db: AsyncSession = Depends(get_db),
) -> MaterialEnvelope:
    material = await materials_service.create_material(db, user, data)
    return MaterialEnvelope(
        message="Material Posted!",
        material=MaterialResponse.model_validate(material),
    )


@router.get("/me/materials", response_model=MaterialListResponse, summary="List My Materials")
async def list_materials(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> MaterialListResponse:
    materials, total = await materials_service.list_posted_materials(
        db, user, skip=skip, limit=limit
    )
    return MaterialListResponse(
        materials=[MaterialResponse.model_validate(m) for m in materials],
        total=total,
    )


@router.get(
    "/me/materials/{material_id}",
    response_model=MaterialEnvelope,
    summary="Get My Material",
)
async def get_material(
    material_id: str,
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> MaterialEnvelope:
    material = await materials_service.get_owned_material(db, user, material_id)
    return MaterialEnvelope(material=MaterialResponse.model_validate(material))


@router.delete(
    "/me/materials/{material_id}",
    response_model=MessageResponse,
    summary="Delete Material",
)
async def delete_material(
    material_id: str,
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    await materials_service.delete_material(db, user, material_id)
    return MessageResponse(message="Material Deleted!")


# ============================================
# Received Enquiries
# ============================================


async def _list_enquiries(
    db: AsyncSession,
    user: User,
    enquiry_type: EnquiryType,
    enquiry_status: EnquiryStatus | None,
    skip: int,
    limit: int,
) -> EnquiryListResponse:
    enquiries, total = await enquiries_service.list_received(
        db, user, enquiry_type=enquiry_type, status=enquiry_status, skip=skip, limit=limit
    )
    return EnquiryListResponse(
        enquiries=[EnquiryResponse.model_validate(e) for e in enquiries],
        total=total,
    )


@router.get(
    "/me/admission-enquiries",
    response_model=EnquiryListResponse,
    summary="List Admission Enquiries",
)
async def list_admission_enquiries(
    enquiry_status: EnquiryStatus | None = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> EnquiryListResponse:
    return await _list_enquiries(db, user, EnquiryType.ADMISSION, enquiry_status, skip, limit)


@router.get(
    "/me/admission-enquiries/{enquiry_id}",
    response_model=EnquiryEnvelope,
    summary="Get Admission Enquiry",
)
async def get_admission_enquiry(
    enquiry_id: str,
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> EnquiryEnvelope:
    enquiry = await enquiries_service.get_received(db, user, enquiry_id, EnquiryType.ADMISSION)
    return EnquiryEnvelope(enquiry=EnquiryResponse.model_validate(enquiry))


@router.patch(
    "/me/admission-enquiries/{enquiry_id}",
    response_model=EnquiryEnvelope,
    summary="Change Admission Enquiry Status",
)
async def change_admission_enquiry_status(
    enquiry_id: str,
    data: EnquiryStatusUpdate,
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> EnquiryEnvelope:
    enquiry = await enquiries_service.change_status(
        db, user, enquiry_id, data.status, EnquiryType.ADMISSION
    )
    return EnquiryEnvelope(
        message="Enquiry Status Updated!",
        enquiry=EnquiryResponse.model_validate(enquiry),
    )


@router.get(
    "/me/vacancy-enquiries",
    response_model=EnquiryListResponse,
    summary="List Vacancy Enquiries",
)
async def list_vacancy_enquiries(
    enquiry_status: EnquiryStatus | None = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> EnquiryListResponse:
    return await _list_enquiries(db, user, EnquiryType.VACANCY, enquiry_status, skip, limit)


@router.get(
    "/me/vacancy-enquiries/{enquiry_id}",
    response_model=EnquiryEnvelope,
    summary="Get Vacancy Enquiry",
)
async def get_vacancy_enquiry(
    enquiry_id: str,
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> EnquiryEnvelope:
    enquiry = await enquiries_service.get_received(db, user, enquiry_id, EnquiryType.VACANCY)
    return EnquiryEnvelope(enquiry=EnquiryResponse.model_validate(enquiry))


@router.patch(
    "/me/vacancy-enquiries/{enquiry_id}",
    response_model=EnquiryEnvelope,
    summary="Change Vacancy Enquiry Status",
)
async def change_vacancy_enquiry_status(
    enquiry_id: str,
    data: EnquiryStatusUpdate,
    user: User = Depends(current_institution),
    db: AsyncSession = Depends(get_db),
) -> EnquiryEnvelope:
    enquiry = await enquiries_service.change_status(
        db, user, enquiry_id, data.status, EnquiryType.VACANCY
    )
    return EnquiryEnvelope(
        message="Enquiry Status Updated!",
        enquiry=EnquiryResponse.model_validate(enquiry),
    )
