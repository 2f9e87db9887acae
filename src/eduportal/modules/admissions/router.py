"""
Admissions Router

Public endpoints for browsing admission notices, and the student endpoint
for enquiring about one. Institutions manage their notices under
``/institutions/me/admissions``.

Endpoints:
- GET /admissions - List admissions (open ones by default)
- GET /admissions/{id} - Get one admission
- POST /admissions/{id}/enquiries - Enquire about an open admission (approved students)
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.auth import require_roles
from eduportal.core.database import get_db
from eduportal.modules.admissions import service
from eduportal.modules.admissions.schemas import (
    AdmissionEnvelope,
    AdmissionListResponse,
    AdmissionResponse,
)
from eduportal.modules.enquiries import service as enquiries_service
from eduportal.modules.enquiries.schemas import EnquiryCreate, EnquiryEnvelope, EnquiryResponse
from eduportal.modules.users.models import User, UserRole

router = APIRouter()


@router.get("", response_model=AdmissionListResponse, summary="List Admissions")
async def list_admissions(
    open_only: bool = Query(True),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> AdmissionListResponse:
    admissions, total = await service.list_admissions(
        db, open_only=open_only, skip=skip, limit=limit
    )
    return AdmissionListResponse(
        admissions=[AdmissionResponse.model_validate(a) for a in admissions],
        total=total,
    )


@router.get("/{admission_id}", response_model=AdmissionEnvelope, summary="Get Admission")
async def get_admission(
    admission_id: str,
    db: AsyncSession = Depends(get_db),
) -> AdmissionEnvelope:
    admission = await service.get_admission(db, admission_id)
    return AdmissionEnvelope(admission=AdmissionResponse.model_validate(admission))


@router.post(
    "/{admission_id}/enquiries",
    response_model=EnquiryEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Enquire About Admission",
)
async def create_admission_enquiry(
    admission_id: str,
    data: EnquiryCreate,
    user: User = Depends(require_roles(UserRole.STUDENT, approved_only=True)),
    db: AsyncSession = Depends(get_db),
) -> EnquiryEnvelope:
    """
    Send an enquiry to the institution that published the admission.

    Raises:
        400: Admission is closed
        404: Admission not found
        409: A pending enquiry for this admission already exists
    """
    enquiry = await enquiries_service.create_admission_enquiry(db, user, admission_id, data)
    return EnquiryEnvelope(
        message="Enquiry Sent!",
        enquiry=EnquiryResponse.model_validate(enquiry),
    )
