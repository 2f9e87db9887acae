"""
Enquiries Router

Endpoints:
- GET /enquiries/mine - Enquiries the caller sent (students and teachers)
- GET /enquiries/received - Enquiries addressed to the caller (institutions and centers)
- GET /enquiries/received/{id} - One received enquiry
- PATCH /enquiries/received/{id} - Accept or reject a received enquiry

Enquiries are created under ``/admissions/{id}/enquiries`` and
``/vacancies/{id}/enquiries``.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.auth import require_roles
from eduportal.core.database import get_db
from eduportal.modules.enquiries import service
from eduportal.modules.enquiries.models import EnquiryStatus, EnquiryType
from eduportal.modules.enquiries.schemas import (
    EnquiryEnvelope,
    EnquiryListResponse,
    EnquiryResponse,
    EnquiryStatusUpdate,
)
from eduportal.modules.users.models import User, UserRole

router = APIRouter()

ENQUIRERS = (UserRole.STUDENT, UserRole.TEACHER)
OWNERS = (UserRole.INSTITUTION, UserRole.CENTER)


@router.get("/mine", response_model=EnquiryListResponse, summary="List Sent Enquiries")
async def list_sent_enquiries(
    status: EnquiryStatus | None = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    user: User = Depends(require_roles(*ENQUIRERS)),
    db: AsyncSession = Depends(get_db),
) -> EnquiryListResponse:
    enquiries, total = await service.list_sent(db, user, status=status, skip=skip, limit=limit)
    return EnquiryListResponse(
        enquiries=[EnquiryResponse.model_validate(e) for e in enquiries],
        total=total,
    )


@router.get("/received", response_model=EnquiryListResponse, summary="List Received Enquiries")
async def list_received_enquiries(
    enquiry_type: EnquiryType | None = Query(None, alias="type"),
    status: EnquiryStatus | None = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    user: User = Depends(require_roles(*OWNERS)),
    db: AsyncSession = Depends(get_db),
) -> EnquiryListResponse:
    enquiries, total = await service.list_received(
        db, user, enquiry_type=enquiry_type, status=status, skip=skip, limit=limit
    )
    return EnquiryListResponse(
        enquiries=[EnquiryResponse.model_validate(e) for e in enquiries],
        total=total,
    )


@router.get(
    "/received/{enquiry_id}",
    response_model=EnquiryEnvelope,
    summary="Get Received Enquiry",
)
async def get_received_enquiry(
    enquiry_id: str,
    user: User = Depends(require_roles(*OWNERS)),
    db: AsyncSession = Depends(get_db),
) -> EnquiryEnvelope:
    enquiry = await service.get_received(db, user, enquiry_id)
    return EnquiryEnvelope(enquiry=EnquiryResponse.model_validate(enquiry))


@router.patch(
    "/received/{enquiry_id}",
    response_model=EnquiryEnvelope,
    summary="Change Enquiry Status",
)
async def change_enquiry_status(
    enquiry_id: str,
    data: EnquiryStatusUpdate,
    user: User = Depends(require_roles(*OWNERS)),
    db: AsyncSession = Depends(get_db),
) -> EnquiryEnvelope:
    enquiry = await service.change_status(db, user, enquiry_id, data.status)
    return EnquiryEnvelope(
        message="Enquiry Status Updated!",
        enquiry=EnquiryResponse.model_validate(enquiry),
    )
