"""Enquiry schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from eduportal.modules.enquiries.models import EnquiryStatus, EnquiryType


class EnquiryCreate(BaseModel):
    """Request body for enquiring about an admission or vacancy."""

    model_config = ConfigDict(extra="forbid")

    message: str = Field(..., min_length=1, max_length=2000)


class EnquiryStatusUpdate(BaseModel):
    """Owner's decision on a received enquiry."""

    model_config = ConfigDict(extra="forbid")

    status: EnquiryStatus


class EnquiryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    enquiry_type: EnquiryType
    admission_id: str | None = None
    vacancy_id: str | None = None
    owner_id: str
    enquirer_id: str
    message: str
    status: EnquiryStatus
    created_at: datetime
    updated_at: datetime


class EnquiryEnvelope(BaseModel):
    success: bool = True
    message: str | None = None
    enquiry: EnquiryResponse


class EnquiryListResponse(BaseModel):
    success: bool = True
    enquiries: list[EnquiryResponse]
    total: int = Field(..., ge=0)
