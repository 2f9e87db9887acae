"""Admission schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class AdmissionCreate(BaseModel):
    """Request body for creating an admission notice."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=3, max_length=200)
    course: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    eligibility: str | None = Field(None, max_length=2000)
    fees: int | None = Field(None, ge=0)
    seats: int | None = Field(None, ge=1)
    deadline: date | None = None
    is_open: bool = True


class AdmissionUpdate(BaseModel):
    """Partial update; the owning institution can never be changed."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=3, max_length=200)
    course: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1, max_length=5000)
    eligibility: str | None = Field(None, max_length=2000)
    fees: int | None = Field(None, ge=0)
    seats: int | None = Field(None, ge=1)
    deadline: date | None = None
    is_open: bool | None = None


class AdmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    institution_id: str
    title: str
    course: str
    description: str
    eligibility: str | None = None
    fees: int | None = None
    seats: int | None = None
    deadline: date | None = None
    is_open: bool
    created_at: datetime
    updated_at: datetime


class AdmissionEnvelope(BaseModel):
    success: bool = True
    message: str | None = None
    admission: AdmissionResponse


class AdmissionListResponse(BaseModel):
    success: bool = True
    admissions: list[AdmissionResponse]
    total: int = Field(..., ge=0)
