"""Vacancy schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from eduportal.modules.users.models import UserRole


class VacancyCreate(BaseModel):
    """Request body for advertising a vacancy."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=3, max_length=200)
    subject: str | None = Field(None, max_length=100)
    description: str = Field(..., min_length=1, max_length=5000)
    qualification: str | None = Field(None, max_length=200)
    salary: int | None = Field(None, ge=0)
    location: str | None = Field(None, max_length=200)
    openings: int = Field(1, ge=1)
    deadline: date | None = None
    is_open: bool = True


class VacancyUpdate(BaseModel):
    """Partial update; the poster can never be changed."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=3, max_length=200)
    subject: str | None = Field(None, max_length=100)
    description: str | None = Field(None, min_length=1, max_length=5000)
    qualification: str | None = Field(None, max_length=200)
    salary: int | None = Field(None, ge=0)
    location: str | None = Field(None, max_length=200)
    openings: int | None = Field(None, ge=1)
    deadline: date | None = None
    is_open: bool | None = None


class VacancyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    posted_by_id: str
    posted_by_role: UserRole
    title: str
    subject: str | None = None
    description: str
    qualification: str | None = None
    salary: int | None = None
    location: str | None = None
    openings: int
    deadline: date | None = None
    is_open: bool
    created_at: datetime
    updated_at: datetime


class VacancyEnvelope(BaseModel):
    success: bool = True
    message: str | None = None
    vacancy: VacancyResponse


class VacancyListResponse(BaseModel):
    success: bool = True
    vacancies: list[VacancyResponse]
    total: int = Field(..., ge=0)
