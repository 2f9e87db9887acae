"""Material schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from eduportal.modules.users.models import UserRole


class MaterialCreate(BaseModel):
    """Request body for posting a study material."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=3, max_length=200)
    subject: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=5000)
    resource_url: HttpUrl | None = None


class MaterialResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    posted_by_id: str
    posted_by_role: UserRole
    title: str
    subject: str
    description: str | None = None
    resource_url: str | None = None
    created_at: datetime
    updated_at: datetime


class MaterialEnvelope(BaseModel):
    success: bool = True
    message: str | None = None
    material: MaterialResponse


class MaterialListResponse(BaseModel):
    success: bool = True
    materials: list[MaterialResponse]
    total: int = Field(..., ge=0)
