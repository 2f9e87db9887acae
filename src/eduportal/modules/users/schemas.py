"""
User Schemas

Pydantic schemas for account input, role profiles and user responses.

Each role's extension data is described by a profile schema; the
``PROFILE_SCHEMAS`` map is the single place the rest of the code looks a
role's schema up. ``UPDATABLE_*`` define which fields a user may change
on their own account.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from eduportal.modules.users.models import AccountStatus, UserRole

INDIAN_MOBILE_PATTERN = r"^[6-9]\d{9}$"
MIN_INSTITUTION_IMAGES = 5


def _check_contact_number(value: str | None) -> str | None:
    if value is not None and not re.fullmatch(INDIAN_MOBILE_PATTERN, value):
        raise ValueError("Contact number must be a valid 10 digit mobile number!")
    return value


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class InstitutionType(str, Enum):
    SCHOOL = "School"
    COLLEGE = "College"


# ============================================
# Account Schemas
# ============================================


class AccountCreate(BaseModel):
    """Fields common to every new account."""

    name: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=32)
    phone: str | None = Field(None, max_length=20)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class AccountUpdate(BaseModel):
    """Account-level fields a user may change."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=3, max_length=30)
    phone: str | None = Field(None, max_length=20)


# ============================================
# Role Profiles
# ============================================


class ProfileImage(BaseModel):
    public_id: str | None = None
    url: str = Field(..., min_length=1)


class InstitutionDetailsInput(BaseModel):
    """Institution details as submitted by the client (images come as files)."""

    name: str = Field(..., min_length=1, max_length=200)
    contact_number: str

    @field_validator("contact_number")
    @classmethod
    def validate_contact_number(cls, value: str) -> str:
        return _check_contact_number(value)


class InstitutionDetails(InstitutionDetailsInput):
    images: list[ProfileImage] = Field(default_factory=list)

    @field_validator("images")
    @classmethod
    def require_minimum_images(cls, value: list[ProfileImage]) -> list[ProfileImage]:
        if len(value) < MIN_INSTITUTION_IMAGES:
            raise ValueError(
                f"An institution must have at least {MIN_INSTITUTION_IMAGES} images."
            )
        return value


class InstitutionProfileInput(BaseModel):
    """Institution profile before images are attached."""

    model_config = ConfigDict(extra="forbid")

    address: str = Field(..., min_length=1, max_length=500)
    website: str = Field(..., min_length=1, max_length=500)
    description: str = Field(..., min_length=1, max_length=500)
    institution_type: InstitutionType
    gender: Gender | None = None
    age: int | None = Field(None, ge=21)
    institution_details: InstitutionDetailsInput


class InstitutionProfile(InstitutionProfileInput):
    institution_details: InstitutionDetails


class StudentProfile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    gender: Gender | None = None
    age: int | None = Field(None, ge=5)
    address: str | None = Field(None, max_length=500)
    qualification: str | None = Field(None, max_length=200)


class TeacherProfile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    gender: Gender | None = None
    age: int | None = Field(None, ge=18)
    address: str | None = Field(None, max_length=500)
    qualification: str | None = Field(None, max_length=200)
    subjects: list[str] = Field(default_factory=list)
    experience_years: int | None = Field(None, ge=0)


class CenterProfile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    address: str = Field(..., min_length=1, max_length=500)
    description: str | None = Field(None, max_length=500)
    website: str | None = Field(None, max_length=500)
    contact_number: str | None = None

    @field_validator("contact_number")
    @classmethod
    def validate_contact_number(cls, value: str | None) -> str | None:
        return _check_contact_number(value)


class AdminProfile(BaseModel):
    model_config = ConfigDict(extra="forbid")


PROFILE_SCHEMAS: dict[UserRole, type[BaseModel]] = {
    UserRole.STUDENT: StudentProfile,
    UserRole.TEACHER: TeacherProfile,
    UserRole.INSTITUTION: InstitutionProfile,
    UserRole.CENTER: CenterProfile,
    UserRole.ADMIN: AdminProfile,
}

UPDATABLE_ACCOUNT_FIELDS: frozenset[str] = frozenset({"name", "phone"})

UPDATABLE_PROFILE_FIELDS: dict[UserRole, frozenset[str]] = {
    UserRole.STUDENT: frozenset({"gender", "age", "address", "qualification"}),
    UserRole.TEACHER: frozenset(
        {"gender", "age", "address", "qualification", "subjects", "experience_years"}
    ),
    UserRole.INSTITUTION: frozenset(
        {
            "gender",
            "age",
            "address",
            "website",
            "description",
            "institution_type",
            "institution_details",
        }
    ),
    UserRole.CENTER: frozenset({"address", "description", "website", "contact_number"}),
    UserRole.ADMIN: frozenset(),
}

# Nested profile objects that may only be partially updated
UPDATABLE_NESTED_FIELDS: dict[str, frozenset[str]] = {
    "institution_details": frozenset({"name", "contact_number"}),
}


# ============================================
# Responses
# ============================================


class UserResponse(BaseModel):
    """Public representation of a user. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    role: UserRole
    name: str
    email: str
    phone: str | None = None
    status: AccountStatus
    profile: dict[str, Any]
    created_at: datetime
    updated_at: datetime


class UserEnvelope(BaseModel):
    success: bool = True
    message: str | None = None
    user: UserResponse


class UserListResponse(BaseModel):
    success: bool = True
    users: list[UserResponse]
    total: int = Field(..., ge=0)
    skip: int = Field(..., ge=0)
    limit: int = Field(..., ge=1, le=100)
