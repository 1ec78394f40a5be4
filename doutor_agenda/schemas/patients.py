"""Patient schemas for request/response validation."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class PatientSex(str, Enum):
    """Patient sex enumeration."""

    MALE = "male"
    FEMALE = "female"


class PatientBase(BaseModel):
    """Base schema for patient."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=7, max_length=20)
    sex: PatientSex


class PatientCreate(PatientBase):
    """Schema for creating a patient."""


class PatientUpdate(BaseModel):
    """Schema for updating a patient."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, min_length=7, max_length=20)
    sex: PatientSex | None = None


class PatientResponse(BaseModel):
    """Patient response schema."""

    id: UUID
    clinic_id: UUID
    name: str
    email: str
    phone: str
    sex: PatientSex
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
