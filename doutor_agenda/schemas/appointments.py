"""Appointment schemas for request/response validation."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class AppointmentCreate(BaseModel):
    """Schema for creating a new appointment."""

    date: datetime
    patient_id: UUID
    doctor_id: UUID


class AppointmentUpdate(BaseModel):
    """Schema for updating an existing appointment."""

    date: datetime | None = None
    patient_id: UUID | None = None
    doctor_id: UUID | None = None


class AppointmentResponse(BaseModel):
    """Schema for appointment response."""

    id: UUID
    date: datetime
    clinic_id: UUID
    patient_id: UUID
    doctor_id: UUID
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class AppointmentListResponse(BaseModel):
    """Schema for paginated appointment list response."""

    total: int
    page: int
    page_size: int
    items: list[AppointmentResponse]


class AppointmentFilters(BaseModel):
    """Schema for appointment filtering."""

    doctor_id: UUID | None = None
    patient_id: UUID | None = None
    from_date: datetime | None = None
    to_date: datetime | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)
