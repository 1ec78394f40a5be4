"""Doctor schemas for request/response validation."""

from datetime import datetime, time
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class DoctorBase(BaseModel):
    """Base schema for doctor."""

    name: str = Field(..., min_length=1, max_length=255)
    avatar_image_url: str | None = None
    specialty: str = Field(..., min_length=1, max_length=200)
    # 0 - sunday ... 6 - saturday
    available_from_weekday: int = Field(..., ge=0, le=6)
    available_to_weekday: int = Field(..., ge=0, le=6)
    available_from_time: time
    available_to_time: time
    appointment_price_in_cents: int = Field(..., ge=0)


class DoctorCreate(DoctorBase):
    """Schema for creating a doctor."""

    @model_validator(mode="after")
    def validate_time_range(self) -> "DoctorCreate":
        """Availability must end after it starts."""
        if self.available_to_time <= self.available_from_time:
            raise ValueError("available_to_time must be after available_from_time")
        return self


class DoctorUpdate(BaseModel):
    """Schema for updating a doctor."""

    name: str | None = Field(None, min_length=1, max_length=255)
    avatar_image_url: str | None = None
    specialty: str | None = Field(None, min_length=1, max_length=200)
    available_from_weekday: int | None = Field(None, ge=0, le=6)
    available_to_weekday: int | None = Field(None, ge=0, le=6)
    available_from_time: time | None = None
    available_to_time: time | None = None
    appointment_price_in_cents: int | None = Field(None, ge=0)


class DoctorResponse(DoctorBase):
    """Doctor response schema."""

    id: UUID
    clinic_id: UUID
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
