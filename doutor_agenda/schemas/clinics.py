"""Clinic schemas for request/response validation."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ClinicCreate(BaseModel):
    """Schema for creating a clinic."""

    name: str = Field(..., min_length=1, max_length=255)


class ClinicUpdate(BaseModel):
    """Schema for updating a clinic."""

    name: str | None = Field(None, min_length=1, max_length=255)


class ClinicResponse(BaseModel):
    """Clinic response schema."""

    id: UUID
    name: str
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
