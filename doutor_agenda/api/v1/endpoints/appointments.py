"""Appointment endpoints, scoped to a clinic."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Query, status

from doutor_agenda.dependencies import DatabaseSession, MemberClinic
from doutor_agenda.schemas.appointments import (
    AppointmentCreate,
    AppointmentFilters,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentUpdate,
)
from doutor_agenda.services.appointment_service import AppointmentService

router = APIRouter()


@router.post(
    "/",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create appointment",
)
async def create_appointment(
    data: AppointmentCreate,
    clinic: MemberClinic,
    db: DatabaseSession,
) -> AppointmentResponse:
    """
    Book an appointment.

    The doctor and the patient must both belong to the clinic.
    """
    return await AppointmentService(db).create_appointment(clinic["id"], data)


@router.get(
    "/",
    response_model=AppointmentListResponse,
    summary="List appointments",
)
async def list_appointments(
    clinic: MemberClinic,
    db: DatabaseSession,
    doctor_id: UUID | None = Query(None, description="Filter by doctor"),
    patient_id: UUID | None = Query(None, description="Filter by patient"),
    from_date: datetime | None = Query(None, description="Filter from date"),
    to_date: datetime | None = Query(None, description="Filter to date"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
) -> AppointmentListResponse:
    """List the clinic's appointments ordered by date."""
    filters = AppointmentFilters(
        doctor_id=doctor_id,
        patient_id=patient_id,
        from_date=from_date,
        to_date=to_date,
        page=page,
        page_size=page_size,
    )
    return await AppointmentService(db).list_appointments(clinic["id"], filters)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: UUID,
    clinic: MemberClinic,
    db: DatabaseSession,
) -> AppointmentResponse:
    """Get an appointment."""
    return await AppointmentService(db).get_appointment(clinic["id"], appointment_id)


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: UUID,
    data: AppointmentUpdate,
    clinic: MemberClinic,
    db: DatabaseSession,
) -> AppointmentResponse:
    """Reschedule an appointment or change its doctor or patient."""
    return await AppointmentService(db).update_appointment(clinic["id"], appointment_id, data)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: UUID,
    clinic: MemberClinic,
    db: DatabaseSession,
) -> None:
    """Delete an appointment."""
    await AppointmentService(db).delete_appointment(clinic["id"], appointment_id)
