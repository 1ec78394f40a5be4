"""Doctor endpoints, scoped to a clinic."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from doutor_agenda.dependencies import DatabaseSession, MemberClinic
from doutor_agenda.schemas.doctors import DoctorCreate, DoctorResponse, DoctorUpdate
from doutor_agenda.services.doctor_service import DoctorService

router = APIRouter()


@router.post("/", response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
async def create_doctor(data: DoctorCreate, clinic: MemberClinic, db: DatabaseSession):
    """
    Add a doctor to the clinic.

    - **available_from_weekday / available_to_weekday**: 0 (Sunday) to 6 (Saturday)
    - **available_from_time / available_to_time**: daily availability window
    - **appointment_price_in_cents**: consultation price
    """
    return await DoctorService(db).create_doctor(clinic["id"], data)


@router.get("/", response_model=list[DoctorResponse])
async def list_doctors(
    clinic: MemberClinic,
    db: DatabaseSession,
    specialty: str | None = Query(None, description="Filter by specialty"),
):
    """List the clinic's doctors."""
    return await DoctorService(db).list_doctors(clinic["id"], specialty=specialty)


@router.get("/{doctor_id}", response_model=DoctorResponse)
async def get_doctor(doctor_id: UUID, clinic: MemberClinic, db: DatabaseSession):
    """Get a doctor."""
    return await DoctorService(db).get_doctor(clinic["id"], doctor_id)


@router.patch("/{doctor_id}", response_model=DoctorResponse)
async def update_doctor(
    doctor_id: UUID, data: DoctorUpdate, clinic: MemberClinic, db: DatabaseSession
):
    """Update a doctor."""
    return await DoctorService(db).update_doctor(clinic["id"], doctor_id, data)


@router.delete("/{doctor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_doctor(doctor_id: UUID, clinic: MemberClinic, db: DatabaseSession) -> None:
    """Delete a doctor without appointments."""
    await DoctorService(db).delete_doctor(clinic["id"], doctor_id)
