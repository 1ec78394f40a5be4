"""Patient endpoints, scoped to a clinic."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from doutor_agenda.dependencies import DatabaseSession, MemberClinic
from doutor_agenda.schemas.patients import PatientCreate, PatientResponse, PatientUpdate
from doutor_agenda.services.patient_service import PatientService

router = APIRouter()


@router.post("/", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def create_patient(data: PatientCreate, clinic: MemberClinic, db: DatabaseSession):
    """Register a patient in the clinic."""
    return await PatientService(db).create_patient(clinic["id"], data)


@router.get("/", response_model=list[PatientResponse])
async def list_patients(
    clinic: MemberClinic,
    db: DatabaseSession,
    search: str | None = Query(None, description="Search by name or email"),
):
    """List the clinic's patients."""
    return await PatientService(db).list_patients(clinic["id"], search=search)


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(patient_id: UUID, clinic: MemberClinic, db: DatabaseSession):
    """Get a patient."""
    return await PatientService(db).get_patient(clinic["id"], patient_id)


@router.patch("/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: UUID, data: PatientUpdate, clinic: MemberClinic, db: DatabaseSession
):
    """Update a patient."""
    return await PatientService(db).update_patient(clinic["id"], patient_id, data)


@router.delete("/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_patient(patient_id: UUID, clinic: MemberClinic, db: DatabaseSession) -> None:
    """Delete a patient without appointments."""
    await PatientService(db).delete_patient(clinic["id"], patient_id)
