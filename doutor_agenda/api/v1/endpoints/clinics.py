"""Clinic management endpoints."""

from fastapi import APIRouter, status

from doutor_agenda.dependencies import CurrentUser, DatabaseSession, MemberClinic
from doutor_agenda.schemas.clinics import ClinicCreate, ClinicResponse, ClinicUpdate
from doutor_agenda.services.clinic_service import ClinicService

router = APIRouter()


@router.post("/", response_model=ClinicResponse, status_code=status.HTTP_201_CREATED)
async def create_clinic(clinic_data: ClinicCreate, user: CurrentUser, db: DatabaseSession):
    """
    Create a new clinic.

    The caller becomes a member of the new clinic.
    """
    return await ClinicService().create_clinic(db, user["id"], clinic_data)


@router.get("/", response_model=list[ClinicResponse])
async def list_clinics(user: CurrentUser, db: DatabaseSession):
    """List the clinics the caller belongs to."""
    return await ClinicService().list_clinics_for_user(db, user["id"])


@router.get("/{clinic_id}", response_model=ClinicResponse)
async def get_clinic(clinic: MemberClinic):
    """Get one of the caller's clinics."""
    return clinic


@router.patch("/{clinic_id}", response_model=ClinicResponse)
async def update_clinic(clinic_data: ClinicUpdate, clinic: MemberClinic, db: DatabaseSession):
    """Rename a clinic."""
    return await ClinicService().update_clinic(db, clinic["id"], clinic_data)


@router.delete("/{clinic_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_clinic(clinic: MemberClinic, db: DatabaseSession) -> None:
    """
    Delete a clinic.

    Its doctors, patients, appointments and memberships are deleted with it.
    """
    await ClinicService().delete_clinic(db, clinic["id"])
