"""API v1 router configuration."""

from fastapi import APIRouter

from doutor_agenda.api.v1.endpoints import (
    appointments,
    auth,
    clinics,
    doctors,
    health,
    patients,
)

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(clinics.router, prefix="/clinics", tags=["Clinics"])
api_router.include_router(doctors.router, prefix="/clinics/{clinic_id}/doctors", tags=["Doctors"])
api_router.include_router(
    patients.router, prefix="/clinics/{clinic_id}/patients", tags=["Patients"]
)
api_router.include_router(
    appointments.router, prefix="/clinics/{clinic_id}/appointments", tags=["Appointments"]
)
