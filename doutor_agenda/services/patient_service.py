"""Patient service for business logic."""

from uuid import UUID

import structlog
from sqlalchemy import and_, delete, insert, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from doutor_agenda.core.exceptions import (
    BadRequestException,
    ConflictException,
    NotFoundException,
)
from doutor_agenda.database import LIKE_ESCAPE, contains_pattern
from doutor_agenda.models.patients import patients
from doutor_agenda.schemas.patients import PatientCreate, PatientUpdate

logger = structlog.get_logger()


class PatientService:
    """Service for managing a clinic's patients."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def create_patient(self, clinic_id: UUID, data: PatientCreate) -> dict:
        """Register a patient in a clinic."""
        stmt = (
            insert(patients)
            .values(clinic_id=clinic_id, **data.model_dump(mode="json"))
            .returning(patients)
        )

        try:
            result = await self.db.execute(stmt)
        except IntegrityError as e:
            await self.db.rollback()
            raise BadRequestException("Invalid patient data") from e

        patient = dict(result.mappings().one())
        await self.db.commit()

        logger.info("patient_created", patient_id=str(patient["id"]), clinic_id=str(clinic_id))
        return patient

    async def get_patient(self, clinic_id: UUID, patient_id: UUID) -> dict:
        """
        Get a patient of a clinic.

        Raises:
            NotFoundException: If the patient does not exist in this clinic
        """
        result = await self.db.execute(
            select(patients).where(
                and_(patients.c.id == patient_id, patients.c.clinic_id == clinic_id)
            )
        )
        patient = result.mappings().first()

        if not patient:
            raise NotFoundException("Patient not found")

        return dict(patient)

    async def list_patients(self, clinic_id: UUID, search: str | None = None) -> list[dict]:
        """List a clinic's patients, optionally filtered by name or email."""
        conditions = [patients.c.clinic_id == clinic_id]
        if search:
            pattern = contains_pattern(search)
            conditions.append(
                or_(
                    patients.c.name.ilike(pattern, escape=LIKE_ESCAPE),
                    patients.c.email.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        result = await self.db.execute(
            select(patients).where(and_(*conditions)).order_by(patients.c.name)
        )
        return [dict(p) for p in result.mappings().all()]

    async def update_patient(
        self, clinic_id: UUID, patient_id: UUID, data: PatientUpdate
    ) -> dict:
        """Update a patient."""
        existing = await self.get_patient(clinic_id, patient_id)

        update_values = data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        if not update_values:
            return existing

        result = await self.db.execute(
            update(patients)
            .where(patients.c.id == patient_id)
            .values(**update_values)
            .returning(patients)
        )
        patient = dict(result.mappings().one())
        await self.db.commit()
        return patient

    async def delete_patient(self, clinic_id: UUID, patient_id: UUID) -> None:
        """
        Delete a patient.

        Raises:
            NotFoundException: If the patient does not exist in this clinic
            ConflictException: If appointments still reference the patient
        """
        await self.get_patient(clinic_id, patient_id)

        try:
            await self.db.execute(delete(patients).where(patients.c.id == patient_id))
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictException("Patient has appointments and cannot be deleted") from e

        logger.info("patient_deleted", patient_id=str(patient_id), clinic_id=str(clinic_id))
