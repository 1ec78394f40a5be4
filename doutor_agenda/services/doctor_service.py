"""Doctor service for business logic."""

from uuid import UUID

import structlog
from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from doutor_agenda.core.exceptions import (
    BadRequestException,
    ConflictException,
    NotFoundException,
)
from doutor_agenda.database import LIKE_ESCAPE, contains_pattern
from doutor_agenda.models.doctors import doctors
from doutor_agenda.schemas.doctors import DoctorCreate, DoctorUpdate

logger = structlog.get_logger()

# Columns a PATCH may set back to NULL
NULLABLE_FIELDS = frozenset({"avatar_image_url"})


class DoctorService:
    """Service for managing a clinic's doctors."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def create_doctor(self, clinic_id: UUID, data: DoctorCreate) -> dict:
        """Add a doctor to a clinic."""
        stmt = (
            insert(doctors)
            .values(clinic_id=clinic_id, **data.model_dump())
            .returning(doctors)
        )

        try:
            result = await self.db.execute(stmt)
        except IntegrityError as e:
            await self.db.rollback()
            raise BadRequestException("Invalid doctor data") from e

        doctor = dict(result.mappings().one())
        await self.db.commit()

        logger.info("doctor_created", doctor_id=str(doctor["id"]), clinic_id=str(clinic_id))
        return doctor

    async def get_doctor(self, clinic_id: UUID, doctor_id: UUID) -> dict:
        """
        Get a doctor of a clinic.

        Raises:
            NotFoundException: If the doctor does not exist in this clinic
        """
        result = await self.db.execute(
            select(doctors).where(and_(doctors.c.id == doctor_id, doctors.c.clinic_id == clinic_id))
        )
        doctor = result.mappings().first()

        if not doctor:
            raise NotFoundException("Doctor not found")

        return dict(doctor)

    async def list_doctors(self, clinic_id: UUID, specialty: str | None = None) -> list[dict]:
        """List a clinic's doctors ordered by name."""
        conditions = [doctors.c.clinic_id == clinic_id]
        if specialty:
            conditions.append(
                doctors.c.specialty.ilike(contains_pattern(specialty), escape=LIKE_ESCAPE)
            )

        result = await self.db.execute(
            select(doctors).where(and_(*conditions)).order_by(doctors.c.name)
        )
        return [dict(d) for d in result.mappings().all()]

    async def update_doctor(self, clinic_id: UUID, doctor_id: UUID, data: DoctorUpdate) -> dict:
        """
        Update a doctor.

        Raises:
            NotFoundException: If the doctor does not exist in this clinic
            BadRequestException: If the resulting availability range is empty
        """
        existing = await self.get_doctor(clinic_id, doctor_id)

        update_values = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field in NULLABLE_FIELDS
        }
        if not update_values:
            return existing

        from_time = update_values.get("available_from_time", existing["available_from_time"])
        to_time = update_values.get("available_to_time", existing["available_to_time"])
        if to_time <= from_time:
            raise BadRequestException("available_to_time must be after available_from_time")

        try:
            result = await self.db.execute(
                update(doctors)
                .where(doctors.c.id == doctor_id)
                .values(**update_values)
                .returning(doctors)
            )
        except IntegrityError as e:
            await self.db.rollback()
            raise BadRequestException("Invalid doctor data") from e

        doctor = dict(result.mappings().one())
        await self.db.commit()
        return doctor

    async def delete_doctor(self, clinic_id: UUID, doctor_id: UUID) -> None:
        """
        Delete a doctor.

        Raises:
            NotFoundException: If the doctor does not exist in this clinic
            ConflictException: If appointments still reference the doctor
        """
        await self.get_doctor(clinic_id, doctor_id)

        try:
            await self.db.execute(delete(doctors).where(doctors.c.id == doctor_id))
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictException("Doctor has appointments and cannot be deleted") from e

        logger.info("doctor_deleted", doctor_id=str(doctor_id), clinic_id=str(clinic_id))
