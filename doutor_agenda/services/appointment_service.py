"""Appointment service for business logic."""

from uuid import UUID

import structlog
from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from doutor_agenda.core.exceptions import BadRequestException, NotFoundException
from doutor_agenda.models.appointments import appointments
from doutor_agenda.schemas.appointments import (
    AppointmentCreate,
    AppointmentFilters,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentUpdate,
)
from doutor_agenda.services.doctor_service import DoctorService
from doutor_agenda.services.patient_service import PatientService

logger = structlog.get_logger()


class AppointmentService:
    """Service for managing appointments."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db
        self.doctors = DoctorService(db)
        self.patients = PatientService(db)

    async def create_appointment(
        self,
        clinic_id: UUID,
        data: AppointmentCreate,
    ) -> AppointmentResponse:
        """
        Create a new appointment.

        Args:
            clinic_id: Clinic the appointment belongs to
            data: Appointment creation data

        Returns:
            Created appointment

        Raises:
            NotFoundException: If the doctor or patient is not part of the clinic
            BadRequestException: If a referenced row vanished before the insert
        """
        await self.doctors.get_doctor(clinic_id, data.doctor_id)
        await self.patients.get_patient(clinic_id, data.patient_id)

        stmt = (
            insert(appointments)
            .values(
                clinic_id=clinic_id,
                date=data.date,
                patient_id=data.patient_id,
                doctor_id=data.doctor_id,
            )
            .returning(appointments)
        )

        try:
            result = await self.db.execute(stmt)
        except IntegrityError as e:
            await self.db.rollback()
            raise BadRequestException("Appointment references a missing doctor or patient") from e

        row = result.mappings().one()
        await self.db.commit()

        logger.info(
            "appointment_created",
            appointment_id=str(row["id"]),
            clinic_id=str(clinic_id),
            doctor_id=str(data.doctor_id),
        )
        return AppointmentResponse.model_validate(dict(row))

    async def get_appointment(
        self,
        clinic_id: UUID,
        appointment_id: UUID,
    ) -> AppointmentResponse:
        """
        Get appointment by ID.

        Raises:
            NotFoundException: If appointment not found in this clinic
        """
        stmt = select(appointments).where(
            and_(
                appointments.c.id == appointment_id,
                appointments.c.clinic_id == clinic_id,
            )
        )

        result = await self.db.execute(stmt)
        row = result.mappings().first()

        if not row:
            raise NotFoundException("Appointment not found")

        return AppointmentResponse.model_validate(dict(row))

    async def list_appointments(
        self,
        clinic_id: UUID,
        filters: AppointmentFilters,
    ) -> AppointmentListResponse:
        """
        List appointments with filtering and pagination.

        Args:
            clinic_id: Clinic whose appointments are listed
            filters: Filter and pagination parameters

        Returns:
            Paginated list of appointments
        """
        conditions = [appointments.c.clinic_id == clinic_id]

        if filters.doctor_id:
            conditions.append(appointments.c.doctor_id == filters.doctor_id)

        if filters.patient_id:
            conditions.append(appointments.c.patient_id == filters.patient_id)

        if filters.from_date:
            conditions.append(appointments.c.date >= filters.from_date)

        if filters.to_date:
            conditions.append(appointments.c.date <= filters.to_date)

        # Count total
        count_stmt = select(func.count()).select_from(appointments).where(and_(*conditions))
        total_result = await self.db.execute(count_stmt)
        total = total_result.scalar() or 0

        # Get paginated results
        offset = (filters.page - 1) * filters.page_size

        stmt = (
            select(appointments)
            .where(and_(*conditions))
            .order_by(appointments.c.date)
            .limit(filters.page_size)
            .offset(offset)
        )

        result = await self.db.execute(stmt)
        items = [AppointmentResponse.model_validate(dict(row)) for row in result.mappings().all()]

        return AppointmentListResponse(
            total=total,
            page=filters.page,
            page_size=filters.page_size,
            items=items,
        )

    async def update_appointment(
        self,
        clinic_id: UUID,
        appointment_id: UUID,
        data: AppointmentUpdate,
    ) -> AppointmentResponse:
        """
        Update an existing appointment.

        Raises:
            NotFoundException: If the appointment, or a newly referenced
                doctor or patient, is not part of the clinic
        """
        existing = await self.get_appointment(clinic_id, appointment_id)

        update_values = data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_values:
            return existing

        if "doctor_id" in update_values:
            await self.doctors.get_doctor(clinic_id, update_values["doctor_id"])
        if "patient_id" in update_values:
            await self.patients.get_patient(clinic_id, update_values["patient_id"])

        try:
            result = await self.db.execute(
                update(appointments)
                .where(appointments.c.id == appointment_id)
                .values(**update_values)
                .returning(appointments)
            )
        except IntegrityError as e:
            await self.db.rollback()
            raise BadRequestException("Appointment references a missing doctor or patient") from e

        row = result.mappings().one()
        await self.db.commit()
        return AppointmentResponse.model_validate(dict(row))

    async def delete_appointment(self, clinic_id: UUID, appointment_id: UUID) -> None:
        """
        Delete an appointment.

        Raises:
            NotFoundException: If appointment not found in this clinic
        """
        stmt = delete(appointments).where(
            and_(
                appointments.c.id == appointment_id,
                appointments.c.clinic_id == clinic_id,
            )
        )
        result = await self.db.execute(stmt)

        if result.rowcount == 0:  # type: ignore[attr-defined]
            await self.db.rollback()
            raise NotFoundException("Appointment not found")

        await self.db.commit()
        logger.info("appointment_deleted", appointment_id=str(appointment_id))
