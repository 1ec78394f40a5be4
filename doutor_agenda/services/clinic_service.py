"""Clinic service for business logic."""

from uuid import UUID

import structlog
from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from doutor_agenda.core.exceptions import ForbiddenException, NotFoundException
from doutor_agenda.models.clinics import clinics
from doutor_agenda.schemas.clinics import ClinicCreate, ClinicUpdate
from doutor_agenda.services.user_service import UserService

logger = structlog.get_logger()


class ClinicService:
    """Service for clinic operations."""

    def __init__(self, user_service: UserService | None = None):
        """Initialize service with an optional user service."""
        self.users = user_service or UserService()

    async def create_clinic(
        self, db: AsyncSession, owner_id: str, clinic_data: ClinicCreate
    ) -> dict:
        """Create a clinic and make its creator a member, in one transaction."""
        result = await db.execute(
            insert(clinics).values(name=clinic_data.name).returning(clinics)
        )
        clinic = result.mappings().first()

        if not clinic:
            raise ValueError("Failed to create clinic")

        clinic_dict = dict(clinic)
        await self.users.add_user_to_clinic(db, owner_id, clinic_dict["id"], commit=False)
        await db.commit()

        logger.info("clinic_created", clinic_id=str(clinic_dict["id"]), owner_id=owner_id)
        return clinic_dict

    async def get_clinic_by_id(self, db: AsyncSession, clinic_id: UUID) -> dict | None:
        """Get clinic by ID."""
        result = await db.execute(select(clinics).where(clinics.c.id == clinic_id))
        clinic = result.mappings().first()
        return dict(clinic) if clinic else None

    async def get_member_clinic(self, db: AsyncSession, clinic_id: UUID, user_id: str) -> dict:
        """
        Get a clinic the user belongs to.

        Raises:
            NotFoundException: If the clinic does not exist
            ForbiddenException: If the user is not a member
        """
        clinic = await self.get_clinic_by_id(db, clinic_id)
        if not clinic:
            raise NotFoundException("Clinic not found")

        if not await self.users.is_member(db, user_id, clinic_id):
            raise ForbiddenException("Access denied to this clinic")

        return clinic

    async def list_clinics_for_user(self, db: AsyncSession, user_id: str) -> list[dict]:
        """List the clinics a user belongs to."""
        return await self.users.get_user_clinics(db, user_id)

    async def update_clinic(
        self, db: AsyncSession, clinic_id: UUID, clinic_data: ClinicUpdate
    ) -> dict | None:
        """Update clinic information."""
        update_values = clinic_data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_values:
            return await self.get_clinic_by_id(db, clinic_id)

        result = await db.execute(
            update(clinics)
            .where(clinics.c.id == clinic_id)
            .values(**update_values)
            .returning(clinics)
        )
        updated_clinic = result.mappings().first()
        await db.commit()

        return dict(updated_clinic) if updated_clinic else None

    async def delete_clinic(self, db: AsyncSession, clinic_id: UUID) -> bool:
        """Delete a clinic; its doctors, patients and appointments cascade."""
        result = await db.execute(delete(clinics).where(clinics.c.id == clinic_id))
        await db.commit()

        deleted = result.rowcount > 0  # type: ignore[attr-defined]
        if deleted:
            logger.info("clinic_deleted", clinic_id=str(clinic_id))
        return deleted
