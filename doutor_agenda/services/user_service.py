"""User service for business logic."""

from uuid import UUID

import structlog
from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from doutor_agenda.core.exceptions import ConflictException
from doutor_agenda.models.clinics import clinics, users_to_clinics
from doutor_agenda.models.users import users

logger = structlog.get_logger()


class UserService:
    """Service for user operations."""

    @staticmethod
    def normalize_email(email: str) -> str:
        """Emails are stored lower-cased and trimmed."""
        return email.strip().lower()

    async def create_user(
        self,
        db: AsyncSession,
        name: str,
        email: str,
        image: str | None = None,
        email_verified: bool = False,
        commit: bool = True,
    ) -> dict:
        """
        Create a new user.

        Raises:
            ConflictException: If the email is already registered
        """
        query = (
            insert(users)
            .values(
                name=name,
                email=self.normalize_email(email),
                image=image,
                email_verified=email_verified,
            )
            .returning(users)
        )

        try:
            result = await db.execute(query)
        except IntegrityError as e:
            await db.rollback()
            raise ConflictException("User with this email already exists") from e

        user = result.mappings().first()
        if not user:
            raise ValueError("Failed to create user")

        if commit:
            await db.commit()

        return dict(user)

    async def get_user_by_id(self, db: AsyncSession, user_id: str) -> dict | None:
        """Get user by ID."""
        query = select(users).where(users.c.id == user_id)
        result = await db.execute(query)
        user = result.mappings().first()
        return dict(user) if user else None

    async def get_user_by_email(self, db: AsyncSession, email: str) -> dict | None:
        """Get user by email."""
        query = select(users).where(users.c.email == self.normalize_email(email))
        result = await db.execute(query)
        user = result.mappings().first()
        return dict(user) if user else None

    async def update_user(
        self,
        db: AsyncSession,
        user_id: str,
        name: str | None = None,
        image: str | None = None,
    ) -> dict | None:
        """Update user profile."""
        update_data = {}
        if name is not None:
            update_data["name"] = name
        if image is not None:
            update_data["image"] = image

        if not update_data:
            return await self.get_user_by_id(db, user_id)

        query = update(users).where(users.c.id == user_id).values(**update_data).returning(users)
        result = await db.execute(query)
        await db.commit()
        user = result.mappings().first()

        return dict(user) if user else None

    async def mark_email_verified(
        self, db: AsyncSession, user_id: str, commit: bool = True
    ) -> dict | None:
        """Mark a user's email as verified."""
        query = (
            update(users)
            .where(users.c.id == user_id)
            .values(email_verified=True)
            .returning(users)
        )
        result = await db.execute(query)
        user = result.mappings().first()

        if commit:
            await db.commit()

        return dict(user) if user else None

    async def delete_user(self, db: AsyncSession, user_id: str) -> bool:
        """Delete a user; sessions, accounts and memberships go with it."""
        query = delete(users).where(users.c.id == user_id)
        result = await db.execute(query)
        await db.commit()

        deleted = result.rowcount > 0  # type: ignore[attr-defined]
        if deleted:
            logger.info("user_deleted", user_id=user_id)
        return deleted

    async def add_user_to_clinic(
        self, db: AsyncSession, user_id: str, clinic_id: UUID, commit: bool = True
    ) -> dict:
        """Create a clinic membership for a user."""
        query = (
            insert(users_to_clinics)
            .values(user_id=user_id, clinic_id=clinic_id)
            .returning(users_to_clinics)
        )

        try:
            result = await db.execute(query)
        except IntegrityError as e:
            await db.rollback()
            raise ConflictException("User is already a member of this clinic") from e

        membership = result.mappings().first()
        if commit:
            await db.commit()

        return dict(membership)  # type: ignore[arg-type]

    async def get_user_clinics(self, db: AsyncSession, user_id: str) -> list[dict]:
        """List the clinics a user is a member of."""
        query = (
            select(clinics)
            .join(users_to_clinics, users_to_clinics.c.clinic_id == clinics.c.id)
            .where(users_to_clinics.c.user_id == user_id)
            .order_by(clinics.c.name)
        )
        result = await db.execute(query)
        return [dict(c) for c in result.mappings().all()]

    async def is_member(self, db: AsyncSession, user_id: str, clinic_id: UUID) -> bool:
        """Check whether a user belongs to a clinic."""
        query = select(users_to_clinics.c.user_id).where(
            and_(
                users_to_clinics.c.user_id == user_id,
                users_to_clinics.c.clinic_id == clinic_id,
            )
        )
        result = await db.execute(query)
        return result.first() is not None
