"""Clinic and clinic membership tables."""

from uuid import uuid4

from sqlalchemy import Column, ForeignKey, Table, Text, Uuid

from doutor_agenda.models.base import created_at_column, metadata, updated_at_column

clinics = Table(
    "clinics",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("name", Text, nullable=False),
    created_at_column(),
    updated_at_column(nullable=True),
)

# Many-to-many join between users and clinics
users_to_clinics = Table(
    "users_to_clinics",
    metadata,
    Column(
        "user_id",
        Text,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
    ),
    Column(
        "clinic_id",
        Uuid,
        ForeignKey("clinics.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
        index=True,
    ),
    created_at_column(),
    updated_at_column(nullable=True),
)
