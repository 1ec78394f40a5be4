"""Doctor model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    Table,
    Text,
    Time,
    Uuid,
)

from doutor_agenda.models.base import created_at_column, metadata, updated_at_column

doctors = Table(
    "doctors",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "clinic_id",
        Uuid,
        ForeignKey("clinics.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("name", Text, nullable=False),
    Column("avatar_image_url", Text),
    Column("specialty", Text, nullable=False),
    # 0 - sunday, 1 - monday, ... 6 - saturday
    Column("available_from_weekday", Integer, nullable=False),
    Column("available_to_weekday", Integer, nullable=False),
    Column("available_from_time", Time, nullable=False),
    Column("available_to_time", Time, nullable=False),
    Column("appointment_price_in_cents", Integer, nullable=False),
    created_at_column(),
    updated_at_column(nullable=True),
    CheckConstraint(
        "available_from_weekday BETWEEN 0 AND 6",
        name="available_from_weekday",
    ),
    CheckConstraint(
        "available_to_weekday BETWEEN 0 AND 6",
        name="available_to_weekday",
    ),
    CheckConstraint(
        "appointment_price_in_cents >= 0",
        name="appointment_price_in_cents",
    ),
)
