"""Patient model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import Column, Enum, ForeignKey, Table, Text, Uuid

from doutor_agenda.models.base import created_at_column, metadata, updated_at_column

PATIENT_SEX_VALUES = ("male", "female")

patients_sex = Enum(*PATIENT_SEX_VALUES, name="patients_sex", create_constraint=True)

patients = Table(
    "patients",
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
    Column("email", Text, nullable=False),
    Column("phone", Text, nullable=False),
    Column("sex", patients_sex, nullable=False),
    created_at_column(),
    updated_at_column(nullable=True),
)
