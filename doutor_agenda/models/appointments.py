"""Appointments table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, Table, Uuid

from doutor_agenda.models.base import created_at_column, metadata, updated_at_column

appointments = Table(
    "appointments",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("date", DateTime(timezone=True), nullable=False),
    Column(
        "clinic_id",
        Uuid,
        ForeignKey("clinics.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    # Patient and doctor rows cannot be deleted while referenced here
    Column("patient_id", Uuid, ForeignKey("patients.id"), nullable=False, index=True),
    Column("doctor_id", Uuid, ForeignKey("doctors.id"), nullable=False, index=True),
    created_at_column(),
    updated_at_column(nullable=True),
)

Index("ix_appointments_doctor_date", appointments.c.doctor_id, appointments.c.date)
