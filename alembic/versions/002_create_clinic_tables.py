"""Create clinics, users_to_clinics, doctors, patients and appointments tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-18 00:10:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

patients_sex = postgresql.ENUM("male", "female", name="patients_sex", create_type=False)


def uuid_pk() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
    )


def clinic_fk(table: str) -> sa.Column:
    return sa.Column(
        "clinic_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("clinics.id", name=f"{table}_clinic_id_fkey", ondelete="CASCADE"),
        nullable=False,
    )


def timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=True,
            server_default=sa.text("NOW()"),
        ),
    ]


def upgrade() -> None:
    """Create clinic scheduling tables."""
    # gen_random_uuid() comes from pgcrypto on PostgreSQL < 13
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    op.create_table(
        "clinics",
        uuid_pk(),
        sa.Column("name", sa.Text(), nullable=False),
        *timestamps(),
    )

    op.create_table(
        "users_to_clinics",
        sa.Column(
            "user_id",
            sa.Text(),
            sa.ForeignKey("users.id", name="users_to_clinics_user_id_fkey", ondelete="CASCADE"),
            nullable=False,
        ),
        clinic_fk("users_to_clinics"),
        *timestamps(),
        sa.PrimaryKeyConstraint("user_id", "clinic_id", name="users_to_clinics_pkey"),
    )
    op.create_index("ix_users_to_clinics_clinic_id", "users_to_clinics", ["clinic_id"])

    op.create_table(
        "doctors",
        uuid_pk(),
        clinic_fk("doctors"),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("avatar_image_url", sa.Text(), nullable=True),
        sa.Column("specialty", sa.Text(), nullable=False),
        sa.Column("available_from_weekday", sa.Integer(), nullable=False),
        sa.Column("available_to_weekday", sa.Integer(), nullable=False),
        sa.Column("available_from_time", sa.Time(), nullable=False),
        sa.Column("available_to_time", sa.Time(), nullable=False),
        sa.Column("appointment_price_in_cents", sa.Integer(), nullable=False),
        *timestamps(),
        sa.CheckConstraint(
            "available_from_weekday BETWEEN 0 AND 6",
            name="doctors_available_from_weekday_check",
        ),
        sa.CheckConstraint(
            "available_to_weekday BETWEEN 0 AND 6",
            name="doctors_available_to_weekday_check",
        ),
        sa.CheckConstraint(
            "appointment_price_in_cents >= 0",
            name="doctors_appointment_price_in_cents_check",
        ),
    )
    op.create_index("ix_doctors_clinic_id", "doctors", ["clinic_id"])

    patients_sex.create(op.get_bind(), checkfirst=True)
    op.create_table(
        "patients",
        uuid_pk(),
        clinic_fk("patients"),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("phone", sa.Text(), nullable=False),
        sa.Column("sex", patients_sex, nullable=False),
        *timestamps(),
    )
    op.create_index("ix_patients_clinic_id", "patients", ["clinic_id"])

    op.create_table(
        "appointments",
        uuid_pk(),
        sa.Column("date", sa.TIMESTAMP(timezone=True), nullable=False),
        clinic_fk("appointments"),
        sa.Column(
            "patient_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("patients.id", name="appointments_patient_id_fkey"),
            nullable=False,
        ),
        sa.Column(
            "doctor_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("doctors.id", name="appointments_doctor_id_fkey"),
            nullable=False,
        ),
        *timestamps(),
    )
    op.create_index("ix_appointments_clinic_id", "appointments", ["clinic_id"])
    op.create_index("ix_appointments_patient_id", "appointments", ["patient_id"])
    op.create_index("ix_appointments_doctor_id", "appointments", ["doctor_id"])
    op.create_index("ix_appointments_doctor_date", "appointments", ["doctor_id", "date"])


def downgrade() -> None:
    """Drop clinic scheduling tables."""
    op.drop_table("appointments")
    op.drop_table("patients")
    patients_sex.drop(op.get_bind(), checkfirst=True)
    op.drop_table("doctors")
    op.drop_table("users_to_clinics")
    op.drop_table("clinics")
