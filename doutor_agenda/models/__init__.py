"""Database models."""

from doutor_agenda.models.appointments import appointments
from doutor_agenda.models.auth import accounts, sessions, verifications
from doutor_agenda.models.base import metadata
from doutor_agenda.models.clinics import clinics, users_to_clinics
from doutor_agenda.models.doctors import doctors
from doutor_agenda.models.patients import patients
from doutor_agenda.models.users import users

__all__ = [
    "accounts",
    "appointments",
    "clinics",
    "doctors",
    "metadata",
    "patients",
    "sessions",
    "users",
    "users_to_clinics",
    "verifications",
]
