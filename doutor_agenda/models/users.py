"""User model definition using SQLAlchemy Core."""

from sqlalchemy import Boolean, Column, Table, Text, false

from doutor_agenda.core.security import generate_id
from doutor_agenda.models.base import created_at_column, metadata, updated_at_column

users = Table(
    "users",
    metadata,
    Column("id", Text, primary_key=True, default=generate_id),
    Column("name", Text, nullable=False),
    Column("email", Text, nullable=False, unique=True),
    Column("email_verified", Boolean, nullable=False, server_default=false()),
    Column("image", Text),
    created_at_column(),
    updated_at_column(),
)
