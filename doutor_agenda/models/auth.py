"""Session, account and verification tables backing authentication."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Table, Text

from doutor_agenda.core.security import generate_id
from doutor_agenda.models.base import created_at_column, metadata, updated_at_column

sessions = Table(
    "session",
    metadata,
    Column("id", Text, primary_key=True, default=generate_id),
    Column("expires_at", DateTime(timezone=True), nullable=False),
    Column("token", Text, nullable=False, unique=True),
    created_at_column(),
    updated_at_column(),
    Column("ip_address", Text),
    Column("user_agent", Text),
    Column(
        "user_id",
        Text,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
)

accounts = Table(
    "account",
    metadata,
    Column("id", Text, primary_key=True, default=generate_id),
    # Provider-side identifier; equals users.id for the credential provider
    Column("account_id", Text, nullable=False),
    Column("provider_id", Text, nullable=False),
    Column(
        "user_id",
        Text,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("access_token", Text),
    Column("refresh_token", Text),
    Column("id_token", Text),
    Column("access_token_expires_at", DateTime(timezone=True)),
    Column("refresh_token_expires_at", DateTime(timezone=True)),
    Column("scope", Text),
    # Password hash, only set for the credential provider
    Column("password", Text),
    created_at_column(),
    updated_at_column(),
)

verifications = Table(
    "verification",
    metadata,
    Column("id", Text, primary_key=True, default=generate_id),
    Column("identifier", Text, nullable=False),
    Column("value", Text, nullable=False),
    Column("expires_at", DateTime(timezone=True), nullable=False),
    created_at_column(),
    updated_at_column(nullable=True),
)

Index("ix_verification_identifier", verifications.c.identifier)
