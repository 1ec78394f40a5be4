"""Shared metadata and column helpers for all tables."""

from sqlalchemy import Column, DateTime, MetaData, func

# Constraint names are predictable so violations can be matched by name
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "%(table_name)s_%(column_0_name)s_key",
    "ck": "%(table_name)s_%(constraint_name)s_check",
    "fk": "%(table_name)s_%(column_0_name)s_fkey",
    "pk": "%(table_name)s_pkey",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)


def created_at_column() -> Column:
    """Creation timestamp, filled by the database."""
    return Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


def updated_at_column(nullable: bool = False) -> Column:
    """Modification timestamp, refreshed on every UPDATE."""
    return Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=nullable,
        server_default=func.now(),
        onupdate=func.now(),
    )
