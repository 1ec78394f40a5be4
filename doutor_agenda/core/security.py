"""Security utilities for passwords, session tokens and verification tokens."""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

from jose import JWTError, jwt
from passlib.context import CryptContext

from doutor_agenda.config import settings

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

SESSION_TOKEN_BYTES = 32


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def generate_id() -> str:
    """Generate a text primary key for auth tables."""
    return uuid4().hex


def generate_session_token() -> str:
    """Generate an opaque, URL-safe session token."""
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """
    Normalize a datetime read from the database to aware UTC.

    SQLite hands timestamps back without tzinfo; they are stored as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def create_verification_token(
    email: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed email verification token.

    Args:
        email: Address being verified
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT token
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.verification_token_expire_minutes)

    now = utcnow()
    to_encode: dict[str, Any] = {
        "email": email.lower(),
        "exp": now + expires_delta,
        "iat": now,
        "type": "email_verification",
    }

    return jwt.encode(
        to_encode,
        settings.auth_secret,
        algorithm=settings.jwt_algorithm,
    )


def decode_verification_token(token: str) -> dict[str, Any] | None:
    """
    Decode and validate an email verification token.

    Args:
        token: JWT token to decode

    Returns:
        Decoded payload or None if invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.auth_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None

    if payload.get("type") != "email_verification":
        return None

    return payload
