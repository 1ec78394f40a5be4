"""Authentication schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from doutor_agenda.config import settings


class SignUpRequest(BaseModel):
    """Email and password registration request."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., max_length=128)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Reject names made only of whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Enforce the configured minimum password length."""
        if len(v) < settings.min_password_length:
            raise ValueError(
                f"Password must have at least {settings.min_password_length} characters"
            )
        return v


class SignInRequest(BaseModel):
    """Email and password login request."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class ChangePasswordRequest(BaseModel):
    """Password change request."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., max_length=128)
    revoke_other_sessions: bool = False

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        """Enforce the configured minimum password length."""
        if len(v) < settings.min_password_length:
            raise ValueError(
                f"Password must have at least {settings.min_password_length} characters"
            )
        return v


class UserResponse(BaseModel):
    """User response schema."""

    id: str
    name: str
    email: EmailStr
    email_verified: bool
    image: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SessionResponse(BaseModel):
    """Session row as returned to its owner."""

    id: str
    token: str
    expires_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Sign-in / sign-up response with the session and its user."""

    token: str
    session: SessionResponse
    user: UserResponse


class SessionWithUser(BaseModel):
    """Current session lookup response."""

    session: SessionResponse
    user: UserResponse


class VerificationTokenResponse(BaseModel):
    """Issued verification token and its expiry."""

    token: str
    expires_at: datetime
