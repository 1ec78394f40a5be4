"""FastAPI dependencies."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from doutor_agenda.config import settings
from doutor_agenda.core.exceptions import UnauthorizedException
from doutor_agenda.database import get_db
from doutor_agenda.services.auth_service import AuthService
from doutor_agenda.services.clinic_service import ClinicService

# Security
security = HTTPBearer(auto_error=False)


def get_session_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    """Read the session token from the Authorization header or the session cookie."""
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name)


async def get_current_session(
    token: Annotated[str | None, Depends(get_session_token)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> tuple[dict, dict]:
    """
    Resolve the caller's session.

    Returns:
        Tuple of (session, user)

    Raises:
        HTTPException: If no valid session accompanies the request
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return await AuthService(db).get_session(token)
    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


async def get_current_user(
    current: Annotated[tuple[dict, dict], Depends(get_current_session)],
) -> dict:
    """Get the user owning the caller's session."""
    return current[1]


async def get_optional_user(
    token: Annotated[str | None, Depends(get_session_token)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict | None:
    """Get the signed-in user for pages that also serve anonymous visitors."""
    if not token:
        return None
    try:
        _, user = await AuthService(db).get_session(token)
    except UnauthorizedException:
        return None
    return user


async def get_member_clinic(
    clinic_id: UUID,
    user: Annotated[dict, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """Load the clinic in the path, requiring the caller to be a member."""
    return await ClinicService().get_member_clinic(db, clinic_id, user["id"])


# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
SessionToken = Annotated[str | None, Depends(get_session_token)]
CurrentSession = Annotated[tuple[dict, dict], Depends(get_current_session)]
CurrentUser = Annotated[dict, Depends(get_current_user)]
OptionalUser = Annotated[dict | None, Depends(get_optional_user)]
MemberClinic = Annotated[dict, Depends(get_member_clinic)]
