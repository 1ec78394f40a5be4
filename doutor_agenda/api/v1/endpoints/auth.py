"""Authentication endpoints."""

from fastapi import APIRouter, Query, Request, Response, status

from doutor_agenda.config import settings
from doutor_agenda.dependencies import CurrentSession, CurrentUser, DatabaseSession, SessionToken
from doutor_agenda.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    SessionResponse,
    SessionWithUser,
    SignInRequest,
    SignUpRequest,
    UserResponse,
    VerificationTokenResponse,
)
from doutor_agenda.services.auth_service import AuthService

router = APIRouter()


def set_session_cookie(response: Response, session: dict) -> None:
    """Attach the session token as an HTTP-only cookie."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session["token"],
        max_age=settings.session_expires_in_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    """Remove the session cookie."""
    response.delete_cookie(key=settings.session_cookie_name, path="/")


def client_info(request: Request) -> tuple[str | None, str | None]:
    """Client address and user agent recorded on new sessions."""
    return (
        request.client.host if request.client else None,
        request.headers.get("user-agent"),
    )


def build_auth_response(user: dict, session: dict) -> AuthResponse:
    return AuthResponse(
        token=session["token"],
        session=SessionResponse.model_validate(session),
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/sign-up/email",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register with email and password",
)
async def sign_up_email(
    payload: SignUpRequest,
    request: Request,
    response: Response,
    db: DatabaseSession,
) -> AuthResponse:
    """
    Create a user with a password account and sign them in.

    A verification token for the address is issued alongside; delivering it
    to the user is left to the caller.
    """
    ip_address, user_agent = client_info(request)
    user, session, _ = await AuthService(db).sign_up_email(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    set_session_cookie(response, session)
    return build_auth_response(user, session)


@router.post(
    "/sign-in/email",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign in with email and password",
)
async def sign_in_email(
    payload: SignInRequest,
    request: Request,
    response: Response,
    db: DatabaseSession,
) -> AuthResponse:
    """Check credentials and open a new session."""
    ip_address, user_agent = client_info(request)
    user, session = await AuthService(db).sign_in_email(
        email=payload.email,
        password=payload.password,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    set_session_cookie(response, session)
    return build_auth_response(user, session)


@router.get("/session", response_model=SessionWithUser, summary="Current session")
async def get_session(current: CurrentSession) -> SessionWithUser:
    """Return the caller's session and user."""
    session, user = current
    return SessionWithUser(
        session=SessionResponse.model_validate(session),
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/sign-out",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Sign out and delete the session",
)
async def sign_out(token: SessionToken, response: Response, db: DatabaseSession) -> None:
    """Delete the caller's session, if any, and clear the cookie."""
    if token:
        await AuthService(db).sign_out(token)
    clear_session_cookie(response)


@router.get("/sessions", response_model=list[SessionResponse], summary="List sessions")
async def list_sessions(user: CurrentUser, db: DatabaseSession) -> list[SessionResponse]:
    """List the caller's active sessions."""
    sessions = await AuthService(db).list_sessions(user["id"])
    return [SessionResponse.model_validate(s) for s in sessions]


@router.post("/revoke-other-sessions", summary="Sign out everywhere else")
async def revoke_other_sessions(current: CurrentSession, db: DatabaseSession) -> dict[str, int]:
    """Delete every session of the caller except the current one."""
    session, user = current
    revoked = await AuthService(db).revoke_other_sessions(user["id"], session["token"])
    return {"revoked": revoked}


@router.post(
    "/change-password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Change password",
)
async def change_password(
    payload: ChangePasswordRequest,
    current: CurrentSession,
    db: DatabaseSession,
) -> None:
    """Replace the caller's password, optionally revoking their other sessions."""
    session, user = current
    auth_service = AuthService(db)
    await auth_service.change_password(user["id"], payload.current_password, payload.new_password)
    if payload.revoke_other_sessions:
        await auth_service.revoke_other_sessions(user["id"], session["token"])


@router.post(
    "/send-verification-email",
    response_model=VerificationTokenResponse,
    summary="Issue an email verification token",
)
async def send_verification_email(
    user: CurrentUser,
    db: DatabaseSession,
) -> VerificationTokenResponse:
    """Issue a fresh verification token for the caller's own address."""
    token, expires_at = await AuthService(db).create_email_verification(user)
    return VerificationTokenResponse(token=token, expires_at=expires_at)


@router.get("/verify-email", response_model=UserResponse, summary="Verify an email address")
async def verify_email(
    db: DatabaseSession,
    token: str = Query(..., min_length=1),
) -> UserResponse:
    """Consume a verification token and mark the address verified."""
    user = await AuthService(db).verify_email(token)
    return UserResponse.model_validate(user)
