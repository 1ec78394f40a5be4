"""Authentication and dashboard pages."""

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import ValidationError

from doutor_agenda.api.v1.endpoints.auth import (
    clear_session_cookie,
    client_info,
    set_session_cookie,
)
from doutor_agenda.core.exceptions import AppException
from doutor_agenda.dependencies import DatabaseSession, OptionalUser, SessionToken
from doutor_agenda.pages.templating import templates
from doutor_agenda.schemas.auth import SignInRequest, SignUpRequest
from doutor_agenda.services.auth_service import AuthService
from doutor_agenda.services.clinic_service import ClinicService

router = APIRouter(include_in_schema=False)

TABS = ("login", "register")


def render_authentication(
    request: Request,
    tab: str = "login",
    error: str | None = None,
    values: dict | None = None,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    """Render the tabbed login / registration page."""
    return templates.TemplateResponse(
        request,
        "authentication.html",
        {
            "active_tab": tab if tab in TABS else "login",
            "error": error,
            "values": values or {},
        },
        status_code=status_code,
    )


def validation_message(exc: ValidationError) -> str:
    """First human-readable message from a form validation error."""
    error = exc.errors()[0]
    field = error["loc"][0] if error["loc"] else "form"
    message = str(error["msg"]).removeprefix("Value error, ")
    return f"{field}: {message}"


def redirect_to(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, user: OptionalUser, db: DatabaseSession) -> Response:
    """Dashboard listing the signed-in user's clinics."""
    if user is None:
        return redirect_to("/authentication")

    clinics = await ClinicService().list_clinics_for_user(db, user["id"])
    return templates.TemplateResponse(
        request,
        "home.html",
        {"user": user, "clinics": clinics},
    )


@router.get("/authentication", response_class=HTMLResponse)
async def authentication(request: Request, user: OptionalUser, tab: str = "login") -> Response:
    """Login / registration tabs. Signed-in visitors go straight to the dashboard."""
    if user is not None:
        return redirect_to("/")
    return render_authentication(request, tab=tab)


@router.post("/authentication/sign-in", response_class=HTMLResponse)
async def sign_in_form(
    request: Request,
    db: DatabaseSession,
    email: str = Form(""),
    password: str = Form(""),
) -> Response:
    """Handle the login form."""
    values = {"email": email}
    try:
        form = SignInRequest(email=email, password=password)
    except ValidationError as e:
        return render_authentication(
            request, "login", validation_message(e), values, status.HTTP_400_BAD_REQUEST
        )

    ip_address, user_agent = client_info(request)
    try:
        _, session = await AuthService(db).sign_in_email(
            form.email, form.password, ip_address=ip_address, user_agent=user_agent
        )
    except AppException as e:
        return render_authentication(request, "login", e.message, values, e.status_code)

    response = redirect_to("/")
    set_session_cookie(response, session)
    return response


@router.post("/authentication/sign-up", response_class=HTMLResponse)
async def sign_up_form(
    request: Request,
    db: DatabaseSession,
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
) -> Response:
    """Handle the registration form."""
    values = {"name": name, "email": email}
    try:
        form = SignUpRequest(name=name, email=email, password=password)
    except ValidationError as e:
        return render_authentication(
            request, "register", validation_message(e), values, status.HTTP_400_BAD_REQUEST
        )

    ip_address, user_agent = client_info(request)
    try:
        _, session, _ = await AuthService(db).sign_up_email(
            form.name,
            form.email,
            form.password,
            ip_address=ip_address,
            user_agent=user_agent,
        )
    except AppException as e:
        return render_authentication(request, "register", e.message, values, e.status_code)

    response = redirect_to("/")
    set_session_cookie(response, session)
    return response


@router.post("/sign-out")
async def sign_out(token: SessionToken, db: DatabaseSession) -> Response:
    """Delete the session and return to the login page."""
    if token:
        await AuthService(db).sign_out(token)

    response = redirect_to("/authentication")
    clear_session_cookie(response)
    return response
