"""Cookie session login/logout and the session dependency used by every privileged route."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.schemas.auth import LoginRequest, SessionData, SessionResponse
from app.services import session_manager

router = APIRouter()


def get_current_session(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionData | None:
    """Dependency: the verified session from the cookie, or None when absent/invalid/expired."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    return session_manager.get_session(token, settings=settings)


def set_session_cookie(response: Response, token: str, session: SessionData, settings: Settings) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        expires=session.expires_at,
        httponly=True,
        secure=settings.APP_ENV != "dev",
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    """Overwrite the cookie with an empty, already-expired value."""
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value="",
        expires=0,
        max_age=0,
        httponly=True,
        secure=settings.APP_ENV != "dev",
        samesite="lax",
        path="/",
    )


@router.post("/login", response_model=SessionResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionResponse:
    """
    Authenticate with username and password and set the HTTP-only session cookie.
    Wrong credentials return 401 with {"error": "..."}.
    """
    issued = session_manager.login(db, body.username, body.password, settings=settings)
    set_session_cookie(response, issued.token, issued.session, settings)
    return SessionResponse(user=issued.session.user, expires_at=issued.session.expires_at)


@router.post("/logout", status_code=204)
def logout(
    settings: Annotated[Settings, Depends(get_settings)],
) -> Response:
    """Clear the session cookie. Always succeeds, signed in or not."""
    response = Response(status_code=204)
    clear_session_cookie(response, settings)
    return response


@router.get("/session", response_model=SessionResponse | None)
def read_session(
    session: Annotated[SessionData | None, Depends(get_current_session)],
) -> SessionResponse | None:
    """Current session, or null when not signed in."""
    if session is None:
        return None
    return SessionResponse(user=session.user, expires_at=session.expires_at)
