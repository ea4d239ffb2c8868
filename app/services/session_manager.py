"""Session manager: check credentials, mint signed sessions, verify them on demand.

Nothing here touches cookies or the request; the API layer reads and writes
the cookie and passes the token (or None) in explicitly.
"""

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import jwt
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.core.security import (
    create_session_token,
    decode_session_token,
    verify_password,
)
from app.models.user import User
from app.schemas.auth import ROLE_SUPER_ADMIN, IssuedSession, SessionData, SessionUser
from app.services.errors import AccessDenied, InvalidCredentials

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def issue_session(
    user: User,
    settings: "Settings | None" = None,
    now: datetime | None = None,
) -> IssuedSession:
    """Sign a fixed-duration session for `user`. Sessions are never renewed."""
    session_user = SessionUser(id=user.id, username=user.username, role=user.role)
    token, issued_at, expires_at = create_session_token(
        session_user.model_dump(), settings=settings, now=now
    )
    return IssuedSession(
        token=token,
        session=SessionData(
            user=session_user,
            issued_at=issued_at,
            expires_at=expires_at,
        ),
    )


def login(
    db: Session,
    username: str,
    password: str,
    settings: "Settings | None" = None,
) -> IssuedSession:
    """
    Authenticate against the stored bcrypt hash and return a new session.

    Raises InvalidCredentials for an unknown user or a wrong password alike.
    """
    user = db.query(User).filter(User.username == username.strip()).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login failed for username=%r", username)
        raise InvalidCredentials()
    issued = issue_session(user, settings=settings)
    logger.info("Login succeeded: user_id=%s role=%s", user.id, user.role)
    return issued


def get_session(
    token: str | None,
    settings: "Settings | None" = None,
    now: datetime | None = None,
) -> SessionData | None:
    """
    Verify and decode a session token.

    Returns None for a missing, malformed, tampered or expired token; callers
    cannot tell these apart and must treat None as "unauthenticated".
    """
    if not token:
        return None
    try:
        payload = decode_session_token(token, settings=settings)
        session = SessionData(
            user=SessionUser.model_validate(payload.get("user")),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
        )
    except (jwt.PyJWTError, PydanticValidationError, KeyError, TypeError, ValueError):
        return None
    if now is not None and session.expires_at <= now:
        return None
    return session


def require_session(session: SessionData | None) -> SessionData:
    """Return the session or raise AccessDenied when unauthenticated."""
    if session is None:
        raise AccessDenied("You must be signed in to do that")
    return session


def require_super_admin(session: SessionData | None) -> SessionData:
    """Return the session if it belongs to a super-admin; otherwise AccessDenied."""
    session = require_session(session)
    if session.user.role != ROLE_SUPER_ADMIN:
        raise AccessDenied("Super-admin access required")
    return session
