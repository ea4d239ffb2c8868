"""Request/response schemas for auth endpoints and the decoded session."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["author", "super-admin"]

ROLE_AUTHOR: Role = "author"
ROLE_SUPER_ADMIN: Role = "super-admin"
ROLE_VALUES: frozenset[str] = frozenset({ROLE_AUTHOR, ROLE_SUPER_ADMIN})


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class SessionUser(BaseModel):
    """Identity embedded in the session token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: Role


class SessionData(BaseModel):
    """Decoded, verified session: who is acting and until when."""

    user: SessionUser
    issued_at: datetime
    expires_at: datetime


class IssuedSession(BaseModel):
    """A freshly minted session plus the signed token to store in the cookie."""

    token: str
    session: SessionData


class SessionResponse(BaseModel):
    """Body returned by login and GET /auth/session."""

    user: SessionUser
    expires_at: datetime
