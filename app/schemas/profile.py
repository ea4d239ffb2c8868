"""Schemas for the current user's profile."""

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.auth import Role


class ProfileResponse(BaseModel):
    """Profile as shown on the profile page."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: Role
    bio: str | None = None
    avatar_url: str | None = None


class ProfileUpdate(BaseModel):
    """Editable profile fields; empty strings clear the value."""

    bio: str = Field(default="", max_length=5000)
    avatar_url: str = Field(default="", max_length=2048)
