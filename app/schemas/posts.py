"""Pydantic schemas for posts: editor input, dashboard and public views."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PostStatus = Literal["draft", "pending_approval", "published"]

STATUS_DRAFT: PostStatus = "draft"
STATUS_PENDING_APPROVAL: PostStatus = "pending_approval"
STATUS_PUBLISHED: PostStatus = "published"

TITLE_MAX_LENGTH = 255
CATEGORY_MAX_LENGTH = 255
CONTENT_MAX_LENGTH = 200_000
URL_MAX_LENGTH = 2048
MAX_SOURCES = 50


class PostInput(BaseModel):
    """
    Editor payload for create and update.

    title and category are checked by the lifecycle service so a missing value
    is reported as a validation error message rather than a schema error.
    `published` is the author's publish intent, not the resulting status.
    """

    model_config = {"extra": "ignore"}

    title: str = Field(default="", max_length=TITLE_MAX_LENGTH)
    content: str = Field(default="", max_length=CONTENT_MAX_LENGTH)
    category: str = Field(default="", max_length=CATEGORY_MAX_LENGTH)
    featured: bool = False
    image: str | None = Field(default=None, max_length=URL_MAX_LENGTH)
    sources: list[str] = Field(default_factory=list, max_length=MAX_SOURCES)
    published: bool = Field(default=False, description="Request publication.")

    @field_validator("sources")
    @classmethod
    def strip_sources(cls, v: list[str]) -> list[str]:
        return [s.strip() for s in v if s and s.strip()]

    @field_validator("image")
    @classmethod
    def blank_image_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()


class PostSummary(BaseModel):
    """Dashboard row: enough to show status badges and ownership."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    category: str
    status: PostStatus
    user_id: int
    featured: bool
    created_at: datetime


class PostDetail(BaseModel):
    """Full post as rendered by the article page and the editor."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    category: str
    featured: bool
    image: str | None
    sources: list[str]
    user_id: int
    status: PostStatus
    published: bool
    created_at: datetime
    updated_at: datetime | None = None


class PublicPost(BaseModel):
    """Published post as listed on the public site."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    category: str
    featured: bool
    image: str | None
    sources: list[str]
    created_at: datetime


class CategoryGroup(BaseModel):
    """Published posts of one category for the articles index."""

    category: str
    posts: list[PublicPost]


class CategoriesResponse(BaseModel):
    """Response for GET /posts/categories."""

    categories: list[CategoryGroup]


class DeletedResponse(BaseModel):
    """Response after deleting a post."""

    id: int
    deleted: bool = True
