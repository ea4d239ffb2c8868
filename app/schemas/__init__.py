"""Pydantic request/response schemas."""

from app.schemas.auth import (
    ROLE_AUTHOR,
    ROLE_SUPER_ADMIN,
    IssuedSession,
    LoginRequest,
    Role,
    SessionData,
    SessionResponse,
    SessionUser,
)
from app.schemas.health import HealthResponse
from app.schemas.posts import (
    STATUS_DRAFT,
    STATUS_PENDING_APPROVAL,
    STATUS_PUBLISHED,
    CategoriesResponse,
    CategoryGroup,
    DeletedResponse,
    PostDetail,
    PostInput,
    PostStatus,
    PostSummary,
    PublicPost,
)
from app.schemas.profile import ProfileResponse, ProfileUpdate
from app.schemas.upload import UploadResponse

__all__ = [
    "CategoriesResponse",
    "CategoryGroup",
    "DeletedResponse",
    "HealthResponse",
    "IssuedSession",
    "LoginRequest",
    "PostDetail",
    "PostInput",
    "PostStatus",
    "PostSummary",
    "PublicPost",
    "ProfileResponse",
    "ProfileUpdate",
    "ROLE_AUTHOR",
    "ROLE_SUPER_ADMIN",
    "Role",
    "STATUS_DRAFT",
    "STATUS_PENDING_APPROVAL",
    "STATUS_PUBLISHED",
    "SessionData",
    "SessionResponse",
    "SessionUser",
    "UploadResponse",
]
