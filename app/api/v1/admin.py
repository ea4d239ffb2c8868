"""Dashboard endpoints: post CRUD and workflow transitions, profile, image upload.

Every route takes the session resolved from the cookie (or None) and hands it to
the services, which decide access. Service errors become {"error": message}.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_session
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.schemas.auth import SessionData
from app.schemas.posts import DeletedResponse, PostDetail, PostInput, PostSummary
from app.schemas.profile import ProfileResponse, ProfileUpdate
from app.schemas.upload import UploadResponse
from app.services import post_lifecycle, post_queries, profiles, storage

router = APIRouter()

CurrentSession = Annotated[SessionData | None, Depends(get_current_session)]
DbSession = Annotated[Session, Depends(get_db)]


@router.get("/posts", response_model=list[PostSummary])
def dashboard_posts(db: DbSession, session: CurrentSession) -> list[PostSummary]:
    """All posts for super-admins; an author's own posts otherwise."""
    posts = post_queries.list_dashboard_posts(db, session)
    return [PostSummary.model_validate(p) for p in posts]


@router.get("/posts/pending", response_model=list[PostSummary])
def pending_posts(db: DbSession, session: CurrentSession) -> list[PostSummary]:
    """Posts waiting for approval (super-admin only)."""
    posts = post_queries.list_pending_posts(db, session)
    return [PostSummary.model_validate(p) for p in posts]


@router.post("/posts", response_model=PostDetail, status_code=201)
def create_post(body: PostInput, db: DbSession, session: CurrentSession) -> PostDetail:
    """
    Create a post. With `published=true` a super-admin publishes directly and an
    author's post goes to pending_approval; otherwise it is saved as a draft.
    """
    return PostDetail.model_validate(post_lifecycle.create_post(db, session, body))


@router.put("/posts/{post_id}", response_model=PostDetail)
def update_post(
    post_id: int, body: PostInput, db: DbSession, session: CurrentSession
) -> PostDetail:
    """Replace a post's fields; status is recomputed from `published` on every save."""
    return PostDetail.model_validate(
        post_lifecycle.update_post(db, session, post_id, body)
    )


@router.post("/posts/{post_id}/submit", response_model=PostDetail)
def submit_post(post_id: int, db: DbSession, session: CurrentSession) -> PostDetail:
    return PostDetail.model_validate(
        post_lifecycle.submit_for_approval(db, session, post_id)
    )


@router.post("/posts/{post_id}/approve", response_model=PostDetail)
def approve_post(post_id: int, db: DbSession, session: CurrentSession) -> PostDetail:
    return PostDetail.model_validate(post_lifecycle.approve_post(db, session, post_id))


@router.post("/posts/{post_id}/publish", response_model=PostDetail)
def publish_post(post_id: int, db: DbSession, session: CurrentSession) -> PostDetail:
    return PostDetail.model_validate(post_lifecycle.publish_post(db, session, post_id))


@router.delete("/posts/{post_id}", response_model=DeletedResponse)
def delete_post(post_id: int, db: DbSession, session: CurrentSession) -> DeletedResponse:
    return DeletedResponse(id=post_lifecycle.delete_post(db, session, post_id))


@router.get("/profile", response_model=ProfileResponse)
def read_profile(db: DbSession, session: CurrentSession) -> ProfileResponse:
    return ProfileResponse.model_validate(profiles.get_profile(db, session))


@router.put("/profile", response_model=ProfileResponse)
def save_profile(
    body: ProfileUpdate, db: DbSession, session: CurrentSession
) -> ProfileResponse:
    return ProfileResponse.model_validate(profiles.update_profile(db, session, body))


@router.post("/uploads", response_model=UploadResponse, status_code=201)
async def upload_image(
    session: CurrentSession,
    settings: Annotated[Settings, Depends(get_settings)],
    file: Annotated[UploadFile | None, File()] = None,
) -> UploadResponse:
    """
    Upload a post image or avatar (multipart field `file`) and return its public URL.
    The URL is not attached to anything until the post or profile is saved.
    """
    # One byte past the limit is enough for the size check to reject.
    content = await file.read(settings.MAX_UPLOAD_BYTES + 1) if file is not None else None
    return await storage.upload_image(
        session,
        filename=file.filename if file is not None else None,
        content=content,
        content_type=file.content_type if file is not None else None,
        settings=settings,
    )
