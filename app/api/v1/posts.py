"""Public article endpoints: published listing, categories, detail, and author preview."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_session
from app.core.database import get_db
from app.schemas.auth import SessionData
from app.schemas.posts import (
    CategoriesResponse,
    CategoryGroup,
    PostDetail,
    PublicPost,
)
from app.services import post_queries

router = APIRouter()


@router.get("", response_model=list[PublicPost])
def list_posts(
    db: Annotated[Session, Depends(get_db)],
    category: Annotated[str | None, Query(max_length=255)] = None,
    featured: bool | None = None,
    limit: Annotated[int, Query(ge=1, le=post_queries.MAX_PUBLIC_POSTS)] = 50,
) -> list[PublicPost]:
    """Published posts, newest first. Drafts and posts pending approval never appear."""
    posts = post_queries.list_published_posts(
        db, category=category, featured=featured, limit=limit
    )
    return [PublicPost.model_validate(p) for p in posts]


@router.get("/categories", response_model=CategoriesResponse)
def list_categories(
    db: Annotated[Session, Depends(get_db)],
) -> CategoriesResponse:
    """Every published post grouped by category for the articles index (not paged)."""
    groups = post_queries.group_by_category(
        post_queries.list_published_posts(db, limit=None)
    )
    return CategoriesResponse(
        categories=[
            CategoryGroup(
                category=name,
                posts=[PublicPost.model_validate(p) for p in posts],
            )
            for name, posts in groups.items()
        ]
    )


@router.get("/{post_id}", response_model=PublicPost)
def get_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> PublicPost:
    """A published post; 404 for anything else."""
    return PublicPost.model_validate(post_queries.get_published_post(db, post_id))


@router.get("/{post_id}/preview", response_model=PostDetail)
def preview_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[SessionData | None, Depends(get_current_session)],
) -> PostDetail:
    """Any-status preview for the post's author or a super-admin."""
    return PostDetail.model_validate(post_queries.get_post_preview(db, session, post_id))
