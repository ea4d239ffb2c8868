"""Post lifecycle: who may create, edit, submit, approve, publish and delete posts.

Status model: draft -> pending_approval -> published. The resulting status of a
create or update is a pure function of the publish intent and the actor's role
(compute_status); everything else here gates mutations on session, role and
ownership. All checks happen in this layer; the store is used for persistence only.
"""

import logging
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.post import Post
from app.schemas.auth import ROLE_SUPER_ADMIN, SessionData
from app.schemas.posts import (
    STATUS_DRAFT,
    STATUS_PENDING_APPROVAL,
    STATUS_PUBLISHED,
    PostInput,
    PostStatus,
)
from app.services.errors import AccessDenied, NotFound, PersistenceError, ValidationError
from app.services.sanitizer import sanitize_html
from app.services.session_manager import require_session, require_super_admin

logger = logging.getLogger(__name__)

T = TypeVar("T")


def compute_status(publish_requested: bool, role: str) -> PostStatus:
    """
    Map (publish intent, actor role) to the post status.

    (False, any) -> draft; (True, super-admin) -> published; (True, author) -> pending_approval.
    """
    if not publish_requested:
        return STATUS_DRAFT
    if role == ROLE_SUPER_ADMIN:
        return STATUS_PUBLISHED
    return STATUS_PENDING_APPROVAL


def is_owner(session: SessionData, post: Post) -> bool:
    return post.user_id == session.user.id


def can_modify(session: SessionData | None, post: Post) -> bool:
    """Owners may change their own posts; super-admins may change any post."""
    if session is None:
        return False
    return session.user.role == ROLE_SUPER_ADMIN or is_owner(session, post)


def _validate_input(data: PostInput) -> None:
    if not data.title.strip():
        raise ValidationError("Title is required")
    if not data.category.strip():
        raise ValidationError("Category is required")


def _get_post(db: Session, post_id: int) -> Post:
    post = db.query(Post).filter(Post.id == post_id).first()
    if post is None:
        raise NotFound(f"Post {post_id} not found")
    return post


def _get_modifiable_post(db: Session, session: SessionData, post_id: int) -> Post:
    post = _get_post(db, post_id)
    if not can_modify(session, post):
        raise AccessDenied("You can only modify your own posts")
    return post


def _commit(db: Session, action: Callable[[], T]) -> T:
    """Run `action`, commit, and surface store failures as PersistenceError (no retry)."""
    try:
        result = action()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Post store operation failed")
        raise PersistenceError(str(e.orig) if getattr(e, "orig", None) else str(e)) from e
    return result


def _apply_fields(post: Post, data: PostInput) -> None:
    post.title = data.title.strip()
    post.content = sanitize_html(data.content)
    post.category = data.category.strip()
    post.featured = data.featured
    post.image = data.image
    post.sources = list(data.sources)


def create_post(db: Session, session: SessionData | None, data: PostInput) -> Post:
    """Create a post owned by the session user; status follows compute_status."""
    session = require_session(session)
    _validate_input(data)
    post = Post(user_id=session.user.id)
    _apply_fields(post, data)
    post.status = compute_status(data.published, session.user.role)

    def _insert() -> Post:
        db.add(post)
        db.flush()
        return post

    _commit(db, _insert)
    db.refresh(post)
    logger.info(
        "Post created: id=%s user_id=%s status=%s", post.id, post.user_id, post.status
    )
    return post


def update_post(
    db: Session,
    session: SessionData | None,
    post_id: int,
    data: PostInput,
) -> Post:
    """
    Replace a post's fields and recompute its status from `data.published`.

    The status is recomputed on every update, so an author saving an already
    published post with publish requested sends it back to pending_approval.
    """
    session = require_session(session)
    post = _get_modifiable_post(db, session, post_id)
    _validate_input(data)
    previous = post.status
    _apply_fields(post, data)
    post.status = compute_status(data.published, session.user.role)
    _commit(db, lambda: db.flush())
    db.refresh(post)
    logger.info(
        "Post updated: id=%s by user_id=%s status %s -> %s",
        post.id,
        session.user.id,
        previous,
        post.status,
    )
    return post


def submit_for_approval(db: Session, session: SessionData | None, post_id: int) -> Post:
    """Owner moves a draft into the approval queue."""
    session = require_session(session)
    post = _get_post(db, post_id)
    if not is_owner(session, post):
        raise AccessDenied("Only the author of a post can submit it for approval")
    if post.status != STATUS_DRAFT:
        raise ValidationError(
            f"Only draft posts can be submitted for approval (post is {post.status})"
        )
    post.status = STATUS_PENDING_APPROVAL
    _commit(db, lambda: db.flush())
    logger.info("Post submitted for approval: id=%s user_id=%s", post.id, session.user.id)
    return post


def approve_post(db: Session, session: SessionData | None, post_id: int) -> Post:
    """
    Super-admin publishes a pending post.

    The role check runs before the lookup, so non-super-admins get AccessDenied
    even for ids that do not exist. Approving a published post is a no-op.
    """
    session = require_super_admin(session)
    post = _get_post(db, post_id)
    if post.status == STATUS_PUBLISHED:
        return post
    if post.status != STATUS_PENDING_APPROVAL:
        raise ValidationError("Only posts pending approval can be approved")
    post.status = STATUS_PUBLISHED
    _commit(db, lambda: db.flush())
    logger.info("Post approved: id=%s by user_id=%s", post.id, session.user.id)
    return post


def publish_post(db: Session, session: SessionData | None, post_id: int) -> Post:
    """Super-admin force-publishes a post from any status."""
    session = require_super_admin(session)
    post = _get_post(db, post_id)
    if post.status != STATUS_PUBLISHED:
        previous = post.status
        post.status = STATUS_PUBLISHED
        _commit(db, lambda: db.flush())
        logger.info(
            "Post force-published: id=%s by user_id=%s (was %s)",
            post.id,
            session.user.id,
            previous,
        )
    return post


def delete_post(db: Session, session: SessionData | None, post_id: int) -> int:
    """Delete a post in any status; owner or super-admin only. Returns the deleted id."""
    session = require_session(session)
    post = _get_modifiable_post(db, session, post_id)
    _commit(db, lambda: db.delete(post))
    logger.info("Post deleted: id=%s by user_id=%s", post_id, session.user.id)
    return post_id
