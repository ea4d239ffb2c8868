"""Read-side queries: public listings, previews and the dashboard."""

from sqlalchemy.orm import Session

from app.models.post import Post
from app.schemas.auth import ROLE_SUPER_ADMIN, SessionData
from app.schemas.posts import STATUS_PENDING_APPROVAL, STATUS_PUBLISHED
from app.services.errors import AccessDenied, NotFound
from app.services.post_lifecycle import can_modify
from app.services.session_manager import require_session, require_super_admin

# Public listing cap per request.
MAX_PUBLIC_POSTS = 200


def _newest_first(query):
    return query.order_by(Post.created_at.desc(), Post.id.desc())


def list_published_posts(
    db: Session,
    category: str | None = None,
    featured: bool | None = None,
    limit: int | None = MAX_PUBLIC_POSTS,
) -> list[Post]:
    """
    Published posts, newest first, optionally narrowed by category or featured flag.

    `limit` is clamped to MAX_PUBLIC_POSTS; None returns every match.
    """
    query = db.query(Post).filter(Post.status == STATUS_PUBLISHED)
    if category:
        query = query.filter(Post.category == category)
    if featured is not None:
        query = query.filter(Post.featured == featured)
    query = _newest_first(query)
    if limit is not None:
        query = query.limit(max(1, min(limit, MAX_PUBLIC_POSTS)))
    return query.all()


def group_by_category(posts: list[Post]) -> dict[str, list[Post]]:
    """Group posts by category, categories sorted by name; post order is kept."""
    groups: dict[str, list[Post]] = {}
    for post in posts:
        groups.setdefault(post.category, []).append(post)
    return dict(sorted(groups.items(), key=lambda item: item[0].lower()))


def get_published_post(db: Session, post_id: int) -> Post:
    """A single post for the public article page; anything unpublished is NotFound."""
    post = (
        db.query(Post)
        .filter(Post.id == post_id, Post.status == STATUS_PUBLISHED)
        .first()
    )
    if post is None:
        raise NotFound(f"Post {post_id} not found")
    return post


def get_post_preview(db: Session, session: SessionData | None, post_id: int) -> Post:
    """Any-status read for the post's owner or a super-admin."""
    session = require_session(session)
    post = db.query(Post).filter(Post.id == post_id).first()
    if post is None:
        raise NotFound(f"Post {post_id} not found")
    if not can_modify(session, post):
        raise AccessDenied("You can only preview your own posts")
    return post


def list_dashboard_posts(db: Session, session: SessionData | None) -> list[Post]:
    """Super-admins see every post; authors see only their own."""
    session = require_session(session)
    query = db.query(Post)
    if session.user.role != ROLE_SUPER_ADMIN:
        query = query.filter(Post.user_id == session.user.id)
    return _newest_first(query).all()


def list_pending_posts(db: Session, session: SessionData | None) -> list[Post]:
    """Approval queue for super-admins."""
    require_super_admin(session)
    query = db.query(Post).filter(Post.status == STATUS_PENDING_APPROVAL)
    return _newest_first(query).all()
