"""Current user's profile (bio and avatar)."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.user import User
from app.schemas.auth import SessionData
from app.schemas.profile import ProfileUpdate
from app.services.errors import NotFound, PersistenceError
from app.services.session_manager import require_session

logger = logging.getLogger(__name__)


def get_profile(db: Session, session: SessionData | None) -> User:
    session = require_session(session)
    user = db.query(User).filter(User.id == session.user.id).first()
    if user is None:
        raise NotFound("User not found")
    return user


def update_profile(db: Session, session: SessionData | None, data: ProfileUpdate) -> User:
    """Overwrite bio and avatar_url; blank values are stored as NULL."""
    user = get_profile(db, session)
    user.bio = data.bio.strip() or None
    user.avatar_url = data.avatar_url.strip() or None
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Profile update failed for user_id=%s", user.id)
        raise PersistenceError(str(e)) from e
    db.refresh(user)
    logger.info("Profile updated: user_id=%s", user.id)
    return user
