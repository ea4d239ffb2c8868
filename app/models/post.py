"""ORM model for blog posts and their publishing status."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from app.models.base import Base


class Post(Base):
    """
    Article owned by the user referenced by user_id.

    status: 'draft', 'pending_approval' or 'published'
    """

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    category = Column(String(255), nullable=False, index=True)
    featured = Column(Boolean, nullable=False, default=False)
    image = Column(String(2048), nullable=True)
    sources = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status = Column(String(32), nullable=False, default="draft", index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    author = relationship("User", back_populates="posts")

    @property
    def published(self) -> bool:
        return self.status == "published"
