"""ORM model for blog authors and administrators (auth and RBAC)."""

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship

from app.models.base import Base


class User(Base):
    """
    Account that can sign in to the dashboard.

    role: 'author' or 'super-admin'
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="author")
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(2048), nullable=True)

    posts = relationship("Post", back_populates="author", passive_deletes=True)
