"""
User model - identity plus public profile fields.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, generate_uuid, utcnow

if TYPE_CHECKING:
    from app.db.models.comment import Comment
    from app.db.models.follow import Follow
    from app.db.models.like import Like
    from app.db.models.post import Post


class User(Base):
    """User entity. Email and username are unique across all users."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    username: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    display_name: Mapped[str] = mapped_column(Text, nullable=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    # Children are removed by ON DELETE CASCADE; passive_deletes keeps the ORM
    # from lazy-loading them (not allowed under AsyncSession).
    posts: Mapped[list["Post"]] = relationship(
        "Post", back_populates="author", passive_deletes=True
    )
    comments: Mapped[list["Comment"]] = relationship(
        "Comment", back_populates="author", passive_deletes=True
    )
    likes: Mapped[list["Like"]] = relationship(
        "Like", back_populates="user", passive_deletes=True
    )
    # Follow edges pointing at this user / leaving this user
    followers: Mapped[list["Follow"]] = relationship(
        "Follow",
        foreign_keys="Follow.following_id",
        back_populates="following",
        passive_deletes=True,
    )
    following: Mapped[list["Follow"]] = relationship(
        "Follow",
        foreign_keys="Follow.follower_id",
        back_populates="follower",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
