"""
User repository - all user queries, including aggregate counts.
Design: Counts come from correlated scalar subqueries so a page of users is
one round-trip (no N+1 over posts/follows).
"""

from typing import NamedTuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from app.db.errors import PersistenceError
from app.db.models.follow import Follow
from app.db.models.post import Post
from app.db.models.user import User
from app.db.repositories.base_repository import BaseRepository


class UserWithCounts(NamedTuple):
    user: User
    posts: int
    followers: int
    following: int


def _count_columns():
    posts = (
        select(func.count(Post.id))
        .where(Post.user_id == User.id)
        .correlate(User)
        .scalar_subquery()
        .label("posts")
    )
    followers = (
        select(func.count(Follow.id))
        .where(Follow.following_id == User.id)
        .correlate(User)
        .scalar_subquery()
        .label("followers")
    )
    following = (
        select(func.count(Follow.id))
        .where(Follow.follower_id == User.id)
        .correlate(User)
        .scalar_subquery()
        .label("following")
    )
    return posts, followers, following


class UserRepository(BaseRepository[User]):
    """User-specific queries. Extends base CRUD with count projections."""

    def __init__(self, session):
        super().__init__(session, User)

    async def get_page_with_counts(self, *, skip: int, limit: int) -> list[UserWithCounts]:
        """Newest-created first; id breaks ties between equal timestamps."""
        stmt = (
            select(User, *_count_columns())
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(skip)
            .limit(limit)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc
        return [UserWithCounts(*row) for row in result.all()]

    async def get_with_counts(self, id: str) -> UserWithCounts | None:
        stmt = select(User, *_count_columns()).where(User.id == id)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc
        row = result.one_or_none()
        return UserWithCounts(*row) if row else None
