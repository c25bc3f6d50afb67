"""
User service - use cases behind /api/users.
Design: Routes stay thin; this layer validates request shape, calls the
repository and turns persistence errors into API errors.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from app.core.exceptions import (
    AppError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from app.core.pagination import PageRequest
from app.db.errors import RecordNotFoundError, UniqueViolationError
from app.db.models.user import User
from app.db.repositories.user_repository import UserRepository, UserWithCounts
from app.db.session import Database
from app.schemas.common import Page
from app.schemas.user import (
    UserCount,
    UserCreate,
    UserDetail,
    UserPublic,
    UserResponse,
    UserUpdate,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Required fields missing: email, username, displayName"

# Optional text columns: an explicit null or "" means "clear"
CLEARABLE_FIELDS = ("bio", "profile_image_url")


def _counts(row: UserWithCounts) -> UserCount:
    return UserCount(posts=row.posts, followers=row.followers, following=row.following)


def _to_public(row: UserWithCounts) -> UserPublic:
    user = row.user
    return UserPublic(
        id=user.id,
        username=user.username,
        display_name=user.display_name,
        bio=user.bio,
        profile_image_url=user.profile_image_url,
        created_at=user.created_at,
        updated_at=user.updated_at,
        count=_counts(row),
    )


def _to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        username=user.username,
        display_name=user.display_name,
        bio=user.bio,
        profile_image_url=user.profile_image_url,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def _to_detail(row: UserWithCounts) -> UserDetail:
    return UserDetail(**_to_response(row.user).model_dump(), count=_counts(row))


def _require_id(user_id: str | None) -> str:
    if user_id is None or not user_id.strip():
        raise ValidationError("ID is required")
    return user_id


async def _gather_or_cancel(*coros):
    """asyncio.gather, but a failure cancels the remaining queries before raising."""
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


@asynccontextmanager
async def _translate_errors(failure_message: str) -> AsyncIterator[None]:
    """Map persistence faults to API errors; anything unrecognised is a 500."""
    try:
        yield
    except AppError:
        raise
    except RecordNotFoundError as exc:
        raise NotFoundError("User") from exc
    except UniqueViolationError as exc:
        raise ConflictError("User already exists") from exc
    except Exception as exc:
        logger.exception(failure_message)
        raise InternalError(failure_message) from exc


class UserService:
    """List/get/create/update/delete over users."""

    def __init__(self, repo: UserRepository, database: Database):
        self.repo = repo
        self.database = database

    async def list_users(self, page_request: PageRequest) -> Page[UserPublic]:
        """One page of public projections plus the pagination descriptor.

        The page query and the count run concurrently on separate sessions
        (an AsyncSession cannot serve two queries at once).
        """

        async def fetch_page() -> list[UserWithCounts]:
            async with self.database.session() as session:
                return await UserRepository(session).get_page_with_counts(
                    skip=page_request.skip, limit=page_request.limit
                )

        async def fetch_total() -> int:
            async with self.database.session() as session:
                return await UserRepository(session).count()

        async with _translate_errors("Failed to fetch users"):
            rows, total = await _gather_or_cancel(fetch_page(), fetch_total())

        return Page[UserPublic](
            data=[_to_public(row) for row in rows],
            pagination=page_request.describe(total),
        )

    async def get_user(self, user_id: str | None) -> UserDetail:
        user_id = _require_id(user_id)
        async with _translate_errors("Failed to fetch user"):
            row = await self.repo.get_with_counts(user_id)
        if row is None:
            raise NotFoundError("User")
        return _to_detail(row)

    async def create_user(self, data: UserCreate) -> UserResponse:
        if not (data.email and data.username and data.display_name):
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)
        user = User(
            email=data.email,
            username=data.username,
            display_name=data.display_name,
            # Stored as NULL rather than "" when not supplied
            bio=data.bio or None,
            profile_image_url=data.profile_image_url or None,
        )
        async with _translate_errors("Failed to create user"):
            user = await self.repo.add(user)
        logger.info("Created user %s (%s)", user.id, user.username)
        return _to_response(user)

    async def update_user(self, user_id: str | None, data: UserUpdate) -> UserResponse:
        user_id = _require_id(user_id)
        patch = build_patch(data)
        async with _translate_errors("Failed to update user"):
            user = await self.repo.update(user_id, patch)
        return _to_response(user)

    async def delete_user(self, user_id: str | None) -> None:
        user_id = _require_id(user_id)
        async with _translate_errors("Failed to delete user"):
            await self.repo.delete(user_id)
        logger.info("Deleted user %s", user_id)


def build_patch(data: UserUpdate) -> dict[str, str | None]:
    """Column values for an update: only fields the client actually sent."""
    patch = data.model_dump(exclude_unset=True)
    if "display_name" in patch and not (patch["display_name"] or "").strip():
        raise ValidationError("displayName cannot be empty")
    for field in CLEARABLE_FIELDS:
        if field in patch and patch[field] == "":
            patch[field] = None
    return patch
