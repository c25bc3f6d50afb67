"""
UserRepository tests against SQLite - error translation and count projections.
"""

import pytest

from app.db.errors import RecordNotFoundError, UniqueViolationError
from app.db.models import User
from app.db.repositories.user_repository import UserRepository


@pytest.mark.asyncio
async def test_add_duplicate_email_raises_unique_violation(session, make_user):
    await make_user(email="dup@x.com")
    repo = UserRepository(session)
    with pytest.raises(UniqueViolationError):
        await repo.add(User(email="dup@x.com", username="fresh", display_name="F"))


@pytest.mark.asyncio
async def test_update_missing_raises_not_found(session):
    repo = UserRepository(session)
    with pytest.raises(RecordNotFoundError) as exc_info:
        await repo.update("missing", {"bio": "x"})
    assert exc_info.value.key == "missing"


@pytest.mark.asyncio
async def test_delete_missing_raises_not_found(session):
    with pytest.raises(RecordNotFoundError):
        await UserRepository(session).delete("missing")


@pytest.mark.asyncio
async def test_get_with_counts(session, make_users, add_activity):
    alice, bob = await make_users(2)
    await add_activity(alice, posts=3, following=[bob])

    row = await UserRepository(session).get_with_counts(alice.id)
    assert row.user.username == "user0"
    assert (row.posts, row.followers, row.following) == (3, 0, 1)
    assert await UserRepository(session).get_with_counts("missing") is None


@pytest.mark.asyncio
async def test_page_and_count(session, make_users):
    await make_users(7)
    repo = UserRepository(session)
    rows = await repo.get_page_with_counts(skip=5, limit=5)
    assert [r.user.username for r in rows] == ["user1", "user0"]
    assert await repo.count() == 7
