"""
Pytest fixtures - per-test database, API client, user factories.
Each test gets its own SQLite file so concurrent sessions see committed data.
"""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Follow, Post, User
from app.db.session import Database, get_database
from app.main import app

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session_factory() as s:
        yield s


@pytest_asyncio.fixture
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_database] = lambda: database
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_users(database: Database):
    """Insert n users; user i is created i minutes after BASE_TIME."""

    async def _make(n: int = 1, **overrides) -> list[User]:
        users = []
        for i in range(n):
            fields = {
                "email": f"user{i}@example.com",
                "username": f"user{i}",
                "display_name": f"User {i}",
                "created_at": BASE_TIME + timedelta(minutes=i),
                "updated_at": BASE_TIME + timedelta(minutes=i),
            }
            fields.update(overrides)
            users.append(User(**fields))
        async with database.session() as s:
            s.add_all(users)
        return users

    return _make


@pytest.fixture
def make_user(make_users):
    async def _make(**overrides) -> User:
        users = await make_users(1, **overrides)
        return users[0]

    return _make


@pytest.fixture
def add_activity(database: Database):
    """Attach posts and follow edges: add_activity(user, posts=2, followers=[...])."""

    async def _add(user: User, posts: int = 0, followers=(), following=()) -> None:
        async with database.session() as s:
            s.add_all(Post(user_id=user.id, content=f"post {i}") for i in range(posts))
            s.add_all(Follow(follower_id=f.id, following_id=user.id) for f in followers)
            s.add_all(Follow(follower_id=user.id, following_id=f.id) for f in following)

    return _add
