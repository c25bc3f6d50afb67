#!/usr/bin/env python3
"""
Seed script: development fixtures written straight through the ORM.
Creates three users with posts, follows, likes and a threaded comment.
  python scripts/seed_data.py
  python scripts/seed_data.py --reset
  python scripts/seed_data.py --database-url sqlite+aiosqlite:///./dev.db --reset
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import func, select  # noqa: E402

from app.config import get_settings  # noqa: E402
from app.core.logging import configure_logging  # noqa: E402
from app.db.models import Comment, Follow, Like, Post, User  # noqa: E402
from app.db.session import Database  # noqa: E402

logger = logging.getLogger("seed")

USERS = [
    {
        "email": "alice@example.com",
        "username": "alice",
        "display_name": "Alice Johnson",
        "bio": "Hello! Nice to meet you 😊",
    },
    {
        "email": "bob@example.com",
        "username": "bob",
        "display_name": "Bob Smith",
        "bio": "Software developer and coffee lover ☕",
    },
    {
        "email": "carol@example.com",
        "username": "carol",
        "display_name": "Carol Brown",
        "bio": "Photographer | Travel enthusiast 📸",
    },
]


async def seed(database: Database) -> dict[str, int]:
    """Insert fixtures in one transaction; returns row counts per table."""
    async with database.session() as session:
        alice, bob, carol = users = [User(**fields) for fields in USERS]
        session.add_all(users)
        await session.flush()

        first = Post(user_id=alice.id, content="Hello world! This is my first post on this platform! 🎉")
        react = Post(
            user_id=bob.id,
            content="Just finished working on a new React project. TypeScript is amazing! 🚀",
        )
        sunset = Post(user_id=alice.id, content="Beautiful sunset today. Nature never fails to amaze me 🌅")
        session.add_all([first, react, sunset])
        await session.flush()

        session.add_all(
            [
                Follow(follower_id=bob.id, following_id=alice.id),
                Follow(follower_id=carol.id, following_id=alice.id),
                Follow(follower_id=alice.id, following_id=bob.id),
                Like(user_id=bob.id, post_id=first.id),
                Like(user_id=carol.id, post_id=first.id),
                Like(user_id=alice.id, post_id=react.id),
            ]
        )

        welcome = Comment(user_id=bob.id, post_id=first.id, content="Welcome to the platform! 🎊")
        session.add_all(
            [welcome, Comment(user_id=carol.id, post_id=first.id, content="Great first post!")]
        )
        await session.flush()
        session.add(
            Comment(
                user_id=alice.id,
                post_id=first.id,
                parent_comment_id=welcome.id,
                content="Thank you so much! 😊",
            )
        )
        await session.flush()

        counts = {}
        for model in (User, Post, Follow, Like, Comment):
            result = await session.execute(select(func.count()).select_from(model))
            counts[model.__tablename__] = result.scalar_one()
    return counts


async def run(database_url: str, reset: bool) -> None:
    database = Database(database_url)
    try:
        if reset:
            logger.info("Recreating tables...")
            await database.drop_all()
            await database.create_all()
        logger.info("Seeding database...")
        counts = await seed(database)
    finally:
        await database.dispose()
    print("Seed data created successfully!")
    for table, count in counts.items():
        print(f"Created {count} {table}")


def main():
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Seed development fixtures")
    ap.add_argument("--database-url", default=settings.database_url, help="Async SQLAlchemy URL")
    ap.add_argument("--reset", action="store_true", help="Drop and recreate tables first")
    args = ap.parse_args()

    configure_logging(settings.log_level)
    try:
        asyncio.run(run(args.database_url, args.reset))
    except Exception:
        logger.exception("Seed failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
