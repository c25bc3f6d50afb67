# Repository pattern: data access behind a small CRUD interface

from app.db.repositories.user_repository import UserRepository, UserWithCounts

__all__ = ["UserRepository", "UserWithCounts"]
