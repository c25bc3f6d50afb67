"""
FastAPI dependencies - service construction with repository injection.
"""

from typing import Annotated

from fastapi import Depends

from app.db.repositories.user_repository import UserRepository
from app.db.session import DatabaseDep, DbSession
from app.services.user_service import UserService


def get_user_service(session: DbSession, database: DatabaseDep) -> UserService:
    """Factory for the service with repository injection (Dependency Inversion)."""
    return UserService(UserRepository(session), database)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
