"""
Base repository - generic CRUD over one model.
Design: All SQLAlchemy exceptions are translated to app.db.errors here, so
services never see driver-specific error codes.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import Base
from app.db.errors import (
    PersistenceError,
    RecordNotFoundError,
    UniqueViolationError,
    is_unique_violation,
)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Generic async repository. Subclasses define model-specific queries."""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def get_by_id(self, id: str) -> ModelType | None:
        """Fetch single entity by primary key, or None."""
        try:
            return await self.session.get(self.model, id)
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    async def count(self) -> int:
        try:
            result = await self.session.execute(select(func.count()).select_from(self.model))
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc
        return result.scalar_one()

    async def add(self, entity: ModelType) -> ModelType:
        """Persist new entity. Flushes so constraint violations surface here."""
        self.session.add(entity)
        await self._flush()
        await self.session.refresh(entity)
        return entity

    async def update(self, id: str, values: dict[str, Any]) -> ModelType:
        """Apply column values to an existing row. Raises RecordNotFoundError."""
        entity = await self._require(id)
        for field, value in values.items():
            setattr(entity, field, value)
        await self._flush()
        await self.session.refresh(entity)
        return entity

    async def delete(self, id: str) -> None:
        """Remove row by primary key. Raises RecordNotFoundError."""
        entity = await self._require(id)
        try:
            await self.session.delete(entity)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    async def _require(self, id: str) -> ModelType:
        entity = await self.get_by_id(id)
        if entity is None:
            raise RecordNotFoundError(self.model.__name__, id)
        return entity

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            if is_unique_violation(exc):
                raise UniqueViolationError(str(exc.orig)) from exc
            raise PersistenceError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise PersistenceError(str(exc)) from exc
