"""Base repository: get_by_id, create, flush-and-refresh updates, lifecycle hooks."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, create, save and hooks.

    Subclasses override _on_after_create / _on_after_update (e.g. for
    logging). LSP: subclasses are substitutable for BaseRepository.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and run _on_after_create hook."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_create(obj)
        return obj

    async def save(self, obj: ModelType) -> ModelType:
        """Flush changes of an attached record and run _on_after_update hook."""
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_update(obj)
        return obj

    async def _on_after_create(self, obj: ModelType) -> None:
        """Override in subclasses."""

    async def _on_after_update(self, obj: ModelType) -> None:
        """Override in subclasses."""
