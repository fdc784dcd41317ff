"""
Base repository with common read operations and store-failure mapping.
"""

from contextlib import asynccontextmanager
from typing import TypeVar, Generic, Type, AsyncIterator

import structlog
from sqlalchemy import Select, select, func
from sqlalchemy.exc import (
    DisconnectionError,
    InterfaceError,
    OperationalError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.core.errors import StoreUnavailable
from rolegate.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)

logger = structlog.get_logger()

# Failures outside our control: connection loss, timeouts, pool exhaustion
STORE_FAILURES = (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError)


@asynccontextmanager
async def store_errors(operation: str) -> AsyncIterator[None]:
    """
    Convert store failures into StoreUnavailable.

    Usage:
        async with store_errors("find_by_slug"):
            result = await self.db.execute(stmt)
    """
    try:
        yield
    except STORE_FAILURES as exc:
        logger.warning(
            "Role store unavailable",
            operation=operation,
            error=str(exc),
        )
        raise StoreUnavailable(operation, exc) from exc


class BaseRepository(Generic[ModelT]):
    """
    Base repository providing common read operations.

    Usage:
        class RoleRepository(BaseRepository[Role]):
            model = Role

        repo = RoleRepository(db)
        role = await repo.get_by_id(role_id)
    """

    model: Type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    def _base_query(self) -> Select:
        """Base query - override to add default filters."""
        return select(self.model)

    async def get_by_id(self, id: int) -> ModelT | None:
        """Get entity by ID."""
        stmt = self._base_query().where(self.model.id == id)
        async with store_errors(f"{self.model.__tablename__}.get_by_id"):
            result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_one(self, **filters) -> ModelT | None:
        """Get single entity by filters."""
        stmt = self._base_query()
        for field, value in filters.items():
            stmt = stmt.where(getattr(self.model, field) == value)
        async with store_errors(f"{self.model.__tablename__}.get_one"):
            result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def count(self, **filters) -> int:
        """Count entities matching filters."""
        stmt = select(func.count()).select_from(self.model)
        for field, value in filters.items():
            stmt = stmt.where(getattr(self.model, field) == value)
        async with store_errors(f"{self.model.__tablename__}.count"):
            return await self.db.scalar(stmt) or 0

    async def all(self, **filters) -> list[ModelT]:
        """Get all entities matching filters, ordered by ID."""
        stmt = self._base_query()
        for field, value in filters.items():
            if value is not None:
                stmt = stmt.where(getattr(self.model, field) == value)
        stmt = stmt.order_by(self.model.id)
        async with store_errors(f"{self.model.__tablename__}.all"):
            result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create(self, **data) -> ModelT:
        """Create new entity."""
        entity = self.model(**data)
        async with store_errors(f"{self.model.__tablename__}.create"):
            self.db.add(entity)
            await self.db.flush()
            await self.db.refresh(entity)
        return entity
