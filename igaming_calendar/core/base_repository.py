"""
Generic repository base class for SQLAlchemy models with async CRUD operations.

Usage:
    class DocumentRepository(BaseRepository[Document, str]):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(Document, session)

    async with AsyncDBPool.get_session() as session:
        repo = DocumentRepository(session)
        document = await repo.create(collection="events")
        await repo.commit()
"""

from abc import ABC
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

__all__ = ["BaseRepository"]

# Type variables for SQLAlchemy model and ID type
ModelType = TypeVar("ModelType")
IDType = TypeVar("IDType", int, str)


class BaseRepository(Generic[ModelType, IDType], ABC):
    """Base repository with async CRUD operations for SQLAlchemy models."""

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        """Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record.

        Args:
            **kwargs: Field values

        Returns:
            Created instance
        """
        try:
            instance = self.model(**kwargs)
            self.session.add(instance)
            await self.session.flush()
            await self.session.refresh(instance)
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        else:
            return instance

    async def get_by_id(self, id_: IDType) -> ModelType | None:
        """Get record by primary key, or None."""
        result = await self.session.execute(select(self.model).where(self.model.id == id_))
        return result.scalar_one_or_none()

    async def get_page(
        self, *conditions: Any, order_by: Sequence[Any] = (), limit: int | None = None, offset: int | None = None
    ) -> Sequence[ModelType]:
        """Get records matching every condition.

        Args:
            *conditions: SQLAlchemy WHERE clauses
            order_by: ORDER BY clauses
            limit: Max records
            offset: Records to skip

        Returns:
            List of instances
        """
        query = select(self.model).where(*conditions).order_by(*order_by)

        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return result.scalars().all()

    async def commit(self) -> None:
        """Commit current transaction."""
        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise
