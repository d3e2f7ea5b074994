"""
SQL-backed document store (SQLAlchemy async).

Implements the same DocumentStore interface as the Notion backend over two
tables, ``documents`` and ``document_properties``, so the service can run
against PostgreSQL or SQLite instead of a hosted document database.

Cursors are stringified row offsets into the (created_at, id) ordering.
"""

from collections.abc import Callable, Mapping, Sequence
from contextlib import AbstractAsyncContextManager

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from igaming_calendar.core.base_repository import BaseRepository
from igaming_calendar.core.exceptions.domain import DocumentStoreError
from igaming_calendar.models.base import utc_now
from igaming_calendar.models.document import Document, DocumentProperty

from .document_store import Collection, DocumentPage, DocumentStore, StoredDocument

__all__ = ["DocumentRepository", "SqlDocumentStore"]

logger = structlog.get_logger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class DocumentRepository(BaseRepository[Document, str]):
    """Database access for stored documents and their properties."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Document, session)

    async def find_page(
        self, collection: str, filters: Mapping[str, str], offset: int, limit: int
    ) -> Sequence[Document]:
        """Documents in ``collection`` whose properties equal every filter value."""
        conditions = [Document.collection == collection]
        for name, value in filters.items():
            conditions.append(
                select(DocumentProperty.document_id)
                .where(
                    DocumentProperty.document_id == Document.id,
                    DocumentProperty.name == name,
                    DocumentProperty.value == value,
                )
                .exists()
            )
        return await self.get_page(
            *conditions,
            order_by=(Document.created_at, Document.id),
            limit=limit,
            offset=offset,
        )

    async def set_properties(self, document: Document, properties: Mapping[str, str]) -> Document:
        """Overwrite or add the given properties on ``document``."""
        existing = {prop.name: prop for prop in document.properties}
        for name, value in properties.items():
            if name in existing:
                existing[name].value = value
            else:
                document.properties.append(DocumentProperty(name=name, value=value))
        document.updated_at = utc_now()
        await self.session.flush()
        return document


class SqlDocumentStore(DocumentStore):
    """DocumentStore over SQLAlchemy; one session per operation."""

    def __init__(self, session_factory: SessionFactory, page_size: int = 100) -> None:
        self._session_factory = session_factory
        self._page_size = page_size

    @staticmethod
    def _offset_from_cursor(start_cursor: str | None) -> int:
        if not start_cursor:
            return 0
        try:
            offset = int(start_cursor)
        except ValueError as exc:
            raise DocumentStoreError(f"Invalid cursor: {start_cursor!r}") from exc
        if offset < 0:
            raise DocumentStoreError(f"Invalid cursor: {start_cursor!r}")
        return offset

    async def query(
        self,
        collection: Collection,
        filters: Mapping[str, str] | None = None,
        start_cursor: str | None = None,
    ) -> DocumentPage:
        offset = self._offset_from_cursor(start_cursor)
        try:
            async with self._session_factory() as session:
                documents = await DocumentRepository(session).find_page(
                    collection.name, filters or {}, offset=offset, limit=self._page_size + 1
                )
                results = [
                    StoredDocument(id=doc.id, properties=doc.to_properties())
                    for doc in documents[: self._page_size]
                ]
        except SQLAlchemyError as exc:
            raise DocumentStoreError(f"Query on '{collection.name}' failed: {exc}") from exc

        has_more = len(documents) > self._page_size
        return DocumentPage(
            results=results,
            has_more=has_more,
            next_cursor=str(offset + self._page_size) if has_more else None,
        )

    async def create(self, collection: Collection, properties: Mapping[str, str]) -> StoredDocument:
        try:
            async with self._session_factory() as session:
                repo = DocumentRepository(session)
                document = await repo.create(
                    collection=collection.name,
                    properties=[DocumentProperty(name=name, value=value) for name, value in properties.items()],
                )
                await repo.commit()
                stored = StoredDocument(id=document.id, properties=dict(properties))
        except IntegrityError:
            raise
        except SQLAlchemyError as exc:
            raise DocumentStoreError(f"Create in '{collection.name}' failed: {exc}") from exc

        logger.debug("document_created", collection=collection.name, document_id=stored.id)
        return stored

    async def update(
        self, collection: Collection, document_id: str, properties: Mapping[str, str]
    ) -> StoredDocument:
        try:
            async with self._session_factory() as session:
                repo = DocumentRepository(session)
                document = await repo.get_by_id(document_id)
                if document is None or document.collection != collection.name:
                    raise DocumentStoreError(
                        f"Document '{document_id}' not found in '{collection.name}'", status_code=404
                    )
                await repo.set_properties(document, properties)
                await repo.commit()
                stored = StoredDocument(id=document.id, properties=document.to_properties())
        except IntegrityError:
            raise
        except SQLAlchemyError as exc:
            raise DocumentStoreError(f"Update in '{collection.name}' failed: {exc}") from exc

        logger.debug("document_updated", collection=collection.name, document_id=stored.id)
        return stored
