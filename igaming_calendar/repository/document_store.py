"""
Document store interface shared by the Notion and SQL backends.

The store is treated as a narrow document API: equality-filtered queries with
pagination cursors, create, and update. Every property is plain text on this
side of the interface; each backend converts to its own representation using
the collection's schema.

Usage:
    page = await store.query(events, filters={"link": link})
    everything = await query_all(store, events, max_pages=100)
    created = await store.create(events, {"Name": "ICE London", "link": link})
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field

import structlog

from igaming_calendar.core.enums import PropertyKind
from igaming_calendar.core.exceptions.domain import DocumentStoreError, PaginationLimitError

__all__ = [
    "Collection",
    "DocumentPage",
    "DocumentStore",
    "StoredDocument",
    "query_all",
]

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Collection:
    """A named collection and the kinds of its properties.

    ``database_id`` is the backend's identifier for the collection (the Notion
    database id); the SQL backend keys on ``name`` instead.
    """

    name: str
    database_id: str | None = None
    schema: Mapping[str, PropertyKind] = field(default_factory=dict)

    def kind_of(self, prop: str) -> PropertyKind:
        return self.schema.get(prop, PropertyKind.RICH_TEXT)


@dataclass
class StoredDocument:
    id: str
    properties: dict[str, str] = field(default_factory=dict)

    def get(self, prop: str) -> str:
        return self.properties.get(prop, "")


@dataclass
class DocumentPage:
    results: list[StoredDocument]
    has_more: bool = False
    next_cursor: str | None = None


class DocumentStore(ABC):
    """Async document store client."""

    @abstractmethod
    async def query(
        self,
        collection: Collection,
        filters: Mapping[str, str] | None = None,
        start_cursor: str | None = None,
    ) -> DocumentPage:
        """Return one page of documents whose properties equal every filter value."""

    @abstractmethod
    async def create(self, collection: Collection, properties: Mapping[str, str]) -> StoredDocument:
        """Create a document and return it with its new id."""

    @abstractmethod
    async def update(
        self, collection: Collection, document_id: str, properties: Mapping[str, str]
    ) -> StoredDocument:
        """Overwrite the given properties of an existing document."""

    async def aclose(self) -> None:
        """Release backend resources. Shared pools are closed by the lifespan."""
        return None


async def query_all(
    store: DocumentStore,
    collection: Collection,
    filters: Mapping[str, str] | None = None,
    max_pages: int = 100,
) -> list[StoredDocument]:
    """Follow pagination cursors until the store reports no more pages.

    Args:
        store: Store to read from
        collection: Collection to query
        filters: Optional equality filters
        max_pages: Ceiling on pages read

    Returns:
        Every matching document, in store order

    Raises:
        PaginationLimitError: The store still reported more after ``max_pages`` pages
        DocumentStoreError: The store reported more pages but gave no cursor
    """
    documents: list[StoredDocument] = []
    cursor: str | None = None

    for page_number in range(1, max_pages + 1):
        page = await store.query(collection, filters=filters, start_cursor=cursor)
        documents.extend(page.results)

        if not page.has_more:
            logger.debug(
                "collection_fetched",
                collection=collection.name,
                pages=page_number,
                documents=len(documents),
            )
            return documents

        if not page.next_cursor:
            msg = f"Collection '{collection.name}' reported more results without a cursor"
            raise DocumentStoreError(msg, detail={"collection": collection.name, "page": page_number})
        cursor = page.next_cursor

    logger.warning("pagination_limit_reached", collection=collection.name, max_pages=max_pages)
    raise PaginationLimitError(collection.name, max_pages)
