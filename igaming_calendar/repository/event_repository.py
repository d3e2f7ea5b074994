"""Event repository over the document store.

Maps ``Event`` to store properties and back. ``Name`` is the collection's
title property and mirrors ``eventName``; ``status`` is a select holding the
moderation state. Every text value is truncated before it is written.
"""

from collections.abc import Mapping

import structlog

from igaming_calendar.core.enums import EventStatus, PropertyKind
from igaming_calendar.models.event import Event, StoredEvent

from .document_store import Collection, DocumentStore, StoredDocument, query_all

__all__ = ["EVENT_SCHEMA", "EventRepository", "events_collection", "truncate_text"]

logger = structlog.get_logger(__name__)

TITLE_PROPERTY = "Name"
STATUS_PROPERTY = "status"

# Store property name -> Event attribute
EVENT_FIELDS: dict[str, str] = {
    "eventName": "event_name",
    "month": "month",
    "location": "location",
    "link": "link",
    "unprocessedDate": "unprocessed_date",
    "description": "description",
    "website": "website",
    "startDate": "start_date",
    "endDate": "end_date",
}

EVENT_SCHEMA: dict[str, PropertyKind] = {
    TITLE_PROPERTY: PropertyKind.TITLE,
    **{prop: PropertyKind.RICH_TEXT for prop in EVENT_FIELDS},
    STATUS_PROPERTY: PropertyKind.SELECT,
}


def events_collection(database_id: str | None = None) -> Collection:
    return Collection(name="events", database_id=database_id, schema=EVENT_SCHEMA)


def truncate_text(text: str, max_length: int = 2000) -> str:
    """Cut ``text`` to ``max_length`` characters, ending in ``...`` when cut."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def _parse_status(value: str) -> EventStatus | None:
    try:
        return EventStatus(value)
    except ValueError:
        return None


class EventRepository:
    """Event records keyed by ``link``."""

    def __init__(
        self,
        store: DocumentStore,
        collection: Collection,
        max_pages: int = 100,
        max_field_length: int = 2000,
    ) -> None:
        self.store = store
        self.collection = collection
        self.max_pages = max_pages
        self.max_field_length = max_field_length

    def to_properties(self, event: Event, status: EventStatus) -> dict[str, str]:
        """Store properties for ``event``, truncated, stamped with ``status``."""
        properties = {
            prop: truncate_text(getattr(event, attr), self.max_field_length)
            for prop, attr in EVENT_FIELDS.items()
        }
        properties[TITLE_PROPERTY] = properties["eventName"]
        properties[STATUS_PROPERTY] = status.value
        return properties

    @staticmethod
    def to_stored_event(document: StoredDocument) -> StoredEvent:
        event = Event(**{attr: document.get(prop) for prop, attr in EVENT_FIELDS.items()})
        return StoredEvent(id=document.id, event=event, status=_parse_status(document.get(STATUS_PROPERTY)))

    def link_key(self, link: str) -> str:
        """``link`` as it is written to the store (truncated like every field)."""
        return truncate_text(link, self.max_field_length)

    async def find_by_link(self, link: str) -> StoredEvent | None:
        """First record whose stored ``link`` equals ``link``, or None."""
        page = await self.store.query(self.collection, filters={"link": self.link_key(link)})
        if not page.results:
            return None
        return self.to_stored_event(page.results[0])

    async def list_all(self, filters: Mapping[str, str] | None = None) -> list[StoredEvent]:
        documents = await query_all(self.store, self.collection, filters=filters, max_pages=self.max_pages)
        return [self.to_stored_event(document) for document in documents]

    async def list_reviewed(self) -> list[Event]:
        """Public projection of every reviewed event, without id or status."""
        stored = await self.list_all(filters={STATUS_PROPERTY: EventStatus.REVIEWED.value})
        return [item.event for item in stored]

    async def create(self, event: Event, status: EventStatus) -> StoredEvent:
        document = await self.store.create(self.collection, self.to_properties(event, status))
        logger.info("event_created", event_id=document.id, link=event.link, status=status.value)
        return StoredEvent(id=document.id, event=event, status=status)

    async def update(self, event_id: str, event: Event, status: EventStatus) -> StoredEvent:
        document = await self.store.update(self.collection, event_id, self.to_properties(event, status))
        logger.info("event_updated", event_id=document.id, link=event.link, status=status.value)
        return StoredEvent(id=document.id, event=event, status=status)
