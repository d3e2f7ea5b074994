"""Registration records written when a visitor requests a calendar invite."""

import structlog

from igaming_calendar.core.enums import PropertyKind
from igaming_calendar.models.event import Registration

from .document_store import Collection, DocumentStore

__all__ = ["REGISTRATION_SCHEMA", "RegistrationRepository", "registrations_collection"]

logger = structlog.get_logger(__name__)

REGISTRATION_SCHEMA: dict[str, PropertyKind] = {
    "name": PropertyKind.TITLE,
    "email": PropertyKind.EMAIL,
    "industry": PropertyKind.RICH_TEXT,
}


def registrations_collection(database_id: str | None = None) -> Collection:
    return Collection(name="registrations", database_id=database_id, schema=REGISTRATION_SCHEMA)


class RegistrationRepository:
    def __init__(self, store: DocumentStore, collection: Collection) -> None:
        self.store = store
        self.collection = collection

    async def create(self, registration: Registration) -> str:
        """Write one registration and return its id."""
        document = await self.store.create(self.collection, registration.model_dump())
        logger.info("registration_created", registration_id=document.id)
        return document.id
