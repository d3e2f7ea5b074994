"""Repository layer: the document store interface, its backends and the
event/registration repositories built on top of it.
"""

from .document_store import Collection, DocumentPage, DocumentStore, StoredDocument, query_all
from .event_repository import EventRepository, events_collection, truncate_text
from .registration_repository import RegistrationRepository, registrations_collection

__all__ = [
    "Collection",
    "DocumentPage",
    "DocumentStore",
    "EventRepository",
    "RegistrationRepository",
    "StoredDocument",
    "events_collection",
    "query_all",
    "registrations_collection",
    "truncate_text",
]
