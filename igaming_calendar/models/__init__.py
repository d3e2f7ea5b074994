"""
Models for the iGaming events calendar.

Pydantic models describe the wire format; SQLAlchemy models back the SQL
document store.
"""

from .base import Base
from .document import Document, DocumentProperty
from .event import CamelModel, Event, EventSubmission, Registration, StoredEvent
from .invite import InviteRequest

__all__: list[str] = [
    "Base",
    "CamelModel",
    "Document",
    "DocumentProperty",
    "Event",
    "EventSubmission",
    "InviteRequest",
    "Registration",
    "StoredEvent",
]
