"""Shared fixtures: in-memory document store, recording mailer and a test client."""

from collections.abc import Iterator, Mapping, Sequence

import pytest
from fastapi.testclient import TestClient

from igaming_calendar.core.dependencies import (
    get_event_repository,
    get_mailer,
    get_public_event_repository,
    get_registration_repository,
)
from igaming_calendar.core.enums import EventStatus
from igaming_calendar.core.exceptions.domain import DocumentStoreError, MailDeliveryError
from igaming_calendar.main import app
from igaming_calendar.models.event import Event
from igaming_calendar.repository.document_store import (
    Collection,
    DocumentPage,
    DocumentStore,
    StoredDocument,
)
from igaming_calendar.repository.event_repository import EventRepository, events_collection
from igaming_calendar.repository.registration_repository import (
    RegistrationRepository,
    registrations_collection,
)
from igaming_calendar.services.mailer import MailAttachment


class FakeDocumentStore(DocumentStore):
    """Dict-backed store with equality filters and offset cursors.

    ``fail_on`` names operations ("query", "create", "update") that raise;
    ``fail_links`` makes writes of those links raise.
    """

    def __init__(self, page_size: int = 100) -> None:
        self.page_size = page_size
        self.documents: dict[str, list[StoredDocument]] = {}
        self.fail_on: set[str] = set()
        self.fail_links: set[str] = set()
        self.queries = 0
        self._next_id = 0

    def seed(self, collection: Collection, properties: Mapping[str, str]) -> StoredDocument:
        self._next_id += 1
        document = StoredDocument(id=f"{collection.name}-{self._next_id}", properties=dict(properties))
        self.documents.setdefault(collection.name, []).append(document)
        return document

    def all(self, collection: Collection) -> list[StoredDocument]:
        return self.documents.get(collection.name, [])

    def _check(self, operation: str, properties: Mapping[str, str] | None = None) -> None:
        if operation in self.fail_on:
            raise DocumentStoreError(f"{operation} failed", status_code=503)
        if properties and properties.get("link") in self.fail_links:
            raise DocumentStoreError(f"{operation} rejected {properties['link']}", status_code=400)

    async def query(
        self,
        collection: Collection,
        filters: Mapping[str, str] | None = None,
        start_cursor: str | None = None,
    ) -> DocumentPage:
        self.queries += 1
        self._check("query")
        matches = [
            doc for doc in self.all(collection) if all(doc.get(k) == v for k, v in (filters or {}).items())
        ]
        offset = int(start_cursor or 0)
        end = offset + self.page_size
        has_more = end < len(matches)
        return DocumentPage(
            results=[StoredDocument(id=doc.id, properties=dict(doc.properties)) for doc in matches[offset:end]],
            has_more=has_more,
            next_cursor=str(end) if has_more else None,
        )

    async def create(self, collection: Collection, properties: Mapping[str, str]) -> StoredDocument:
        self._check("create", properties)
        return self.seed(collection, properties)

    async def update(
        self, collection: Collection, document_id: str, properties: Mapping[str, str]
    ) -> StoredDocument:
        self._check("update", properties)
        for doc in self.all(collection):
            if doc.id == document_id:
                doc.properties.update(properties)
                return StoredDocument(id=doc.id, properties=dict(doc.properties))
        raise DocumentStoreError(f"Document '{document_id}' not found", status_code=404)


class FakeMailer:
    """Records sent mail instead of talking to SMTP."""

    sender_address = "events@example.com"

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.fail = False

    async def send(
        self, to: str, subject: str, html_body: str, attachments: Sequence[MailAttachment] = ()
    ) -> None:
        if self.fail:
            raise MailDeliveryError("SMTP relay refused connection")
        self.sent.append({"to": to, "subject": subject, "html_body": html_body, "attachments": list(attachments)})


def make_event(**overrides: str) -> Event:
    data = {
        "event_name": "ICE London",
        "month": "February",
        "location": "ExCeL London",
        "link": "https://example.com/ice-london",
        "description": "Gaming technology exhibition",
        "website": "https://example.com",
        "start_date": "04-02-2025",
        "end_date": "06-02-2025",
    }
    data.update(overrides)
    return Event(**data)


def seed_event(store: FakeDocumentStore, event: Event, status: EventStatus = EventStatus.REVIEWED) -> StoredDocument:
    collection = events_collection("events-db")
    repository = EventRepository(store, collection)
    return store.seed(collection, repository.to_properties(event, status))


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def store() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture
def event_repository(store: FakeDocumentStore) -> EventRepository:
    return EventRepository(store, events_collection("events-db"))


@pytest.fixture
def registration_repository(store: FakeDocumentStore) -> RegistrationRepository:
    return RegistrationRepository(store, registrations_collection("registrations-db"))


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def client(
    event_repository: EventRepository,
    registration_repository: RegistrationRepository,
    mailer: FakeMailer,
) -> Iterator[TestClient]:
    """Test client with the store and mailer swapped for fakes (lifespan not run)."""
    app.dependency_overrides[get_event_repository] = lambda: event_repository
    app.dependency_overrides[get_public_event_repository] = lambda: event_repository
    app.dependency_overrides[get_registration_repository] = lambda: registration_repository
    app.dependency_overrides[get_mailer] = lambda: mailer
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def bare_client() -> Iterator[TestClient]:
    """Test client with no overrides and no store on app.state."""
    app.dependency_overrides.clear()
    yield TestClient(app, raise_server_exceptions=False)
