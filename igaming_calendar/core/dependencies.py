"""
FastAPI dependencies for the document store, repositories and mailer.

Every route gets its collaborators through these functions so tests can swap
them with ``app.dependency_overrides``:

    app.dependency_overrides[get_event_repository] = lambda: EventRepository(fake_store, events_collection())

Missing configuration is reported as ``ConfigurationError`` (500) with the
name of the setting, e.g. ``NOTION_EVENTS_DATABASE_ID is not configured``.
"""

import structlog
from fastapi import Depends, Request

from igaming_calendar.core.enums import StoreBackend
from igaming_calendar.core.exceptions.http_exceptions import ConfigurationError
from igaming_calendar.main_config import get_mail_config, get_notion_config, get_store_config
from igaming_calendar.repository.document_store import Collection, DocumentStore
from igaming_calendar.repository.event_repository import EventRepository, events_collection
from igaming_calendar.repository.registration_repository import RegistrationRepository, registrations_collection
from igaming_calendar.services.mailer import Mailer, SmtpMailer

__all__ = [
    "get_document_store",
    "get_event_repository",
    "get_mailer",
    "get_public_event_repository",
    "get_registration_repository",
]

logger = structlog.get_logger(__name__)


def get_document_store(request: Request) -> DocumentStore:
    """The store built at startup.

    Raises:
        ConfigurationError: No store was built (Notion secret missing)
    """
    store = getattr(request.app.state, "document_store", None)
    if store is None:
        raise ConfigurationError("NOTION_SECRET is not configured")
    return store


def _collection(setting: str, database_id: str | None, factory) -> Collection:
    if get_store_config().backend == StoreBackend.NOTION and not database_id:
        raise ConfigurationError(f"{setting} is not configured")
    return factory(database_id)


def _event_repository(store: DocumentStore) -> EventRepository:
    store_config = get_store_config()
    collection = _collection(
        "NOTION_EVENTS_DATABASE_ID", get_notion_config().events_database_id, events_collection
    )
    return EventRepository(
        store,
        collection,
        max_pages=store_config.max_pages,
        max_field_length=store_config.max_field_length,
    )


def get_event_repository(store: DocumentStore = Depends(get_document_store)) -> EventRepository:
    return _event_repository(store)


def get_public_event_repository(request: Request) -> EventRepository | None:
    """Event repository for read-only public views, or None when unconfigured.

    The public views fall back to the bundled static events instead of failing.
    """
    try:
        return _event_repository(get_document_store(request))
    except ConfigurationError as exc:
        logger.warning("public_feed_unconfigured", reason=exc.message)
        return None


def get_registration_repository(request: Request) -> RegistrationRepository | None:
    """Registration repository, or None when unconfigured.

    A missing registrations store only costs the audit record; the invite is
    still sent.
    """
    try:
        store = get_document_store(request)
        collection = _collection(
            "NOTION_REGISTRATIONS_DATABASE_ID",
            get_notion_config().registrations_database_id,
            registrations_collection,
        )
    except ConfigurationError as exc:
        logger.warning("registrations_unconfigured", reason=exc.message)
        return None
    return RegistrationRepository(store, collection)


def get_mailer() -> Mailer:
    config = get_mail_config()
    if not config.user:
        raise ConfigurationError("SMTP_USER is not configured")
    return SmtpMailer(config)
