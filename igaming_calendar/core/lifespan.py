"""
Application lifespan management for FastAPI.

Startup builds the configured document store and keeps it on
``app.state.document_store``:
- notion: NotionDocumentStore over the shared httpx client pool
- sql: SqlDocumentStore over the async SQLAlchemy engine (tables created
  when ``DATABASE_CREATE_SCHEMA`` is set)

A Notion backend without ``NOTION_SECRET`` starts with no store; routes that
need one answer 500 and the public feed serves the static dataset.

Shutdown closes the store and disposes the shared pools.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from igaming_calendar.core.database import AsyncDBPool
from igaming_calendar.core.enums import StoreBackend
from igaming_calendar.core.rest_api import HttpxRestClientPool
from igaming_calendar.main_config import get_database_config, get_notion_config, get_store_config
from igaming_calendar.models.base import Base
from igaming_calendar.repository.document_store import DocumentStore
from igaming_calendar.repository.notion_store import NotionDocumentStore
from igaming_calendar.repository.sql_store import SqlDocumentStore

logger = structlog.get_logger(__name__)


async def build_document_store() -> DocumentStore | None:
    store_config = get_store_config()

    if store_config.backend == StoreBackend.SQL:
        database_config = get_database_config()
        await AsyncDBPool.init(database_config)
        if database_config.create_schema:
            await AsyncDBPool.create_all(Base.metadata)
        logger.info("document_store_ready", backend=store_config.backend.value, sqlite=database_config.is_sqlite)
        return SqlDocumentStore(AsyncDBPool.get_session, page_size=store_config.page_size)

    notion_config = get_notion_config()
    if notion_config.secret is None:
        logger.warning("document_store_unconfigured", backend=store_config.backend.value, missing="NOTION_SECRET")
        return None

    client = await HttpxRestClientPool.get_client()
    logger.info("document_store_ready", backend=store_config.backend.value)
    return NotionDocumentStore(
        client,
        secret=notion_config.secret.get_secret_value(),
        base_url=notion_config.base_url,
        version=notion_config.version,
        page_size=store_config.page_size,
    )


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle events.

    Startup:
        - Build the document store for the configured backend

    Shutdown:
        - Close the store
        - Cleanup HTTP client pool and database engine
    """
    app.state.document_store = await build_document_store()

    yield

    store = app.state.document_store
    if store is not None:
        await store.aclose()
    await HttpxRestClientPool.dispose()
    await AsyncDBPool.dispose()
