"""Public event feed: reviewed events from the store, or the bundled static list."""

import json
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path

import structlog

from igaming_calendar.core.exceptions.domain import DocumentStoreError
from igaming_calendar.models.event import Event
from igaming_calendar.repository.event_repository import EventRepository

__all__ = ["FeedSource", "PublicFeed", "STATIC_EVENTS_PATH", "load_public_events", "load_static_events"]

logger = structlog.get_logger(__name__)

STATIC_EVENTS_PATH = Path(__file__).resolve().parent.parent / "data" / "events.json"


class FeedSource(str, Enum):
    STORE = "store"
    STATIC = "static"


@dataclass(frozen=True)
class PublicFeed:
    events: list[Event]
    source: FeedSource


@lru_cache
def _read_static(path: Path) -> tuple[Event, ...]:
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)
    return tuple(Event.model_validate(item) for item in data.get("events", []))


def load_static_events(path: Path = STATIC_EVENTS_PATH) -> list[Event]:
    return list(_read_static(path))


async def load_public_events(repository: EventRepository | None) -> PublicFeed:
    """Reviewed events from the store, falling back to the static dataset.

    ``repository`` is None when no store is configured, which also selects the
    static dataset.
    """
    if repository is None:
        logger.warning("static_feed_fallback", reason="store not configured")
        return PublicFeed(events=load_static_events(), source=FeedSource.STATIC)

    try:
        events = await repository.list_reviewed()
    except DocumentStoreError as exc:
        logger.warning("static_feed_fallback", reason=str(exc))
        return PublicFeed(events=load_static_events(), source=FeedSource.STATIC)

    return PublicFeed(events=events, source=FeedSource.STORE)
