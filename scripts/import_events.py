"""
Async script to import events from a JSON file into the configured store.
Uses the bulk path: existing links are updated, new links created, and every
imported event is marked reviewed.

Usage:
    python scripts/import_events.py                      # bundled dataset
    python scripts/import_events.py path/to/events.json

The file holds either a list of events or {"events": [...]}, with camelCase
keys (eventName, link, startDate, ...).
"""
import asyncio
import json
import sys
from pathlib import Path

from igaming_calendar.core.database import AsyncDBPool
from igaming_calendar.core.lifespan import build_document_store
from igaming_calendar.core.logging_config import setup_logging
from igaming_calendar.core.rest_api import HttpxRestClientPool
from igaming_calendar.main_config import get_notion_config, get_store_config
from igaming_calendar.models.event import Event
from igaming_calendar.repository.event_repository import EventRepository, events_collection
from igaming_calendar.services.event_feed import STATIC_EVENTS_PATH
from igaming_calendar.services.reconciliation import bulk_submit_events


def load_events(file_path: Path) -> list[Event]:
    """Load events from a JSON file."""
    with file_path.open(encoding="utf-8") as f:
        data = json.load(f)
    items = data.get("events", []) if isinstance(data, dict) else data
    return [Event.model_validate(item) for item in items]


async def main(file_path: Path) -> int:
    """Main import function."""
    print("=" * 60)
    print("iGaming Events Calendar - Event Import")
    print("=" * 60)

    if not file_path.exists():
        print(f"Error: Events file not found at {file_path}")
        return 1

    events = load_events(file_path)
    print(f"\nLoaded {len(events)} events from {file_path}")

    store = await build_document_store()
    if store is None:
        print("Error: document store is not configured (set NOTION_SECRET or STORE_BACKEND=sql)")
        return 1

    store_config = get_store_config()
    repository = EventRepository(
        store,
        events_collection(get_notion_config().events_database_id),
        max_pages=store_config.max_pages,
        max_field_length=store_config.max_field_length,
    )

    try:
        result = await bulk_submit_events(repository, events)
    finally:
        await store.aclose()
        await HttpxRestClientPool.dispose()
        await AsyncDBPool.dispose()

    summary = result.summary
    print("\n" + "=" * 60)
    print(f"Total: {summary.total}  Updated: {summary.updated}  Created: {summary.created}  Failed: {summary.failed}")
    print("=" * 60)
    for outcome in result.outcomes:
        if not outcome.success:
            print(f"  ✗ {outcome.link}: {outcome.error}")

    return 1 if summary.failed else 0


if __name__ == "__main__":
    setup_logging()
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else STATIC_EVENTS_PATH
    sys.exit(asyncio.run(main(path)))
