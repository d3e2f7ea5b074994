"""Card grid presentation: sorted, paginated event cards with short descriptions."""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from igaming_calendar.models.event import Event
from igaming_calendar.utils.dates import format_date_range, sort_events_by_date

__all__ = ["CardItem", "CardPage", "EventStats", "event_stats", "paginate_events", "truncate_description"]


@dataclass(frozen=True)
class CardItem:
    event: Event
    date_range: str
    short_description: str


@dataclass(frozen=True)
class CardPage:
    items: list[CardItem]
    page: int
    page_size: int
    total_items: int
    total_pages: int


@dataclass(frozen=True)
class EventStats:
    total_events: int
    locations: int


def truncate_description(text: str, max_length: int = 200) -> str:
    """First ``max_length`` characters followed by ``...`` when longer."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def paginate_events(
    events: Sequence[Event], page: int = 1, page_size: int = 9, description_length: int = 200
) -> CardPage:
    """
    Sort events by start date and return one page of cards.

    Pages are 1-based. A page past the end clamps to the last page and a page
    below 1 to the first; an empty list yields one empty page.
    """
    if page_size < 1:
        raise ValueError("page_size must be at least 1")

    ordered = sort_events_by_date(events)
    total_pages = max(1, math.ceil(len(ordered) / page_size))
    page = min(max(page, 1), total_pages)

    offset = (page - 1) * page_size
    items = [
        CardItem(
            event=event,
            date_range=format_date_range(event.start_date, event.end_date),
            short_description=truncate_description(event.description, description_length),
        )
        for event in ordered[offset : offset + page_size]
    ]
    return CardPage(
        items=items,
        page=page,
        page_size=page_size,
        total_items=len(ordered),
        total_pages=total_pages,
    )


def event_stats(events: Sequence[Event]) -> EventStats:
    return EventStats(total_events=len(events), locations=len({event.location for event in events}))
