"""Month calendar and card grid views over the public event feed."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from igaming_calendar.core.dependencies import get_public_event_repository
from igaming_calendar.core.exceptions.http_exceptions import BadRequestError
from igaming_calendar.main_config import get_calendar_config
from igaming_calendar.models.event import CamelModel, Event
from igaming_calendar.repository.event_repository import EventRepository
from igaming_calendar.services.calendar_layout import (
    CalendarWeek,
    LayoutMetrics,
    WeekEventSegment,
    layout_month,
)
from igaming_calendar.services.card_view import event_stats, paginate_events
from igaming_calendar.services.event_feed import FeedSource, load_public_events
from igaming_calendar.utils.dates import shift_month

router = APIRouter(
    prefix="/api",
    tags=["calendar"],
)

DATE_FORMAT = "%d-%m-%Y"
# The grid and prev/next links reach into the neighbouring months
MIN_YEAR = date.min.year + 1
MAX_YEAR = date.max.year - 1


class MonthRef(BaseModel):
    year: int
    month: int


class DayCellResponse(CamelModel):
    date: str
    in_month: bool
    is_today: bool


class SegmentResponse(CamelModel):
    event: Event
    start_date: str
    end_date: str
    start_col: int
    end_col: int
    total_duration: int
    is_start_of_event: bool
    is_end_of_event: bool
    row: int


class WeekResponse(CamelModel):
    index: int
    start_date: str
    days: list[DayCellResponse]
    segments: list[SegmentResponse]
    hidden_count: int
    row_count: int
    expanded: bool
    height: int


class CalendarResponse(CamelModel):
    year: int
    month: int
    label: str
    previous: MonthRef
    next: MonthRef
    weeks: list[WeekResponse]
    source: FeedSource


class CardResponse(CamelModel):
    event: Event
    date_range: str
    short_description: str


class StatsResponse(CamelModel):
    total_events: int
    locations: int


class CardsResponse(CamelModel):
    items: list[CardResponse]
    page: int
    page_size: int
    total_items: int
    total_pages: int
    stats: StatsResponse
    source: FeedSource


def _segment_response(segment: WeekEventSegment) -> SegmentResponse:
    return SegmentResponse(
        event=segment.event,
        start_date=segment.start.strftime(DATE_FORMAT),
        end_date=segment.end.strftime(DATE_FORMAT),
        start_col=segment.start_col,
        end_col=segment.end_col,
        total_duration=segment.total_duration,
        is_start_of_event=segment.is_start_of_event,
        is_end_of_event=segment.is_end_of_event,
        row=segment.row,
    )


def _week_response(week: CalendarWeek) -> WeekResponse:
    visible, hidden = week.visible_segments(week.expanded)
    return WeekResponse(
        index=week.index,
        start_date=week.start.strftime(DATE_FORMAT),
        days=[
            DayCellResponse(date=cell.date.strftime(DATE_FORMAT), in_month=cell.in_month, is_today=cell.is_today)
            for cell in week.days
        ],
        segments=[_segment_response(segment) for segment in visible],
        hidden_count=hidden,
        row_count=week.row_count,
        expanded=week.expanded,
        height=week.height,
    )


@router.get("/calendar", response_model=CalendarResponse)
async def calendar_route(
    year: int | None = Query(None, ge=MIN_YEAR, le=MAX_YEAR),
    month: int | None = Query(None, ge=1, le=12),
    expanded: list[int] = Query(default=[], description="Week indexes (0-5) to show in full"),
    repository: EventRepository | None = Depends(get_public_event_repository),
) -> CalendarResponse:
    """Lay out one month of public events on a 6 x 7 grid."""
    today = date.today()
    if (year is None) != (month is None):
        raise BadRequestError("year and month must be given together", detail={"year": year, "month": month})
    current = date(year, month, 1) if year is not None and month is not None else today.replace(day=1)

    metrics = LayoutMetrics.from_config(get_calendar_config())
    feed = await load_public_events(repository)
    layout = layout_month(feed.events, current, expanded=set(expanded), today=today, metrics=metrics)

    previous, following = shift_month(current, -1), shift_month(current, 1)
    return CalendarResponse(
        year=layout.year,
        month=layout.month,
        label=layout.label,
        previous=MonthRef(year=previous.year, month=previous.month),
        next=MonthRef(year=following.year, month=following.month),
        weeks=[_week_response(week) for week in layout.weeks],
        source=feed.source,
    )


@router.get("/events/cards", response_model=CardsResponse)
async def cards_route(
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1, le=100),
    repository: EventRepository | None = Depends(get_public_event_repository),
) -> CardsResponse:
    """One page of event cards sorted by start date, plus footer stats."""
    config = get_calendar_config()
    feed = await load_public_events(repository)
    card_page = paginate_events(
        feed.events,
        page=page,
        page_size=page_size or config.card_page_size,
        description_length=config.card_description_length,
    )
    stats = event_stats(feed.events)

    return CardsResponse(
        items=[
            CardResponse(event=item.event, date_range=item.date_range, short_description=item.short_description)
            for item in card_page.items
        ],
        page=card_page.page,
        page_size=card_page.page_size,
        total_items=card_page.total_items,
        total_pages=card_page.total_pages,
        stats=StatsResponse(total_events=stats.total_events, locations=stats.locations),
        source=feed.source,
    )
