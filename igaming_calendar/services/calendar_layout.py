"""
Month calendar layout.

Lays events out on a 6 x 7 Monday-first grid. Within each displayed week,
every event overlapping the week becomes one segment clamped to the week, and
segments are packed first-fit into rows so that no two segments sharing a row
overlap in columns:

    week = Mon 24-02 .. Sun 02-03
    ICE London 01-03..03-03  -> cols 6-7, row 0, open-ended on the right
    SBC Summit 26-02         -> col 3,    row 0

Rows past ``visible_rows`` are hidden behind a "+N more" marker unless the
week was expanded by the viewer.

Usage:
    month = layout_month(events, date(2025, 3, 1), expanded={1})
    for week in month.weeks:
        segments, hidden = week.visible_segments(week.expanded)
"""

from collections.abc import Collection, Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta

from igaming_calendar.main_config import CalendarConfig
from igaming_calendar.models.event import Event
from igaming_calendar.utils.dates import get_month_year, parse_date

__all__ = [
    "CalendarDayCell",
    "CalendarMonth",
    "CalendarWeek",
    "LayoutMetrics",
    "NormalizedEvent",
    "WeekEventSegment",
    "build_month_grid",
    "clip_to_week",
    "layout_month",
    "normalize_event",
    "pack_rows",
    "sort_segments",
    "week_height",
]

WEEKS_PER_GRID = 6
DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class LayoutMetrics:
    """Row disclosure and pixel heights used to size each week."""

    visible_rows: int = 2
    base_height: int = 120
    header_height: int = 36
    row_height: int = 32
    more_height: int = 20

    @classmethod
    def from_config(cls, config: CalendarConfig) -> "LayoutMetrics":
        return cls(
            visible_rows=config.visible_rows,
            base_height=config.base_height,
            header_height=config.header_height,
            row_height=config.row_height,
            more_height=config.more_height,
        )


@dataclass(frozen=True)
class CalendarDayCell:
    date: date
    in_month: bool
    is_today: bool = False


@dataclass(frozen=True)
class NormalizedEvent:
    event: Event
    start: date
    end: date
    total_duration: int


@dataclass
class WeekEventSegment:
    """The part of one event that falls inside one displayed week."""

    event: Event
    start: date
    end: date
    start_col: int
    end_col: int
    total_duration: int
    is_start_of_event: bool
    is_end_of_event: bool
    row: int = -1


@dataclass
class CalendarWeek:
    index: int
    start: date
    days: list[CalendarDayCell]
    segments: list[WeekEventSegment] = field(default_factory=list)
    expanded: bool = False
    height: int = 0
    visible_rows: int = LayoutMetrics.visible_rows

    @property
    def end(self) -> date:
        return self.start + timedelta(days=DAYS_PER_WEEK - 1)

    @property
    def row_count(self) -> int:
        return max((segment.row for segment in self.segments), default=-1) + 1

    def visible_segments(
        self, expanded: bool = False, visible_rows: int | None = None
    ) -> tuple[list[WeekEventSegment], int]:
        """Segments to draw and the number hidden behind "+N more".

        Args:
            expanded: Show every row regardless of ``visible_rows``
            visible_rows: Rows shown while collapsed, defaults to the week's
                own ``visible_rows`` (set from the layout metrics)

        Returns:
            (visible segments, hidden segment count)
        """
        if expanded:
            return list(self.segments), 0
        limit = self.visible_rows if visible_rows is None else visible_rows
        visible = [segment for segment in self.segments if segment.row < limit]
        return visible, len(self.segments) - len(visible)


@dataclass
class CalendarMonth:
    year: int
    month: int
    weeks: list[CalendarWeek]

    @property
    def label(self) -> str:
        return get_month_year(date(self.year, self.month, 1))


def build_month_grid(current_date: date, today: date | None = None) -> list[list[CalendarDayCell]]:
    """Six Monday-first weeks covering the month of ``current_date``."""
    first = current_date.replace(day=1)
    grid_start = first - timedelta(days=first.weekday())

    weeks = []
    for week_index in range(WEEKS_PER_GRID):
        week = []
        for day_index in range(DAYS_PER_WEEK):
            day = grid_start + timedelta(days=week_index * DAYS_PER_WEEK + day_index)
            in_month = (day.year, day.month) == (first.year, first.month)
            week.append(
                CalendarDayCell(
                    date=day,
                    in_month=in_month,
                    is_today=in_month and day == today,
                )
            )
        weeks.append(week)
    return weeks


def normalize_event(event: Event) -> NormalizedEvent | None:
    """Parsed span of ``event``; None when either date does not parse."""
    start = parse_date(event.start_date)
    end = parse_date(event.end_date)
    if start is None or end is None:
        return None
    return NormalizedEvent(event=event, start=start, end=end, total_duration=max((end - start).days + 1, 1))


def _column(day: date, week_start: date) -> int:
    return min(max((day - week_start).days + 1, 1), DAYS_PER_WEEK)


def clip_to_week(item: NormalizedEvent, week_start: date) -> WeekEventSegment | None:
    """Clamp ``item`` to the week starting ``week_start``; None when it misses the week."""
    week_end = week_start + timedelta(days=DAYS_PER_WEEK - 1)
    start = max(item.start, week_start)
    end = min(item.end, week_end)
    if start > end:
        return None

    return WeekEventSegment(
        event=item.event,
        start=start,
        end=end,
        start_col=_column(start, week_start),
        end_col=_column(end, week_start),
        total_duration=item.total_duration,
        is_start_of_event=start == item.start,
        is_end_of_event=end == item.end,
    )


def sort_segments(segments: Iterable[WeekEventSegment]) -> list[WeekEventSegment]:
    # Longest first, then earliest start, then name
    return sorted(segments, key=lambda s: (-s.total_duration, s.start, s.event.event_name))


def pack_rows(segments: Iterable[WeekEventSegment]) -> list[list[WeekEventSegment]]:
    """Assign each segment, in order, to the first row it does not overlap.

    Sets ``segment.row`` and returns the rows top to bottom.
    """
    rows: list[list[WeekEventSegment]] = []
    for segment in segments:
        for row_index, row in enumerate(rows):
            if all(segment.end_col < placed.start_col or segment.start_col > placed.end_col for placed in row):
                segment.row = row_index
                row.append(segment)
                break
        else:
            segment.row = len(rows)
            rows.append([segment])
    return rows


def week_height(row_count: int, expanded: bool = False, metrics: LayoutMetrics | None = None) -> int:
    metrics = metrics or LayoutMetrics()
    if row_count == 0:
        return metrics.base_height

    shown = row_count if expanded else min(row_count, metrics.visible_rows)
    height = metrics.header_height + shown * metrics.row_height
    if shown < row_count:
        height += metrics.more_height
    return max(metrics.base_height, height)


def layout_month(
    events: Iterable[Event],
    current_date: date,
    expanded: Collection[int] = (),
    today: date | None = None,
    metrics: LayoutMetrics | None = None,
) -> CalendarMonth:
    """Lay ``events`` out on the month grid of ``current_date``.

    Args:
        events: Events to place; ones with unparseable dates are skipped
        current_date: Any day in the month to display
        expanded: Week indexes (0-5) whose hidden rows are shown
        today: Day to flag on the grid, defaults to the current date
        metrics: Row disclosure and height settings

    Returns:
        CalendarMonth with six packed weeks
    """
    metrics = metrics or LayoutMetrics()
    today = today or date.today()
    normalized = [item for item in (normalize_event(event) for event in events) if item is not None]

    weeks = []
    for index, days in enumerate(build_month_grid(current_date, today)):
        week_start = days[0].date
        clipped = (clip_to_week(item, week_start) for item in normalized)
        segments = sort_segments(segment for segment in clipped if segment is not None)
        rows = pack_rows(segments)

        is_expanded = index in expanded
        weeks.append(
            CalendarWeek(
                index=index,
                start=week_start,
                days=days,
                segments=segments,
                expanded=is_expanded,
                height=week_height(len(rows), is_expanded, metrics),
                visible_rows=metrics.visible_rows,
            )
        )

    return CalendarMonth(year=current_date.year, month=current_date.month, weeks=weeks)
