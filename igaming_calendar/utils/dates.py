"""Date helpers for the ``DD-MM-YYYY`` strings stored on events.

Event dates travel as text (``"01-03-2025"``), never ISO. These helpers parse
that text into ``datetime.date`` values and format dates the way the calendar
and the card grid display them.

All functions are pure. ``parse_date`` never raises: malformed input returns
``None`` and every caller is expected to guard for it.
"""

import calendar
import re
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Protocol, TypeVar

__all__ = [
    "days_in_month",
    "first_weekday_of_month",
    "format_date",
    "format_date_range",
    "format_long_date",
    "get_events_for_date",
    "get_month_year",
    "parse_date",
    "shift_month",
    "sort_events_by_date",
]

_DATE_PATTERN = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")


class Dated(Protocol):
    start_date: str
    end_date: str


DatedT = TypeVar("DatedT", bound=Dated)


def parse_date(value: str | None) -> date | None:
    """Parse ``DD-MM-YYYY`` into a date.

    Returns:
        The calendar date, or None when the text is not a valid date
        (wrong shape, non-numeric parts, day or month out of range).
    """
    if not value:
        return None
    match = _DATE_PATTERN.match(value.strip())
    if match is None:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def format_date(value: date) -> str:
    """Short display form, e.g. ``Mon, Mar 3, 2025``."""
    return f"{value:%a}, {value:%b} {value.day}, {value.year}"


def format_long_date(value: date) -> str:
    """Long display form, e.g. ``Monday, March 3, 2025``."""
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def format_date_range(start: str, end: str) -> str:
    """Format an event's date span for display.

    A span that starts and ends on the same calendar day renders as a single
    date. Otherwise the start is abbreviated and the end carries the year:
    ``Mar 1 - Mar 3, 2025``. Unparseable input is returned as raw text.
    """
    start_date = parse_date(start)
    end_date = parse_date(end)

    if start_date is None or end_date is None:
        return start if start == end or not end else f"{start} - {end}"

    if start_date == end_date:
        return format_date(start_date)

    return f"{start_date:%b} {start_date.day} - {end_date:%b} {end_date.day}, {end_date.year}"


def get_month_year(value: date) -> str:
    """Month header label, e.g. ``March 2025``."""
    return f"{value:%B} {value.year}"


def days_in_month(year: int, month: int) -> int:
    """Number of days in ``month`` (1-12) of ``year``."""
    return calendar.monthrange(year, month)[1]


def first_weekday_of_month(year: int, month: int) -> int:
    """Weekday of the 1st of the month, Monday = 0 ... Sunday = 6."""
    return date(year, month, 1).weekday()


def shift_month(value: date, delta: int) -> date:
    """First day of the month ``delta`` months away from ``value``."""
    index = value.year * 12 + (value.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


def sort_events_by_date(events: Iterable[DatedT]) -> list[DatedT]:
    """Return a new list ordered by start date, ascending.

    The sort is stable. Events whose start date does not parse keep their
    relative order and go after every dated event.
    """

    def _key(event: DatedT) -> tuple[bool, date]:
        parsed = parse_date(event.start_date)
        return (parsed is None, parsed or date.min)

    return sorted(events, key=_key)


def get_events_for_date(events: Sequence[DatedT], day: date) -> list[DatedT]:
    """Events whose inclusive ``[start, end]`` range contains ``day``."""
    matches = []
    for event in events:
        start = parse_date(event.start_date)
        end = parse_date(event.end_date)
        if start is None or end is None:
            continue
        if start <= day <= end:
            matches.append(event)
    return matches
