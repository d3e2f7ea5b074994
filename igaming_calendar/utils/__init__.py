"""Pure helper functions shared by services and routes."""

from .dates import (
    days_in_month,
    first_weekday_of_month,
    format_date,
    format_date_range,
    format_long_date,
    get_events_for_date,
    get_month_year,
    parse_date,
    shift_month,
    sort_events_by_date,
)

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
