"""
Event and registration models exchanged with clients and the document store.

Wire names are camelCase (``eventName``, ``startDate``) to match the
calendar front-end; Python code uses the snake_case attribute names.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from igaming_calendar.core.enums import EventStatus
from igaming_calendar.utils.dates import parse_date


class CamelModel(BaseModel):
    """Base model serialising with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Event(CamelModel):
    """
    A single calendar entry.

    Attributes:
        event_name: Display name of the conference or exhibition
        month: Display label for the month the event belongs to
        location: Venue or city
        link: Canonical identity key used to deduplicate submissions
        unprocessed_date: Raw date text as originally scraped or typed
        description: Free-text description
        website: Event website or ticketing URL
        start_date: First day, ``DD-MM-YYYY``
        end_date: Last day (inclusive), ``DD-MM-YYYY``
    """

    event_name: str = ""
    month: str = ""
    location: str = ""
    link: str = ""
    unprocessed_date: str = ""
    description: str = ""
    website: str = ""
    start_date: str = ""
    end_date: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class EventSubmission(Event):
    """Public single-event submission.

    ``eventName`` and ``link`` are required. When both dates are given they
    must parse and the start must not fall after the end.
    """

    event_name: str = Field(..., min_length=1)
    link: str = Field(..., min_length=1)

    @field_validator("event_name", "link")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @model_validator(mode="after")
    def _check_date_order(self) -> "EventSubmission":
        for field_name in ("start_date", "end_date"):
            raw = getattr(self, field_name)
            if raw and parse_date(raw) is None:
                raise ValueError(f"{to_camel(field_name)} must be a DD-MM-YYYY date")

        start = parse_date(self.start_date)
        end = parse_date(self.end_date)
        if start and end and start > end:
            raise ValueError("startDate must not be after endDate")
        return self


class StoredEvent(BaseModel):
    """An event as read back from the store, with its id and status."""

    id: str
    event: Event
    status: EventStatus | None = None


class Registration(BaseModel):
    """A visitor's calendar-invite request, recorded once and never read back."""

    name: str
    email: str
    industry: str
