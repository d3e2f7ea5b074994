"""Calendar invite request payload."""

import re

from pydantic import Field, field_validator, model_validator

from igaming_calendar.utils.dates import parse_date

from .event import CamelModel

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class InviteRequest(CamelModel):
    """Visitor details plus the event they want an invite for.

    Everything except ``eventDescription`` and ``eventWebsite`` is required.
    """

    user_name: str = Field(..., min_length=1)
    user_email: str = Field(..., min_length=1)
    user_industry: str = Field(..., min_length=1)
    event_name: str = Field(..., min_length=1)
    event_description: str = ""
    event_location: str = Field(..., min_length=1)
    start_date: str = Field(..., min_length=1)
    end_date: str = Field(..., min_length=1)
    event_website: str = ""

    @field_validator("event_description", "event_website", mode="before")
    @classmethod
    def _optional_text(cls, value: str | None) -> str:
        return value or ""

    @field_validator("user_email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        value = value.strip()
        if not _EMAIL_PATTERN.match(value):
            raise ValueError("must be a valid email address")
        return value

    @model_validator(mode="after")
    def _valid_dates(self) -> "InviteRequest":
        start = parse_date(self.start_date)
        end = parse_date(self.end_date)
        if start is None or end is None:
            raise ValueError("startDate and endDate must be DD-MM-YYYY dates")
        if start > end:
            raise ValueError("startDate must not be after endDate")
        return self

    @property
    def first_name(self) -> str:
        return self.user_name.split(" ")[0]
