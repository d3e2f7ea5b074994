"""
Calendar invites: an iCalendar attachment plus an HTML email, sent while the
visitor's registration is recorded.

The invite is an all-day style event in UTC: DTSTART is the start date at
midnight and DTEND is midnight of the day after the end date, so a one-day
event spans exactly 24 hours. A display alarm fires 24 hours before start.
"""

import asyncio
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from pathlib import Path

import structlog
from icalendar import Alarm, Calendar, vCalAddress, vText
from icalendar import Event as ICalEvent
from jinja2 import Environment, FileSystemLoader, select_autoescape

from igaming_calendar.core.exceptions.domain import MailDeliveryError
from igaming_calendar.main_config import InviteConfig
from igaming_calendar.models.event import Registration
from igaming_calendar.models.invite import InviteRequest
from igaming_calendar.repository.registration_repository import RegistrationRepository
from igaming_calendar.utils.dates import format_long_date, parse_date

from .mailer import MailAttachment, Mailer

__all__ = [
    "InviteResult",
    "build_invite_calendar",
    "invite_date_range",
    "render_invite_email",
    "send_calendar_invite",
]

logger = structlog.get_logger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
REMINDER_BEFORE = timedelta(hours=24)


@dataclass(frozen=True)
class InviteResult:
    registration_id: str | None


@lru_cache
def _template_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
    )


def _utc_midnight(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _required_date(value: str) -> date:
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Invalid DD-MM-YYYY date: {value!r}")
    return parsed


def invite_date_range(start_date: str, end_date: str) -> str:
    """Long-form display range; a single date when start and end are the same day."""
    start = _required_date(start_date)
    end = _required_date(end_date)
    if start == end:
        return format_long_date(start)
    return f"{format_long_date(start)} - {format_long_date(end)}"


def build_invite_calendar(
    invite: InviteRequest,
    organizer_email: str,
    now: datetime | None = None,
    config: InviteConfig | None = None,
) -> bytes:
    """
    Serialize a one-event VCALENDAR for ``invite``.

    Args:
        invite: Visitor and event details
        organizer_email: Address the invite is sent from
        now: Submission time; drives DTSTAMP and the UID
        config: PRODID, UID domain and organizer name

    Returns:
        The calendar as iCalendar bytes
    """
    config = config or InviteConfig()
    now = now or datetime.now(timezone.utc)
    start = _required_date(invite.start_date)
    end = _required_date(invite.end_date)

    cal = Calendar()
    cal.add("prodid", config.prodid)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "PUBLISH")

    organizer = vCalAddress(f"mailto:{organizer_email}")
    organizer.params["cn"] = vText(config.organizer_name)

    attendee = vCalAddress(f"mailto:{invite.user_email}")
    attendee.params["cutype"] = vText("INDIVIDUAL")
    attendee.params["role"] = vText("REQ-PARTICIPANT")
    attendee.params["partstat"] = vText("NEEDS-ACTION")
    attendee.params["rsvp"] = vText("TRUE")
    attendee.params["cn"] = vText(invite.user_name)

    description = invite.event_description
    if invite.event_website:
        description += f"\n\nWebsite: {invite.event_website}"

    event = ICalEvent()
    event.add("dtstart", _utc_midnight(start))
    event.add("dtend", _utc_midnight(end + timedelta(days=1)))
    event.add("dtstamp", now)
    event.add("organizer", organizer)
    event.add("uid", f"{int(now.timestamp() * 1000)}@{config.uid_domain}")
    event.add("attendee", attendee)
    event.add("summary", invite.event_name)
    event.add("description", description)
    event.add("location", invite.event_location)
    event.add("status", "CONFIRMED")
    event.add("sequence", 0)

    alarm = Alarm()
    alarm.add("action", "DISPLAY")
    alarm.add("description", f"Reminder: {invite.event_name}")
    alarm.add("trigger", -REMINDER_BEFORE)
    event.add_component(alarm)

    cal.add_component(event)
    return cal.to_ical()


def render_invite_email(invite: InviteRequest, organizer_name: str = "PayRam") -> str:
    template = _template_env().get_template("invite_email.html")
    return template.render(
        event_name=invite.event_name,
        first_name=invite.first_name,
        date_range=invite_date_range(invite.start_date, invite.end_date),
        event_location=invite.event_location,
        event_website=invite.event_website,
        organizer_name=organizer_name,
    )


async def _record_registration(invite: InviteRequest, registrations: RegistrationRepository | None) -> str | None:
    if registrations is None:
        return None
    return await registrations.create(
        Registration(name=invite.user_name, email=invite.user_email, industry=invite.user_industry)
    )


async def send_calendar_invite(
    invite: InviteRequest,
    mailer: Mailer,
    registrations: RegistrationRepository | None,
    config: InviteConfig | None = None,
    now: datetime | None = None,
) -> InviteResult:
    """
    Email the invite and record the registration concurrently.

    Raises:
        MailDeliveryError: The email could not be sent. A failed registration
            write only leaves ``registration_id`` as None.
    """
    config = config or InviteConfig()
    ics = build_invite_calendar(invite, mailer.sender_address, now=now, config=config)
    html = render_invite_email(invite, organizer_name=config.organizer_name)

    email_result, registration_result = await asyncio.gather(
        mailer.send(
            to=invite.user_email,
            subject=f"Calendar Invite: {invite.event_name}",
            html_body=html,
            attachments=[MailAttachment("event.ics", ics, "text/calendar", {"method": "PUBLISH"})],
        ),
        _record_registration(invite, registrations),
        return_exceptions=True,
    )

    if isinstance(email_result, BaseException):
        if isinstance(email_result, MailDeliveryError):
            raise email_result
        raise MailDeliveryError(f"Failed to send calendar invite email: {email_result}") from email_result

    registration_id = None
    if isinstance(registration_result, BaseException):
        logger.warning("registration_write_failed", event_name=invite.event_name, error=str(registration_result))
    else:
        registration_id = registration_result

    logger.info(
        "calendar_invite_sent",
        event_name=invite.event_name,
        user_industry=invite.user_industry,
        registration_recorded=registration_id is not None,
    )
    return InviteResult(registration_id=registration_id)
