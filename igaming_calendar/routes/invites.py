"""Calendar invite endpoint."""

import structlog
from fastapi import APIRouter, Depends

from igaming_calendar.core.dependencies import get_mailer, get_registration_repository
from igaming_calendar.core.exceptions.domain import MailDeliveryError
from igaming_calendar.core.exceptions.http_exceptions import UpstreamServiceError
from igaming_calendar.main_config import get_invite_config
from igaming_calendar.models.event import CamelModel
from igaming_calendar.models.invite import InviteRequest
from igaming_calendar.repository.registration_repository import RegistrationRepository
from igaming_calendar.services.invites import send_calendar_invite
from igaming_calendar.services.mailer import Mailer

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["invites"],
)


class InviteResponse(CamelModel):
    success: bool = True
    message: str = "Calendar invite sent successfully"
    registration_id: str | None = None


@router.post("/send-calendar-invite", response_model=InviteResponse)
async def send_calendar_invite_route(
    invite: InviteRequest,
    mailer: Mailer = Depends(get_mailer),
    registrations: RegistrationRepository | None = Depends(get_registration_repository),
) -> InviteResponse:
    """Email an .ics invite for the event and record the visitor's registration."""
    try:
        result = await send_calendar_invite(invite, mailer, registrations, config=get_invite_config())
    except MailDeliveryError as exc:
        logger.error("calendar_invite_failed", event_name=invite.event_name, error=str(exc))
        raise UpstreamServiceError("Failed to send calendar invite", detail={"details": str(exc)}) from exc

    return InviteResponse(registration_id=result.registration_id)
