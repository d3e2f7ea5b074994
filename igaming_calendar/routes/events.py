"""Event submission and the public reviewed-events feed."""

from typing import Literal

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from igaming_calendar.core.dependencies import get_event_repository
from igaming_calendar.core.exceptions.domain import DocumentStoreError
from igaming_calendar.core.exceptions.http_exceptions import UpstreamServiceError
from igaming_calendar.models.event import CamelModel, Event, EventSubmission
from igaming_calendar.repository.event_repository import EventRepository
from igaming_calendar.services.reconciliation import bulk_submit_events, submit_event

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["events"],
)


# Pydantic models for request/response
class SubmitEventResponse(CamelModel):
    success: bool = True
    message: str
    action: Literal["created", "updated"]
    event_id: str


class BulkSubmitRequest(BaseModel):
    """Schema for a moderation/import batch."""

    events: list[Event]


class BulkSummaryResponse(BaseModel):
    total: int
    updated: int
    created: int
    failed: int


class BulkItemResponse(CamelModel):
    link: str
    action: Literal["created", "updated"]
    success: bool
    event_id: str | None = None
    error: str | None = None


class BulkSubmitResponse(BaseModel):
    success: bool = True
    message: str
    summary: BulkSummaryResponse
    results: list[BulkItemResponse]


class ReviewedEventsResponse(BaseModel):
    events: list[Event]


def _upstream_error(message: str, exc: DocumentStoreError) -> UpstreamServiceError:
    detail = {"details": exc.message}
    if exc.status_code is not None:
        detail["upstream_status"] = exc.status_code
    return UpstreamServiceError(message, detail=detail)


@router.post("/submit-event", response_model=SubmitEventResponse)
async def submit_event_route(
    event: EventSubmission, repository: EventRepository = Depends(get_event_repository)
) -> SubmitEventResponse:
    """Create or update a publicly submitted event; it is stored under review."""
    try:
        result = await submit_event(repository, event)
    except DocumentStoreError as exc:
        logger.error("event_submission_failed", link=event.link, error=exc.message)
        raise _upstream_error("Failed to process event", exc) from exc

    return SubmitEventResponse(
        message=f"Event {result.action} successfully",
        action=result.action,
        event_id=result.event_id,
    )


@router.post("/bulk-submit-event", response_model=BulkSubmitResponse)
async def bulk_submit_event_route(
    payload: BulkSubmitRequest, repository: EventRepository = Depends(get_event_repository)
) -> BulkSubmitResponse:
    """Upsert a batch of events as reviewed; per-item failures are reported, not raised."""
    try:
        result = await bulk_submit_events(repository, payload.events)
    except DocumentStoreError as exc:
        logger.error("bulk_submission_failed", events=len(payload.events), error=exc.message)
        raise _upstream_error("Failed to process events", exc) from exc

    summary = result.summary
    return BulkSubmitResponse(
        message="Events processed successfully",
        summary=BulkSummaryResponse(
            total=summary.total, updated=summary.updated, created=summary.created, failed=summary.failed
        ),
        results=[
            BulkItemResponse(
                link=outcome.link,
                action=outcome.action,
                success=outcome.success,
                event_id=outcome.event_id,
                error=outcome.error,
            )
            for outcome in result.outcomes
        ],
    )


@router.get("/reviewed-events", response_model=ReviewedEventsResponse)
async def reviewed_events_route(
    repository: EventRepository = Depends(get_event_repository),
) -> ReviewedEventsResponse:
    """Every reviewed event, without ids or moderation status."""
    try:
        events = await repository.list_reviewed()
    except DocumentStoreError as exc:
        logger.error("reviewed_events_fetch_failed", error=exc.message)
        raise _upstream_error("Failed to fetch reviewed events", exc) from exc

    return ReviewedEventsResponse(events=events)
