"""
Create-or-update of events keyed by ``link``.

Single submissions come from the public form and are stamped
``under-review``; bulk submissions are the moderation/import path and are
stamped ``reviewed``. Links are compared by exact string equality on their
stored form, so over-long links match after truncation.

Bulk writes are independent: every create and update is dispatched at once
and settled individually, so one failing item never blocks or undoes another.
"""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

import structlog

from igaming_calendar.core.enums import EventStatus
from igaming_calendar.core.exceptions.domain import DocumentStoreError
from igaming_calendar.models.event import Event, StoredEvent
from igaming_calendar.repository.event_repository import EventRepository

__all__ = [
    "BulkSubmissionResult",
    "BulkSummary",
    "ItemOutcome",
    "SubmissionResult",
    "bulk_submit_events",
    "submit_event",
]

logger = structlog.get_logger(__name__)

Action = Literal["created", "updated"]


@dataclass(frozen=True)
class SubmissionResult:
    action: Action
    event_id: str


@dataclass(frozen=True)
class ItemOutcome:
    link: str
    action: Action
    success: bool
    event_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class BulkSummary:
    total: int
    updated: int
    created: int
    failed: int


@dataclass
class BulkSubmissionResult:
    outcomes: list[ItemOutcome] = field(default_factory=list)

    @property
    def summary(self) -> BulkSummary:
        return BulkSummary(
            total=len(self.outcomes),
            updated=sum(1 for outcome in self.outcomes if outcome.action == "updated"),
            created=sum(1 for outcome in self.outcomes if outcome.action == "created"),
            failed=sum(1 for outcome in self.outcomes if not outcome.success),
        )


async def submit_event(repository: EventRepository, event: Event) -> SubmissionResult:
    """Upsert one publicly submitted event.

    A failing lookup is treated as "not found" and the event is created.

    Raises:
        DocumentStoreError: The create or update itself failed
    """
    try:
        existing = await repository.find_by_link(event.link)
    except DocumentStoreError as exc:
        logger.warning("event_lookup_failed", link=event.link, error=str(exc))
        existing = None

    if existing is not None:
        stored = await repository.update(existing.id, event, EventStatus.UNDER_REVIEW)
        return SubmissionResult(action="updated", event_id=stored.id)

    stored = await repository.create(event, EventStatus.UNDER_REVIEW)
    return SubmissionResult(action="created", event_id=stored.id)


def _link_index(existing: Sequence[StoredEvent]) -> dict[str, str]:
    # Later records win when the store already holds duplicate links
    return {item.event.link: item.id for item in existing if item.event.link}


async def bulk_submit_events(repository: EventRepository, events: Sequence[Event]) -> BulkSubmissionResult:
    """
    Upsert a batch of events, all stamped ``reviewed``.

    The existing collection is read once up front; each item is then an update
    (its link is already stored) or a create. Duplicate links inside one batch
    are not merged: each item is processed on its own.

    Raises:
        DocumentStoreError: Reading the existing collection failed
    """
    index = _link_index(await repository.list_all())

    plan: list[tuple[Event, str | None]] = [
        (event, index.get(repository.link_key(event.link))) for event in events
    ]
    operations = [
        repository.update(event_id, event, EventStatus.REVIEWED)
        if event_id is not None
        else repository.create(event, EventStatus.REVIEWED)
        for event, event_id in plan
    ]
    settled = await asyncio.gather(*operations, return_exceptions=True)

    outcomes = []
    for (event, event_id), settled_item in zip(plan, settled):
        action: Action = "updated" if event_id is not None else "created"
        if isinstance(settled_item, BaseException):
            if not isinstance(settled_item, Exception):
                raise settled_item
            logger.warning("bulk_item_failed", link=event.link, action=action, error=str(settled_item))
            outcomes.append(
                ItemOutcome(link=event.link, action=action, success=False, event_id=event_id, error=str(settled_item))
            )
        else:
            outcomes.append(ItemOutcome(link=event.link, action=action, success=True, event_id=settled_item.id))

    result = BulkSubmissionResult(outcomes=outcomes)
    summary = result.summary
    logger.info(
        "bulk_submission_processed",
        total=summary.total,
        updated=summary.updated,
        created=summary.created,
        failed=summary.failed,
    )
    return result
