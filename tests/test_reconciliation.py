"""Tests for create-or-update by link, single and bulk."""

import pytest

from igaming_calendar.core.enums import EventStatus
from igaming_calendar.core.exceptions.domain import DocumentStoreError
from igaming_calendar.repository.event_repository import EventRepository, truncate_text
from igaming_calendar.services.reconciliation import bulk_submit_events, submit_event

from conftest import FakeDocumentStore, make_event, seed_event

pytestmark = pytest.mark.anyio


def test_truncate_text() -> None:
    assert truncate_text("abc", 2000) == "abc"
    assert truncate_text("a" * 2000) == "a" * 2000

    cut = truncate_text("a" * 2500)
    assert len(cut) == 2000
    assert cut == "a" * 1997 + "..."


async def test_submit_creates_then_updates_same_record(
    store: FakeDocumentStore, event_repository: EventRepository
) -> None:
    created = await submit_event(event_repository, make_event())
    updated = await submit_event(event_repository, make_event(location="Olympia London"))

    assert created.action == "created"
    assert updated.action == "updated"
    assert updated.event_id == created.event_id

    (document,) = store.all(event_repository.collection)
    assert document.get("location") == "Olympia London"
    assert document.get("status") == EventStatus.UNDER_REVIEW.value
    assert document.get("Name") == document.get("eventName") == "ICE London"


async def test_submit_public_path_resets_status_to_under_review(
    store: FakeDocumentStore, event_repository: EventRepository
) -> None:
    existing = seed_event(store, make_event(), EventStatus.REVIEWED)

    result = await submit_event(event_repository, make_event())

    assert result.event_id == existing.id
    assert store.all(event_repository.collection)[0].get("status") == "under-review"


async def test_submit_lookup_failure_falls_back_to_create(
    store: FakeDocumentStore, event_repository: EventRepository
) -> None:
    store.fail_on.add("query")

    result = await submit_event(event_repository, make_event())

    assert result.action == "created"
    assert len(store.all(event_repository.collection)) == 1


async def test_submit_write_failure_propagates(
    store: FakeDocumentStore, event_repository: EventRepository
) -> None:
    store.fail_on.add("create")

    with pytest.raises(DocumentStoreError):
        await submit_event(event_repository, make_event())


async def test_submit_truncates_every_text_field(
    store: FakeDocumentStore, event_repository: EventRepository
) -> None:
    await submit_event(event_repository, make_event(description="x" * 5000, location="y" * 2001))

    (document,) = store.all(event_repository.collection)
    assert document.get("description") == "x" * 1997 + "..."
    assert document.get("location") == "y" * 1997 + "..."
    assert document.get("website") == "https://example.com"


async def test_bulk_partitions_by_link(store: FakeDocumentStore, event_repository: EventRepository) -> None:
    existing = seed_event(store, make_event(link="https://a"), EventStatus.UNDER_REVIEW)
    seed_event(store, make_event(link=""), EventStatus.REVIEWED)

    result = await bulk_submit_events(
        event_repository,
        [make_event(link="https://a", location="Updated"), make_event(link="https://b"), make_event(link="")],
    )

    summary = result.summary
    assert (summary.total, summary.updated, summary.created, summary.failed) == (3, 1, 2, 0)
    assert [o.action for o in result.outcomes] == ["updated", "created", "created"]
    assert result.outcomes[0].event_id == existing.id

    documents = store.all(event_repository.collection)
    assert len(documents) == 4
    assert all(doc.get("status") == "reviewed" for doc in documents)
    assert documents[0].get("location") == "Updated"


async def test_bulk_reads_collection_once_across_pages(event_repository: EventRepository) -> None:
    store = FakeDocumentStore(page_size=2)
    repository = EventRepository(store, event_repository.collection)
    for i in range(5):
        seed_event(store, make_event(link=f"https://{i}"))

    result = await bulk_submit_events(repository, [make_event(link="https://4"), make_event(link="https://9")])

    assert store.queries == 3
    assert [o.action for o in result.outcomes] == ["updated", "created"]


async def test_bulk_item_failure_does_not_block_others(
    store: FakeDocumentStore, event_repository: EventRepository
) -> None:
    seed_event(store, make_event(link="https://a"))
    store.fail_links.add("https://bad")

    result = await bulk_submit_events(
        event_repository,
        [make_event(link="https://a"), make_event(link="https://bad"), make_event(link="https://c")],
    )

    assert [o.success for o in result.outcomes] == [True, False, True]
    assert result.outcomes[1].error == "create rejected https://bad"
    assert result.outcomes[1].event_id is None
    assert result.summary.failed == 1
    assert result.summary.created == 2
    assert len(store.all(event_repository.collection)) == 2


async def test_bulk_duplicate_links_in_batch_are_processed_independently(
    store: FakeDocumentStore, event_repository: EventRepository
) -> None:
    result = await bulk_submit_events(event_repository, [make_event(link="https://x"), make_event(link="https://x")])

    assert [o.action for o in result.outcomes] == ["created", "created"]
    assert len(store.all(event_repository.collection)) == 2


async def test_bulk_fetch_failure_raises(store: FakeDocumentStore, event_repository: EventRepository) -> None:
    store.fail_on.add("query")

    with pytest.raises(DocumentStoreError):
        await bulk_submit_events(event_repository, [make_event()])


async def test_submit_overlong_link_matches_its_stored_copy(
    store: FakeDocumentStore, event_repository: EventRepository
) -> None:
    link = "https://example.com/" + "a" * 2100

    first = await submit_event(event_repository, make_event(link=link))
    second = await submit_event(event_repository, make_event(link=link, location="Olympia"))

    assert (first.action, second.action) == ("created", "updated")
    assert second.event_id == first.event_id
    (document,) = store.all(event_repository.collection)
    assert document.get("link") == truncate_text(link)


async def test_bulk_overlong_link_updates_stored_copy(
    store: FakeDocumentStore, event_repository: EventRepository
) -> None:
    link = "https://example.com/" + "b" * 2100
    existing = seed_event(store, make_event(link=link))

    result = await bulk_submit_events(event_repository, [make_event(link=link, location="Updated")])

    assert [(o.action, o.event_id) for o in result.outcomes] == [("updated", existing.id)]
    assert len(store.all(event_repository.collection)) == 1
