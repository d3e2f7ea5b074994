"""Tests for the event submission and reviewed-events endpoints."""

from fastapi import status
from fastapi.testclient import TestClient

from igaming_calendar.core.enums import EventStatus

from conftest import FakeDocumentStore, make_event, seed_event

EVENT_PAYLOAD = {
    "eventName": "ICE London",
    "month": "February",
    "location": "ExCeL London",
    "link": "https://example.com/ice-london",
    "unprocessedDate": "4-6 Feb 2025",
    "description": "Gaming technology exhibition",
    "website": "https://example.com",
    "startDate": "04-02-2025",
    "endDate": "06-02-2025",
}


# =============================================================================
# POST /api/submit-event
# =============================================================================


def test_submit_event_creates_then_updates(client: TestClient, store: FakeDocumentStore) -> None:
    first = client.post("/api/submit-event", json=EVENT_PAYLOAD)
    second = client.post("/api/submit-event", json={**EVENT_PAYLOAD, "location": "Olympia"})

    assert first.status_code == status.HTTP_200_OK
    assert first.json()["success"] is True
    assert first.json()["action"] == "created"
    assert first.json()["message"] == "Event created successfully"

    assert second.status_code == status.HTTP_200_OK
    assert second.json()["action"] == "updated"
    assert second.json()["message"] == "Event updated successfully"
    assert second.json()["eventId"] == first.json()["eventId"]

    documents = store.documents["events"]
    assert len(documents) == 1
    assert documents[0].get("location") == "Olympia"
    assert documents[0].get("unprocessedDate") == "4-6 Feb 2025"
    assert documents[0].get("status") == "under-review"


def test_submit_event_accepts_missing_optional_fields(client: TestClient) -> None:
    response = client.post("/api/submit-event", json={"eventName": "Meetup", "link": "https://meetup"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["action"] == "created"


def test_submit_event_requires_link(client: TestClient, store: FakeDocumentStore) -> None:
    payload = {k: v for k, v in EVENT_PAYLOAD.items() if k != "link"}

    response = client.post("/api/submit-event", json=payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["error_code"] == "ValidationError"
    assert data["detail"]["errors"][0]["loc"] == ["body", "link"]
    assert store.documents == {}


def test_submit_event_rejects_blank_name(client: TestClient) -> None:
    response = client.post("/api/submit-event", json={**EVENT_PAYLOAD, "eventName": "   "})

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_submit_event_rejects_malformed_date(client: TestClient) -> None:
    response = client.post("/api/submit-event", json={**EVENT_PAYLOAD, "startDate": "2025-02-04"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "startDate" in response.json()["detail"]["errors"][0]["msg"]


def test_submit_event_rejects_start_after_end(client: TestClient) -> None:
    response = client.post("/api/submit-event", json={**EVENT_PAYLOAD, "startDate": "07-02-2025"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "after endDate" in response.json()["detail"]["errors"][0]["msg"]


def test_submit_event_store_failure(client: TestClient, store: FakeDocumentStore) -> None:
    store.fail_on.add("create")

    response = client.post("/api/submit-event", json=EVENT_PAYLOAD)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    data = response.json()
    assert data["success"] is False
    assert data["message"] == "Failed to process event"
    assert data["detail"] == {"details": "create failed", "upstream_status": 503}


def test_submit_event_without_store_is_configuration_error(bare_client: TestClient) -> None:
    response = bare_client.post("/api/submit-event", json=EVENT_PAYLOAD)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["error_code"] == "ConfigurationError"
    assert response.json()["message"] == "NOTION_SECRET is not configured"


# =============================================================================
# POST /api/bulk-submit-event
# =============================================================================


def test_bulk_submit_reports_summary_and_results(client: TestClient, store: FakeDocumentStore) -> None:
    seed_event(store, make_event(link="https://a"), EventStatus.UNDER_REVIEW)
    store.fail_links.add("https://bad")

    response = client.post(
        "/api/bulk-submit-event",
        json={
            "events": [
                {**EVENT_PAYLOAD, "link": "https://a"},
                {**EVENT_PAYLOAD, "link": "https://b"},
                {**EVENT_PAYLOAD, "link": "https://bad"},
            ]
        },
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Events processed successfully"
    assert data["summary"] == {"total": 3, "updated": 1, "created": 2, "failed": 1}

    results = data["results"]
    assert [r["link"] for r in results] == ["https://a", "https://b", "https://bad"]
    assert [r["action"] for r in results] == ["updated", "created", "created"]
    assert [r["success"] for r in results] == [True, True, False]
    assert results[2]["error"] == "create rejected https://bad"
    assert all(doc.get("status") == "reviewed" for doc in store.documents["events"])


def test_bulk_submit_requires_events_array(client: TestClient) -> None:
    assert client.post("/api/bulk-submit-event", json={}).status_code == status.HTTP_400_BAD_REQUEST
    assert client.post("/api/bulk-submit-event", json={"events": "x"}).status_code == status.HTTP_400_BAD_REQUEST


def test_bulk_submit_empty_batch(client: TestClient) -> None:
    response = client.post("/api/bulk-submit-event", json={"events": []})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["summary"] == {"total": 0, "updated": 0, "created": 0, "failed": 0}
    assert response.json()["results"] == []


def test_bulk_submit_fetch_failure(client: TestClient, store: FakeDocumentStore) -> None:
    store.fail_on.add("query")

    response = client.post("/api/bulk-submit-event", json={"events": [EVENT_PAYLOAD]})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"] == "Failed to process events"


# =============================================================================
# GET /api/reviewed-events
# =============================================================================


def test_reviewed_events_only_returns_reviewed(client: TestClient, store: FakeDocumentStore) -> None:
    seed_event(store, make_event(event_name="Public", link="https://public"), EventStatus.REVIEWED)
    seed_event(store, make_event(event_name="Pending", link="https://pending"), EventStatus.UNDER_REVIEW)

    response = client.get("/api/reviewed-events")

    assert response.status_code == status.HTTP_200_OK
    events = response.json()["events"]
    assert [e["eventName"] for e in events] == ["Public"]
    assert events[0]["startDate"] == "04-02-2025"
    assert "status" not in events[0]
    assert "id" not in events[0]


def test_reviewed_events_empty(client: TestClient) -> None:
    response = client.get("/api/reviewed-events")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"events": []}


def test_reviewed_events_store_failure(client: TestClient, store: FakeDocumentStore) -> None:
    store.fail_on.add("query")

    response = client.get("/api/reviewed-events")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"] == "Failed to fetch reviewed events"


def test_reviewed_events_without_store(bare_client: TestClient) -> None:
    response = bare_client.get("/api/reviewed-events")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"] == "NOTION_SECRET is not configured"


def test_resubmitting_overlong_link_updates_single_record(client: TestClient, store: FakeDocumentStore) -> None:
    payload = {"eventName": "E", "link": "https://x/" + "a" * 2100}

    first = client.post("/api/submit-event", json=payload)
    second = client.post("/api/submit-event", json=payload)

    assert [first.json()["action"], second.json()["action"]] == ["created", "updated"]
    assert len(store.documents["events"]) == 1
