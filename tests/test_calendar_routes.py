"""Tests for the month calendar and card grid endpoints."""

from fastapi import status
from fastapi.testclient import TestClient

from igaming_calendar.core.enums import EventStatus

from conftest import FakeDocumentStore, make_event, seed_event


def _seed_march(store: FakeDocumentStore) -> None:
    seed_event(store, make_event(event_name="Valletta", link="v", start_date="01-03-2025", end_date="03-03-2025"))
    for name in ("A", "B", "C", "D"):
        seed_event(store, make_event(event_name=name, link=name, start_date="05-03-2025", end_date="05-03-2025"))
    seed_event(
        store,
        make_event(event_name="Pending", link="p", start_date="10-03-2025", end_date="10-03-2025"),
        EventStatus.UNDER_REVIEW,
    )


# =============================================================================
# GET /api/calendar
# =============================================================================


def test_calendar_month_layout(client: TestClient, store: FakeDocumentStore) -> None:
    _seed_march(store)

    response = client.get("/api/calendar", params={"year": 2025, "month": 3})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["label"] == "March 2025"
    assert data["source"] == "store"
    assert data["previous"] == {"year": 2025, "month": 2}
    assert data["next"] == {"year": 2025, "month": 4}

    weeks = data["weeks"]
    assert len(weeks) == 6
    assert all(len(week["days"]) == 7 for week in weeks)
    assert weeks[0]["startDate"] == "24-02-2025"
    assert weeks[0]["days"][0] == {"date": "24-02-2025", "inMonth": False, "isToday": False}
    assert weeks[0]["days"][5]["inMonth"] is True

    (first,) = weeks[0]["segments"]
    assert first["event"]["eventName"] == "Valletta"
    assert (first["startCol"], first["endCol"]) == (6, 7)
    assert first["isStartOfEvent"] is True and first["isEndOfEvent"] is False
    assert first["totalDuration"] == 3


def test_calendar_hides_rows_beyond_visible_limit(client: TestClient, store: FakeDocumentStore) -> None:
    _seed_march(store)

    collapsed = client.get("/api/calendar", params={"year": 2025, "month": 3}).json()["weeks"][1]

    # Valletta's tail (col 1) and A (col 3) share the first row
    assert [(s["event"]["eventName"], s["row"]) for s in collapsed["segments"]] == [
        ("Valletta", 0),
        ("A", 0),
        ("B", 1),
    ]
    assert collapsed["rowCount"] == 4
    assert collapsed["hiddenCount"] == 2
    assert collapsed["expanded"] is False

    expanded = client.get("/api/calendar", params={"year": 2025, "month": 3, "expanded": 1}).json()["weeks"][1]

    assert len(expanded["segments"]) == 5
    assert expanded["hiddenCount"] == 0
    assert expanded["expanded"] is True
    assert expanded["height"] > collapsed["height"]


def test_calendar_excludes_unreviewed_events(client: TestClient, store: FakeDocumentStore) -> None:
    _seed_march(store)

    weeks = client.get("/api/calendar", params={"year": 2025, "month": 3}).json()["weeks"]

    names = {s["event"]["eventName"] for week in weeks for s in week["segments"]}
    assert "Pending" not in names


def test_calendar_year_without_month_is_rejected(client: TestClient) -> None:
    response = client.get("/api/calendar", params={"year": 2025})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "year and month must be given together"


def test_calendar_invalid_month_is_rejected(client: TestClient) -> None:
    response = client.get("/api/calendar", params={"year": 2025, "month": 13})

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_calendar_defaults_to_current_month(client: TestClient) -> None:
    response = client.get("/api/calendar")

    assert response.status_code == status.HTTP_200_OK
    days = [day for week in response.json()["weeks"] for day in week["days"]]
    assert sum(day["isToday"] for day in days) == 1


def test_calendar_falls_back_to_static_feed_on_store_failure(client: TestClient, store: FakeDocumentStore) -> None:
    store.fail_on.add("query")

    response = client.get("/api/calendar", params={"year": 2025, "month": 3})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["source"] == "static"
    assert data["weeks"][0]["segments"][0]["event"]["eventName"] == "iGaming NEXT Valletta"


def test_calendar_without_store_uses_static_feed(bare_client: TestClient) -> None:
    response = bare_client.get("/api/calendar", params={"year": 2025, "month": 2})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["source"] == "static"
    names = {s["event"]["eventName"] for week in data["weeks"] for s in week["segments"]}
    assert "ICE London" in names


# =============================================================================
# GET /api/events/cards
# =============================================================================


def test_cards_sorted_and_paginated(client: TestClient, store: FakeDocumentStore) -> None:
    for i in range(12, 0, -1):
        day = f"{i:02d}-06-2025"
        seed_event(
            store, make_event(event_name=f"E{i}", link=f"l{i}", start_date=day, end_date=day, location=f"City {i % 3}")
        )

    first = client.get("/api/events/cards").json()
    second = client.get("/api/events/cards", params={"page": 2}).json()

    assert first["pageSize"] == 9
    assert first["totalItems"] == 12
    assert first["totalPages"] == 2
    assert [item["event"]["eventName"] for item in first["items"]] == [f"E{i}" for i in range(1, 10)]
    assert [item["event"]["eventName"] for item in second["items"]] == ["E10", "E11", "E12"]
    assert first["items"][0]["dateRange"] == "Sun, Jun 1, 2025"
    assert first["stats"] == {"totalEvents": 12, "locations": 3}
    assert first["source"] == "store"


def test_cards_page_past_end_clamps(client: TestClient, store: FakeDocumentStore) -> None:
    seed_event(store, make_event(description="x" * 300))

    data = client.get("/api/events/cards", params={"page": 5, "page_size": 4}).json()

    assert data["page"] == 1
    assert data["pageSize"] == 4
    assert data["items"][0]["shortDescription"] == "x" * 200 + "..."


def test_cards_without_store_uses_static_feed(bare_client: TestClient) -> None:
    data = bare_client.get("/api/events/cards").json()

    assert data["source"] == "static"
    assert data["totalItems"] == 5
    assert data["items"][0]["event"]["eventName"] == "ICE London"


def test_calendar_rejects_years_at_the_date_range_edges(client: TestClient) -> None:
    late = client.get("/api/calendar", params={"year": 9999, "month": 12})
    early = client.get("/api/calendar", params={"year": 1, "month": 1})

    assert late.status_code == status.HTTP_400_BAD_REQUEST
    assert early.status_code == status.HTTP_400_BAD_REQUEST


def test_calendar_accepts_outermost_supported_years(client: TestClient) -> None:
    last = client.get("/api/calendar", params={"year": 9998, "month": 12})
    first = client.get("/api/calendar", params={"year": 2, "month": 1})

    assert last.status_code == status.HTTP_200_OK
    assert last.json()["next"] == {"year": 9999, "month": 1}
    assert first.status_code == status.HTTP_200_OK
    assert first.json()["previous"] == {"year": 1, "month": 12}
