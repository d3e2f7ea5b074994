"""Tests for application wiring: route discovery, health and request ids."""

from pathlib import Path

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from igaming_calendar.core.route_discovery import RouterDiscoveryError, discover_routers, register_routers


def test_every_endpoint_is_mounted_under_api(bare_client: TestClient) -> None:
    paths = set(bare_client.app.openapi()["paths"])

    assert {
        "/api/",
        "/api/health",
        "/api/submit-event",
        "/api/bulk-submit-event",
        "/api/reviewed-events",
        "/api/send-calendar-invite",
        "/api/calendar",
        "/api/events/cards",
    } <= paths


def test_health_reports_missing_store(bare_client: TestClient) -> None:
    response = bare_client.get("/api/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "healthy"
    assert data["store"]["configured"] is False


def test_response_carries_request_id(bare_client: TestClient) -> None:
    response = bare_client.get("/api/health", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"


def test_request_id_is_generated(bare_client: TestClient) -> None:
    response = bare_client.get("/api/health")

    assert len(response.headers["X-Request-ID"]) == 16


def test_register_routers_defaults_prefix_and_tags(tmp_path: Path) -> None:
    routes_dir = tmp_path / "sample_pkg" / "routes"
    routes_dir.mkdir(parents=True)
    (routes_dir.parent / "__init__.py").write_text("")
    (routes_dir / "__init__.py").write_text("")
    (routes_dir / "_private.py").write_text("raise RuntimeError('never imported')\n")
    (routes_dir / "ping.py").write_text(
        "from fastapi import APIRouter\n"
        "router = APIRouter()\n"
        "@router.get('/ping')\n"
        "async def ping():\n"
        "    return {'pong': True}\n"
    )

    with pytest.MonkeyPatch.context() as mp:
        mp.syspath_prepend(str(tmp_path))
        app = FastAPI()
        register_routers(app, routes_dir)

    response = TestClient(app).get("/api/ping")
    assert response.json() == {"pong": True}
    assert app.openapi()["paths"]["/api/ping"]["get"]["tags"] == ["ping"]


def test_discover_routers_requires_router_export(tmp_path: Path) -> None:
    routes_dir = tmp_path / "broken_pkg" / "routes"
    routes_dir.mkdir(parents=True)
    (routes_dir.parent / "__init__.py").write_text("")
    (routes_dir / "__init__.py").write_text("")
    (routes_dir / "nothing.py").write_text("router = None\n")

    with pytest.MonkeyPatch.context() as mp:
        mp.syspath_prepend(str(tmp_path))
        with pytest.raises(RouterDiscoveryError, match="must export 'router'"):
            discover_routers(routes_dir)
