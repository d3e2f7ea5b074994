"""FastAPI route auto-discovery.

Conventions:
- Route modules live under `igaming_calendar/routes/`.
- Each module exports a `router: APIRouter`.
- Files starting with `_` are ignored.
- Routers without their own prefix are mounted under `/api`; routers without
  tags are tagged with their module name.
"""

import importlib
import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, FastAPI

logger = logging.getLogger(__name__)

API_PREFIX = "/api"
ROUTES_DIR = Path(__file__).resolve().parent.parent / "routes"


class RouterDiscoveryError(Exception):
    """Raised when router discovery fails."""


def _iter_route_files(routes_dir: Path) -> list[Path]:
    return sorted(
        (path for path in routes_dir.glob("*.py") if path.is_file() and not path.name.startswith("_")),
        key=lambda path: path.name,
    )


def _module_path(routes_dir: Path, py_file: Path) -> str:
    # igaming_calendar/routes/events.py -> igaming_calendar.routes.events
    return f"{routes_dir.parent.name}.{routes_dir.name}.{py_file.stem}"


def discover_routers(routes_dir: Path = ROUTES_DIR) -> list[tuple[APIRouter, dict[str, Any]]]:
    """Import every route module and return `(router, include_kwargs)` pairs."""
    routers: list[tuple[APIRouter, dict[str, Any]]] = []

    for py_file in _iter_route_files(routes_dir):
        module_path = _module_path(routes_dir, py_file)
        try:
            module = importlib.import_module(module_path)
        except Exception as e:
            msg = (
                f"Failed to import route module '{module_path}'.\n"
                f"  File: {py_file}\n"
                f"  Hint: Ensure the package is importable and dependencies are installed"
            )
            raise RouterDiscoveryError(msg) from e

        router = getattr(module, "router", None)
        if not isinstance(router, APIRouter):
            msg = (
                f"Router file '{py_file.name}' must export 'router' as an APIRouter.\n"
                f"  Module: {module_path}\n"
                f"  Type: {type(router).__name__}"
            )
            raise RouterDiscoveryError(msg)

        include_kwargs: dict[str, Any] = {}
        if not router.prefix:
            include_kwargs["prefix"] = API_PREFIX
        if not router.tags:
            include_kwargs["tags"] = [py_file.stem]
        routers.append((router, include_kwargs))

    return routers


def register_routers(app: FastAPI, routes_dir: Path = ROUTES_DIR) -> None:
    """Discover and register routers with a FastAPI app.

    Fails fast on startup if a route module can't be imported or doesn't export a
    valid `router`.
    """
    if not routes_dir.exists():
        raise FileNotFoundError(f"Routes directory not found: {routes_dir}")

    routers = discover_routers(routes_dir)
    logger.info("Found %s router(s) in %s", len(routers), routes_dir)

    for router, include_kwargs in routers:
        app.include_router(router, **include_kwargs)
        logger.info(
            "  - %s (tags: %s)",
            include_kwargs.get("prefix") or router.prefix,
            include_kwargs.get("tags") or list(router.tags),
        )
