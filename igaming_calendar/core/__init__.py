"""
Core infrastructure components for the application.

This package contains configuration-driven infrastructure: the database and
HTTP client pools, logging, exceptions, dependencies, lifespan and route
discovery. Import from the submodules directly, e.g.
``from igaming_calendar.core.dependencies import get_event_repository``.
"""
