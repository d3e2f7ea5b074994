"""
FastAPI application entry point with async lifespan management.

This module initializes the FastAPI application with:
- Structured logging with request correlation IDs
- The configured document store (Notion or SQL), built in the lifespan
- CORS middleware configuration
- Standardized error responses
- Automatic route discovery under /api

Run locally:
    uvicorn igaming_calendar.main:app --reload
"""

import uuid

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from igaming_calendar.core.exceptions.handlers import register_exception_handlers
from igaming_calendar.core.lifespan import app_lifespan
from igaming_calendar.core.logging_config import setup_logging
from igaming_calendar.core.route_discovery import register_routers
from igaming_calendar.main_config import cors_config, fastapi_config, settings

# =============================================================================
# Setup Logging (before app creation)
# =============================================================================
setup_logging()


def create_app() -> FastAPI:
    application = FastAPI(
        title=fastapi_config.title,
        description=fastapi_config.description,
        version=fastapi_config.version,
        docs_url=fastapi_config.docs_url,
        redoc_url=fastapi_config.redoc_url,
        openapi_url=fastapi_config.openapi_url,
        lifespan=app_lifespan,
        debug=fastapi_config.debug,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=cors_config.origins_list,
        allow_credentials=cors_config.allow_credentials,
        allow_methods=cors_config.methods_list,
        allow_headers=cors_config.headers_list,
    )

    # Adds request_id to the structlog context
    application.add_middleware(
        CorrelationIdMiddleware,
        header_name="X-Request-ID",
        generator=lambda: uuid.uuid4().hex[:16],
        validator=None,
        transformer=lambda x: x,
    )

    register_exception_handlers(application)
    register_routers(application)
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "igaming_calendar.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=None,  # Keep the structlog setup
    )
