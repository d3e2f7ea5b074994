"""Centralized logging configuration with structured logging.

Provides:
- Pretty console logs for development (colored, key-value pairs)
- JSON logs for production (LOG_FORMAT=json)
- Request ID correlation across all logs
- Configurable log levels for noisy libraries

Usage:
    from igaming_calendar.core.logging_config import setup_logging
    setup_logging()  # Call once at app startup

    logger = structlog.get_logger(__name__)
    logger.info("event_created", event_id=page_id, link=link)
"""

import importlib.util
import logging
import sys
from typing import Any

import structlog
from asgi_correlation_id import correlation_id

from igaming_calendar.main_config import logging_config


def get_request_id(_logger: Any, _method_name: str, event_dict: dict) -> dict:
    """Add request_id from asgi-correlation-id contextvar to log events."""
    request_id = correlation_id.get()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def setup_logging() -> None:
    """Configure structured logging for the entire application.

    Behavior:
    - Reads LOG_FORMAT, LOG_LEVEL from environment (via main_config)
    - JSON format for production (LOG_FORMAT=json)
    - Pretty console for local/dev (LOG_FORMAT=console)
    - Request ID automatically added to all logs
    - Uvicorn logs also go through structlog processors

    Call this once before creating the FastAPI app.
    """
    log_level = logging_config.level.upper()

    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        get_request_id,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if logging_config.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        # rich is a dev-only extra; colors only when it is importable
        colors = importlib.util.find_spec("rich") is not None
        renderer = structlog.dev.ConsoleRenderer(colors=colors)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for uvicorn_logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
        uvicorn_logger = logging.getLogger(uvicorn_logger_name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.addHandler(handler)
        uvicorn_logger.propagate = False

    logging.getLogger("sqlalchemy.engine").setLevel(logging_config.level_sqlalchemy.upper())
    logging.getLogger("httpx").setLevel(logging_config.level_httpx.upper())
    logging.getLogger("uvicorn").setLevel(log_level)
    logging.getLogger("uvicorn.access").setLevel(logging_config.level_uvicorn_access.upper())
    logging.getLogger("uvicorn.error").setLevel(log_level)

    logger = structlog.get_logger(__name__)
    logger.info(
        "logging_configured",
        log_format=logging_config.format,
        log_level=log_level,
    )
