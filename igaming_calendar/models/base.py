"""
Declarative base and mixins for the SQL document store tables.

Connection handling lives in igaming_calendar.core.database.
"""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime
from sqlalchemy.orm import DeclarativeBase


def utc_now() -> datetime:
    """Current UTC time, timezone aware."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""


class TimestampMixin:
    """Adds created_at / updated_at columns."""

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)
