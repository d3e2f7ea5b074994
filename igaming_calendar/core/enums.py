"""Enumeration definitions for the calendar service."""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    LOCAL = "local"
    DEV = "dev"
    UAT = "uat"
    PREPROD = "preprod"
    PROD = "prod"


class EventStatus(str, Enum):
    """Moderation state stamped on every stored event."""

    UNDER_REVIEW = "under-review"
    REVIEWED = "reviewed"


class StoreBackend(str, Enum):
    """Document store implementation selected at startup."""

    NOTION = "notion"
    SQL = "sql"


class PropertyKind(str, Enum):
    """How a document property is typed in the store."""

    TITLE = "title"
    RICH_TEXT = "rich_text"
    SELECT = "select"
    EMAIL = "email"
