"""Domain exceptions raised below the HTTP layer.

Routes translate these into ``AppError`` responses; handlers registered in
``handlers.py`` catch any that escape.
"""

from typing import Any


class DocumentStoreError(Exception):
    """A document store call failed (transport error or non-2xx response)."""

    def __init__(self, message: str, status_code: int | None = None, detail: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail


class PaginationLimitError(DocumentStoreError):
    """A fetch-all loop read ``max_pages`` pages and the store still reported more."""

    def __init__(self, collection: str, max_pages: int) -> None:
        super().__init__(
            f"Collection '{collection}' still has more results after {max_pages} pages",
            detail={"collection": collection, "max_pages": max_pages},
        )
        self.collection = collection
        self.max_pages = max_pages


class MailDeliveryError(Exception):
    """Sending an email failed."""
