"""
Notion-backed document store.

Talks to the Notion REST API through the shared httpx client:

    POST  /databases/{database_id}/query   -> filtered, paginated query
    POST  /pages                           -> create a page in a database
    PATCH /pages/{page_id}                 -> update page properties

Property values are plain strings on our side. They are wrapped into Notion's
typed property objects (title, rich_text, select, email) according to the
collection schema, and unwrapped again when reading.
"""

from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from igaming_calendar.core.enums import PropertyKind
from igaming_calendar.core.exceptions.domain import DocumentStoreError

from .document_store import Collection, DocumentPage, DocumentStore, StoredDocument

__all__ = ["NotionDocumentStore", "decode_property", "encode_property"]

logger = structlog.get_logger(__name__)


def encode_property(kind: PropertyKind, value: str) -> dict[str, Any]:
    """Wrap a plain value into a Notion property object."""
    if kind == PropertyKind.TITLE:
        return {"title": [{"text": {"content": value}}]}
    if kind == PropertyKind.SELECT:
        return {"select": {"name": value} if value else None}
    if kind == PropertyKind.EMAIL:
        return {"email": value or None}
    return {"rich_text": [{"text": {"content": value}}]}


def decode_property(prop: Mapping[str, Any] | None) -> str:
    """Unwrap a Notion property object into plain text ("" when empty)."""
    if not prop:
        return ""
    prop_type = prop.get("type")
    if prop_type is None:
        # Objects we built ourselves carry no "type" key
        prop_type = next((key for key in ("title", "rich_text", "select", "email") if key in prop), None)

    if prop_type in ("title", "rich_text"):
        return "".join(part.get("plain_text", "") for part in prop.get(prop_type) or [])
    if prop_type == "select":
        selected = prop.get("select")
        return selected.get("name", "") if selected else ""
    if prop_type == "email":
        return prop.get("email") or ""
    return ""


def _filter_clause(kind: PropertyKind, prop: str, value: str) -> dict[str, Any]:
    # Notion's filter condition keys match the property type names
    return {"property": prop, kind.value: {"equals": value}}


class NotionDocumentStore(DocumentStore):
    """DocumentStore over the Notion REST API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        secret: str,
        base_url: str = "https://api.notion.com/v1",
        version: str = "2022-06-28",
        page_size: int = 100,
    ) -> None:
        self._client = client
        self._secret = secret
        self._base_url = base_url.rstrip("/")
        self._version = version
        self._page_size = page_size

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._secret}",
            "Notion-Version": self._version,
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            response = await self._client.request(method, url, json=payload, headers=self._headers())
        except httpx.HTTPError as exc:
            logger.error("notion_request_failed", method=method, path=path, error=str(exc))
            raise DocumentStoreError(f"Notion request failed: {exc}") from exc

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {"message": response.text}
            message = body.get("message") or response.reason_phrase
            logger.error(
                "notion_error_response",
                method=method,
                path=path,
                status_code=response.status_code,
                code=body.get("code"),
            )
            raise DocumentStoreError(
                f"Notion API returned {response.status_code}: {message}",
                status_code=response.status_code,
                detail=body,
            )

        return response.json()

    def _database_id(self, collection: Collection) -> str:
        if not collection.database_id:
            raise DocumentStoreError(f"No Notion database configured for '{collection.name}'")
        return collection.database_id

    def _encode(self, collection: Collection, properties: Mapping[str, str]) -> dict[str, Any]:
        return {
            name: encode_property(collection.kind_of(name), value)
            for name, value in properties.items()
        }

    def _decode(self, page: Mapping[str, Any]) -> StoredDocument:
        properties = {
            name: decode_property(prop) for name, prop in (page.get("properties") or {}).items()
        }
        return StoredDocument(id=page["id"], properties=properties)

    def _build_filter(self, collection: Collection, filters: Mapping[str, str]) -> dict[str, Any]:
        clauses = [
            _filter_clause(collection.kind_of(name), name, value) for name, value in filters.items()
        ]
        return clauses[0] if len(clauses) == 1 else {"and": clauses}

    async def query(
        self,
        collection: Collection,
        filters: Mapping[str, str] | None = None,
        start_cursor: str | None = None,
    ) -> DocumentPage:
        payload: dict[str, Any] = {"page_size": self._page_size}
        if filters:
            payload["filter"] = self._build_filter(collection, filters)
        if start_cursor:
            payload["start_cursor"] = start_cursor

        data = await self._request("POST", f"/databases/{self._database_id(collection)}/query", payload)
        return DocumentPage(
            results=[self._decode(page) for page in data.get("results", [])],
            has_more=bool(data.get("has_more")),
            next_cursor=data.get("next_cursor"),
        )

    async def create(self, collection: Collection, properties: Mapping[str, str]) -> StoredDocument:
        payload = {
            "parent": {"database_id": self._database_id(collection)},
            "properties": self._encode(collection, properties),
        }
        data = await self._request("POST", "/pages", payload)
        return StoredDocument(id=data["id"], properties=dict(properties))

    async def update(
        self, collection: Collection, document_id: str, properties: Mapping[str, str]
    ) -> StoredDocument:
        payload = {"properties": self._encode(collection, properties)}
        data = await self._request("PATCH", f"/pages/{document_id}", payload)
        return StoredDocument(id=data.get("id", document_id), properties=dict(properties))
