"""
Tables backing the SQL document store.

A document belongs to a named collection ("events", "registrations") and
carries a flat set of text properties, one row per property. This mirrors the
shape of a hosted document database closely enough that the same repository
code runs against either backend.
"""

from uuid import uuid4

from sqlalchemy import Column, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin


def new_document_id() -> str:
    return str(uuid4())


class Document(Base, TimestampMixin):
    """
    A stored document.

    Attributes:
        id: UUID string, returned to clients as the record id
        collection: Collection name the document belongs to
        properties: Property rows, loaded eagerly
    """

    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=new_document_id)
    collection = Column(String(64), nullable=False, index=True)

    properties = relationship(
        "DocumentProperty",
        back_populates="document",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, collection='{self.collection}')>"

    def to_properties(self) -> dict[str, str]:
        return {prop.name: prop.value for prop in self.properties}


class DocumentProperty(Base):
    """A single named text value on a document."""

    __tablename__ = "document_properties"

    document_id = Column(
        String(36), ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True
    )
    name = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False, default="")

    document = relationship("Document", back_populates="properties")

    def __repr__(self) -> str:
        return f"<DocumentProperty(document_id={self.document_id}, name='{self.name}')>"
