from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from docshare.application.dtos.common_dto import PageMeta
from docshare.domain.entities.document import DocumentEntity


class DocumentResponse(BaseModel):
    """A stored document."""
    id: str = Field(..., description="Unique identifier of the document", example="9b1c2d3e4f5a6b7c8d9e0f1a2b3c4d5e")
    owner_id: str = Field(..., description="Profile ID of the document owner")
    content: Any = Field(..., description="Document body; any JSON value or plain text")
    creation_date: datetime = Field(..., description="ISO timestamp when the document was created")
    last_modified_date: datetime = Field(..., description="ISO timestamp of the last content change")

    @classmethod
    def from_entity(cls, doc: DocumentEntity) -> "DocumentResponse":
        return cls(
            id=doc.id,
            owner_id=doc.owner_id,
            content=doc.content,
            creation_date=doc.created_at,
            last_modified_date=doc.updated_at,
        )


class DocumentContentRequest(BaseModel):
    """Request body for creating or replacing a document."""
    content: Any = Field(..., description="Document body; any JSON value or plain text", example={"title": "Notes"})


class ListDocumentsResponse(PageMeta):
    """One page of documents visible to the caller."""
    data: list[DocumentResponse] = Field(..., description="Documents on this page")


class SharersResponse(BaseModel):
    """Profiles a document is shared with."""
    shared_with: list[str] = Field(..., description="Profile IDs with read access", example=["user_b", "user_c"])


class SetSharersRequest(BaseModel):
    """Replacement share list. Whitespace is trimmed and empty IDs are ignored."""
    shared_with: list[str] = Field(..., description="Profile IDs to share with", example=["user_b", "user_c"])
