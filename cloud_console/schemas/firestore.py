# cloud_console/schemas/firestore.py
"""
Schemas for the Firestore-like document store:
- /api/collections
- /api/collections/{id}/documents
- /api/documents/{id}
- /api/query
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from cloud_console.schemas.common import ConsoleModel


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


class FirestoreCollectionCreate(ConsoleModel):
    """Body for POST /api/collections. `documentCount` is never accepted."""
    name: str = Field(..., min_length=1, description="Collection name (unique)")


class FirestoreCollection(ConsoleModel):
    id: int
    name: str
    document_count: int = Field(0, ge=0, description="Live documents referencing this collection")


class FirestoreDocumentCreate(ConsoleModel):
    """
    Body for POST /api/collections/{id}/documents.

    `data` may be any JSON value (object, array, scalar) except null. A blank
    `documentId` counts as omitted.
    """
    document_id: Optional[str] = Field(None, description="Caller-chosen document id; generated when omitted")
    data: Any = Field(..., description="Arbitrary JSON payload")

    @field_validator("document_id")
    @classmethod
    def _normalize_document_id(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @field_validator("data")
    @classmethod
    def _require_data(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("data must not be null")
        return v


class FirestoreDocumentUpdate(ConsoleModel):
    """
    Body for PUT /api/documents/{id}.

    The parent collection cannot be changed through an update.
    """
    document_id: Optional[str] = None
    data: Any = None

    @field_validator("document_id")
    @classmethod
    def _normalize_document_id(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


class FirestoreDocument(ConsoleModel):
    id: int
    collection_id: int
    document_id: str
    data: Any
    created_at: datetime
    updated_at: datetime


class QueryRequest(ConsoleModel):
    """
    Body for POST /api/query.

    Only `collection_id` selects anything; the field/operator/value predicate
    is echoed into the activity log but not evaluated.
    """
    collection_id: int
    field: str = Field(..., min_length=1)
    operator: str = Field(..., min_length=1)
    value: Any = None


class QueryResponse(ConsoleModel):
    """
    Example:
    {
      "results": [...first 3 documents...],
      "count": 5
    }
    """
    results: List[FirestoreDocument] = Field(default_factory=list)
    count: int = Field(..., ge=0, description="Total documents in the collection (not len(results))")
