# cloud_console/api/routes/firestore.py
"""
Firestore-like document store.

Routes:
- GET/POST   /api/collections
- DELETE     /api/collections/{id}
- GET/POST   /api/collections/{id}/documents
- PUT/DELETE /api/documents/{id}
- POST       /api/query

The query endpoint is a demo stub: it ignores field/operator/value and returns
the first few documents of the collection together with the collection's full
document count. `results` and `count` therefore disagree once a collection
holds more documents than the preview limit.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from cloud_console.api.deps import get_settings, get_store
from cloud_console.core.config import Settings
from cloud_console.core.errors import NotFoundError
from cloud_console.schemas.common import SuccessResponse
from cloud_console.schemas.firestore import (
    FirestoreCollection,
    FirestoreCollectionCreate,
    FirestoreDocument,
    FirestoreDocumentCreate,
    FirestoreDocumentUpdate,
    QueryRequest,
    QueryResponse,
)
from cloud_console.services.store import ResourceStore

router = APIRouter()


# -----------------------
# Collections
# -----------------------
@router.get("/collections", response_model=List[FirestoreCollection])
async def list_collections(store: ResourceStore = Depends(get_store)):
    return store.list_collections()


@router.post("/collections", response_model=FirestoreCollection)
async def create_collection(payload: FirestoreCollectionCreate, store: ResourceStore = Depends(get_store)):
    return store.create_collection(payload.model_dump())


@router.delete("/collections/{collection_id}", response_model=SuccessResponse)
async def delete_collection(collection_id: int, store: ResourceStore = Depends(get_store)):
    if not store.delete_collection(collection_id):
        raise NotFoundError("Collection not found")
    return SuccessResponse()


# -----------------------
# Documents
# -----------------------
@router.get("/collections/{collection_id}/documents", response_model=List[FirestoreDocument])
async def list_documents(collection_id: int, store: ResourceStore = Depends(get_store)):
    return store.list_documents(collection_id)


@router.post("/collections/{collection_id}/documents", response_model=FirestoreDocument)
async def create_document(
    collection_id: int,
    payload: FirestoreDocumentCreate,
    store: ResourceStore = Depends(get_store),
):
    # Unknown collection -> ValidationError (400) raised by the store.
    return store.create_document(collection_id, payload.model_dump())


@router.put("/documents/{document_pk}", response_model=FirestoreDocument)
async def update_document(
    document_pk: int,
    payload: FirestoreDocumentUpdate,
    store: ResourceStore = Depends(get_store),
):
    document = store.update_document(document_pk, payload.supplied_fields())
    if document is None:
        raise NotFoundError("Document not found")
    return document


@router.delete("/documents/{document_pk}", response_model=SuccessResponse)
async def delete_document(document_pk: int, store: ResourceStore = Depends(get_store)):
    if not store.delete_document(document_pk):
        raise NotFoundError("Document not found")
    return SuccessResponse()


# -----------------------
# Query stub
# -----------------------
@router.post("/query", response_model=QueryResponse)
async def run_query(
    payload: QueryRequest,
    store: ResourceStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """
    Request:
      {"collectionId": 1, "field": "age", "operator": ">", "value": 21}

    Response:
      {"results": [...first 3 documents...], "count": <all documents in the collection>}
    """
    results, count = store.preview_documents(payload.collection_id, settings.QUERY_PREVIEW_LIMIT)
    store.hooks.emit(
        "query.executed",
        collection_id=payload.collection_id,
        field=payload.field,
        operator=payload.operator,
        value=payload.value,
    )
    return QueryResponse(results=results, count=count)
