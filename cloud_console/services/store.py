# cloud_console/services/store.py
"""
In-memory resource store.

Responsibilities:
- Own the seven resource collections (functions, endpoints, Firestore
  collections/documents, log entries, IAM users, service accounts)
- Assign ids from per-collection counters (start at 1, never reused)
- Apply creation defaults and shallow-merge updates
- Maintain FirestoreCollection.document_count incrementally
- Enforce name/email uniqueness
- Emit post-commit events through a HookRegistry

Concurrency:
- One RLock guards every operation, so "assign id then insert" and
  "insert document then bump parent count" are single indivisible steps.
- Events are emitted after the lock is released (post-commit).

Records are pydantic models. Updates never mutate a stored record in place;
they replace it with `model_copy(update=...)`, so records handed to callers
stay stable snapshots.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar

from pydantic import BaseModel

from cloud_console.core.errors import ValidationError
from cloud_console.schemas.endpoints import ApiEndpoint
from cloud_console.schemas.firestore import FirestoreCollection, FirestoreDocument
from cloud_console.schemas.functions import CloudFunction
from cloud_console.schemas.iam import IamUser, ServiceAccount
from cloud_console.schemas.logs import ALL_LEVELS, ALL_SERVICES, LogEntry
from cloud_console.services.hooks import HookRegistry

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)

Clock = Callable[[], datetime]

_TICK = timedelta(microseconds=1)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_document_id() -> str:
    """Firestore-style auto id (20 characters)."""
    return uuid.uuid4().hex[:20]


class ResourceStore:
    """All console resources, held in process memory."""

    COLLECTIONS = (
        "functions",
        "endpoints",
        "collections",
        "documents",
        "logs",
        "iam_users",
        "service_accounts",
    )

    def __init__(self, clock: Optional[Clock] = None, hooks: Optional[HookRegistry] = None) -> None:
        self._lock = threading.RLock()
        self._clock: Clock = clock or utcnow
        self._last_ts: Optional[datetime] = None
        self.hooks = hooks or HookRegistry()

        self._functions: Dict[int, CloudFunction] = {}
        self._endpoints: Dict[int, ApiEndpoint] = {}
        self._collections: Dict[int, FirestoreCollection] = {}
        self._documents: Dict[int, FirestoreDocument] = {}
        self._logs: Dict[int, LogEntry] = {}
        self._iam_users: Dict[int, IamUser] = {}
        self._service_accounts: Dict[int, ServiceAccount] = {}

        # Last id handed out per collection (0 = nothing created yet).
        self._counters: Dict[str, int] = {name: 0 for name in self.COLLECTIONS}

    # -------------------------
    # Internals (call with the lock held)
    # -------------------------
    def _next_id(self, collection: str) -> int:
        self._counters[collection] += 1
        return self._counters[collection]

    def _now(self) -> datetime:
        """Strictly increasing server time, even if the wall clock stalls or steps back."""
        now = self._clock()
        if self._last_ts is not None and now <= self._last_ts:
            now = self._last_ts + _TICK
        self._last_ts = now
        return now

    @staticmethod
    def _ensure_unique(
        records: Mapping[int, BaseModel],
        attr: str,
        value: Optional[str],
        *,
        label: str,
        exclude_id: Optional[int] = None,
        casefold: bool = False,
    ) -> None:
        if value is None:
            return
        needle = value.casefold() if casefold else value
        for record_id, record in records.items():
            if record_id == exclude_id:
                continue
            current = getattr(record, attr)
            if (current.casefold() if casefold else current) == needle:
                raise ValidationError(
                    f"{label} '{value}' already exists",
                    code=f"DUPLICATE_{attr.upper()}",
                )

    @staticmethod
    def _merge(records: Dict[int, R], record_id: int, fields: Mapping[str, Any]) -> Optional[R]:
        existing = records.get(record_id)
        if existing is None:
            return None
        updated = existing.model_copy(update=dict(fields))
        records[record_id] = updated
        return updated

    # -------------------------
    # Cloud Functions
    # -------------------------
    def list_functions(self) -> List[CloudFunction]:
        with self._lock:
            return list(self._functions.values())

    def get_function(self, function_id: int) -> Optional[CloudFunction]:
        with self._lock:
            return self._functions.get(function_id)

    def create_function(self, fields: Mapping[str, Any]) -> CloudFunction:
        with self._lock:
            self._ensure_unique(self._functions, "name", fields.get("name"), label="Function")
            func = CloudFunction(
                **{**fields, "id": self._next_id("functions"), "status": "Active", "deployed": self._now()}
            )
            self._functions[func.id] = func
        logger.info("Deployed function id=%s name=%s", func.id, func.name)
        self.hooks.emit("function.created", function=func)
        return func

    def update_function(self, function_id: int, fields: Mapping[str, Any]) -> Optional[CloudFunction]:
        with self._lock:
            if function_id not in self._functions:
                return None
            if not fields:
                return self._functions[function_id]
            self._ensure_unique(
                self._functions, "name", fields.get("name"), label="Function", exclude_id=function_id
            )
            func = self._merge(self._functions, function_id, fields)
        self.hooks.emit("function.updated", function=func, changes=dict(fields))
        return func

    def delete_function(self, function_id: int) -> bool:
        with self._lock:
            func = self._functions.pop(function_id, None)
        if func is None:
            return False
        logger.info("Deleted function id=%s name=%s", func.id, func.name)
        self.hooks.emit("function.deleted", function=func)
        return True

    # -------------------------
    # API Endpoints
    # -------------------------
    def list_endpoints(self) -> List[ApiEndpoint]:
        with self._lock:
            return list(self._endpoints.values())

    def get_endpoint(self, endpoint_id: int) -> Optional[ApiEndpoint]:
        with self._lock:
            return self._endpoints.get(endpoint_id)

    def create_endpoint(self, fields: Mapping[str, Any]) -> ApiEndpoint:
        with self._lock:
            endpoint = ApiEndpoint(**{**fields, "id": self._next_id("endpoints")})
            self._endpoints[endpoint.id] = endpoint
        self.hooks.emit("endpoint.created", endpoint=endpoint)
        return endpoint

    def update_endpoint(self, endpoint_id: int, fields: Mapping[str, Any]) -> Optional[ApiEndpoint]:
        with self._lock:
            if endpoint_id not in self._endpoints:
                return None
            if not fields:
                return self._endpoints[endpoint_id]
            endpoint = self._merge(self._endpoints, endpoint_id, fields)
        self.hooks.emit("endpoint.updated", endpoint=endpoint, changes=dict(fields))
        return endpoint

    # -------------------------
    # Firestore Collections
    # -------------------------
    def list_collections(self) -> List[FirestoreCollection]:
        with self._lock:
            return list(self._collections.values())

    def get_collection(self, collection_id: int) -> Optional[FirestoreCollection]:
        with self._lock:
            return self._collections.get(collection_id)

    def create_collection(self, fields: Mapping[str, Any]) -> FirestoreCollection:
        with self._lock:
            self._ensure_unique(self._collections, "name", fields.get("name"), label="Collection")
            collection = FirestoreCollection(
                **{**fields, "id": self._next_id("collections"), "document_count": 0}
            )
            self._collections[collection.id] = collection
        logger.info("Created collection id=%s name=%s", collection.id, collection.name)
        self.hooks.emit("collection.created", collection=collection)
        return collection

    def delete_collection(self, collection_id: int) -> bool:
        """Remove a collection. Its documents stay behind with a dangling collection_id."""
        with self._lock:
            collection = self._collections.pop(collection_id, None)
        if collection is None:
            return False
        self.hooks.emit("collection.deleted", collection=collection)
        return True

    # -------------------------
    # Firestore Documents
    # -------------------------
    def list_documents(self, collection_id: int) -> List[FirestoreDocument]:
        with self._lock:
            return [doc for doc in self._documents.values() if doc.collection_id == collection_id]

    def get_document(self, document_pk: int) -> Optional[FirestoreDocument]:
        with self._lock:
            return self._documents.get(document_pk)

    def create_document(self, collection_id: int, fields: Mapping[str, Any]) -> FirestoreDocument:
        """
        Insert a document and bump its parent's document_count in one step.

        Raises ValidationError if the parent collection does not exist right now.
        """
        with self._lock:
            collection = self._collections.get(collection_id)
            if collection is None:
                raise ValidationError(
                    f"Collection {collection_id} does not exist",
                    code="UNKNOWN_COLLECTION",
                )
            now = self._now()
            document = FirestoreDocument(
                **{
                    **fields,
                    "id": self._next_id("documents"),
                    "collection_id": collection_id,
                    "document_id": fields.get("document_id") or generate_document_id(),
                    "created_at": now,
                    "updated_at": now,
                }
            )
            self._documents[document.id] = document
            collection = collection.model_copy(update={"document_count": collection.document_count + 1})
            self._collections[collection_id] = collection
        self.hooks.emit("document.created", document=document, collection=collection)
        return document

    def update_document(self, document_pk: int, fields: Mapping[str, Any]) -> Optional[FirestoreDocument]:
        changes = {k: v for k, v in fields.items() if k not in ("id", "collection_id", "created_at")}
        with self._lock:
            if document_pk not in self._documents:
                return None
            if not changes:
                return self._documents[document_pk]
            document = self._merge(self._documents, document_pk, {**changes, "updated_at": self._now()})
        self.hooks.emit("document.updated", document=document, changes=changes)
        return document

    def delete_document(self, document_pk: int) -> bool:
        """Remove a document and decrement its parent's count (never below zero)."""
        with self._lock:
            document = self._documents.pop(document_pk, None)
            if document is None:
                return False
            collection = self._collections.get(document.collection_id)
            if collection is not None:
                self._collections[collection.id] = collection.model_copy(
                    update={"document_count": max(0, collection.document_count - 1)}
                )
        self.hooks.emit("document.deleted", document=document)
        return True

    def preview_documents(self, collection_id: int, limit: int) -> Tuple[List[FirestoreDocument], int]:
        """First `limit` documents of a collection plus the collection's total document count."""
        with self._lock:
            documents = self.list_documents(collection_id)
            return documents[:limit], len(documents)

    # -------------------------
    # Log Entries
    # -------------------------
    def list_log_entries(
        self,
        service: Optional[str] = None,
        level: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[LogEntry]:
        """
        Filter, then sort newest first, then truncate.

        "All Services" / "All Levels" mean no filter, same as None. A limit of
        None or 0 returns everything.
        """
        with self._lock:
            entries = list(self._logs.values())

        if service and service != ALL_SERVICES:
            entries = [e for e in entries if e.service == service]
        if level and level != ALL_LEVELS:
            entries = [e for e in entries if e.level == level]

        entries.sort(key=lambda e: (e.timestamp, e.id), reverse=True)

        if limit:
            entries = entries[:limit]
        return entries

    def get_log_entry(self, entry_id: int) -> Optional[LogEntry]:
        with self._lock:
            return self._logs.get(entry_id)

    def create_log_entry(self, fields: Mapping[str, Any]) -> LogEntry:
        # No event: log entries are what the hooks produce.
        with self._lock:
            entry = LogEntry(**{**fields, "id": self._next_id("logs"), "timestamp": self._now()})
            self._logs[entry.id] = entry
        return entry

    # -------------------------
    # IAM Users
    # -------------------------
    def list_iam_users(self) -> List[IamUser]:
        with self._lock:
            return list(self._iam_users.values())

    def get_iam_user(self, user_id: int) -> Optional[IamUser]:
        with self._lock:
            return self._iam_users.get(user_id)

    def create_iam_user(self, fields: Mapping[str, Any]) -> IamUser:
        with self._lock:
            self._ensure_unique(self._iam_users, "email", fields.get("email"), label="User", casefold=True)
            user = IamUser(
                **{**fields, "id": self._next_id("iam_users"), "status": "Active", "created_at": self._now()}
            )
            self._iam_users[user.id] = user
        self.hooks.emit("iam_user.created", user=user)
        return user

    def update_iam_user(self, user_id: int, fields: Mapping[str, Any]) -> Optional[IamUser]:
        with self._lock:
            if user_id not in self._iam_users:
                return None
            if not fields:
                return self._iam_users[user_id]
            self._ensure_unique(
                self._iam_users, "email", fields.get("email"), label="User", exclude_id=user_id, casefold=True
            )
            user = self._merge(self._iam_users, user_id, fields)
        self.hooks.emit("iam_user.updated", user=user, changes=dict(fields))
        return user

    def delete_iam_user(self, user_id: int) -> bool:
        with self._lock:
            user = self._iam_users.pop(user_id, None)
        if user is None:
            return False
        self.hooks.emit("iam_user.deleted", user=user)
        return True

    # -------------------------
    # Service Accounts
    # -------------------------
    def list_service_accounts(self) -> List[ServiceAccount]:
        with self._lock:
            return list(self._service_accounts.values())

    def get_service_account(self, account_id: int) -> Optional[ServiceAccount]:
        with self._lock:
            return self._service_accounts.get(account_id)

    def _ensure_unique_account(self, fields: Mapping[str, Any], exclude_id: Optional[int] = None) -> None:
        self._ensure_unique(
            self._service_accounts, "name", fields.get("name"), label="Service account", exclude_id=exclude_id
        )
        self._ensure_unique(
            self._service_accounts,
            "email",
            fields.get("email"),
            label="Service account",
            exclude_id=exclude_id,
            casefold=True,
        )

    def create_service_account(self, fields: Mapping[str, Any]) -> ServiceAccount:
        with self._lock:
            self._ensure_unique_account(fields)
            account = ServiceAccount(
                **{**fields, "id": self._next_id("service_accounts"), "created_at": self._now()}
            )
            self._service_accounts[account.id] = account
        self.hooks.emit("service_account.created", account=account)
        return account

    def update_service_account(self, account_id: int, fields: Mapping[str, Any]) -> Optional[ServiceAccount]:
        with self._lock:
            if account_id not in self._service_accounts:
                return None
            if not fields:
                return self._service_accounts[account_id]
            self._ensure_unique_account(fields, exclude_id=account_id)
            account = self._merge(self._service_accounts, account_id, fields)
        self.hooks.emit("service_account.updated", account=account, changes=dict(fields))
        return account

    def delete_service_account(self, account_id: int) -> bool:
        with self._lock:
            account = self._service_accounts.pop(account_id, None)
        if account is None:
            return False
        self.hooks.emit("service_account.deleted", account=account)
        return True
