# cloud_console/services/activity.py
"""
Activity log: turns resource events into console LogEntry records.

Every write the dashboard performs shows up in the Logging section as a line
such as "Function 'data-processor' deployed successfully". Those lines are
produced here, as post-commit hooks on the store's HookRegistry, so
route handlers never write log entries themselves.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Tuple

from cloud_console.schemas.logs import LogLevel
from cloud_console.services.store import ResourceStore

FUNCTIONS = "Cloud Functions"
ENDPOINTS = "Cloud Endpoints"
FIRESTORE = "Cloud Firestore"
IAM = "IAM"

MessageBuilder = Callable[..., str]

# event -> (service, message builder). All activity lines are INFO.
ACTIVITY_MESSAGES: Dict[str, Tuple[str, MessageBuilder]] = {
    "function.created": (FUNCTIONS, lambda function, **_: f"Function '{function.name}' deployed successfully"),
    "function.updated": (FUNCTIONS, lambda function, **_: f"Function '{function.name}' updated successfully"),
    "function.deleted": (FUNCTIONS, lambda function, **_: f"Function '{function.name}' deleted successfully"),
    "endpoint.created": (
        ENDPOINTS,
        lambda endpoint, **_: f"API endpoint '{endpoint.method} {endpoint.path}' registered",
    ),
    "endpoint.updated": (
        ENDPOINTS,
        lambda endpoint, **_: f"API endpoint '{endpoint.method} {endpoint.path}' updated",
    ),
    "endpoint.tested": (ENDPOINTS, lambda method, url, **_: f"API request processed: {method} {url}"),
    "collection.created": (FIRESTORE, lambda collection, **_: f"Collection '{collection.name}' created successfully"),
    "collection.deleted": (FIRESTORE, lambda collection, **_: f"Collection '{collection.name}' deleted successfully"),
    "document.created": (
        FIRESTORE,
        lambda document, collection, **_: f"Document '{document.document_id}' created in collection '{collection.name}'",
    ),
    "document.updated": (FIRESTORE, lambda document, **_: f"Document '{document.document_id}' updated successfully"),
    "document.deleted": (FIRESTORE, lambda document, **_: f"Document '{document.document_id}' deleted successfully"),
    "query.executed": (
        FIRESTORE,
        lambda field, operator, value, **_: f"Query executed: {field} {operator} {value}",
    ),
    "iam_user.created": (IAM, lambda user, **_: f"User '{user.email}' added with role '{user.role}'"),
    "iam_user.updated": (IAM, lambda user, **_: f"User '{user.email}' updated"),
    "iam_user.deleted": (IAM, lambda user, **_: f"User '{user.email}' removed successfully"),
    "service_account.created": (
        IAM,
        lambda account, **_: f"Service account '{account.name}' created successfully",
    ),
    "service_account.updated": (IAM, lambda account, **_: f"Service account '{account.name}' updated"),
    "service_account.deleted": (IAM, lambda account, **_: f"Service account '{account.name}' deleted"),
    "security_policies.updated": (IAM, lambda **_: "Security policies updated successfully"),
}


def _activity_hook(store: ResourceStore, service: str, build: MessageBuilder) -> Callable[..., Any]:
    def hook(**payload: Any) -> None:
        store.create_log_entry({"service": service, "level": LogLevel.INFO, "message": build(**payload)})

    return hook


def install_activity_log(store: ResourceStore) -> None:
    """Subscribe one log-writing hook per activity event on `store.hooks`."""
    for event, (service, build) in ACTIVITY_MESSAGES.items():
        store.hooks.subscribe(event, _activity_hook(store, service, build))
