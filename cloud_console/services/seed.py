# cloud_console/services/seed.py
"""
Demo sample data so a freshly started console is not empty.

Seeding goes straight through the store before the activity hooks are
installed, so it does not add "deployed successfully" lines to the log.
"""

from __future__ import annotations

from cloud_console.schemas.logs import LogLevel
from cloud_console.services.store import ResourceStore


def seed_sample_data(store: ResourceStore) -> None:
    store.create_function({
        "name": "user-authentication",
        "runtime": "Node.js 18",
        "trigger": "HTTP",
        "code": "exports.handler = (req, res) => { res.json({ message: 'Hello World' }); }",
    })
    store.create_function({
        "name": "data-processor",
        "runtime": "Python 3.9",
        "trigger": "Cloud Storage",
        "code": "def main(event, context): print('Processing data')",
    })

    store.create_endpoint({
        "path": "/api/users",
        "method": "GET",
        "status": "Healthy",
        "requests_per_min": 45,
        "avg_response_time": 120,
    })
    store.create_endpoint({
        "path": "/api/auth/login",
        "method": "POST",
        "status": "Healthy",
        "requests_per_min": 12,
        "avg_response_time": 200,
    })

    for name in ("users", "products", "orders"):
        store.create_collection({"name": name})

    store.create_log_entry({
        "service": "Cloud Functions",
        "level": LogLevel.INFO,
        "message": "Function 'user-authentication' deployed successfully",
    })
    store.create_log_entry({
        "service": "Cloud Endpoints",
        "level": LogLevel.WARNING,
        "message": "API endpoint '/api/data/export' response time exceeded 2s threshold",
    })

    store.create_iam_user({"email": "vra.9618@gmail.com", "role": "Owner"})
    store.create_iam_user({"email": "developer@example.com", "role": "Editor"})

    store.create_service_account({
        "name": "function-executor",
        "email": "function-executor@project.iam.gserviceaccount.com",
        "roles": ["Cloud Functions Invoker"],
    })
