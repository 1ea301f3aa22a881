"""
Unit tests for the in-memory resource store (no HTTP involved).
"""
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from cloud_console.core.errors import ValidationError
from cloud_console.services.activity import install_activity_log
from cloud_console.services.seed import seed_sample_data
from cloud_console.services.store import ResourceStore


def _function(name):
    return {"name": name, "runtime": "Node.js 18", "trigger": "HTTP", "code": "exports.handler = () => {}"}


def test_ids_are_sequential_and_never_reused(bare_store):
    created = [bare_store.create_function(_function(f"fn-{i}")) for i in range(1, 5)]
    assert [f.id for f in created] == [1, 2, 3, 4]

    assert bare_store.delete_function(2) is True
    replacement = bare_store.create_function(_function("fn-new"))

    assert replacement.id == 5
    assert [f.id for f in bare_store.list_functions()] == [1, 3, 4, 5]


def test_function_defaults_applied_on_create(bare_store, clock):
    func = bare_store.create_function(_function("hello"))
    assert func.status == "Active"
    assert func.deployed == clock.now


def test_delete_missing_function_returns_false(bare_store):
    assert bare_store.delete_function(999) is False


def test_document_count_tracks_creates_and_deletes(bare_store):
    users = bare_store.create_collection({"name": "users"})
    docs = [bare_store.create_document(users.id, {"data": {"n": i}}) for i in range(3)]
    assert bare_store.get_collection(users.id).document_count == 3

    assert bare_store.delete_document(docs[0].id) is True
    assert bare_store.get_collection(users.id).document_count == 2

    for doc in docs[1:]:
        bare_store.delete_document(doc.id)
    assert bare_store.delete_document(docs[0].id) is False
    assert bare_store.get_collection(users.id).document_count == 0


def test_document_requires_existing_collection(bare_store):
    with pytest.raises(ValidationError) as excinfo:
        bare_store.create_document(42, {"data": {}})
    assert excinfo.value.code == "UNKNOWN_COLLECTION"
    assert bare_store.list_documents(42) == []


def test_document_id_generated_when_omitted(bare_store):
    col = bare_store.create_collection({"name": "orders"})
    chosen = bare_store.create_document(col.id, {"document_id": "order-1", "data": {}})
    generated = bare_store.create_document(col.id, {"data": {}})

    assert chosen.document_id == "order-1"
    assert len(generated.document_id) == 20


def test_deleting_collection_leaves_documents_dangling(bare_store):
    col = bare_store.create_collection({"name": "tmp"})
    doc = bare_store.create_document(col.id, {"data": {"a": 1}})

    assert bare_store.delete_collection(col.id) is True
    assert bare_store.get_document(doc.id) is not None
    # Parent is gone; deleting the orphan still works.
    assert bare_store.delete_document(doc.id) is True


def test_update_document_is_shallow_merge(bare_store):
    col = bare_store.create_collection({"name": "users"})
    doc = bare_store.create_document(col.id, {"document_id": "u1", "data": {"x": 0, "y": 0}})

    updated = bare_store.update_document(doc.id, {"data": {"x": 1}, "collection_id": 99})

    assert updated.data == {"x": 1}
    assert updated.document_id == "u1"
    assert updated.collection_id == col.id
    assert updated.created_at == doc.created_at
    assert updated.updated_at > doc.updated_at


def test_update_missing_record_returns_none(bare_store):
    assert bare_store.update_document(7, {"data": {}}) is None
    assert bare_store.update_function(7, {"code": ""}) is None
    assert bare_store.update_iam_user(7, {"role": "Viewer"}) is None


def test_update_keeps_unmentioned_fields(bare_store):
    endpoint = bare_store.create_endpoint(
        {"path": "/api/a", "method": "GET", "status": "Healthy", "requests_per_min": 5, "avg_response_time": 80}
    )
    updated = bare_store.update_endpoint(endpoint.id, {"status": "Degraded"})

    assert updated.status == "Degraded"
    assert updated.requests_per_min == 5
    assert updated.path == "/api/a"


def test_function_names_are_unique(bare_store):
    bare_store.create_function(_function("dup"))
    with pytest.raises(ValidationError) as excinfo:
        bare_store.create_function(_function("dup"))
    assert excinfo.value.code == "DUPLICATE_NAME"
    assert len(bare_store.list_functions()) == 1


def test_rename_to_existing_name_rejected(bare_store):
    bare_store.create_function(_function("a"))
    b = bare_store.create_function(_function("b"))
    with pytest.raises(ValidationError):
        bare_store.update_function(b.id, {"name": "a"})
    # Renaming to its own name is fine.
    assert bare_store.update_function(b.id, {"name": "b"}).name == "b"


def test_emails_unique_case_insensitively(bare_store):
    bare_store.create_iam_user({"email": "Dev@Example.com", "role": "Editor"})
    with pytest.raises(ValidationError) as excinfo:
        bare_store.create_iam_user({"email": "dev@example.com", "role": "Viewer"})
    assert excinfo.value.code == "DUPLICATE_EMAIL"


def test_service_account_name_and_email_unique(bare_store):
    bare_store.create_service_account({"name": "runner", "email": "runner@p.iam", "roles": []})
    with pytest.raises(ValidationError):
        bare_store.create_service_account({"name": "runner", "email": "other@p.iam", "roles": []})
    with pytest.raises(ValidationError):
        bare_store.create_service_account({"name": "other", "email": "RUNNER@p.iam", "roles": []})


def test_iam_user_defaults(bare_store):
    user = bare_store.create_iam_user({"email": "a@b.c", "role": "Owner"})
    assert user.status == "Active"
    assert user.created_at is not None


def _seed_logs(store):
    store.create_log_entry({"service": "IAM", "level": "INFO", "message": "one"})
    store.create_log_entry({"service": "IAM", "level": "ERROR", "message": "two"})
    store.create_log_entry({"service": "Cloud Functions", "level": "INFO", "message": "three"})
    store.create_log_entry({"service": "IAM", "level": "INFO", "message": "four"})


def test_log_query_filters_sorts_and_limits(bare_store):
    _seed_logs(bare_store)

    entries = bare_store.list_log_entries(service="IAM", level="INFO")
    assert [e.message for e in entries] == ["four", "one"]

    limited = bare_store.list_log_entries(service="IAM", level="INFO", limit=1)
    assert [e.message for e in limited] == ["four"]


def test_log_query_sentinels_mean_no_filter(bare_store):
    _seed_logs(bare_store)
    everything = bare_store.list_log_entries(service="All Services", level="All Levels")
    assert [e.message for e in everything] == ["four", "three", "two", "one"]


def test_log_timestamps_monotonic_when_clock_steps_back():
    times = iter(
        [
            datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
            datetime(2024, 1, 1, 11, 0, tzinfo=timezone.utc),
            datetime(2024, 1, 1, 11, 0, tzinfo=timezone.utc),
        ]
    )
    store = ResourceStore(clock=lambda: next(times))
    first = store.create_log_entry({"service": "IAM", "level": "INFO", "message": "a"})
    second = store.create_log_entry({"service": "IAM", "level": "INFO", "message": "b"})
    third = store.create_log_entry({"service": "IAM", "level": "INFO", "message": "c"})

    assert first.timestamp < second.timestamp < third.timestamp
    assert second.timestamp - first.timestamp == timedelta(microseconds=1)
    assert [e.message for e in store.list_log_entries()] == ["c", "b", "a"]


def test_preview_documents_returns_slice_and_total(bare_store):
    col = bare_store.create_collection({"name": "products"})
    for i in range(5):
        bare_store.create_document(col.id, {"data": {"i": i}})

    results, count = bare_store.preview_documents(col.id, 3)
    assert [d.data["i"] for d in results] == [0, 1, 2]
    assert count == 5


def test_activity_hooks_write_log_entries(store):
    store.create_function(_function("data-processor"))
    store.delete_function(1)

    messages = [e.message for e in store.list_log_entries()]
    assert messages == [
        "Function 'data-processor' deleted successfully",
        "Function 'data-processor' deployed successfully",
    ]
    assert {e.service for e in store.list_log_entries()} == {"Cloud Functions"}


def test_failing_hook_does_not_break_mutation(store):
    def broken_hook(**payload):
        raise RuntimeError("log sink down")

    store.hooks.subscribe("collection.created", broken_hook)

    col = store.create_collection({"name": "users"})

    assert store.get_collection(col.id) is not None
    # The activity hook registered before the broken one still ran.
    assert [e.message for e in store.list_log_entries()] == ["Collection 'users' created successfully"]
    assert store.hooks.emit("collection.created", collection=col) == 1


def test_seed_data_adds_no_activity_lines(bare_store):
    seed_sample_data(bare_store)
    install_activity_log(bare_store)

    assert [f.name for f in bare_store.list_functions()] == ["user-authentication", "data-processor"]
    assert [c.name for c in bare_store.list_collections()] == ["users", "products", "orders"]
    assert len(bare_store.list_log_entries()) == 2
    assert len(bare_store.list_iam_users()) == 2
    assert bare_store.list_service_accounts()[0].roles == ["Cloud Functions Invoker"]


def test_empty_update_returns_record_without_event(store):
    func = store.create_function(_function("steady"))
    users = store.create_collection({"name": "users"})
    doc = store.create_document(users.id, {"data": {"a": 1}})
    lines_before = len(store.list_log_entries())

    assert store.update_function(func.id, {}) == func
    assert store.update_document(doc.id, {}) == doc
    assert store.update_document(doc.id, {"collection_id": 99}) == doc
    assert len(store.list_log_entries()) == lines_before


def test_concurrent_document_writes_keep_ids_and_counts_consistent():
    store = ResourceStore()
    install_activity_log(store)
    users = store.create_collection({"name": "users"})
    workers, per_worker = 8, 50
    barrier = threading.Barrier(workers)

    def work(worker):
        barrier.wait()
        created = [
            store.create_document(users.id, {"document_id": f"w{worker}-{i}", "data": {"i": i}})
            for i in range(per_worker)
        ]
        for doc in created[::2]:
            assert store.delete_document(doc.id) is True
        return created

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(work, range(workers)))

    ids = sorted(doc.id for created in results for doc in created)
    assert ids == list(range(1, workers * per_worker + 1))

    live = store.list_documents(users.id)
    assert len(live) == workers * per_worker // 2
    assert store.get_collection(users.id).document_count == len(live)

    # One log line per collection create, document create and document delete.
    assert len(store.list_log_entries()) == 1 + workers * per_worker + len(live)
    timestamps = [e.timestamp for e in store.list_log_entries()]
    assert len(set(timestamps)) == len(timestamps)


def test_concurrent_deletes_of_same_document_decrement_once():
    store = ResourceStore()
    users = store.create_collection({"name": "users"})
    docs = [store.create_document(users.id, {"data": {"i": i}}) for i in range(100)]
    workers = 4
    barrier = threading.Barrier(workers)

    def work(_):
        barrier.wait()
        return sum(store.delete_document(doc.id) for doc in docs)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        deleted = sum(pool.map(work, range(workers)))

    assert deleted == 100
    assert store.get_collection(users.id).document_count == 0
    assert store.list_documents(users.id) == []
