# tests/test_fallback_store.py

from __future__ import annotations

import httpx
import pytest

from supervision_tracker.core.errors import NotFoundError
from supervision_tracker.storage.fallback_store import FallbackSupervisionStore
from supervision_tracker.storage.remote_store import RemoteSupervisionStore
from supervision_tracker.storage.sqlite_store import SQLiteSupervisionStore
from supervision_tracker.supervision.models import TaskStatus

from .fakes import FakeRepo, UnreachableRepo, make_task

FIELDS = {
    "task_name": "Annual budget",
    "department": "Finance",
    "deadline": "2025-11-15",
    "monthly_date": 10,
    "status": TaskStatus.PENDING,
    "remarks": None,
}


def test_remote_answers_are_used_when_available(sqlite_store: SQLiteSupervisionStore) -> None:
    remote = FakeRepo(tasks=[make_task("remote-1")])
    store = FallbackSupervisionStore(remote, sqlite_store)

    assert [t.id for t in store.list_tasks()] == ["remote-1"]
    assert store.degraded is False
    assert sqlite_store.list_tasks() == []


def test_unreachable_remote_degrades_to_local(sqlite_store: SQLiteSupervisionStore) -> None:
    remote = UnreachableRepo()
    store = FallbackSupervisionStore(remote, sqlite_store)

    created = store.create_task(FIELDS)
    assert store.degraded is True
    assert [t.id for t in store.list_tasks()] == [created.id]

    store.update_task(created.id, {"status": TaskStatus.COMPLETED})
    assert sqlite_store.list_tasks()[0].status == TaskStatus.COMPLETED

    assert store.delete_task(created.id) is True
    assert store.list_tasks() == []
    assert remote.attempts == 5


def test_http_failure_through_real_client_falls_back(sqlite_store: SQLiteSupervisionStore) -> None:
    def broken(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    remote = RemoteSupervisionStore("http://backend.test/api", transport=httpx.MockTransport(broken))
    store = FallbackSupervisionStore(remote, sqlite_store)

    report = store.create_report({"task_id": "t1", "month": "2025-10", "report_content": "ok"})
    assert [r.id for r in store.list_reports()] == [report.id]


def test_remote_not_found_is_not_masked(sqlite_store: SQLiteSupervisionStore) -> None:
    store = FallbackSupervisionStore(FakeRepo(), sqlite_store)
    with pytest.raises(NotFoundError):
        store.delete_task("missing")
    assert store.degraded is False


def test_recovers_when_remote_comes_back(sqlite_store: SQLiteSupervisionStore) -> None:
    store = FallbackSupervisionStore(UnreachableRepo(), sqlite_store)
    store.list_reports()
    assert store.degraded is True

    store.remote = FakeRepo()
    store.list_reports()
    assert store.degraded is False
