# tests/test_sqlite_store.py

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from supervision_tracker.core.errors import InvalidDateError, NotFoundError
from supervision_tracker.storage.sqlite_store import SQLiteSupervisionStore
from supervision_tracker.supervision.models import ReportStatus, TaskStatus


def _task_fields(name: str = "Website redesign", deadline: str = "2025-12-31") -> dict:
    return {
        "task_name": name,
        "department": "Tech",
        "deadline": deadline,
        "monthly_date": 15,
        "status": TaskStatus.PENDING,
        "remarks": "mobile first",
    }


def test_task_create_list_update_delete(sqlite_store: SQLiteSupervisionStore) -> None:
    first = sqlite_store.create_task(_task_fields("First"))
    second = sqlite_store.create_task(_task_fields("Second"))

    assert first.id and first.id != second.id
    assert first.created_at
    assert first.status == TaskStatus.PENDING
    assert first.remarks == "mobile first"
    assert [t.task_name for t in sqlite_store.list_tasks()] == ["First", "Second"]

    updated = sqlite_store.update_task(
        first.id,
        {"deadline": "2026-01-31", "original_deadline": "2025-12-31", "status": TaskStatus.DELAYED},
    )
    assert updated.deadline == "2026-01-31"
    assert updated.original_deadline == "2025-12-31"
    assert updated.status == TaskStatus.DELAYED
    assert updated.created_at == first.created_at

    assert sqlite_store.delete_task(first.id) is True
    assert [t.id for t in sqlite_store.list_tasks()] == [second.id]


def test_missing_ids_raise_not_found(sqlite_store: SQLiteSupervisionStore) -> None:
    with pytest.raises(NotFoundError):
        sqlite_store.update_task("nope", {"status": TaskStatus.COMPLETED})
    with pytest.raises(NotFoundError):
        sqlite_store.delete_task("nope")
    with pytest.raises(NotFoundError):
        sqlite_store.update_report("nope", {"report_content": "x"})
    with pytest.raises(NotFoundError):
        sqlite_store.delete_report("nope")


def test_immutable_fields_cannot_be_updated(sqlite_store: SQLiteSupervisionStore) -> None:
    task = sqlite_store.create_task(_task_fields())
    with pytest.raises(ValueError):
        sqlite_store.update_task(task.id, {"created_at": "2000-01-01"})


def test_reports_are_independent_of_tasks(sqlite_store: SQLiteSupervisionStore) -> None:
    task = sqlite_store.create_task(_task_fields())
    report = sqlite_store.create_report(
        {
            "task_id": task.id,
            "month": "2025-10",
            "report_content": "requirements done",
            "status": ReportStatus.COMPLETED,
        }
    )
    assert report.status == ReportStatus.COMPLETED

    # No referential integrity at the storage level.
    sqlite_store.delete_task(task.id)
    assert [r.id for r in sqlite_store.list_reports()] == [report.id]

    edited = sqlite_store.update_report(report.id, {"report_content": "design done"})
    assert edited.report_content == "design done"
    assert edited.month == "2025-10"

    with pytest.raises(InvalidDateError):
        sqlite_store.create_report({"task_id": task.id, "month": "October"})


def test_data_survives_reopen(tmp_path: Path) -> None:
    db = tmp_path / "s.sqlite3"
    SQLiteSupervisionStore(db).create_task(_task_fields("Persisted"))
    assert [t.task_name for t in SQLiteSupervisionStore(db).list_tasks()] == ["Persisted"]


def test_migration_adds_missing_columns(tmp_path: Path) -> None:
    db = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(str(db))
    conn.execute(
        """
        CREATE TABLE tasks (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            id TEXT NOT NULL UNIQUE,
            task_name TEXT NOT NULL,
            department TEXT NOT NULL DEFAULT '',
            deadline TEXT NOT NULL,
            monthly_date INTEGER NOT NULL DEFAULT 1,
            status TEXT NOT NULL DEFAULT 'pending',
            created_at TEXT NOT NULL
        )
        """
    )
    conn.execute(
        "INSERT INTO tasks(id, task_name, deadline, monthly_date, status, created_at) "
        "VALUES ('legacy', 'Budget', '2025-11-15', 10, 'weird', '2025-07-05')"
    )
    conn.commit()
    conn.close()

    store = SQLiteSupervisionStore(db)
    (task,) = store.list_tasks()
    assert task.id == "legacy"
    assert task.original_deadline is None
    assert task.remarks is None
    # Unknown stored status falls back to pending.
    assert task.status == TaskStatus.PENDING
