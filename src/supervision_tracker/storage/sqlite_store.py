# src/supervision_tracker/storage/sqlite_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import uuid
from pathlib import Path
from typing import Any

from ..core.dates import now_iso, parse_month
from ..core.errors import NotFoundError
from ..supervision.models import (
    ReportStatus,
    SupervisionReport,
    SupervisionTask,
    TaskStatus,
)

logger = logging.getLogger(__name__)

_TASK_COLUMNS = (
    "task_name",
    "department",
    "deadline",
    "original_deadline",
    "new_deadline",
    "monthly_date",
    "status",
    "remarks",
)
_REPORT_COLUMNS = ("task_id", "month", "report_content", "status")


class SQLiteSupervisionStore:
    """
    Local SQLite store (degraded mode when the remote API is unavailable).

    Two independent tables, tasks and reports. No foreign key between them:
    report.task_id is a plain non-owning reference, cascades are the caller's job.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Listing order is insertion order (the `seq` rowid).

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "supervision.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info(
            "SQLiteSupervisionStore ready db=%s tasks=%s reports=%s",
            self._db_path,
            self._count("tasks"),
            self._count("reports"),
        )

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    task_name TEXT NOT NULL,
                    department TEXT NOT NULL DEFAULT '',
                    deadline TEXT NOT NULL,
                    original_deadline TEXT,
                    new_deadline TEXT,
                    monthly_date INTEGER NOT NULL DEFAULT 1,
                    status TEXT NOT NULL DEFAULT 'pending',
                    remarks TEXT,
                    created_at TEXT NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS reports (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    task_id TEXT NOT NULL,
                    month TEXT NOT NULL,
                    report_content TEXT NOT NULL DEFAULT '',
                    status TEXT NOT NULL DEFAULT 'pending',
                    created_at TEXT NOT NULL
                )
                """
            )

            # Migrations (safe): add columns introduced after the first release.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("SQLiteSupervisionStore migration: added column tasks.%s", name)

            add_col("original_deadline", "TEXT")
            add_col("new_deadline", "TEXT")
            add_col("remarks", "TEXT")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_reports_task_month ON reports(task_id, month)")

            conn.commit()
        finally:
            conn.close()

    def _count(self, table: str) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
            return int(n)
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> SupervisionTask:
        return SupervisionTask(
            id=str(row["id"]),
            task_name=str(row["task_name"] or ""),
            department=str(row["department"] or ""),
            deadline=str(row["deadline"]),
            monthly_date=int(row["monthly_date"] or 1),
            status=TaskStatus.from_raw(row["status"]),
            created_at=str(row["created_at"] or ""),
            original_deadline=row["original_deadline"],
            new_deadline=row["new_deadline"],
            remarks=row["remarks"],
        )

    @staticmethod
    def _row_to_report(row: sqlite3.Row) -> SupervisionReport:
        return SupervisionReport(
            id=str(row["id"]),
            task_id=str(row["task_id"]),
            month=str(row["month"]),
            report_content=str(row["report_content"] or ""),
            status=ReportStatus.from_raw(row["status"]),
            created_at=str(row["created_at"] or ""),
        )

    @staticmethod
    def _db_value(value: Any) -> Any:
        if isinstance(value, (TaskStatus, ReportStatus)):
            return value.value
        return value

    def _fetch_one(self, table: str, record_id: str) -> sqlite3.Row | None:
        conn = self._get_conn()
        try:
            return conn.execute(f"SELECT * FROM {table} WHERE id = ?", (record_id,)).fetchone()
        finally:
            conn.close()

    def _update(
        self, table: str, allowed: tuple[str, ...], record_id: str, fields: dict[str, Any]
    ) -> None:
        sets: list[str] = []
        params: list[Any] = []
        for key, value in fields.items():
            if key not in allowed:
                raise ValueError(f"Field {key!r} cannot be updated")
            sets.append(f"{key} = ?")
            params.append(self._db_value(value))

        conn = self._get_conn()
        try:
            if sets:
                cur = conn.execute(
                    f"UPDATE {table} SET {', '.join(sets)} WHERE id = ?", (*params, record_id)
                )
                found = cur.rowcount == 1
            else:
                found = conn.execute(f"SELECT 1 FROM {table} WHERE id = ?", (record_id,)).fetchone() is not None
            conn.commit()
        finally:
            conn.close()

        if not found:
            raise NotFoundError(table[:-1], record_id)

    def _delete(self, table: str, record_id: str) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))
            conn.commit()
            deleted = cur.rowcount > 0
        finally:
            conn.close()
        if not deleted:
            raise NotFoundError(table[:-1], record_id)
        logger.debug("Deleted %s id=%s", table[:-1], record_id)
        return True

    # ---- tasks ----

    def list_tasks(self) -> list[SupervisionTask]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM tasks ORDER BY seq ASC").fetchall()
            return [self._row_to_task(r) for r in rows]
        finally:
            conn.close()

    def create_task(self, fields: dict[str, Any]) -> SupervisionTask:
        task_name = str(fields.get("task_name") or "").strip()
        if not task_name:
            raise ValueError("task_name is required")
        if not fields.get("deadline"):
            raise ValueError("deadline is required")

        task_id = uuid.uuid4().hex
        status = TaskStatus.from_raw(self._db_value(fields.get("status")))

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO tasks(
                    id, task_name, department, deadline, original_deadline, new_deadline,
                    monthly_date, status, remarks, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task_id,
                    task_name,
                    str(fields.get("department") or "").strip(),
                    str(fields["deadline"]),
                    fields.get("original_deadline"),
                    fields.get("new_deadline"),
                    int(fields.get("monthly_date") or 1),
                    status.value,
                    fields.get("remarks"),
                    now_iso(),
                ),
            )
            conn.commit()
        finally:
            conn.close()

        logger.debug("Task added id=%s name=%s deadline=%s", task_id, task_name, fields["deadline"])
        return self.get_task(task_id)

    def get_task(self, task_id: str) -> SupervisionTask:
        row = self._fetch_one("tasks", task_id)
        if row is None:
            raise NotFoundError("task", task_id)
        return self._row_to_task(row)

    def update_task(self, task_id: str, fields: dict[str, Any]) -> SupervisionTask:
        self._update("tasks", _TASK_COLUMNS, task_id, fields)
        return self.get_task(task_id)

    def delete_task(self, task_id: str) -> bool:
        return self._delete("tasks", task_id)

    # ---- reports ----

    def list_reports(self) -> list[SupervisionReport]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM reports ORDER BY seq ASC").fetchall()
            return [self._row_to_report(r) for r in rows]
        finally:
            conn.close()

    def create_report(self, fields: dict[str, Any]) -> SupervisionReport:
        task_id = str(fields.get("task_id") or "")
        if not task_id:
            raise ValueError("task_id is required")
        month = parse_month(fields.get("month"))

        report_id = uuid.uuid4().hex
        status = ReportStatus.from_raw(self._db_value(fields.get("status")))

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO reports(id, task_id, month, report_content, status, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    report_id,
                    task_id,
                    month,
                    str(fields.get("report_content") or ""),
                    status.value,
                    now_iso(),
                ),
            )
            conn.commit()
        finally:
            conn.close()

        logger.debug("Report added id=%s task_id=%s month=%s", report_id, task_id, month)
        return self.get_report(report_id)

    def get_report(self, report_id: str) -> SupervisionReport:
        row = self._fetch_one("reports", report_id)
        if row is None:
            raise NotFoundError("report", report_id)
        return self._row_to_report(row)

    def update_report(self, report_id: str, fields: dict[str, Any]) -> SupervisionReport:
        self._update("reports", _REPORT_COLUMNS, report_id, fields)
        return self.get_report(report_id)

    def delete_report(self, report_id: str) -> bool:
        return self._delete("reports", report_id)
