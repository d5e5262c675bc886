# src/supervision_tracker/supervision/api.py

"""
Dashboard operations.

Each function applies one user action: validate against the in-memory collections,
call the store, then replace the in-memory record with what the store returned
(last writer wins). The lifecycle/report engines stay pure; this module is the only
place that mutates AppState.
"""

from __future__ import annotations

import contextlib
import logging
from datetime import date
from typing import Any

from ..core.dates import current_month, parse_date
from ..core.errors import NotFoundError
from ..core.state import AppState
from .lifecycle import extension_fields
from .models import ReportStatus, SupervisionReport, SupervisionTask, TaskStatus
from .reports import reports_for_task

logger = logging.getLogger(__name__)

_EDITABLE_TASK_FIELDS = {"task_name", "department", "deadline", "monthly_date", "status", "remarks"}


def _validate_monthly_date(value: Any) -> int:
    try:
        day = int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"monthly_date must be an integer 1-31, got {value!r}") from e
    if not 1 <= day <= 31:
        raise ValueError(f"monthly_date must be between 1 and 31, got {day}")
    return day


def _replace_task(state: AppState, task: SupervisionTask) -> None:
    state.tasks = [task if t.id == task.id else t for t in state.tasks]


def _replace_report(state: AppState, report: SupervisionReport) -> None:
    state.reports = [report if r.id == report.id else r for r in state.reports]


def load_all(state: AppState) -> None:
    state.tasks = state.store.list_tasks()
    state.reports = state.store.list_reports()
    logger.info("Loaded %d tasks and %d reports", len(state.tasks), len(state.reports))


def find_task(state: AppState, task_id: str) -> SupervisionTask:
    for task in state.tasks:
        if task.id == task_id:
            return task
    raise NotFoundError("task", task_id)


def find_report(state: AppState, report_id: str) -> SupervisionReport:
    for report in state.reports:
        if report.id == report_id:
            return report
    raise NotFoundError("report", report_id)


# ---- tasks ----


def add_task(
    state: AppState,
    *,
    task_name: str,
    department: str,
    deadline: str,
    monthly_date: int,
    status: TaskStatus = TaskStatus.PENDING,
    remarks: str | None = None,
) -> SupervisionTask:
    if not task_name or not task_name.strip():
        raise ValueError("task_name is required")

    fields: dict[str, Any] = {
        "task_name": task_name.strip(),
        "department": (department or "").strip(),
        "deadline": parse_date(deadline).isoformat(),
        "monthly_date": _validate_monthly_date(monthly_date),
        "status": TaskStatus(status),
        "remarks": remarks or None,
    }
    task = state.store.create_task(fields)
    state.tasks = [*state.tasks, task]
    logger.info("Task created id=%s name=%s", task.id, task.task_name)
    return task


def update_task(state: AppState, task_id: str, **changes: Any) -> SupervisionTask:
    """
    Edit task fields (the task form).

    A changed deadline captures original_deadline the first time, same as an extension.
    """
    current = find_task(state, task_id)

    unknown = set(changes) - _EDITABLE_TASK_FIELDS
    if unknown:
        raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

    fields = dict(changes)
    if "task_name" in fields and not str(fields["task_name"] or "").strip():
        raise ValueError("task_name is required")
    if "monthly_date" in fields:
        fields["monthly_date"] = _validate_monthly_date(fields["monthly_date"])
    if "status" in fields:
        fields["status"] = TaskStatus(fields["status"])
    if "deadline" in fields:
        fields["deadline"] = parse_date(fields["deadline"]).isoformat()
        if fields["deadline"] != current.deadline and not current.original_deadline:
            fields["original_deadline"] = current.deadline

    task = state.store.update_task(task_id, fields)
    _replace_task(state, task)
    logger.info("Task updated id=%s fields=%s", task_id, sorted(fields))
    return task


def complete_task(state: AppState, task_id: str) -> SupervisionTask:
    return update_task(state, task_id, status=TaskStatus.COMPLETED)


def update_deadline(
    state: AppState, task_id: str, new_deadline: str, today: date | str
) -> SupervisionTask:
    """Record a deadline extension (see lifecycle.extension_fields) and persist it."""
    current = find_task(state, task_id)
    fields = extension_fields(current, new_deadline, today)

    task = state.store.update_task(task_id, fields)
    _replace_task(state, task)
    logger.info(
        "Deadline extended id=%s %s -> %s status=%s",
        task_id,
        current.deadline,
        task.deadline,
        task.status.value,
    )
    return task


def delete_task(state: AppState, task_id: str) -> None:
    """Delete a task and cascade to every report that references it."""
    find_task(state, task_id)
    state.store.delete_task(task_id)

    orphaned = reports_for_task(task_id, state.reports)
    for report in orphaned:
        with contextlib.suppress(NotFoundError):
            state.store.delete_report(report.id)

    state.tasks = [t for t in state.tasks if t.id != task_id]
    state.reports = [r for r in state.reports if r.task_id != task_id]
    logger.info("Task deleted id=%s (cascaded %d reports)", task_id, len(orphaned))


# ---- reports ----


def add_report(
    state: AppState, task_id: str, report_content: str, today: date | str
) -> SupervisionReport:
    """File this month's report for a task."""
    find_task(state, task_id)
    if not report_content or not report_content.strip():
        raise ValueError("report_content is required")

    fields: dict[str, Any] = {
        "task_id": task_id,
        "month": current_month(today),
        "report_content": report_content.strip(),
        "status": ReportStatus.COMPLETED,
    }
    report = state.store.create_report(fields)
    state.reports = [*state.reports, report]
    logger.info("Report filed id=%s task_id=%s month=%s", report.id, task_id, report.month)
    return report


def edit_report(state: AppState, report_id: str, report_content: str) -> SupervisionReport:
    find_report(state, report_id)
    if not report_content or not report_content.strip():
        raise ValueError("report_content is required")

    report = state.store.update_report(report_id, {"report_content": report_content.strip()})
    _replace_report(state, report)
    logger.info("Report edited id=%s", report_id)
    return report


def delete_report(state: AppState, report_id: str) -> None:
    find_report(state, report_id)
    state.store.delete_report(report_id)
    state.reports = [r for r in state.reports if r.id != report_id]
    logger.info("Report deleted id=%s", report_id)
