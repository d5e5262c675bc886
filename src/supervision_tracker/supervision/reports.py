# src/supervision_tracker/supervision/reports.py

"""
Report association engine.

Reports reference tasks by a plain `task_id` (non-owning). Everything here is pure:
callers pass the full collections and get plain values back.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import SupervisionReport, SupervisionTask

UNKNOWN_TASK_NAME = "Unknown task"


def has_report_for_month(
    task_id: str, month: str, reports: Iterable[SupervisionReport]
) -> bool:
    """True iff some report matches both task_id and month (duplicates are fine)."""
    return any(r.task_id == task_id and r.month == month for r in reports)


def group_by_month(
    reports: Iterable[SupervisionReport],
) -> dict[str, list[SupervisionReport]]:
    """
    Bucket reports by month.

    Month keys appear in first-seen order and each bucket keeps input order.
    No chronological sorting: the report history view relies on this order.
    """
    groups: dict[str, list[SupervisionReport]] = {}
    for report in reports:
        groups.setdefault(report.month, []).append(report)
    return groups


def resolve_task_name(task_id: str, tasks: Iterable[SupervisionTask]) -> str:
    """Best-effort lookup; dangling references resolve to UNKNOWN_TASK_NAME."""
    for task in tasks:
        if task.id == task_id:
            return task.task_name
    return UNKNOWN_TASK_NAME


def reports_for_task(
    task_id: str, reports: Iterable[SupervisionReport]
) -> list[SupervisionReport]:
    return [r for r in reports if r.task_id == task_id]
