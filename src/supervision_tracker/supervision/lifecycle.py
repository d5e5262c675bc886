# src/supervision_tracker/supervision/lifecycle.py

"""
Task lifecycle engine.

Pure functions that classify a task against an explicit "today":
- is_delayed: late against the *effective* deadline (original if the task was extended)
- is_due_for_monthly_reminder: monthly check-in is due and/or not yet reported
- extend_deadline: record a new deadline while keeping the first committed one

Nothing here reads a clock or touches a store; the dashboard layer persists results.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import date
from typing import Any

from ..core.dates import current_month, day_of_month, parse_date, to_date
from ..core.errors import CompletedTaskError
from .models import SupervisionReport, SupervisionTask, TaskStatus
from .reports import has_report_for_month


def effective_deadline(task: SupervisionTask) -> str:
    return task.original_deadline or task.deadline


def is_delayed(task: SupervisionTask, today: date | str) -> bool:
    if task.status == TaskStatus.COMPLETED:
        return False
    return parse_date(effective_deadline(task)) < to_date(today)


def extension_fields(
    task: SupervisionTask, new_deadline: str, today: date | str
) -> dict[str, Any]:
    """
    Fields changed by a deadline extension, keyed by attribute name.

    original_deadline is captured only on the first extension; later extensions
    never overwrite it.
    """
    new_value = parse_date(new_deadline)
    if task.status == TaskStatus.COMPLETED:
        raise CompletedTaskError(f"Task {task.id} is completed; its deadline cannot be extended")

    fields: dict[str, Any] = {
        "deadline": new_value.isoformat(),
        "new_deadline": new_value.isoformat(),
        "status": TaskStatus.DELAYED if new_value < to_date(today) else TaskStatus.PENDING,
    }
    if not task.original_deadline:
        fields["original_deadline"] = task.deadline
    return fields


def extend_deadline(
    task: SupervisionTask, new_deadline: str, today: date | str
) -> SupervisionTask:
    return replace(task, **extension_fields(task, new_deadline, today))


def is_due_for_monthly_reminder(
    task: SupervisionTask, reports: Iterable[SupervisionReport], today: date | str
) -> bool:
    """
    Due iff (not reported this month and the check-in day has passed) or today
    is exactly the check-in day.

    The exact-day branch surfaces the task even when this month's report exists.
    monthly_date 29-31 never matches exactly in short months; only the
    "day has passed" branch can pick those tasks up, so it must stay a `<=`.
    """
    if task.status == TaskStatus.COMPLETED:
        return False

    today_d = to_date(today)
    day = day_of_month(today_d)
    has_reported = has_report_for_month(task.id, current_month(today_d), reports)
    return (not has_reported and task.monthly_date <= day) or task.monthly_date == day


# ---- list views ----


def delayed_tasks(tasks: Iterable[SupervisionTask], today: date | str) -> list[SupervisionTask]:
    return [t for t in tasks if is_delayed(t, today)]


def monthly_reminders(
    tasks: Iterable[SupervisionTask],
    reports: Sequence[SupervisionReport],
    today: date | str,
) -> list[SupervisionTask]:
    return [t for t in tasks if is_due_for_monthly_reminder(t, reports, today)]


def on_track_tasks(tasks: Iterable[SupervisionTask], today: date | str) -> list[SupervisionTask]:
    return [
        t for t in tasks if t.status != TaskStatus.COMPLETED and not is_delayed(t, today)
    ]
