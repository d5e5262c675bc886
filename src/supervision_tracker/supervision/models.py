# src/supervision_tracker/supervision/models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..core.dates import parse_date, parse_month
from ..core.errors import InvalidDateError, StoreError


class TaskStatus(StrEnum):
    """
    Supervision task lifecycle status.

    Notes:
    - "delayed" is a stored status written by deadline extensions; the delay *view*
      is computed from dates (see lifecycle.is_delayed), not from this field.
    """

    PENDING = "pending"
    COMPLETED = "completed"
    DELAYED = "delayed"

    @classmethod
    def from_raw(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING


class ReportStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def from_raw(cls, raw: str | None) -> ReportStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING


@dataclass(slots=True)
class SupervisionTask:
    id: str
    task_name: str
    department: str
    deadline: str
    monthly_date: int
    status: TaskStatus
    created_at: str

    original_deadline: str | None = None
    new_deadline: str | None = None
    remarks: str | None = None


@dataclass(slots=True)
class SupervisionReport:
    id: str
    task_id: str  # non-owning reference to SupervisionTask.id
    month: str
    report_content: str
    status: ReportStatus
    created_at: str


# attribute name -> wire (JSON) name
TASK_WIRE_NAMES: dict[str, str] = {
    "id": "id",
    "task_name": "taskName",
    "department": "department",
    "deadline": "deadline",
    "original_deadline": "originalDeadline",
    "new_deadline": "newDeadline",
    "monthly_date": "monthlyDate",
    "status": "status",
    "remarks": "remarks",
    "created_at": "createdAt",
}

REPORT_WIRE_NAMES: dict[str, str] = {
    "id": "id",
    "task_id": "taskId",
    "month": "month",
    "report_content": "reportContent",
    "status": "status",
    "created_at": "createdAt",
}


def fields_to_wire(fields: dict[str, Any], names: dict[str, str]) -> dict[str, Any]:
    """Convert a patch keyed by attribute names into wire names (unknown keys rejected)."""
    out: dict[str, Any] = {}
    for key, value in fields.items():
        if key not in names:
            raise ValueError(f"Unknown field: {key}")
        out[names[key]] = value.value if isinstance(value, StrEnum) else value
    return out


def _opt_str(v: Any) -> str | None:
    if v is None:
        return None
    s = str(v)
    return s or None


def _wire_date(data: dict[str, Any], key: str, *, required: bool) -> str | None:
    raw = data.get(key)
    if raw in (None, ""):
        if required:
            raise StoreError(f"Record {data.get('id')!r} is missing {key!r}")
        return None
    try:
        return parse_date(raw).isoformat()
    except InvalidDateError as e:
        raise StoreError(f"Record {data.get('id')!r} has invalid {key}: {raw!r}") from e


def task_from_wire(data: Any) -> SupervisionTask:
    """Build a task from a wire record; anything the engines could choke on raises StoreError."""
    if not isinstance(data, dict):
        raise StoreError("Task record must be a JSON object")
    for key in ("id", "taskName"):
        if data.get(key) in (None, ""):
            raise StoreError(f"Task record is missing {key!r}")
    try:
        monthly_date = int(data.get("monthlyDate"))
    except (TypeError, ValueError) as e:
        raise StoreError(f"Task {data['id']} has invalid monthlyDate") from e
    if not 1 <= monthly_date <= 31:
        raise StoreError(f"Task {data['id']} has monthlyDate out of range: {monthly_date}")

    return SupervisionTask(
        id=str(data["id"]),
        task_name=str(data["taskName"]),
        department=str(data.get("department") or ""),
        deadline=_wire_date(data, "deadline", required=True) or "",
        monthly_date=monthly_date,
        status=TaskStatus.from_raw(data.get("status")),
        created_at=str(data.get("createdAt") or ""),
        original_deadline=_wire_date(data, "originalDeadline", required=False),
        new_deadline=_wire_date(data, "newDeadline", required=False),
        remarks=_opt_str(data.get("remarks")),
    )


def task_to_wire(task: SupervisionTask) -> dict[str, Any]:
    return {
        "id": task.id,
        "taskName": task.task_name,
        "department": task.department,
        "deadline": task.deadline,
        "originalDeadline": task.original_deadline,
        "newDeadline": task.new_deadline,
        "monthlyDate": task.monthly_date,
        "status": task.status.value,
        "remarks": task.remarks,
        "createdAt": task.created_at,
    }


def report_from_wire(data: Any) -> SupervisionReport:
    if not isinstance(data, dict):
        raise StoreError("Report record must be a JSON object")
    for key in ("id", "taskId", "month"):
        if data.get(key) in (None, ""):
            raise StoreError(f"Report record is missing {key!r}")
    try:
        month = parse_month(data["month"])
    except InvalidDateError as e:
        raise StoreError(f"Report {data['id']} has invalid month: {data['month']!r}") from e

    return SupervisionReport(
        id=str(data["id"]),
        task_id=str(data["taskId"]),
        month=month,
        report_content=str(data.get("reportContent") or ""),
        status=ReportStatus.from_raw(data.get("status")),
        created_at=str(data.get("createdAt") or ""),
    )


def report_to_wire(report: SupervisionReport) -> dict[str, Any]:
    return {
        "id": report.id,
        "taskId": report.task_id,
        "month": report.month,
        "reportContent": report.report_content,
        "status": report.status.value,
        "createdAt": report.created_at,
    }
