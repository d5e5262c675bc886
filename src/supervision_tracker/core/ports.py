# src/supervision_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the dashboard layer.

The dashboard depends on a Protocol instead of a concrete store.
This keeps the remote/local stores swappable and makes testing easier.

Field mappings passed to create/update use attribute names (task_name, monthly_date, ...);
each store converts them to its own layout.
"""

from typing import Any, Protocol

from ..supervision.models import SupervisionReport, SupervisionTask


class SupervisionRepo(Protocol):
    # Tasks
    def list_tasks(self) -> list[SupervisionTask]: ...
    def create_task(self, fields: dict[str, Any]) -> SupervisionTask: ...
    def update_task(self, task_id: str, fields: dict[str, Any]) -> SupervisionTask: ...
    def delete_task(self, task_id: str) -> bool: ...

    # Reports
    def list_reports(self) -> list[SupervisionReport]: ...
    def create_report(self, fields: dict[str, Any]) -> SupervisionReport: ...
    def update_report(self, report_id: str, fields: dict[str, Any]) -> SupervisionReport: ...
    def delete_report(self, report_id: str) -> bool: ...
