# src/supervision_tracker/storage/remote_store.py

"""
REST client for the supervision backend.

Endpoints (trailing slashes are part of the API):
- GET/POST       {base}/tasks/
- PUT/DELETE     {base}/tasks/{id}/
- GET/POST       {base}/reports/
- PUT/DELETE     {base}/reports/{id}/

Bodies use the camelCase wire names (taskName, monthlyDate, ...).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

import httpx

from ..core.errors import NotFoundError, StoreError
from ..supervision.models import (
    REPORT_WIRE_NAMES,
    TASK_WIRE_NAMES,
    SupervisionReport,
    SupervisionTask,
    fields_to_wire,
    report_from_wire,
    task_from_wire,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _make_timeout(total_s: float) -> httpx.Timeout:
    connect_s = min(5.0, total_s)
    return httpx.Timeout(total_s, connect=connect_s)


class RemoteSupervisionStore:
    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise ValueError("base_url is required for the remote store")
        self._client = httpx.Client(
            base_url=base_url.strip().rstrip("/"),
            timeout=_make_timeout(timeout_seconds),
            transport=transport,
            headers={"Accept": "application/json"},
        )
        logger.info("RemoteSupervisionStore ready base_url=%s", self._client.base_url)

    def close(self) -> None:
        self._client.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | None = None,
        not_found: tuple[str, str] | None = None,
    ) -> Any:
        try:
            resp = self._client.request(method, path, json=body)
        except httpx.HTTPError as e:
            raise StoreError(f"{method} {path} failed: {e.__class__.__name__}") from e

        if resp.status_code == 404 and not_found is not None:
            raise NotFoundError(*not_found)
        if not resp.is_success:
            raise StoreError(f"{method} {path} returned HTTP {resp.status_code}")

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise StoreError(f"{method} {path} returned invalid JSON") from e

    @staticmethod
    def _as_list(data: Any, path: str) -> list[Any]:
        if not isinstance(data, list):
            raise StoreError(f"GET {path} did not return a JSON array")
        return data

    @staticmethod
    def _decode_all(items: list[Any], decode: Callable[[Any], T], path: str) -> list[T]:
        # One bad record must not hide the rest of the collection.
        out: list[T] = []
        for item in items:
            try:
                out.append(decode(item))
            except StoreError as e:
                logger.warning("Skipping malformed record from GET %s: %s", path, e)
        return out

    # ---- tasks ----

    def list_tasks(self) -> list[SupervisionTask]:
        data = self._request("GET", "/tasks/")
        return self._decode_all(self._as_list(data, "/tasks/"), task_from_wire, "/tasks/")

    def create_task(self, fields: dict[str, Any]) -> SupervisionTask:
        data = self._request("POST", "/tasks/", body=fields_to_wire(fields, TASK_WIRE_NAMES))
        return task_from_wire(data)

    def update_task(self, task_id: str, fields: dict[str, Any]) -> SupervisionTask:
        data = self._request(
            "PUT",
            f"/tasks/{task_id}/",
            body=fields_to_wire(fields, TASK_WIRE_NAMES),
            not_found=("task", task_id),
        )
        return task_from_wire(data)

    def delete_task(self, task_id: str) -> bool:
        self._request("DELETE", f"/tasks/{task_id}/", not_found=("task", task_id))
        return True

    # ---- reports ----

    def list_reports(self) -> list[SupervisionReport]:
        data = self._request("GET", "/reports/")
        return self._decode_all(self._as_list(data, "/reports/"), report_from_wire, "/reports/")

    def create_report(self, fields: dict[str, Any]) -> SupervisionReport:
        data = self._request("POST", "/reports/", body=fields_to_wire(fields, REPORT_WIRE_NAMES))
        return report_from_wire(data)

    def update_report(self, report_id: str, fields: dict[str, Any]) -> SupervisionReport:
        data = self._request(
            "PUT",
            f"/reports/{report_id}/",
            body=fields_to_wire(fields, REPORT_WIRE_NAMES),
            not_found=("report", report_id),
        )
        return report_from_wire(data)

    def delete_report(self, report_id: str) -> bool:
        self._request("DELETE", f"/reports/{report_id}/", not_found=("report", report_id))
        return True
