# src/supervision_tracker/storage/fallback_store.py

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from ..core.errors import StoreError
from ..core.ports import SupervisionRepo
from ..supervision.models import SupervisionReport, SupervisionTask

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FallbackSupervisionStore:
    """
    Remote-first store with a local degraded mode.

    Every call goes to the remote store first. If it fails with StoreError
    (network error, HTTP 5xx, malformed payload) the same call is served by the
    local store instead. NotFoundError from the remote is a real answer and is
    propagated as-is.

    The two stores are not synchronized: records created while degraded live only
    in the local store.
    """

    def __init__(self, remote: SupervisionRepo, local: SupervisionRepo) -> None:
        self.remote = remote
        self.local = local
        self.degraded = False

    def _call(self, op: str, remote_fn: Callable[[], T], local_fn: Callable[[], T]) -> T:
        try:
            result = remote_fn()
        except StoreError as e:
            if not self.degraded:
                logger.warning("Remote store unavailable (%s); using local store.", e)
            logger.debug("Remote %s failed", op, exc_info=True)
            self.degraded = True
            return local_fn()

        if self.degraded:
            logger.info("Remote store is reachable again.")
        self.degraded = False
        return result

    # ---- tasks ----

    def list_tasks(self) -> list[SupervisionTask]:
        return self._call("list_tasks", self.remote.list_tasks, self.local.list_tasks)

    def create_task(self, fields: dict[str, Any]) -> SupervisionTask:
        return self._call(
            "create_task",
            lambda: self.remote.create_task(fields),
            lambda: self.local.create_task(fields),
        )

    def update_task(self, task_id: str, fields: dict[str, Any]) -> SupervisionTask:
        return self._call(
            "update_task",
            lambda: self.remote.update_task(task_id, fields),
            lambda: self.local.update_task(task_id, fields),
        )

    def delete_task(self, task_id: str) -> bool:
        return self._call(
            "delete_task",
            lambda: self.remote.delete_task(task_id),
            lambda: self.local.delete_task(task_id),
        )

    # ---- reports ----

    def list_reports(self) -> list[SupervisionReport]:
        return self._call("list_reports", self.remote.list_reports, self.local.list_reports)

    def create_report(self, fields: dict[str, Any]) -> SupervisionReport:
        return self._call(
            "create_report",
            lambda: self.remote.create_report(fields),
            lambda: self.local.create_report(fields),
        )

    def update_report(self, report_id: str, fields: dict[str, Any]) -> SupervisionReport:
        return self._call(
            "update_report",
            lambda: self.remote.update_report(report_id, fields),
            lambda: self.local.update_report(report_id, fields),
        )

    def delete_report(self, report_id: str) -> bool:
        return self._call(
            "delete_report",
            lambda: self.remote.delete_report(report_id),
            lambda: self.local.delete_report(report_id),
        )
