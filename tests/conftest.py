# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from supervision_tracker.core.state import AppState
from supervision_tracker.storage.sqlite_store import SQLiteSupervisionStore

from .fakes import FakeRepo, make_report, make_task


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment.
    """
    return SimpleNamespace(
        app_name="supervision-test",
        log_level="DEBUG",
        api_base_url="",
        http_timeout_seconds=1.0,
        remote_enabled=False,
        data_dir=tmp_path,
        db_path=tmp_path / "supervision.sqlite3",
    )


@pytest.fixture()
def sqlite_store(settings: SimpleNamespace) -> SQLiteSupervisionStore:
    return SQLiteSupervisionStore(settings.db_path)


@pytest.fixture()
def repo() -> FakeRepo:
    return FakeRepo(
        tasks=[
            make_task("t1", deadline="2025-09-30", monthly_date=15),
            make_task("t2", deadline="2025-12-31", monthly_date=5),
        ],
        reports=[
            make_report("r1", task_id="t1", month="2025-09"),
            make_report("r2", task_id="t2", month="2025-10"),
        ],
    )


@pytest.fixture()
def state(settings: SimpleNamespace, repo: FakeRepo) -> AppState:
    """AppState over the in-memory repo, already loaded."""
    st = AppState(settings=settings, store=repo)
    st.tasks = repo.list_tasks()
    st.reports = repo.list_reports()
    return st
