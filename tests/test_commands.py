# tests/test_commands.py

from __future__ import annotations

from datetime import date

import pytest

from supervision_tracker.cli import commands
from supervision_tracker.cli.commands import CommandRegistry, registry
from supervision_tracker.core.state import AppState
from supervision_tracker.supervision.models import TaskStatus

from .fakes import FakeRepo, make_report, make_task


@pytest.fixture(autouse=True)
def fixed_today(monkeypatch: pytest.MonkeyPatch) -> date:
    today = date(2025, 10, 15)
    monkeypatch.setattr(commands, "_today", lambda: today)
    return today


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")


def test_add_and_list_tasks(state) -> None:
    reply = registry.handle(state, "/add 2025-12-31 15 Tech | Website redesign | mobile first")
    assert reply is not None and reply.startswith("Task added: Website redesign")

    task = state.tasks[-1]
    assert task.department == "Tech"
    assert task.remarks == "mobile first"
    assert "Website redesign" in (registry.handle(state, "/tasks") or "")


def test_validation_errors_are_replies(state) -> None:
    reply = registry.handle(state, "/add 31-12-2025 15 Tech | Bad date")
    assert reply is not None and reply.startswith("Error:")
    assert registry.handle(state, "/extend 9 2025-12-31").startswith("Error:")


def test_extend_and_delays(state) -> None:
    assert "t1" in registry.handle(state, "/delays")

    reply = registry.handle(state, "/extend 1 2025-10-20")
    assert "2025-10-20" in reply and "2025-09-30" in reply

    # Still overdue against the original deadline.
    delays = registry.handle(state, "/delays")
    assert "2025-09-30 -> 2025-10-20" in delays


def test_reminders_and_report_filing(state) -> None:
    # t1 (day 15) is due today; t2 (day 5) already reported for 2025-10.
    reminders = registry.handle(state, "/reminders")
    assert "Task t1" in reminders and "waiting for report" in reminders
    assert "Task t2" not in reminders

    assert registry.handle(state, "/report t1 all on track").startswith("Report filed")
    assert "already filed" in registry.handle(state, "/report t1 again")

    # Exact check-in day keeps the task listed, now marked as reported.
    assert "[reported]" in registry.handle(state, "/reminders")


def test_reports_grouped_with_unknown_task_sentinel(state) -> None:
    state.tasks = [t for t in state.tasks if t.id != "t1"]
    out = registry.handle(state, "/reports")
    assert out.index("2025-09:") < out.index("2025-10:")
    assert "Unknown task" in out


def test_delete_cascades_via_command(state) -> None:
    assert "deleted" in registry.handle(state, "/delete t1")
    assert all(r.task_id != "t1" for r in state.reports)


def _numeric_state(settings, task_ids: list[str], reports=()) -> AppState:
    """Backend-style numeric ids, which can collide with list positions."""
    repo = FakeRepo(tasks=[make_task(i) for i in task_ids], reports=list(reports))
    st = AppState(settings=settings, store=repo)
    st.tasks = repo.list_tasks()
    st.reports = repo.list_reports()
    return st


def test_numeric_reference_matches_id_before_position(settings) -> None:
    st = _numeric_state(settings, ["2", "1"])

    registry.handle(st, "/done 1")
    assert {t.id: t.status for t in st.tasks} == {
        "2": TaskStatus.PENDING,
        "1": TaskStatus.COMPLETED,
    }

    registry.handle(st, "/delete 1")
    assert [t.id for t in st.tasks] == ["2"]


def test_numeric_reference_falls_back_to_position(settings) -> None:
    st = _numeric_state(settings, ["7", "3"])
    registry.handle(st, "/delete 2")
    assert [t.id for t in st.tasks] == ["7"]


def test_report_reference_matches_id_before_position(settings) -> None:
    st = _numeric_state(
        settings,
        ["2", "1"],
        reports=[make_report("2", task_id="2", month="2025-09"), make_report("1", task_id="1")],
    )

    registry.handle(st, "/delreport 1")
    assert [r.id for r in st.reports] == ["2"]

    registry.handle(st, "/editreport 2 revised")
    assert st.reports[0].report_content == "revised"
