# src/supervision_tracker/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import date
from typing import cast

from ..core.dates import current_month
from ..core.state import AppState
from ..storage.fallback_store import FallbackSupervisionStore
from ..supervision import api
from ..supervision.lifecycle import delayed_tasks, monthly_reminders, on_track_tasks
from ..supervision.models import SupervisionReport, SupervisionTask, TaskStatus
from ..supervision.reports import group_by_month, has_report_for_month, resolve_task_name

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Validation errors (bad dates, unknown ids) become the reply text.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        nparams = len(inspect.signature(handler).parameters)
        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except (ValueError, LookupError) as e:
            logger.debug("Command /%s rejected: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _today() -> date:
    return date.today()


def _pick_task(state: AppState, ref: str) -> SupervisionTask:
    """Resolve a task by id, or by its 1-based position in /tasks when no id matches."""
    for task in state.tasks:
        if task.id == ref:
            return task
    if ref.isdigit() and 1 <= int(ref) <= len(state.tasks):
        return state.tasks[int(ref) - 1]
    return api.find_task(state, ref)


def _pick_report(state: AppState, ref: str) -> SupervisionReport:
    for report in state.reports:
        if report.id == ref:
            return report
    if ref.isdigit() and 1 <= int(ref) <= len(state.reports):
        return state.reports[int(ref) - 1]
    return api.find_report(state, ref)


def _task_line(i: int, t: SupervisionTask) -> str:
    remarks = f" ({t.remarks})" if t.remarks else ""
    return (
        f"{i}. [{t.status.value}] {t.task_name} / {t.department or '-'}"
        f" / due {t.deadline} / monthly day {t.monthly_date}{remarks}  id={t.id}"
    )


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.store
    if isinstance(store, FallbackSupervisionStore):
        mode = "remote (DEGRADED: local fallback)" if store.degraded else "remote"
    else:
        mode = "local only"
    today = _today()
    return (
        "Status:\n"
        f"  Store: {mode}\n"
        f"  Tasks: {len(state.tasks)} (delayed: {len(delayed_tasks(state.tasks, today))},"
        f" on track: {len(on_track_tasks(state.tasks, today))})\n"
        f"  Reports: {len(state.reports)}"
    )


def cmd_tasks(state: AppState, args: list[str]) -> str:
    if not state.tasks:
        return "No supervision tasks yet. Use /add to create one."
    lines = ["Supervision tasks:"]
    lines.extend(_task_line(i, t) for i, t in enumerate(state.tasks, start=1))
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <YYYY-MM-DD> <monthly day> <department> | <task name> [| remarks]
    """
    usage = "Usage: /add <YYYY-MM-DD> <monthly day> <department> | <task name> [| remarks]"
    if len(args) < 3 or "|" not in " ".join(args):
        return usage

    deadline, day = args[0], args[1]
    head, _, tail = " ".join(args[2:]).partition("|")
    name, _, remarks = tail.partition("|")
    if not name.strip():
        return usage

    task = api.add_task(
        state,
        task_name=name.strip(),
        department=head.strip(),
        deadline=deadline,
        monthly_date=day,
        remarks=remarks.strip() or None,
    )
    return f"Task added: {task.task_name} (id={task.id})"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <task>"
    task = api.complete_task(state, _pick_task(state, args[0]).id)
    return f"Task completed: {task.task_name}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <task>"
    task = _pick_task(state, args[0])
    api.delete_task(state, task.id)
    return f"Task deleted: {task.task_name} (and its reports)"


def cmd_delays(state: AppState, args: list[str]) -> str:
    late = delayed_tasks(state.tasks, _today())
    if not late:
        return "No overdue tasks. Everything is within its deadline."
    lines = ["Overdue tasks (original deadline -> new deadline):"]
    for t in late:
        lines.append(
            f"  {t.task_name} / {t.department or '-'}:"
            f" {t.original_deadline or t.deadline} -> {t.new_deadline or '-'}  id={t.id}"
        )
    return "\n".join(lines)


def cmd_extend(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /extend <task> <YYYY-MM-DD>"
    task = _pick_task(state, args[0])
    updated = api.update_deadline(state, task.id, args[1], _today())
    return (
        f"Deadline of {updated.task_name} set to {updated.deadline}"
        f" (originally {updated.original_deadline}, status {updated.status.value})."
    )


def cmd_reminders(state: AppState, args: list[str]) -> str:
    today = _today()
    month = current_month(today)
    due = monthly_reminders(state.tasks, state.reports, today)
    if not due:
        return f"All supervision check-ins for {month} are done."
    lines = [f"Check-ins due for {month}:"]
    for t in due:
        filed = has_report_for_month(t.id, month, state.reports)
        mark = "reported" if filed else "waiting for report"
        lines.append(f"  {t.task_name} / {t.department or '-'}: day {t.monthly_date} [{mark}]  id={t.id}")
    return "\n".join(lines)


def cmd_report(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /report <task> <report text>"
    task = _pick_task(state, args[0])
    today = _today()
    if task.status == TaskStatus.COMPLETED:
        return f"{task.task_name} is completed; no monthly report is needed."
    if has_report_for_month(task.id, current_month(today), state.reports):
        return f"A report for {task.task_name} was already filed for {current_month(today)}."
    report = api.add_report(state, task.id, " ".join(args[1:]), today)
    return f"Report filed for {task.task_name} ({report.month})."


def cmd_reports(state: AppState, args: list[str]) -> str:
    groups = group_by_month(state.reports)
    if not groups:
        return "No supervision reports yet."
    index = {r.id: i for i, r in enumerate(state.reports, start=1)}
    lines: list[str] = []
    for month, items in groups.items():
        lines.append(f"{month}:")
        for r in items:
            name = resolve_task_name(r.task_id, state.tasks)
            lines.append(f"  {index[r.id]}. {name}: {r.report_content}")
    return "\n".join(lines)


def cmd_edit_report(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /editreport <report> <new text>"
    report = _pick_report(state, args[0])
    api.edit_report(state, report.id, " ".join(args[1:]))
    return "Report updated."


def cmd_delete_report(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delreport <report>"
    report = _pick_report(state, args[0])
    api.delete_report(state, report.id)
    return "Report deleted."


def cmd_reload(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("Reloading tasks and reports...")
    api.load_all(state)
    return f"Loaded {len(state.tasks)} tasks and {len(state.reports)} reports."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show store mode and task counts.")
registry.register("tasks", cmd_tasks, help_text="List all supervision tasks.", aliases=["ls"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <YYYY-MM-DD> <monthly day> <department> | <name> [| remarks].",
)
registry.register("done", cmd_done, help_text="Mark a task completed: /done <task>.")
registry.register("delete", cmd_delete, help_text="Delete a task and its reports: /delete <task>.")
registry.register("delays", cmd_delays, help_text="List overdue tasks.")
registry.register("extend", cmd_extend, help_text="Extend a deadline: /extend <task> <YYYY-MM-DD>.")
registry.register("reminders", cmd_reminders, help_text="List this month's due check-ins.")
registry.register("report", cmd_report, help_text="File this month's report: /report <task> <text>.")
registry.register("reports", cmd_reports, help_text="Show report history grouped by month.")
registry.register("editreport", cmd_edit_report, help_text="Edit a report: /editreport <report> <text>.")
registry.register("delreport", cmd_delete_report, help_text="Delete a report: /delreport <report>.")
registry.register("reload", cmd_reload, help_text="Reload tasks and reports from the store.")
