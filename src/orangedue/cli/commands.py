# src/orangedue/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable
from datetime import date, timedelta
from typing import Any

from ..core.result import Result
from ..core.state import AppState
from ..records.models import Task, TaskList

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

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

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        handler = self._handlers.get(name)
        if not handler:
            logger.debug("Unknown command /%s", name)
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, parts[1:])

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _split_flags(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """Separate "--name value" pairs from positional arguments."""
    positional: list[str] = []
    flags: dict[str, str] = {}
    it = iter(args)
    for arg in it:
        if arg.startswith("--") and len(arg) > 2:
            flags[arg[2:].lower()] = next(it, "")
        else:
            positional.append(arg)
    return positional, flags


def _fail_text(result: Result[Any]) -> str:
    assert result.error is not None
    return f"[{result.error.code.value}] {result.error.message}"


def _fmt_list(lst: TaskList) -> str:
    color = f" {lst.color}" if lst.color else ""
    return f"#{lst.id} {lst.name}{color} (order {lst.sort_order})"


def _fmt_task(task: Task) -> str:
    mark = "x" if task.status == "completed" else " "
    when = f" {task.start_time}" if task.start_time else ""
    where = f" @list{task.list_id}" if task.list_id is not None else ""
    remind = f" (remind {task.remind_at})" if task.remind_at else ""
    head = f"[{mark}] #{task.id} {task.date}{when} {task.title}"
    return f"{head} !{task.priority.value}{where}{remind}"


def _parse_id(raw: str) -> int | None:
    try:
        return int(raw.lstrip("#"))
    except ValueError:
        return None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_lists(state: AppState, args: list[str]) -> str:
    res = state.api.get_all_lists()
    if not res.ok:
        return _fail_text(res)
    if not res.data:
        return "No lists."
    return "\n".join(_fmt_list(lst) for lst in res.data)


def cmd_addlist(state: AppState, args: list[str]) -> str:
    """/addlist <name> [color]"""
    if not args:
        return "Usage: /addlist <name> [color]"
    res = state.api.create_list(args[0], args[1] if len(args) > 1 else None)
    return f"Created {_fmt_list(res.data)}" if res.ok and res.data else _fail_text(res)


def cmd_rmlist(state: AppState, args: list[str]) -> str:
    list_id = _parse_id(args[0]) if args else None
    if list_id is None:
        return "Usage: /rmlist <list_id>"
    res = state.api.delete_list(list_id)
    if not res.ok or res.data is None:
        return _fail_text(res)
    return f"List #{list_id} removed." if res.data["removed"] else f"No list #{list_id}."


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <date> <title...> [--priority high|medium|low] [--list N] [--at HH:MM]
         [--until HH:MM] [--notes text] [--remind ISO-instant]
    """
    positional, flags = _split_flags(args)
    if len(positional) < 2:
        return (
            "Usage: /add <YYYY-MM-DD|today> <title> "
            "[--priority p] [--list N] [--at HH:MM] [--remind ISO]"
        )

    raw_date = positional[0]
    task_date = date.today().isoformat() if raw_date.lower() == "today" else raw_date
    fields: dict[str, Any] = {
        "title": " ".join(positional[1:]),
        "date": task_date,
        "priority": flags.get("priority", "medium"),
    }
    if "list" in flags:
        fields["list_id"] = flags["list"]
    if "at" in flags:
        fields["start_time"] = flags["at"]
    if "until" in flags:
        fields["end_time"] = flags["until"]
    if "notes" in flags:
        fields["notes"] = flags["notes"]
    if "remind" in flags:
        fields["remind_at"] = flags["remind"]

    res = state.api.create_task(fields)
    return f"Added {_fmt_task(res.data)}" if res.ok and res.data else _fail_text(res)


def cmd_tasks(state: AppState, args: list[str]) -> str:
    """/tasks [today | <from> [<to>]] [--list N|inbox] [--status pending|completed]"""
    positional, flags = _split_flags(args)
    query: dict[str, Any] = {}

    if positional and positional[0].lower() == "today":
        query["date_from"] = query["date_to"] = date.today().isoformat()
    elif positional:
        query["date_from"] = positional[0]
        query["date_to"] = positional[1] if len(positional) > 1 else positional[0]

    if "list" in flags:
        query["list_id"] = None if flags["list"].lower() == "inbox" else flags["list"]
    if "status" in flags:
        query["status"] = flags["status"]

    res = state.api.query_tasks(query)
    if not res.ok or res.data is None:
        return _fail_text(res)
    if not res.data:
        return "No tasks."
    return "\n".join(_fmt_task(t) for t in res.data)


def cmd_done(state: AppState, args: list[str]) -> str:
    """/done <task_id> toggles pending <-> completed."""
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /done <task_id>"
    res = state.api.toggle_complete(task_id)
    return _fmt_task(res.data) if res.ok and res.data else _fail_text(res)


def cmd_move(state: AppState, args: list[str]) -> str:
    """/move <date> <task_id> [task_id...] [--at HH:MM] [--until HH:MM]"""
    positional, flags = _split_flags(args)
    ids = [i for i in (_parse_id(a) for a in positional[1:]) if i is not None]
    if not positional or not ids:
        return "Usage: /move <YYYY-MM-DD> <task_id> [task_id...]"

    moves: dict[str, Any] = {"date": positional[0]}
    if "at" in flags:
        moves["start_time"] = flags["at"]
    if "until" in flags:
        moves["end_time"] = flags["until"]

    res = state.api.bulk_move(ids, moves)
    if not res.ok or res.data is None:
        return _fail_text(res)
    return f"Moved {res.data['updated']} of {len(ids)} task(s)."


def cmd_rm(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /rm <task_id>"
    res = state.api.delete_task(task_id)
    if not res.ok or res.data is None:
        return _fail_text(res)
    return f"Task #{task_id} removed." if res.data["removed"] else f"No task #{task_id}."


def cmd_stats(state: AppState, args: list[str]) -> str:
    """/stats [<from> <to>] (default: last 7 days)"""
    if len(args) >= 2:
        date_from, date_to = args[0], args[1]
    else:
        today = date.today()
        date_from, date_to = (today - timedelta(days=6)).isoformat(), today.isoformat()

    res = state.api.stats_range(date_from, date_to)
    if not res.ok or res.data is None:
        return _fail_text(res)

    stats = res.data
    lines = [
        f"Stats {date_from} .. {date_to}:",
        f"  completed={stats.completed} pending={stats.pending} "
        f"rate={stats.completion_rate:.0%}",
    ]
    for day in stats.heatmap:
        lines.append(f"  {day.date}  {'#' * day.completed}{'.' * day.pending}  ({day.count})")
    return "\n".join(lines)


def cmd_export(state: AppState, args: list[str]) -> str:
    res = state.api.export_backup(args[0] if args else None)
    return f"Exported to {res.data['filePath']}" if res.ok and res.data else _fail_text(res)


def cmd_import(state: AppState, args: list[str]) -> str:
    # The console has no open dialog, so a path is mandatory here.
    if not args:
        return "Usage: /import <path>"
    res = state.api.import_backup(args[0])
    return f"Imported {res.data['imported']} record(s)." if res.ok and res.data else _fail_text(res)


def cmd_remind(state: AppState, args: list[str]) -> str:
    """/remind <task_id> <ISO instant> [title...]"""
    task_id = _parse_id(args[0]) if args else None
    if task_id is None or len(args) < 2:
        return "Usage: /remind <task_id> <YYYY-MM-DDTHH:MM> [title]"

    title = " ".join(args[2:])
    if not title:
        task_res = state.api.get_task(task_id)
        title = task_res.data.title if task_res.ok and task_res.data else f"Task #{task_id}"

    res = state.api.schedule_reminder(task_id, args[1], title)
    return f"Reminder set for #{task_id} at {args[1]}." if res.ok else _fail_text(res)


def cmd_unremind(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None or len(args) < 2:
        return "Usage: /unremind <task_id> <YYYY-MM-DDTHH:MM>"
    res = state.api.cancel_reminder(task_id, args[1])
    if not res.ok or res.data is None:
        return _fail_text(res)
    return "Reminder cancelled." if res.data["cancelled"] else "No such reminder."


def cmd_notify(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /notify <title> [body]"
    res = state.api.show_notification(args[0], " ".join(args[1:]) or None)
    return "Notification shown." if res.ok else _fail_text(res)


def cmd_upcoming(state: AppState, args: list[str]) -> str:
    res = state.api.upcoming_reminders()
    if not res.ok or res.data is None:
        return _fail_text(res)
    if not res.data:
        return "No upcoming reminders."
    return "\n".join(_fmt_task(t) for t in res.data)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("lists", cmd_lists, help_text="Show all lists.")
registry.register("addlist", cmd_addlist, help_text="Create a list: /addlist <name> [color].")
registry.register("rmlist", cmd_rmlist, help_text="Delete a list (its tasks move to the inbox).")
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <date|today> <title> [--priority p] [--list N] [--remind ISO].",
)
registry.register(
    "tasks",
    cmd_tasks,
    help_text="Query tasks: /tasks [today|<from> [<to>]] [--list N|inbox] [--status s].",
    aliases=["ls"],
)
registry.register("done", cmd_done, help_text="Toggle completion: /done <task_id>.")
registry.register("move", cmd_move, help_text="Move tasks: /move <date> <id> [id...] [--at HH:MM].")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <task_id>.")
registry.register("stats", cmd_stats, help_text="Completion stats: /stats [<from> <to>].")
registry.register("export", cmd_export, help_text="Export a backup: /export [path].")
registry.register("import", cmd_import, help_text="Merge a backup: /import <path>.")
registry.register("remind", cmd_remind, help_text="Schedule: /remind <task_id> <ISO instant> [title].")
registry.register("unremind", cmd_unremind, help_text="Cancel: /unremind <task_id> <ISO instant>.")
registry.register("notify", cmd_notify, help_text="Show an alert now: /notify <title> [body].")
registry.register("upcoming", cmd_upcoming, help_text="Reminders due within the upcoming window.")
