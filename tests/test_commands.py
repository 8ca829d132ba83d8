# tests/test_commands.py

from __future__ import annotations

from pathlib import Path

from orangedue.cli.commands import CommandRegistry, registry
from orangedue.core.state import AppState

from .fakes import RecordingNotifier


def test_command_registry_routes_with_aliases(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"a": 0}

    def handler(state, args):
        called["a"] += 1
        return "|".join(args)

    reg.register("a", handler, "a", aliases=["alpha"])

    assert reg.handle(state, '/a x "y z"') == "x|y z"
    assert reg.handle(state, "/ALPHA q") == "q"
    assert called["a"] == 2


def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_add_list_query_and_complete(state: AppState) -> None:
    assert registry.handle(state, "/addlist Work") == "Created #2 Work (order 1)"
    added = registry.handle(state, '/add 2024-05-01 "Ship it" --priority high --list 2 --at 09:00')
    assert added is not None and added.startswith("Added [ ] #1 2024-05-01 09:00 Ship it !high @list2")

    listing = registry.handle(state, "/tasks 2024-05-01 --list 2")
    assert listing is not None and "Ship it" in listing
    assert registry.handle(state, "/tasks --list inbox") == "No tasks."

    done = registry.handle(state, "/done 1")
    assert done is not None and done.startswith("[x] #1")

    stats = registry.handle(state, "/stats 2024-05-01 2024-05-01")
    assert stats is not None and "completed=1 pending=0 rate=100%" in stats


def test_move_rm_and_errors(state: AppState) -> None:
    registry.handle(state, "/add 2024-05-01 one")
    registry.handle(state, "/add 2024-05-01 two")

    assert registry.handle(state, "/move 2024-06-01 1 2 99") == "Moved 2 of 3 task(s)."
    assert registry.handle(state, "/rm 1") == "Task #1 removed."
    assert registry.handle(state, "/rm 1") == "No task #1."
    assert registry.handle(state, "/done 1") == "[NOT_FOUND] Task not found"
    assert (registry.handle(state, "/add someday thing") or "").startswith("[VALIDATION_ERROR]")


def test_export_import_and_notify(state: AppState, notifier: RecordingNotifier, tmp_path: Path) -> None:
    registry.handle(state, "/add 2024-05-01 one")
    target = tmp_path / "out.json"

    assert registry.handle(state, f"/export {target}") == f"Exported to {target}"
    assert registry.handle(state, f"/import {target}") == "Imported 0 record(s)."
    assert registry.handle(state, "/import") == "Usage: /import <path>"

    assert registry.handle(state, '/notify "Hello" there') == "Notification shown."
    assert notifier.alerts[-1].title == "Hello"
    assert notifier.alerts[-1].body == "there"


def test_export_default_goes_to_backup_dir(state: AppState) -> None:
    reply = registry.handle(state, "/export") or ""
    assert reply.startswith(f"Exported to {state.settings.backup_dir}")
