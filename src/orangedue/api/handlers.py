# src/orangedue/api/handlers.py

"""
Request/response facade used by the presentation layer.

Every method returns a Result envelope; nothing raises to the caller.
- missing records   -> NOT_FOUND
- bad input         -> VALIDATION_ERROR / INVALID_FORMAT / INVALID_TIME
- dismissed dialogs -> CANCELLED (logged at INFO, not an error)
- anything else     -> the area's *_ERROR code with the underlying message

Store and scheduler never call each other; the few places where a task change
should touch its reminders are wired here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, TypeVar

from ..core.ports import FilePicker
from ..core.result import ErrorCode, Result, failure, success
from ..records import backup
from ..records.backup import InvalidBackupFormat
from ..records.models import Task, TaskList
from ..records.query import TaskQuery, query_tasks, upcoming_reminders
from ..records.stats import Stats, stats_range
from ..records.store import RecordStore, utc_now
from ..reminders.scheduler import InvalidReminderTime, ReminderScheduler

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OrganizerApi:
    def __init__(
        self,
        store: RecordStore,
        scheduler: ReminderScheduler,
        *,
        file_picker: FilePicker | None = None,
        backup_dir: str | Path = ".",
        upcoming_window: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.scheduler = scheduler
        self._file_picker = file_picker
        self._backup_dir = Path(backup_dir)
        self._upcoming_window = upcoming_window
        self._clock = clock

    def _run(self, code: ErrorCode, action: str, fn: Callable[[], Result[T]]) -> Result[T]:
        try:
            return fn()
        except InvalidBackupFormat as e:
            return failure(ErrorCode.INVALID_FORMAT, str(e))
        except InvalidReminderTime as e:
            return failure(ErrorCode.INVALID_TIME, str(e))
        except ValueError as e:
            return failure(ErrorCode.VALIDATION_ERROR, str(e))
        except Exception as e:
            logger.exception("Failed to %s", action)
            return failure(code, f"Failed to {action}: {e}")

    # ---- lists ----

    def get_all_lists(self) -> Result[list[TaskList]]:
        return self._run(ErrorCode.DB_ERROR, "get lists", lambda: success(self.store.all_lists()))

    def create_list(self, name: str, color: str | None = None) -> Result[TaskList]:
        return self._run(
            ErrorCode.DB_ERROR, "create list", lambda: success(self.store.create_list(name, color))
        )

    def update_list(self, list_id: int, patch: Mapping[str, Any]) -> Result[TaskList]:
        def op() -> Result[TaskList]:
            lst = self.store.update_list(list_id, patch)
            if lst is None:
                return failure(ErrorCode.NOT_FOUND, "List not found")
            return success(lst)

        return self._run(ErrorCode.DB_ERROR, "update list", op)

    def delete_list(self, list_id: int) -> Result[dict[str, bool]]:
        return self._run(
            ErrorCode.DB_ERROR,
            "delete list",
            lambda: success({"removed": self.store.delete_list(list_id)}),
        )

    # ---- tasks ----

    def query_tasks(self, query: Mapping[str, Any] | None = None) -> Result[list[Task]]:
        def op() -> Result[list[Task]]:
            q = TaskQuery.from_dict(dict(query or {}))
            return success(query_tasks(self.store.snapshot(), q))

        return self._run(ErrorCode.DB_ERROR, "query tasks", op)

    def get_task(self, task_id: int) -> Result[Task]:
        def op() -> Result[Task]:
            task = self.store.get_task(task_id)
            if task is None:
                return failure(ErrorCode.NOT_FOUND, "Task not found")
            return success(task)

        return self._run(ErrorCode.DB_ERROR, "get task", op)

    def create_task(self, fields: Mapping[str, Any]) -> Result[Task]:
        def op() -> Result[Task]:
            task = self.store.create_task(fields)
            self._sync_reminder(task, previous=None)
            return success(task)

        return self._run(ErrorCode.DB_ERROR, "create task", op)

    def update_task(self, task_id: int, patch: Mapping[str, Any]) -> Result[Task]:
        def op() -> Result[Task]:
            previous = self.store.get_task(task_id)
            task = self.store.update_task(task_id, patch)
            if task is None:
                return failure(ErrorCode.NOT_FOUND, "Task not found")
            self._sync_reminder(task, previous=previous)
            return success(task)

        return self._run(ErrorCode.DB_ERROR, "update task", op)

    def toggle_complete(self, task_id: int, completed: bool | None = None) -> Result[Task]:
        def op() -> Result[Task]:
            task = self.store.toggle_complete(task_id, completed)
            if task is None:
                return failure(ErrorCode.NOT_FOUND, "Task not found")
            return success(task)

        return self._run(ErrorCode.DB_ERROR, "toggle task completion", op)

    def bulk_move(self, ids: Iterable[int], moves: Mapping[str, Any]) -> Result[dict[str, int]]:
        return self._run(
            ErrorCode.DB_ERROR,
            "bulk move tasks",
            lambda: success({"updated": self.store.bulk_move(ids, moves)}),
        )

    def delete_task(self, task_id: int) -> Result[dict[str, bool]]:
        def op() -> Result[dict[str, bool]]:
            removed = self.store.delete_task(task_id)
            if removed:
                # A deleted task must not alert later with stale data.
                self.scheduler.cancel_task(task_id)
            return success({"removed": removed})

        return self._run(ErrorCode.DB_ERROR, "delete task", op)

    # ---- stats ----

    def stats_range(self, date_from: Any, date_to: Any) -> Result[Stats]:
        return self._run(
            ErrorCode.DB_ERROR,
            "get stats",
            lambda: success(stats_range(self.store.snapshot(), date_from, date_to)),
        )

    # ---- backup ----

    def export_backup(self, file_path: str | Path | None = None) -> Result[dict[str, str]]:
        def op() -> Result[dict[str, str]]:
            now = self._clock()
            default_name = backup.default_backup_name(now.astimezone().date())
            if file_path:
                target: Path | None = Path(file_path)
            elif self._file_picker is not None:
                target = self._file_picker.choose_save_path(default_name)
            else:
                target = self._backup_dir / default_name

            if target is None:
                logger.info("Export cancelled by user")
                return failure(ErrorCode.CANCELLED, "Export cancelled by user")

            snapshot = backup.export_snapshot(self.store, now=now)
            written = backup.write_backup(target, snapshot)
            return success({"filePath": str(written)})

        return self._run(ErrorCode.EXPORT_ERROR, "export backup", op)

    def import_backup(self, file_path: str | Path | None = None) -> Result[dict[str, int]]:
        def op() -> Result[dict[str, int]]:
            source: Path | None = Path(file_path) if file_path else None
            if source is None and self._file_picker is not None:
                source = self._file_picker.choose_open_path()
            if source is None:
                logger.info("Import cancelled by user")
                return failure(ErrorCode.CANCELLED, "Import cancelled by user")

            payload = backup.read_backup(source)
            return success({"imported": backup.import_snapshot(self.store, payload)})

        return self._run(ErrorCode.IMPORT_ERROR, "import backup", op)

    # ---- reminders ----

    def schedule_reminder(
        self, task_id: int, when: str | datetime, title: str, body: str | None = None
    ) -> Result[dict[str, bool]]:
        return self._run(
            ErrorCode.REMINDER_ERROR,
            "schedule reminder",
            lambda: success({"scheduled": self.scheduler.schedule(task_id, when, title, body)}),
        )

    def cancel_reminder(self, task_id: int, when: str | datetime) -> Result[dict[str, bool]]:
        return self._run(
            ErrorCode.REMINDER_ERROR,
            "cancel reminder",
            lambda: success({"cancelled": self.scheduler.cancel(task_id, when)}),
        )

    def show_notification(self, title: str, body: str | None = None) -> Result[dict[str, bool]]:
        return self._run(
            ErrorCode.NOTIFICATION_ERROR,
            "show notification",
            lambda: success({"shown": self.scheduler.fire_now(title, body)}),
        )

    def upcoming_reminders(self) -> Result[list[Task]]:
        return self._run(
            ErrorCode.DB_ERROR,
            "list upcoming reminders",
            lambda: success(
                upcoming_reminders(
                    self.store.snapshot(), now=self._clock(), within=self._upcoming_window
                )
            ),
        )

    def _sync_reminder(self, task: Task, *, previous: Task | None) -> None:
        """Keep the task's own reminder in step with its remind_at field (best-effort)."""
        if previous is not None and previous.remind_at and previous.remind_at != task.remind_at:
            self.scheduler.cancel(previous.id, previous.remind_at)

        if not task.remind_at:
            return

        try:
            self.scheduler.schedule(
                task.id, task.remind_at, task.title, f"Task reminder: {task.title}"
            )
        except InvalidReminderTime:
            logger.info(
                "Task id=%s remind_at=%s is not in the future; not scheduled",
                task.id,
                task.remind_at,
            )
        except RuntimeError:
            # No running event loop (e.g. scripted use outside the app).
            logger.warning("No event loop; reminder for task id=%s not scheduled", task.id)
