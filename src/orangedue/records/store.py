# src/orangedue/records/store.py

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from .models import (
    Priority,
    Task,
    TaskList,
    TaskStatus,
    clean_list_fields,
    clean_task_fields,
    iso_instant,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

# Fields bulk_move is allowed to touch.
MOVE_FIELDS = ("date", "start_time", "end_time")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RecordStore:
    """
    In-memory store for lists and tasks.

    - ids come from monotonic counters and are never reused
    - records are frozen dataclasses, so every read is already a snapshot
    - mutations are serialized by a re-entrant lock (reminder callbacks run on
      executor threads and may read concurrently)

    The store is volatile: nothing survives the process unless exported.
    """

    def __init__(
        self,
        *,
        clock: Clock = utc_now,
        seed_default_list: bool = True,
        default_list_name: str = "Default list",
        default_list_color: str | None = "#3b82f6",
    ) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._lists: dict[int, TaskList] = {}
        self._tasks: dict[int, Task] = {}
        self._next_list_id = 1
        self._next_task_id = 1

        if seed_default_list:
            self.create_list(default_list_name, default_list_color, sort_order=0)

        logger.info(
            "RecordStore ready lists=%d tasks=%d", len(self._lists), len(self._tasks)
        )

    def _now(self) -> str:
        return iso_instant(self._clock())

    # ---- lists ----

    def all_lists(self) -> list[TaskList]:
        with self._lock:
            lists = list(self._lists.values())
        lists.sort(key=lambda lst: (lst.sort_order, lst.created_at, lst.id))
        return lists

    def get_list(self, list_id: int) -> TaskList | None:
        with self._lock:
            return self._lists.get(int(list_id))

    def find_list_by_name(self, name: str) -> TaskList | None:
        with self._lock:
            for lst in self._lists.values():
                if lst.name == name:
                    return lst
        return None

    def create_list(
        self,
        name: str,
        color: str | None = None,
        *,
        sort_order: int | None = None,
    ) -> TaskList:
        fields = clean_list_fields({"name": name, "color": color})

        with self._lock:
            if sort_order is None:
                # New lists always sort after every existing one.
                sort_order = max((lst.sort_order for lst in self._lists.values()), default=0) + 1

            now = self._now()
            lst = TaskList(
                id=self._next_list_id,
                name=fields["name"],
                color=fields["color"],
                sort_order=int(sort_order),
                created_at=now,
                updated_at=now,
            )
            self._next_list_id += 1
            self._lists[lst.id] = lst

        logger.debug("List created id=%s name=%r sort_order=%s", lst.id, lst.name, lst.sort_order)
        return lst

    def update_list(self, list_id: int, patch: Mapping[str, Any]) -> TaskList | None:
        fields = clean_list_fields(patch)

        with self._lock:
            current = self._lists.get(int(list_id))
            if current is None:
                return None
            updated = replace(current, **fields, updated_at=self._now())
            self._lists[updated.id] = updated

        logger.debug("List updated id=%s fields=%s", list_id, sorted(fields))
        return updated

    def delete_list(self, list_id: int) -> bool:
        """Remove a list; its tasks move to the inbox (list_id=None), never deleted."""
        list_id = int(list_id)
        with self._lock:
            now = self._now()
            orphaned = 0
            for task in list(self._tasks.values()):
                if task.list_id == list_id:
                    self._tasks[task.id] = replace(task, list_id=None, updated_at=now)
                    orphaned += 1
            removed = self._lists.pop(list_id, None) is not None

        logger.debug("List delete id=%s removed=%s orphaned_tasks=%d", list_id, removed, orphaned)
        return removed

    # ---- tasks ----

    def snapshot(self) -> tuple[Task, ...]:
        with self._lock:
            return tuple(self._tasks.values())

    def count_tasks(self) -> int:
        with self._lock:
            return len(self._tasks)

    def get_task(self, task_id: int) -> Task | None:
        with self._lock:
            return self._tasks.get(int(task_id))

    def find_task(self, title: str, date: str) -> Task | None:
        with self._lock:
            for task in self._tasks.values():
                if task.title == title and task.date == date:
                    return task
        return None

    def create_task(self, fields: Mapping[str, Any]) -> Task:
        """
        Create a task from user-supplied fields.

        title and date are required; priority defaults to medium and status to
        pending.
        """
        data = clean_task_fields(fields)
        if "title" not in data:
            raise ValueError("title is required")
        if "date" not in data:
            raise ValueError("date is required")

        with self._lock:
            now = self._now()
            task = Task(
                id=self._next_task_id,
                title=data["title"],
                date=data["date"],
                priority=data.get("priority", Priority.MEDIUM),
                status=data.get("status", TaskStatus.PENDING),
                created_at=now,
                updated_at=now,
                start_time=data.get("start_time"),
                end_time=data.get("end_time"),
                list_id=data.get("list_id"),
                notes=data.get("notes"),
                remind_at=data.get("remind_at"),
            )
            self._next_task_id += 1
            self._tasks[task.id] = task

        if task.list_id is not None and self.get_list(task.list_id) is None:
            logger.warning("Task id=%s references unknown list_id=%s", task.id, task.list_id)

        logger.debug("Task created id=%s date=%s status=%s", task.id, task.date, task.status.value)
        return task

    def update_task(self, task_id: int, patch: Mapping[str, Any]) -> Task | None:
        fields = clean_task_fields(patch)

        with self._lock:
            current = self._tasks.get(int(task_id))
            if current is None:
                return None
            updated = replace(current, **fields, updated_at=self._now())
            self._tasks[updated.id] = updated

        logger.debug("Task updated id=%s fields=%s", task_id, sorted(fields))
        return updated

    def toggle_complete(self, task_id: int, completed: bool | None = None) -> Task | None:
        """Set completion explicitly, or flip pending <-> completed when not given."""
        with self._lock:
            current = self._tasks.get(int(task_id))
            if current is None:
                return None
            if completed is None:
                completed = current.status == TaskStatus.PENDING
            status = TaskStatus.COMPLETED if completed else TaskStatus.PENDING
            updated = replace(current, status=status, updated_at=self._now())
            self._tasks[updated.id] = updated

        logger.debug("Task id=%s -> %s", task_id, status.value)
        return updated

    def bulk_move(self, task_ids: Iterable[int], moves: Mapping[str, Any]) -> int:
        """
        Apply date/start_time/end_time to each existing id.

        Missing ids are skipped; only keys present in ``moves`` are applied.
        Returns the number of tasks updated.
        """
        unknown = set(moves) - set(MOVE_FIELDS)
        if unknown:
            raise ValueError(f"bulk move cannot change: {', '.join(sorted(unknown))}")
        fields = clean_task_fields(moves)
        # All ids are coerced before the first write so a bad id rejects the batch.
        try:
            ids = [int(task_id) for task_id in task_ids]
        except (TypeError, ValueError) as e:
            raise ValueError(f"bulk move needs integer task ids: {e}") from e

        updated = 0
        with self._lock:
            now = self._now()
            for task_id in ids:
                current = self._tasks.get(task_id)
                if current is None:
                    continue
                self._tasks[current.id] = replace(current, **fields, updated_at=now)
                updated += 1

        logger.debug("Bulk move fields=%s updated=%d", sorted(fields), updated)
        return updated

    def delete_task(self, task_id: int) -> bool:
        with self._lock:
            removed = self._tasks.pop(int(task_id), None) is not None
        logger.debug("Task delete id=%s removed=%s", task_id, removed)
        return removed
