# src/orangedue/records/query.py

"""
Pure task queries over a store snapshot.

Nothing here mutates or keeps state; callers pass `RecordStore.snapshot()`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from .models import Task, TaskStatus, normalize_date, parse_instant

logger = logging.getLogger(__name__)

# Distinguishes "no list filter" from "list_id=None" (inbox only).
ANY_LIST: Any = object()


@dataclass(frozen=True, slots=True)
class TaskQuery:
    list_id: Any = ANY_LIST
    status: TaskStatus | None = None
    date_from: str | None = None
    date_to: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> TaskQuery:
        """Build a query from a request payload; a present list_id key filters even when None."""
        raw = raw or {}
        status = raw.get("status")
        date_from = raw.get("date_from")
        date_to = raw.get("date_to")
        return cls(
            list_id=(None if raw["list_id"] is None else int(raw["list_id"]))
            if "list_id" in raw
            else ANY_LIST,
            status=TaskStatus(status) if status else None,
            date_from=normalize_date(date_from) if date_from else None,
            date_to=normalize_date(date_to) if date_to else None,
        )


def task_sort_key(task: Task) -> tuple[str, str, str, int]:
    # A missing start time sorts before any real one.
    return (task.date, task.start_time or "", task.created_at, task.id)


def query_tasks(snapshot: Iterable[Task], query: TaskQuery | None = None) -> list[Task]:
    """
    Filter by list/status/inclusive date range, then order by
    (date, start_time or "", created_at).
    """
    q = query or TaskQuery()
    out: list[Task] = []

    for task in snapshot:
        if q.list_id is not ANY_LIST and task.list_id != q.list_id:
            continue
        if q.status is not None and task.status != q.status:
            continue
        if q.date_from is not None and task.date < q.date_from:
            continue
        if q.date_to is not None and task.date > q.date_to:
            continue
        out.append(task)

    out.sort(key=task_sort_key)
    return out


def upcoming_reminders(
    snapshot: Iterable[Task],
    *,
    now: datetime,
    within: timedelta = timedelta(hours=1),
) -> list[Task]:
    """
    Pending tasks whose remind_at falls in (now, now + within], soonest first.
    """
    horizon = now + within
    hits: list[tuple[datetime, Task]] = []

    for task in snapshot:
        if not task.remind_at or task.status == TaskStatus.COMPLETED:
            continue
        try:
            when = parse_instant(task.remind_at)
        except ValueError:
            logger.warning("Task id=%s has unparsable remind_at=%r", task.id, task.remind_at)
            continue
        if now < when <= horizon:
            hits.append((when, task))

    hits.sort(key=lambda pair: (pair[0], pair[1].id))
    return [task for _, task in hits]
