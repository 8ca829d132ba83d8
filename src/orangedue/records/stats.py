# src/orangedue/records/stats.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .models import Task, TaskStatus, normalize_date


@dataclass(frozen=True, slots=True)
class HeatmapDay:
    date: str
    count: int
    completed: int
    pending: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "count": self.count,
            "completed": self.completed,
            "pending": self.pending,
        }


@dataclass(frozen=True, slots=True)
class Stats:
    completed: int
    pending: int
    completion_rate: float
    heatmap: list[HeatmapDay] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        # Wire names match the presentation layer (camelCase completionRate).
        return {
            "completed": self.completed,
            "pending": self.pending,
            "completionRate": self.completion_rate,
            "heatmap": [day.to_dict() for day in self.heatmap],
        }


def stats_range(snapshot: Iterable[Task], date_from: Any, date_to: Any) -> Stats:
    """
    Completion counts and a sparse per-day heatmap for tasks dated in
    [date_from, date_to] (inclusive). Days without tasks are not listed.
    """
    lo = normalize_date(date_from)
    hi = normalize_date(date_to)

    completed = 0
    pending = 0
    per_day: dict[str, list[int]] = {}

    for task in snapshot:
        if not (lo <= task.date <= hi):
            continue
        counts = per_day.setdefault(task.date, [0, 0])
        if task.status == TaskStatus.COMPLETED:
            completed += 1
            counts[0] += 1
        else:
            pending += 1
            counts[1] += 1

    total = completed + pending
    rate = completed / total if total > 0 else 0.0

    heatmap = [
        HeatmapDay(date=day, count=done + todo, completed=done, pending=todo)
        for day, (done, todo) in sorted(per_day.items())
    ]
    return Stats(completed=completed, pending=pending, completion_rate=rate, heatmap=heatmap)
