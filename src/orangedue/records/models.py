# src/orangedue/records/models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import date as date_cls
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any


class Priority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: Any) -> TaskStatus:
        if raw is None:
            return cls.PENDING
        return cls(str(raw))


def iso_instant(ts: datetime) -> str:
    """ISO-8601 UTC instant with millisecond precision and a trailing Z."""
    if ts.tzinfo is None:
        ts = ts.astimezone()
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_instant(raw: str | datetime) -> datetime:
    """
    Parse an ISO-8601 instant.

    Naive values are interpreted in local time; the result is always tz-aware.
    """
    value = raw if isinstance(raw, datetime) else datetime.fromisoformat(str(raw).strip())
    if value.tzinfo is None:
        value = value.astimezone()
    return value


def normalize_date(raw: Any) -> str:
    """Return a calendar date as YYYY-MM-DD (accepts date objects or ISO strings)."""
    if isinstance(raw, datetime):
        return raw.date().isoformat()
    if isinstance(raw, date_cls):
        return raw.isoformat()
    if raw is None:
        raise ValueError("date is required")
    return date_cls.fromisoformat(str(raw).strip()).isoformat()


def _optional_str(raw: Any) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.isoformat()
    text = str(raw)
    return text if text != "" else None


@dataclass(frozen=True, slots=True)
class TaskList:
    id: int
    name: str
    color: str | None
    sort_order: int
    created_at: str
    updated_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    title: str
    date: str
    priority: Priority
    status: TaskStatus
    created_at: str
    updated_at: str

    start_time: str | None = None
    end_time: str | None = None
    list_id: int | None = None
    notes: str | None = None
    remind_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["priority"] = self.priority.value
        out["status"] = self.status.value
        return out


# Patchable fields (id/created_at/updated_at are owned by the store).
LIST_FIELDS = frozenset({"name", "color", "sort_order"})
TASK_FIELDS = frozenset(
    {
        "title",
        "date",
        "start_time",
        "end_time",
        "priority",
        "list_id",
        "status",
        "notes",
        "remind_at",
    }
)
_REQUIRED = frozenset({"name", "sort_order", "title", "date", "priority", "status"})


def clean_list_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """
    Validate and coerce a list patch.

    Omitted keys are left alone by the caller; a key present with None clears
    an optional field and is rejected for required ones.
    """
    unknown = set(fields) - LIST_FIELDS
    if unknown:
        raise ValueError(f"unknown list field(s): {', '.join(sorted(unknown))}")

    out: dict[str, Any] = {}
    for key, value in fields.items():
        if value is None and key in _REQUIRED:
            raise ValueError(f"{key} cannot be cleared")
        if key == "name":
            name = str(value).strip()
            if not name:
                raise ValueError("name is required")
            out[key] = name
        elif key == "sort_order":
            out[key] = int(value)
        else:
            out[key] = _optional_str(value)
    return out


def clean_task_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Validate and coerce a task patch (same omitted-vs-None rules as lists)."""
    unknown = set(fields) - TASK_FIELDS
    if unknown:
        raise ValueError(f"unknown task field(s): {', '.join(sorted(unknown))}")

    out: dict[str, Any] = {}
    for key, value in fields.items():
        if value is None and key in _REQUIRED:
            raise ValueError(f"{key} cannot be cleared")
        if key == "title":
            title = str(value).strip()
            if not title:
                raise ValueError("title is required")
            out[key] = title
        elif key == "date":
            out[key] = normalize_date(value)
        elif key == "priority":
            out[key] = Priority(str(value))
        elif key == "status":
            out[key] = TaskStatus.parse(value)
        elif key == "list_id":
            out[key] = None if value is None else int(value)
        elif key == "remind_at" and value not in (None, ""):
            # Must parse as an instant; it is stored as given.
            parse_instant(value)
            out[key] = _optional_str(value.strip() if isinstance(value, str) else value)
        else:
            out[key] = _optional_str(value)
    return out
