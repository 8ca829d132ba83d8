# src/orangedue/core/result.py

"""
Uniform success/error envelope returned by every API operation.

    {"ok": true, "data": ...}
    {"ok": false, "error": {"code": "...", "message": "..."}}
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorCode(StrEnum):
    NOT_FOUND = "NOT_FOUND"
    INVALID_TIME = "INVALID_TIME"
    INVALID_FORMAT = "INVALID_FORMAT"
    CANCELLED = "CANCELLED"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Unexpected failures, one per area.
    DB_ERROR = "DB_ERROR"
    EXPORT_ERROR = "EXPORT_ERROR"
    IMPORT_ERROR = "IMPORT_ERROR"
    REMINDER_ERROR = "REMINDER_ERROR"
    NOTIFICATION_ERROR = "NOTIFICATION_ERROR"


@dataclass(frozen=True, slots=True)
class ResultError:
    code: ErrorCode
    message: str


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    ok: bool
    data: T | None = None
    error: ResultError | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "data": _plain(self.data)}
        assert self.error is not None
        return {
            "ok": False,
            "error": {"code": self.error.code.value, "message": self.error.message},
        }


def success(data: T) -> Result[T]:
    return Result(ok=True, data=data)


def failure(code: ErrorCode, message: str) -> Result[Any]:
    return Result(ok=False, error=ResultError(code=code, message=message))


def _plain(value: Any) -> Any:
    """Recursively convert records (anything with to_dict) into plain JSON-able values."""
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
