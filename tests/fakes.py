# tests/fakes.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path


@dataclass(slots=True)
class Alert:
    title: str
    body: str | None


class RecordingNotifier:
    """
    Fake Notifier used by scheduler/API tests.

    Scheduled reminders deliver from executor threads, so calls are recorded
    under a lock and an Event is set on every delivery.
    """

    def __init__(self, *, fail: bool = False) -> None:
        self.alerts: list[Alert] = []
        self.fail = fail
        self.delivered = threading.Event()
        self._lock = threading.Lock()

    def notify(self, title: str, body: str | None = None) -> None:
        if self.fail:
            raise RuntimeError("notification backend unavailable")
        with self._lock:
            self.alerts.append(Alert(title=title, body=body))
        self.delivered.set()


@dataclass(slots=True)
class ScriptedFilePicker:
    """Fake FilePicker: returns preset paths (None simulates a dismissed dialog)."""

    save_path: Path | None = None
    open_path: Path | None = None
    save_requests: list[str] = field(default_factory=list)
    open_requests: int = 0

    def choose_save_path(self, default_name: str) -> Path | None:
        self.save_requests.append(default_name)
        return self.save_path

    def choose_open_path(self) -> Path | None:
        self.open_requests += 1
        return self.open_path


class ManualClock:
    """Deterministic clock: every call returns the current instant; advance() moves it."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now
