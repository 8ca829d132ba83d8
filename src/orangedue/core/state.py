# src/orangedue/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..api.handlers import OrganizerApi
from ..config import Settings
from ..records.store import RecordStore
from ..reminders.scheduler import ReminderScheduler


@dataclass
class AppState:
    """Everything one running app owns; built once in cli.bootstrap."""

    settings: Settings
    store: RecordStore
    scheduler: ReminderScheduler
    api: OrganizerApi
