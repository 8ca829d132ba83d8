# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from orangedue.api.handlers import OrganizerApi
from orangedue.cli.bootstrap import create_initial_state
from orangedue.config import Settings
from orangedue.core.state import AppState
from orangedue.records.store import RecordStore
from orangedue.reminders.scheduler import ReminderScheduler

from .fakes import ManualClock, RecordingNotifier, ScriptedFilePicker


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings built directly (not from env) so tests stay isolated and deterministic.
    """
    return Settings(
        app_name="orangedue-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        backup_dir=tmp_path / "backups",
        seed_default_list=True,
        default_list_name="Default list",
        default_list_color="#3b82f6",
        reminder_default_body="Task reminder",
        upcoming_window_minutes=60,
    )


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def store(clock: ManualClock) -> RecordStore:
    return RecordStore(clock=clock)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def file_picker() -> ScriptedFilePicker:
    return ScriptedFilePicker()


@pytest.fixture()
def api(
    store: RecordStore,
    notifier: RecordingNotifier,
    file_picker: ScriptedFilePicker,
    tmp_path: Path,
) -> OrganizerApi:
    """
    API over a manual-clock store. The scheduler keeps the real clock because
    its timers run on the real event loop.
    """
    return OrganizerApi(
        store,
        ReminderScheduler(notifier),
        file_picker=file_picker,
        backup_dir=tmp_path / "backups",
    )


@pytest.fixture()
def state(settings: Settings, notifier: RecordingNotifier) -> AppState:
    """AppState wired through the real composition root with a recording notifier."""
    return create_initial_state(notifier, settings=settings)
