# src/orangedue/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the store, the reminder scheduler and the API facade into AppState.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

from ..api.handlers import OrganizerApi
from ..config import Settings, get_settings
from ..core.ports import FilePicker, Notifier
from ..core.state import AppState
from ..records.store import RecordStore
from ..reminders.scheduler import ReminderScheduler

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.backup_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    notifier: Notifier,
    *,
    settings: Settings | None = None,
    file_picker: FilePicker | None = None,
    loop: asyncio.AbstractEventLoop | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = RecordStore(
        seed_default_list=settings.seed_default_list,
        default_list_name=settings.default_list_name,
        default_list_color=settings.default_list_color,
    )
    scheduler = ReminderScheduler(
        notifier,
        loop=loop,
        default_body=settings.reminder_default_body,
    )
    api = OrganizerApi(
        store,
        scheduler,
        file_picker=file_picker,
        backup_dir=settings.backup_dir,
        upcoming_window=timedelta(minutes=settings.upcoming_window_minutes),
    )
    logger.debug("AppState wired (backup_dir=%s)", settings.backup_dir)
    return AppState(settings=settings, store=store, scheduler=scheduler, api=api)
