# src/orangedue/core/ports.py

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
Alert rendering and file dialogs belong to the presentation layer; the core only
calls these capabilities.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class Notifier(Protocol):
    """
    Shows an alert to the user.

    Called for scheduled reminders (from an executor thread) and for manual
    fire-now alerts (from the caller's thread).
    """

    def notify(self, title: str, body: str | None = None) -> None: ...


class FilePicker(Protocol):
    """
    Supplies backup file paths when the caller gave none.

    Returning None means the user dismissed the dialog.
    """

    def choose_save_path(self, default_name: str) -> Path | None: ...
    def choose_open_path(self) -> Path | None: ...
