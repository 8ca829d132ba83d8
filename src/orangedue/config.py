# src/orangedue/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app, passed down from the composition root.
- Nothing outside this module reads the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "ORANGEDUE"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local paths ----
    data_dir: Path
    backup_dir: Path

    # ---- Store ----
    seed_default_list: bool
    default_list_name: str
    default_list_color: str | None

    # ---- Reminders ----
    reminder_default_body: str
    upcoming_window_minutes: int

    @staticmethod
    def from_env(*, load_env_file: bool = True) -> "Settings":
        if load_env_file:
            load_dotenv(override=False)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/orangedue"))
        color = _env(_k("DEFAULT_LIST_COLOR"), "#3b82f6").strip()

        return Settings(
            app_name=_env(_k("APP_NAME"), "orangedue"),
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            data_dir=data_dir,
            backup_dir=_env_path(_k("BACKUP_DIR"), data_dir / "backups"),
            seed_default_list=_env_bool(_k("SEED_DEFAULT_LIST"), True),
            default_list_name=_env(_k("DEFAULT_LIST_NAME"), "Default list"),
            default_list_color=color or None,
            reminder_default_body=_env(_k("REMINDER_DEFAULT_BODY"), "Task reminder"),
            upcoming_window_minutes=max(1, _env_int(_k("UPCOMING_WINDOW_MINUTES"), 60)),
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
