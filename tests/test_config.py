# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from orangedue.config import Settings


def test_from_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DATA_DIR", "BACKUP_DIR", "SEED_DEFAULT_LIST", "UPCOMING_WINDOW_MINUTES"):
        monkeypatch.delenv(f"ORANGEDUE_{name}", raising=False)

    s = Settings.from_env(load_env_file=False)
    assert s.data_dir == Path(".local/orangedue")
    assert s.backup_dir == Path(".local/orangedue/backups")
    assert s.seed_default_list is True
    assert s.upcoming_window_minutes == 60


def test_from_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ORANGEDUE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("ORANGEDUE_SEED_DEFAULT_LIST", "no")
    monkeypatch.setenv("ORANGEDUE_DEFAULT_LIST_COLOR", "")
    monkeypatch.setenv("ORANGEDUE_UPCOMING_WINDOW_MINUTES", "not-a-number")

    s = Settings.from_env(load_env_file=False)
    assert s.backup_dir == tmp_path / "backups"
    assert s.seed_default_list is False
    assert s.default_list_color is None
    assert s.upcoming_window_minutes == 60
