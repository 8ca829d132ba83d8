# src/orangedue/records/backup.py

"""
Backup codec.

File layout (UTF-8 JSON):

    {"version": "1.0", "timestamp": "<ISO instant>",
     "data": {"lists": [...], "tasks": [...]}}

Import is a merge, not a restore:
- lists are skipped when a list with the same name exists
- tasks are skipped when a task with the same (title, date) exists
- inserted records get fresh ids and timestamps
- records without a name, title or valid date are skipped with a warning
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Mapping
from datetime import date, datetime
from pathlib import Path
from typing import Any

from .models import TASK_FIELDS, iso_instant, normalize_date
from .store import RecordStore, utc_now

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.0"


class InvalidBackupFormat(ValueError):
    """Raised before any mutation when a backup payload is structurally invalid."""


def default_backup_name(today: date | None = None) -> str:
    today = today or date.today()
    return f"orangedue-backup-{today.isoformat()}.json"


def export_snapshot(store: RecordStore, *, now: datetime | None = None) -> dict[str, Any]:
    """Full, self-contained copy of the store plus version and export instant."""
    return {
        "version": BACKUP_VERSION,
        "timestamp": iso_instant(now or utc_now()),
        "data": {
            "lists": [lst.to_dict() for lst in store.all_lists()],
            "tasks": [task.to_dict() for task in sorted(store.snapshot(), key=lambda t: t.id)],
        },
    }


def _validate(payload: Any) -> tuple[list[Any], list[Any]]:
    data = payload.get("data") if isinstance(payload, Mapping) else None
    if not isinstance(data, Mapping):
        raise InvalidBackupFormat("Invalid backup file format: missing data section")

    lists = data.get("lists")
    tasks = data.get("tasks")
    if not isinstance(lists, list) or not isinstance(tasks, list):
        raise InvalidBackupFormat("Invalid backup file format: lists and tasks must be arrays")
    return lists, tasks


def import_snapshot(store: RecordStore, payload: Any) -> int:
    """
    Merge a backup payload into the store and return how many lists and tasks
    were inserted.

    Only the overall shape is fatal. Duplicates are skipped silently; records
    that cannot be imported (no name, no title, bad date or field values) are
    skipped with a warning.
    """
    lists, tasks = _validate(payload)

    imported = 0
    skipped = 0
    # Old list id -> id of the list carrying the same name in this store.
    list_ids: dict[int, int] = {}

    for i, raw in enumerate(lists):
        name = str(raw.get("name") or "").strip() if isinstance(raw, Mapping) else ""
        if not name:
            logger.warning("Skipping imported list #%d: no name", i)
            skipped += 1
            continue

        existing = store.find_list_by_name(name)
        if existing is None:
            sort_order = raw.get("sort_order")
            try:
                existing = store.create_list(
                    name,
                    raw.get("color"),
                    sort_order=sort_order if isinstance(sort_order, int) else None,
                )
            except ValueError as e:
                logger.warning("Skipping imported list %r: %s", name, e)
                skipped += 1
                continue
            imported += 1
        old_id = raw.get("id")
        if isinstance(old_id, int):
            list_ids[old_id] = existing.id

    for i, raw in enumerate(tasks):
        if not isinstance(raw, Mapping) or not raw.get("title") or not raw.get("date"):
            logger.warning("Skipping imported task #%d: needs title and date", i)
            skipped += 1
            continue

        title = str(raw["title"]).strip()
        try:
            task_date = normalize_date(raw["date"])
        except ValueError as e:
            logger.warning("Skipping imported task %r: %s", title, e)
            skipped += 1
            continue
        if store.find_task(title, task_date) is not None:
            continue

        fields = {k: v for k, v in raw.items() if k in TASK_FIELDS}
        fields.update(title=title, date=task_date)
        old_list = fields.get("list_id")
        fields["list_id"] = list_ids.get(old_list) if isinstance(old_list, int) else None

        try:
            store.create_task(fields)
        except ValueError as e:
            logger.warning("Skipping imported task %r: %s", title, e)
            skipped += 1
            continue
        imported += 1

    logger.info(
        "Backup import: %d new records, %d skipped (payload lists=%d tasks=%d)",
        imported,
        skipped,
        len(lists),
        len(tasks),
    )
    return imported


def write_backup(path: str | Path, snapshot: Mapping[str, Any]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(snapshot, ensure_ascii=False, indent=2), "utf-8")
    try:
        os.replace(tmp, path)
    finally:
        with contextlib.suppress(FileNotFoundError):
            tmp.unlink()
    logger.info("Backup written to %s", path)
    return path


def read_backup(path: str | Path) -> Any:
    try:
        return json.loads(Path(path).read_text("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidBackupFormat(f"Invalid backup file format: {e}") from e
