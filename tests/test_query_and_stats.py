# tests/test_query_and_stats.py

from __future__ import annotations

from datetime import timedelta

from orangedue.records.models import TaskStatus
from orangedue.records.query import TaskQuery, query_tasks, upcoming_reminders
from orangedue.records.stats import stats_range
from orangedue.records.store import RecordStore

from .fakes import ManualClock


def _seed(store: RecordStore, clock: ManualClock) -> dict[str, int]:
    work = store.create_list("Work")
    ids: dict[str, int] = {}
    for title, day, start, list_id in [
        ("late", "2024-05-02", "14:00", work.id),
        ("early", "2024-05-02", "08:00", None),
        ("untimed", "2024-05-02", None, work.id),
        ("first", "2024-05-01", None, None),
        ("later-created", "2024-05-02", "08:00", work.id),
    ]:
        clock.advance(seconds=1)
        fields = {"title": title, "date": day, "list_id": list_id}
        if start:
            fields["start_time"] = start
        ids[title] = store.create_task(fields).id
    ids["work"] = work.id
    return ids


def test_query_without_filters_returns_everything_in_order(store: RecordStore, clock: ManualClock) -> None:
    _seed(store, clock)
    titles = [t.title for t in query_tasks(store.snapshot())]
    assert titles == ["first", "untimed", "early", "later-created", "late"]


def test_list_filter_distinguishes_omitted_null_and_id(store: RecordStore, clock: ManualClock) -> None:
    ids = _seed(store, clock)
    snap = store.snapshot()

    assert len(query_tasks(snap, TaskQuery.from_dict({}))) == 5

    inbox = query_tasks(snap, TaskQuery.from_dict({"list_id": None}))
    assert {t.title for t in inbox} == {"early", "first"}

    work = query_tasks(snap, TaskQuery.from_dict({"list_id": ids["work"]}))
    assert {t.title for t in work} == {"late", "untimed", "later-created"}


def test_status_and_inclusive_date_range(store: RecordStore, clock: ManualClock) -> None:
    ids = _seed(store, clock)
    store.toggle_complete(ids["late"])
    snap = store.snapshot()

    done = query_tasks(snap, TaskQuery(status=TaskStatus.COMPLETED))
    assert [t.title for t in done] == ["late"]

    day_one = query_tasks(snap, TaskQuery.from_dict({"date_from": "2024-05-01", "date_to": "2024-05-01"}))
    assert [t.title for t in day_one] == ["first"]

    none = query_tasks(snap, TaskQuery.from_dict({"date_from": "2024-05-03"}))
    assert none == []


def test_upcoming_reminders_window(store: RecordStore, clock: ManualClock) -> None:
    now = clock.now
    soon = store.create_task(
        {"title": "soon", "date": "2024-05-01", "remind_at": (now + timedelta(minutes=30)).isoformat()}
    )
    store.create_task(
        {"title": "too late", "date": "2024-05-01", "remind_at": (now + timedelta(hours=2)).isoformat()}
    )
    store.create_task(
        {"title": "past", "date": "2024-05-01", "remind_at": (now - timedelta(minutes=1)).isoformat()}
    )
    done = store.create_task(
        {"title": "done", "date": "2024-05-01", "remind_at": (now + timedelta(minutes=10)).isoformat()}
    )
    store.toggle_complete(done.id)

    hits = upcoming_reminders(store.snapshot(), now=now, within=timedelta(hours=1))
    assert [t.id for t in hits] == [soon.id]


def test_stats_concrete_scenario(store: RecordStore) -> None:
    work = store.create_list("Work")
    assert (work.id, work.sort_order) == (2, 1)

    task = store.create_task({"title": "Ship", "date": "2024-05-01", "priority": "high", "list_id": 2})
    assert task.id == 1
    assert task.status == TaskStatus.PENDING

    assert store.toggle_complete(1).status == TaskStatus.COMPLETED  # type: ignore[union-attr]

    stats = stats_range(store.snapshot(), "2024-05-01", "2024-05-01")
    assert stats.to_dict() == {
        "completed": 1,
        "pending": 0,
        "completionRate": 1,
        "heatmap": [{"date": "2024-05-01", "count": 1, "completed": 1, "pending": 0}],
    }


def test_stats_empty_window_has_zero_rate(store: RecordStore) -> None:
    store.create_task({"title": "outside", "date": "2024-04-30"})
    stats = stats_range(store.snapshot(), "2024-05-01", "2024-05-31")
    assert (stats.completed, stats.pending, stats.completion_rate) == (0, 0, 0)
    assert stats.heatmap == []


def test_stats_heatmap_is_sparse_and_sorted(store: RecordStore) -> None:
    for title, day in [("a", "2024-05-05"), ("b", "2024-05-01"), ("c", "2024-05-05"), ("d", "2024-06-01")]:
        store.create_task({"title": title, "date": day})
    store.toggle_complete(1)

    stats = stats_range(store.snapshot(), "2024-05-01", "2024-05-31")
    assert stats.completed + stats.pending == 3
    assert 0 <= stats.completion_rate <= 1
    assert [(d.date, d.count, d.completed, d.pending) for d in stats.heatmap] == [
        ("2024-05-01", 1, 0, 1),
        ("2024-05-05", 2, 1, 1),
    ]
