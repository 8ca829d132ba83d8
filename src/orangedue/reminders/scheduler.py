# src/orangedue/reminders/scheduler.py

"""
Reminder scheduler.

A registry of live asyncio timer handles keyed by (task_id, instant):
- schedule() arms a loop.call_later timer (replacing any entry with the same key),
- the timer removes its own entry, then hands the alert to the notifier on the
  loop's default executor so a slow notifier never stalls the loop,
- cancel() disarms and removes an entry.

All registry operations must run on the loop thread. Because firing and
cancelling both happen there, once cancel() returns True the notifier is never
called for that entry.

Nothing is persisted: pending reminders die with the process.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from ..core.ports import Notifier
from ..records.models import parse_instant
from ..records.store import utc_now

logger = logging.getLogger(__name__)


class InvalidReminderTime(ValueError):
    """The reminder target is not strictly in the future."""


@dataclass(frozen=True, slots=True, order=True)
class ReminderKey:
    task_id: int
    # Epoch milliseconds, so equal instants written differently share a key.
    when_ms: int

    @classmethod
    def of(cls, task_id: int, when: str | datetime) -> ReminderKey:
        instant = parse_instant(when)
        return cls(task_id=int(task_id), when_ms=round(instant.timestamp() * 1000))


class ReminderScheduler:
    def __init__(
        self,
        notifier: Notifier,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        clock: Callable[[], datetime] = utc_now,
        default_body: str = "Task reminder",
    ) -> None:
        self._notifier = notifier
        self._loop = loop
        self._clock = clock
        self._default_body = default_body
        self._entries: dict[ReminderKey, asyncio.TimerHandle] = {}
        self._inflight: set[asyncio.Future[None]] = set()

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            # Bind to the loop of the first caller.
            self._loop = asyncio.get_running_loop()
        return self._loop

    # ---- registry ----

    def schedule(
        self,
        task_id: int,
        when: str | datetime,
        title: str,
        body: str | None = None,
    ) -> bool:
        """
        Arm a reminder for (task_id, when).

        Raises InvalidReminderTime unless `when` is strictly in the future.
        Re-scheduling the same key cancels the previous timer first.
        """
        key = ReminderKey.of(task_id, when)
        delay = key.when_ms / 1000.0 - self._clock().timestamp()
        if delay <= 0:
            raise InvalidReminderTime("Reminder time must be in the future")

        loop = self._get_loop()

        previous = self._entries.pop(key, None)
        if previous is not None:
            previous.cancel()
            logger.debug("Reminder replaced key=%s", key)

        text = body if body else self._default_body
        self._entries[key] = loop.call_later(delay, self._fire, key, title, text)
        logger.info("Reminder scheduled task_id=%s in %.1fs", key.task_id, delay)
        return True

    def cancel(self, task_id: int, when: str | datetime) -> bool:
        """Disarm a reminder; False (not an error) when no such entry exists."""
        key = ReminderKey.of(task_id, when)
        handle = self._entries.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        logger.info("Reminder cancelled task_id=%s", key.task_id)
        return True

    def cancel_task(self, task_id: int) -> int:
        """Disarm every reminder of one task; returns how many were live."""
        keys = [k for k in self._entries if k.task_id == int(task_id)]
        for key in keys:
            self._entries.pop(key).cancel()
        if keys:
            logger.info("Reminders cancelled task_id=%s count=%d", task_id, len(keys))
        return len(keys)

    def pending(self) -> list[ReminderKey]:
        return sorted(self._entries)

    def shutdown(self) -> int:
        """Cancel everything still armed (called on process exit)."""
        count = len(self._entries)
        for handle in self._entries.values():
            handle.cancel()
        self._entries.clear()
        if count:
            logger.info("Reminder scheduler shut down; dropped %d pending reminder(s)", count)
        return count

    async def drain(self) -> None:
        """Wait for notifier calls already handed to the executor."""
        if self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    # ---- firing ----

    def fire_now(self, title: str, body: str | None = None) -> bool:
        """Bypass scheduling and notify synchronously; notifier errors propagate."""
        self._notifier.notify(title, body)
        return True

    def _fire(self, key: ReminderKey, title: str, body: str) -> None:
        # Entry is gone before delivery starts: a late cancel() is a no-op.
        self._entries.pop(key, None)
        loop = self._get_loop()
        fut = loop.run_in_executor(None, self._deliver, key, title, body)
        self._inflight.add(fut)
        fut.add_done_callback(self._inflight.discard)

    def _deliver(self, key: ReminderKey, title: str, body: str) -> None:
        try:
            self._notifier.notify(title, body)
            logger.info("Reminder fired task_id=%s", key.task_id)
        except Exception:
            logger.exception("Reminder notify failed task_id=%s", key.task_id)
