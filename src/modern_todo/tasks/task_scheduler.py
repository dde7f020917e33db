# src/modern_todo/tasks/task_scheduler.py

from __future__ import annotations

"""
Due-date reminders.

ReminderScheduler keeps at most one pending reminder per task, keyed by a
stable notification id derived from the task id. run_reminder_loop() is a
small polling loop that:
- pops reminders whose fire time has passed,
- delivers them via an injected Notifier port,
- pushes a reminder back by retry_delay_seconds when delivery fails.

Presentation (console line, popup, ...) belongs to the connector, not the scheduler.
"""

import asyncio
import logging
import zlib
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from ..core.ports import Notifier
from .task_models import Task

logger = logging.getLogger(__name__)

REMINDER_TITLE = "Todo Reminder"


def notification_id_for(task_id: str) -> int:
    """Stable across processes (unlike hash(), which is salted per interpreter)."""
    return zlib.crc32(task_id.encode("utf-8")) & 0x7FFFFFFF


def _now_like(ts: datetime, now: datetime | None) -> datetime:
    """
    Current time in the same flavour as ts.

    Naive due dates are local wall-clock times; aware ones carry their own offset.
    """
    if now is None:
        return datetime.now(ts.tzinfo) if ts.tzinfo is not None else datetime.now()
    if (now.tzinfo is None) == (ts.tzinfo is None):
        return now
    if ts.tzinfo is None:
        return now.astimezone().replace(tzinfo=None)
    return now.astimezone()


@dataclass(slots=True, frozen=True)
class Reminder:
    notification_id: int
    task_id: str
    fire_at: datetime
    title: str
    body: str


class ReminderScheduler:
    """In-process replacement for the platform notification service."""

    def __init__(self) -> None:
        self._pending: dict[int, Reminder] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def schedule(self, task: Task, *, now: datetime | None = None) -> Reminder | None:
        """
        Schedule (or replace) the reminder for task.

        Tasks without a due date, completed tasks and tasks due in the past
        do not ring; any reminder left over for them is cancelled.
        """
        nid = notification_id_for(task.id)

        if task.due_at is None or task.completed:
            self._pending.pop(nid, None)
            return None

        if task.due_at <= _now_like(task.due_at, now):
            logger.debug("Task %s is already due (%s); no reminder", task.id, task.due_at)
            self._pending.pop(nid, None)
            return None

        reminder = Reminder(
            notification_id=nid,
            task_id=task.id,
            fire_at=task.due_at,
            title=REMINDER_TITLE,
            body=task.title,
        )
        self._pending[nid] = reminder
        logger.debug("Reminder scheduled id=%s task=%s at=%s", nid, task.id, task.due_at)
        return reminder

    def cancel(self, task_id: str) -> bool:
        removed = self._pending.pop(notification_id_for(task_id), None)
        if removed is not None:
            logger.debug("Reminder cancelled id=%s task=%s", removed.notification_id, task_id)
        return removed is not None

    def get(self, task_id: str) -> Reminder | None:
        return self._pending.get(notification_id_for(task_id))

    def pending(self) -> list[Reminder]:
        return sorted(self._pending.values(), key=lambda r: (r.fire_at.timestamp(), r.task_id))

    def pop_due(self, now: datetime | None = None) -> list[Reminder]:
        due = [r for r in self.pending() if r.fire_at <= _now_like(r.fire_at, now)]
        for r in due:
            self._pending.pop(r.notification_id, None)
        return due

    def reschedule(self, reminder: Reminder, fire_at: datetime) -> Reminder:
        # A newer schedule() for the same task wins over a retry.
        if reminder.notification_id in self._pending:
            return self._pending[reminder.notification_id]
        moved = replace(reminder, fire_at=fire_at)
        self._pending[moved.notification_id] = moved
        return moved


async def run_reminder_loop(
        scheduler: ReminderScheduler,
        notifier: Notifier,
        *,
        interval_seconds: float = 15.0,
        retry_delay_seconds: float = 60.0,
) -> None:
    """
    Simple polling loop.

    Every interval_seconds:
    - pop reminders whose fire_at <= now
    - deliver via notifier.notify(...)
    - on failure push the reminder back by retry_delay_seconds

    To stop the loop, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))
    retry_s = max(0.01, float(retry_delay_seconds))

    logger.info("Reminder loop started (interval=%.2fs)", sleep_s)

    while True:
        for reminder in scheduler.pop_due():
            try:
                await notifier.notify(
                    notification_id=reminder.notification_id,
                    title=reminder.title,
                    body=reminder.body,
                )
                logger.info("Reminder delivered id=%s task=%s", reminder.notification_id, reminder.task_id)
            except Exception:
                logger.exception("Reminder delivery failed id=%s task=%s", reminder.notification_id, reminder.task_id)
                retry_at = _now_like(reminder.fire_at, None) + timedelta(seconds=retry_s)
                scheduler.reschedule(reminder, retry_at)

        await asyncio.sleep(sleep_s)
