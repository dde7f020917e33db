# src/modern_todo/tasks/task_api.py

"""
Editing helpers: the only place user input turns into Task values.

The store trusts what it is given; titles are validated here.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from datetime import date, datetime
from typing import Any

from .task_models import DEFAULT_CATEGORY, Priority, Task
from .task_store import TodoStore

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class TaskValidationError(ValueError):
    """User input that cannot become a task (shown to the user as-is)."""


def new_task_id(now: float | None = None) -> str:
    """Millisecond timestamp id, same scheme as tasks created on the phone."""
    if now is None:
        now = time.time()
    return str(int(now * 1000))


def _unique_task_id(store: TodoStore) -> str:
    # Two adds within the same millisecond would otherwise collide.
    ms = int(time.time() * 1000)
    while store.get(str(ms)) is not None:
        ms += 1
    return str(ms)


def _clean_title(title: str | None) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise TaskValidationError("Title cannot be empty")
    return cleaned


def parse_due(raw: str | None) -> datetime | None:
    """
    "2026-10-20"            -> 2026-10-20 09:00 local
    "2026-10-20T18:30"      -> as given
    "" / "none" / "clear"   -> None
    """
    s = (raw or "").strip()
    if not s or s.lower() in {"none", "clear", "-"}:
        return None
    try:
        if len(s) == 10:
            d = date.fromisoformat(s)
            return datetime(d.year, d.month, d.day, 9, 0)
        return datetime.fromisoformat(s)
    except ValueError:
        raise TaskValidationError(f"Unrecognized due date: {s} (use YYYY-MM-DD or YYYY-MM-DDTHH:MM)") from None


def build_task(
    *,
    title: str,
    description: str = "",
    due_at: datetime | None = None,
    category: str | None = None,
    priority: Priority | int | str = Priority.MEDIUM,
    completed: bool = False,
    task_id: str | None = None,
) -> Task:
    return Task(
        id=task_id or new_task_id(),
        title=_clean_title(title),
        description=(description or "").strip(),
        completed=completed,
        due_at=due_at,
        category=category or DEFAULT_CATEGORY,
        priority=Priority.parse(priority),
    )


def create_task(
    store: TodoStore,
    *,
    title: str,
    description: str = "",
    due_at: datetime | None = None,
    category: str | None = None,
    priority: Priority | int | str = Priority.MEDIUM,
) -> Task:
    """Validate, assign an id and add to the store."""
    task = build_task(
        title=title,
        description=description,
        due_at=due_at,
        category=category or store.default_category,
        priority=priority,
        task_id=_unique_task_id(store),
    )
    store.add(task)
    logger.debug("Task created id=%s title=%r", task.id, task.title)
    return task


def edit_task(
    store: TodoStore,
    task_id: str,
    *,
    title: Any = _UNSET,
    description: Any = _UNSET,
    due_at: Any = _UNSET,
    category: Any = _UNSET,
    priority: Any = _UNSET,
    completed: Any = _UNSET,
) -> Task | None:
    """
    Apply the given changes to an existing task.

    Returns the updated task, or None when task_id is unknown.
    due_at=None clears the due date (and with it the reminder).
    """
    current = store.get(task_id)
    if current is None:
        return None

    changes: dict[str, Any] = {}
    if title is not _UNSET:
        changes["title"] = _clean_title(title)
    if description is not _UNSET:
        changes["description"] = (description or "").strip()
    if due_at is not _UNSET:
        changes["due_at"] = due_at
    if category is not _UNSET:
        changes["category"] = category
    if priority is not _UNSET:
        changes["priority"] = Priority.parse(priority)
    if completed is not _UNSET:
        changes["completed"] = bool(completed)

    updated = replace(current, **changes)
    if not store.update(updated):
        return None
    return updated
