# src/modern_todo/tasks/task_models.py

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum, StrEnum
from typing import Any

DEFAULT_CATEGORIES: tuple[str, ...] = ("Personal", "Work", "Shopping", "Health", "Other")
DEFAULT_CATEGORY = "Personal"

# Category filter value meaning "every category".
ALL_CATEGORIES = "all"


def is_reserved_category(label: str) -> bool:
    return label.strip().casefold() == ALL_CATEGORIES


class Priority(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @classmethod
    def parse(cls, raw: Any) -> Priority:
        """
        Accepts 1|2|3 (int or numeric string) or a name ("low", "High").
        Anything else maps to MEDIUM.
        """
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, bool) or raw is None:
            return cls.MEDIUM
        if isinstance(raw, str):
            s = raw.strip()
            if s.isdigit():
                raw = int(s)
            else:
                try:
                    return cls[s.upper()]
                except KeyError:
                    return cls.MEDIUM
        try:
            return cls(int(raw))
        except (TypeError, ValueError):
            return cls.MEDIUM

    @property
    def label(self) -> str:
        return self.name.capitalize()


class CompletionFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str = ""
    completed: bool = False
    due_at: datetime | None = None
    category: str = DEFAULT_CATEGORY
    priority: Priority = Priority.MEDIUM


@dataclass(slots=True)
class SelectionState:
    """What the user is currently looking at. Never persisted."""

    completion_filter: CompletionFilter = CompletionFilter.ALL
    search_query: str = ""
    category_filter: str = ALL_CATEGORIES


# ---- JSON codec ----
# Field names match the records written by the original mobile app so an
# exported preference list can be imported as-is.


def task_to_json(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "isCompleted": task.completed,
        "dueDate": task.due_at.isoformat() if task.due_at is not None else None,
        "category": task.category,
        "priority": int(task.priority),
    }


def task_from_json(data: Any) -> Task:
    if not isinstance(data, dict):
        raise ValueError(f"task record must be an object, got {type(data).__name__}")

    task_id = data.get("id")
    if not isinstance(task_id, str) or not task_id.strip():
        raise ValueError("task record has no id")

    title = data.get("title")
    if not isinstance(title, str):
        raise ValueError(f"task {task_id} has no title")

    raw_due = data.get("dueDate")
    due_at = datetime.fromisoformat(raw_due) if raw_due else None

    return Task(
        id=task_id,
        title=title,
        description=str(data.get("description") or ""),
        completed=bool(data.get("isCompleted", False)),
        due_at=due_at,
        category=str(data.get("category") or DEFAULT_CATEGORY),
        priority=Priority.parse(data.get("priority")),
    )


def encode_task(task: Task) -> str:
    return json.dumps(task_to_json(task), ensure_ascii=False)


def decode_task(raw: str) -> Task:
    return task_from_json(json.loads(raw))
