# src/modern_todo/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.preferences import SqlitePreferences
from ..tasks.task_scheduler import ReminderScheduler
from ..tasks.task_store import TodoStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    prefs: SqlitePreferences
    store: TodoStore
    reminders: ReminderScheduler
