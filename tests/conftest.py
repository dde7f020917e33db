# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from modern_todo.core.state import AppState
from modern_todo.tasks.preferences import SqlitePreferences
from modern_todo.tasks.task_models import DEFAULT_CATEGORIES
from modern_todo.tasks.task_scheduler import ReminderScheduler
from modern_todo.tasks.task_store import TodoStore

from .fakes import MemoryPreferences


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="modern-todo-test",
        log_level="DEBUG",
        console_enabled=True,
        reminders_enabled=False,
        reminder_interval_seconds=0.01,
        reminder_retry_seconds=0.01,
        default_category="Personal",
        categories=list(DEFAULT_CATEGORIES),
        data_dir=tmp_path,
        prefs_db_path=tmp_path / "prefs.sqlite3",
        log_dir=tmp_path,
    )


@pytest.fixture()
def prefs() -> MemoryPreferences:
    return MemoryPreferences()


@pytest.fixture()
def reminders() -> ReminderScheduler:
    return ReminderScheduler()


@pytest.fixture()
def store(prefs: MemoryPreferences, reminders: ReminderScheduler) -> TodoStore:
    return TodoStore(prefs, reminders=reminders)


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired like bootstrap does.

    NOTE: We keep the real SQLite preference repo here because its
    correctness is part of what we want to test.
    """
    prefs = SqlitePreferences(settings.prefs_db_path)
    reminders = ReminderScheduler()
    return AppState(
        settings=settings,
        prefs=prefs,
        store=TodoStore(prefs, reminders=reminders, default_category=settings.default_category),
        reminders=reminders,
    )
