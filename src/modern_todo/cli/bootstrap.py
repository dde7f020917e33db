# src/modern_todo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the preference repo, reminder scheduler and store into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.preferences import SqlitePreferences
from ..tasks.task_scheduler import ReminderScheduler
from ..tasks.task_store import TodoStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.prefs_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    The store is returned unloaded; call `await state.store.load()` inside the event loop.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    prefs = SqlitePreferences(settings.prefs_db_path)
    reminders = ReminderScheduler()
    store = TodoStore(
        prefs,
        reminders=reminders,
        default_category=settings.default_category,
        categories=settings.categories,
    )

    logger.debug("State created prefs=%s categories=%s", settings.prefs_db_path, list(store.categories))
    return AppState(settings=settings, prefs=prefs, store=store, reminders=reminders)
