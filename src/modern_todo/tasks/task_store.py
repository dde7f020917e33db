# src/modern_todo/tasks/task_store.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import replace
from typing import Any

from ..core.ports import PreferenceRepo, ReminderPort
from .task_filters import apply_filters
from .task_models import (
    ALL_CATEGORIES,
    DEFAULT_CATEGORIES,
    DEFAULT_CATEGORY,
    CompletionFilter,
    SelectionState,
    Task,
    decode_task,
    encode_task,
    is_reserved_category,
)

logger = logging.getLogger(__name__)

TASKS_KEY = "todos"
THEME_KEY = "isDarkMode"
CATEGORIES_KEY = "categories"

Listener = Callable[[], None]


class TodoStore:
    """
    Observable in-memory task store.

    The in-memory state is authoritative. Every durable mutation schedules a
    write to the preference repo on the running event loop and returns without
    waiting for it:
    - writes go out one at a time, in mutation order
    - a failed write is logged, kept in last_write_error and announced to
      subscribers; the next successful write clears it

    Mutations called without a running loop still apply and notify, but the
    write is skipped and recorded as the last write error.
    Use flush() to wait for outstanding writes (shutdown, tests).
    """

    def __init__(
        self,
        prefs: PreferenceRepo,
        *,
        reminders: ReminderPort | None = None,
        default_category: str = DEFAULT_CATEGORY,
        categories: Iterable[str] = DEFAULT_CATEGORIES,
    ) -> None:
        self._prefs = prefs
        self._reminders = reminders
        self._default_category = default_category

        seeded: list[str] = []
        for label in categories:
            if label not in seeded and not is_reserved_category(label):
                seeded.append(label)
        if default_category not in seeded:
            seeded.insert(0, default_category)
        self._seeded_categories = tuple(seeded)
        self._categories = list(seeded)

        self._tasks: list[Task] = []
        self._selection = SelectionState()
        self._dark_mode = False

        self._listeners: list[Listener] = []
        self._write_lock = asyncio.Lock()
        self._pending_writes: set[asyncio.Task[None]] = set()
        self._last_write_error: Exception | None = None

        self._loaded = False
        self._dirty_before_load = False
        self._categories_dirty_before_load = False
        self._removed_categories: set[str] = set()

    @classmethod
    async def open(cls, prefs: PreferenceRepo, **kwargs: Any) -> TodoStore:
        store = cls(prefs, **kwargs)
        await store.load()
        return store

    # ---- read-only views ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(self._categories)

    @property
    def default_category(self) -> str:
        return self._default_category

    @property
    def selection(self) -> SelectionState:
        return replace(self._selection)

    @property
    def dark_mode(self) -> bool:
        return self._dark_mode

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def last_write_error(self) -> Exception | None:
        return self._last_write_error

    @property
    def last_write_failed(self) -> bool:
        return self._last_write_error is not None

    def get(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return self._tasks[idx] if idx is not None else None

    def visible_tasks(self) -> list[Task]:
        """Filtered view of the collection; recomputed on every call, O(n)."""
        return apply_filters(self._tasks, self._selection)

    # ---- observers ----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            self.unsubscribe(listener)

        return _unsubscribe

    def unsubscribe(self, listener: Listener) -> bool:
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("TodoStore listener %r failed", listener)

    # ---- task mutations ----

    def add(self, task: Task) -> None:
        if self._index_of(task.id) is not None:
            raise ValueError(f"task id {task.id!r} already exists")

        self._tasks.append(task)
        self._sync_reminder(task)
        self._after_tasks_changed()
        logger.debug("Task added id=%s category=%s due_at=%s", task.id, task.category, task.due_at)

    def update(self, task: Task) -> bool:
        idx = self._index_of(task.id)
        if idx is None:
            logger.debug("update: task %s not found", task.id)
            return False

        self._tasks[idx] = task
        self._sync_reminder(task)
        self._after_tasks_changed()
        logger.debug("Task updated id=%s", task.id)
        return True

    def delete(self, task_id: str) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("delete: task %s not found", task_id)
            return False

        del self._tasks[idx]
        if self._reminders is not None:
            self._reminders.cancel(task_id)
        self._after_tasks_changed()
        logger.debug("Task deleted id=%s", task_id)
        return True

    def toggle_completed(self, task_id: str) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("toggle_completed: task %s not found", task_id)
            return False

        current = self._tasks[idx]
        toggled = replace(current, completed=not current.completed)
        self._tasks[idx] = toggled
        self._sync_reminder(toggled)
        self._after_tasks_changed()
        logger.debug("Task %s completed=%s", task_id, toggled.completed)
        return True

    # ---- selection (ephemeral) ----

    def set_completion_filter(self, completion: CompletionFilter | str) -> None:
        self._selection.completion_filter = CompletionFilter(completion)
        self._notify()

    def set_search_query(self, query: str) -> None:
        self._selection.search_query = query
        self._notify()

    def set_category_filter(self, category: str) -> None:
        self._selection.category_filter = category
        self._notify()

    # ---- categories ----

    def add_category(self, label: str) -> bool:
        # "all" is the category filter's match-everything value, not a label.
        if label in self._categories or is_reserved_category(label):
            return False
        self._categories.append(label)
        self._removed_categories.discard(label)
        self._persist_categories()
        self._notify()
        logger.info("Category added: %s", label)
        return True

    def remove_category(self, label: str) -> bool:
        """
        Remove a user-added category.

        Seeded categories stay. Tasks still filed under the removed label move
        to the default category; a category filter pointing at it is reset.
        """
        if label in self._seeded_categories or label not in self._categories:
            return False

        self._categories.remove(label)
        self._removed_categories.add(label)

        moved = 0
        for i, task in enumerate(self._tasks):
            if task.category == label:
                self._tasks[i] = replace(task, category=self._default_category)
                moved += 1
        if moved:
            self._persist_tasks()

        if self._selection.category_filter == label:
            self._selection.category_filter = ALL_CATEGORIES

        self._persist_categories()
        self._notify()
        logger.info("Category removed: %s (reassigned %d task(s) to %s)", label, moved, self._default_category)
        return True

    # ---- theme ----

    def toggle_theme(self) -> bool:
        self._dark_mode = not self._dark_mode
        dark_mode = self._dark_mode
        self._spawn_write(lambda: self._prefs.set_bool(THEME_KEY, dark_mode), what=THEME_KEY)
        self._notify()
        return self._dark_mode

    # ---- load / flush ----

    async def load(self) -> None:
        """
        Pull tasks, theme and custom categories from the preference repo.

        Nothing waits for this: tasks added before it finishes are kept
        (after the loaded ones) and the merged list is written back.
        """
        try:
            # Never read while a write is half-way through.
            async with self._write_lock:
                raw_tasks = await self._prefs.get_string_list(TASKS_KEY)
                dark_mode = await self._prefs.get_bool(THEME_KEY)
                custom = await self._prefs.get_string_list(CATEGORIES_KEY)
        except Exception:
            logger.exception("TodoStore load failed; keeping in-memory state")
            return

        loaded: list[Task] = []
        for raw in raw_tasks or []:
            try:
                loaded.append(decode_task(raw))
            except ValueError:
                logger.warning("Skipping unreadable task record: %.80s", raw)

        known = {t.id for t in self._tasks}
        merged = [t for t in loaded if t.id not in known]
        self._tasks = merged + self._tasks

        if dark_mode is not None:
            self._dark_mode = dark_mode

        for label in custom or []:
            if label in self._categories or label in self._removed_categories:
                continue
            if is_reserved_category(label):
                logger.warning("Skipping reserved category name from storage: %s", label)
                continue
            self._categories.append(label)

        self._loaded = True

        if self._reminders is not None:
            for task in merged:
                self._reminders.schedule(task)

        if self._dirty_before_load:
            self._persist_tasks()
        if self._categories_dirty_before_load:
            self._persist_categories()

        logger.info(
            "TodoStore loaded tasks=%d dark_mode=%s categories=%d",
            len(self._tasks),
            self._dark_mode,
            len(self._categories),
        )
        self._notify()

    async def flush(self) -> None:
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)

    # ---- helpers ----

    def _index_of(self, task_id: str) -> int | None:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    def _sync_reminder(self, task: Task) -> None:
        if self._reminders is None:
            return
        # schedule() cancels on its own when the task should not ring.
        self._reminders.schedule(task)

    def _after_tasks_changed(self) -> None:
        if not self._loaded:
            self._dirty_before_load = True
        self._persist_tasks()
        self._notify()

    def _persist_tasks(self) -> None:
        payload = [encode_task(t) for t in self._tasks]
        self._spawn_write(lambda: self._prefs.set_string_list(TASKS_KEY, payload), what=TASKS_KEY)

    def _persist_categories(self) -> None:
        if not self._loaded:
            self._categories_dirty_before_load = True
        custom = [c for c in self._categories if c not in self._seeded_categories]
        self._spawn_write(lambda: self._prefs.set_string_list(CATEGORIES_KEY, custom), what=CATEGORIES_KEY)

    def _spawn_write(self, write: Callable[[], Awaitable[None]], *, what: str) -> None:
        # Snapshot is taken by the caller; the write itself runs later.
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as exc:
            # Called from sync code: keep the in-memory change, skip the write.
            logger.warning("No running event loop; %s not persisted", what)
            self._last_write_error = exc
            return
        task = loop.create_task(self._run_write(write, what))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _run_write(self, write: Callable[[], Awaitable[None]], what: str) -> None:
        async with self._write_lock:
            try:
                await write()
            except Exception as exc:
                logger.exception("Persisting %s failed; in-memory state kept", what)
                self._last_write_error = exc
                self._notify()
                return

        if self._last_write_error is not None:
            logger.info("Persisting %s succeeded again; clearing write error", what)
            self._last_write_error = None
            self._notify()
