# src/modern_todo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store depends on Protocols instead of concrete implementations.
This keeps persistence/notification backends swappable and makes testing easier.
"""

from typing import Any, Awaitable, Protocol


class PreferenceRepo(Protocol):
    """
    Key-value preference storage (string lists + booleans).

    Missing keys read as None. All calls are awaitable; implementations decide
    whether the work is actually done off the event loop.
    """

    def get_string_list(self, key: str) -> Awaitable[list[str] | None]: ...
    def set_string_list(self, key: str, values: list[str]) -> Awaitable[None]: ...
    def get_bool(self, key: str) -> Awaitable[bool | None]: ...
    def set_bool(self, key: str, value: bool) -> Awaitable[None]: ...
    def remove(self, key: str) -> Awaitable[bool]: ...


class ReminderPort(Protocol):
    """
    Due-date reminder scheduling as seen by the store.

    schedule() replaces any existing reminder for the same task and is
    responsible for ignoring tasks that should not ring (no due date,
    already completed, due in the past).
    """

    def schedule(self, task: Any) -> Any | None: ...
    def cancel(self, task_id: str) -> bool: ...


class Notifier(Protocol):
    """
    Connector-side port: how the reminder loop shows a notification.

    The connector decides presentation (console line, desktop popup, ...).
    """

    def notify(
            self,
            *,
            notification_id: int,
            title: str,
            body: str,
    ) -> Awaitable[None]: ...
