# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field


class MemoryPreferences:
    """
    Dict-backed PreferenceRepo.

    - Captures every write for assertions
    - Can be switched into a failing mode to exercise write-error handling
    """

    def __init__(self, values: dict[str, object] | None = None) -> None:
        self.values: dict[str, object] = dict(values or {})
        self.writes: list[tuple[str, object]] = []
        self.fail_writes = False
        self.fail_reads = False

    async def get_string_list(self, key: str) -> list[str] | None:
        if self.fail_reads:
            raise OSError("disk unavailable")
        val = self.values.get(key)
        return list(val) if isinstance(val, list) else None

    async def set_string_list(self, key: str, values: list[str]) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.values[key] = list(values)
        self.writes.append((key, list(values)))

    async def get_bool(self, key: str) -> bool | None:
        if self.fail_reads:
            raise OSError("disk unavailable")
        val = self.values.get(key)
        return val if isinstance(val, bool) else None

    async def set_bool(self, key: str, value: bool) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.values[key] = bool(value)
        self.writes.append((key, bool(value)))

    async def remove(self, key: str) -> bool:
        return self.values.pop(key, None) is not None


@dataclass(slots=True)
class Notification:
    notification_id: int
    title: str
    body: str


@dataclass(slots=True)
class FakeNotifier:
    """
    Fake Notifier used by reminder loop tests.

    The first fail_times deliveries raise.
    """

    sent: list[Notification] = field(default_factory=list)
    fail_times: int = 0
    attempts: int = 0

    async def notify(self, *, notification_id: int, title: str, body: str) -> None:
        self.attempts += 1
        if self.attempts <= self.fail_times:
            raise ConnectionError("notification service unavailable")
        self.sent.append(Notification(notification_id=notification_id, title=title, body=body))
