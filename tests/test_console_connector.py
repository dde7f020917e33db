# tests/test_console_connector.py

from __future__ import annotations

import pytest

from modern_todo.connectors.console_connector import ConsoleNotifier, run_console_loop


def _feed(monkeypatch, lines: list[str]) -> None:
    pending = iter(lines)

    def fake_input(prompt: str = "") -> str:
        try:
            return next(pending)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)


@pytest.mark.asyncio
async def test_console_quick_add_and_commands(state, monkeypatch, capsys) -> None:
    _feed(monkeypatch, ["Buy milk", "", "/ls", "   ", "/exit", "never read"])

    await run_console_loop(state)
    await state.store.flush()

    assert [t.title for t in state.store.tasks] == ["Buy milk"]
    out = capsys.readouterr().out
    assert "Added: Buy milk" in out
    assert "1. [ ] Buy milk (Personal, Medium)" in out


@pytest.mark.asyncio
async def test_console_stops_on_eof_and_unsubscribes(state, monkeypatch) -> None:
    _feed(monkeypatch, ["/theme"])
    await run_console_loop(state)
    await state.store.flush()
    assert state.store.dark_mode is True
    # The console listener is gone once the loop ends.
    assert state.store._listeners == []


@pytest.mark.asyncio
async def test_console_notifier_prints_reminder(capsys) -> None:
    await ConsoleNotifier().notify(notification_id=7, title="Todo Reminder", body="Take pills")
    assert "[REMINDER] Todo Reminder: Take pills" in capsys.readouterr().out
