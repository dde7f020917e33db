# src/modern_todo/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_api import TaskValidationError, create_task

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleNotifier:
    """Notifier port implementation: reminders become timestamped console lines."""

    async def notify(self, *, notification_id: int, title: str, body: str) -> None:
        # Start on a fresh line: the prompt may be waiting for input.
        sys.stdout.write("\n")
        _print_ts(f"[REMINDER] {title}: {body}")


async def run_console_loop(state: AppState) -> None:
    """
    Interactive REPL.

    - "/..." lines go to the command registry
    - any other text is a quick add with default category/priority
    - /exit, /quit or EOF ends the loop
    """
    logger.info("Console connector started (tasks=%d).", len(state.store.tasks))
    _print_ts("[CONSOLE] Type a task title to add it. Use /help for commands. Use /exit to quit.\n")

    store = state.store
    warned = {"write": False}

    def on_change() -> None:
        # Warn once per failure streak; the store keeps working from memory.
        if store.last_write_failed and not warned["write"]:
            warned["write"] = True
            _print_ts("[TODO][WARN] Could not save changes to disk; they are kept for this session.")
        elif not store.last_write_failed:
            warned["write"] = False

    unsubscribe = store.subscribe(on_change)

    def emit(text: str) -> None:
        _print_ts(text)

    try:
        while True:
            try:
                user_input = (await asyncio.to_thread(input, ">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                cmd_response = command_registry.handle(state, user_input, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                cmd_response = "Internal error while handling a command."

            if cmd_response is not None:
                _print_ts(cmd_response)
                continue

            try:
                task = create_task(store, title=user_input)
            except TaskValidationError as e:
                _print_ts(str(e))
                continue
            _print_ts(f"Added: {task.title} #{task.id}")
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
