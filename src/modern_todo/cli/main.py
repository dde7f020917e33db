# src/modern_todo/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the store, then runs:
- the reminder loop as a background asyncio task (optional),
- the console REPL until /exit or EOF.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import ConsoleNotifier, run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.task_scheduler import run_reminder_loop

logger = logging.getLogger(__name__)


async def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        await state.store.flush()
    except Exception:
        logger.exception("Failed to flush pending writes.")

    if state.store.last_write_failed:
        logger.warning("Last write failed; recent changes may not be on disk.")

    try:
        state.prefs.close()
    except Exception:
        logger.debug("Preferences close failed.", exc_info=True)


async def _run(state: AppState) -> None:
    settings = state.settings

    await state.store.load()

    reminder_task: asyncio.Task[None] | None = None
    if settings.reminders_enabled:
        reminder_task = asyncio.create_task(
            run_reminder_loop(
                state.reminders,
                ConsoleNotifier(),
                interval_seconds=settings.reminder_interval_seconds,
                retry_delay_seconds=settings.reminder_retry_seconds,
            )
        )

    try:
        if settings.console_enabled:
            await run_console_loop(state)
        elif reminder_task is not None:
            logger.info("Console disabled. Running reminders only. Press Ctrl+C to stop.")
            await reminder_task
        else:
            logger.info("Console and reminders are both disabled; nothing to do.")
    finally:
        if reminder_task is not None:
            reminder_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await reminder_task

        await _shutdown(state)


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(log_dir=settings.log_dir, console_level=settings.log_level)

    logger.info("Starting %s (log=%s)...", settings.app_name, log_file)

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
