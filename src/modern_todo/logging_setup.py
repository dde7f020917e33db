# src/modern_todo/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

APP_LOGGER = "modern_todo"
LOG_FILE_NAME = "todo.log"

# Background loops that tick on a timer; console shows them only at WARNING+.
QUIET_APP_LOGGERS: tuple[str, ...] = ("modern_todo.tasks.task_scheduler",)


def resolve_level(name: str | int, default: int = logging.INFO) -> int:
    """Map 'debug' / 'INFO' / 10 to a logging level; unknown names give default."""
    if isinstance(name, int):
        return name
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default


class _ConsoleNoiseFilter(logging.Filter):
    """
    The console shares the terminal with the >>> prompt, so it only shows:
    - modern_todo records (quiet loggers at WARNING+)
    - anything else at ERROR+ (third-party libs, captured py.warnings)
    """

    def __init__(self, quiet: Iterable[str] = QUIET_APP_LOGGERS) -> None:
        super().__init__()
        self._quiet = tuple(quiet)

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name != APP_LOGGER and not name.startswith(APP_LOGGER + "."):
            return record.levelno >= logging.ERROR
        if name.startswith(self._quiet):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo",
    console_level: str | int = logging.INFO,
    file_level: str | int = logging.DEBUG,
) -> Path:
    """
    Console: filtered, at console_level. File (todo.log): everything from
    file_level up. Replaces any handlers already on the root logger.

    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(resolve_level(console_level))
    console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(resolve_level(file_level, logging.DEBUG))
    file_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    return log_file
