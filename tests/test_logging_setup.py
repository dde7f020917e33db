# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from modern_todo.logging_setup import _ConsoleNoiseFilter, resolve_level, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    "raw, expected",
    [("debug", logging.DEBUG), (" Warning ", logging.WARNING), (30, 30), ("loud", logging.INFO)],
)
def test_resolve_level(raw, expected) -> None:
    assert resolve_level(raw) == expected


def test_console_filter_keeps_app_logs_and_quiets_the_rest() -> None:
    f = _ConsoleNoiseFilter()

    assert f.filter(_record("modern_todo.tasks.task_store", logging.DEBUG))
    assert f.filter(_record("modern_todo", logging.INFO))

    assert not f.filter(_record("modern_todo.tasks.task_scheduler", logging.INFO))
    assert f.filter(_record("modern_todo.tasks.task_scheduler", logging.WARNING))

    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert not f.filter(_record("modern_todoish", logging.WARNING))
    assert f.filter(_record("asyncio", logging.ERROR))


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs", console_level="warning")
        logging.getLogger("modern_todo.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert log_file == tmp_path / "logs" / "todo.log"
        assert "hello file" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
