# tests/test_task_api.py

from __future__ import annotations

from datetime import datetime

import pytest

from modern_todo.tasks.task_api import (
    TaskValidationError,
    build_task,
    create_task,
    edit_task,
    new_task_id,
    parse_due,
)
from modern_todo.tasks.task_models import Priority
from modern_todo.tasks.task_store import TodoStore


def test_new_task_id_is_millisecond_timestamp() -> None:
    assert new_task_id(1760000000.1234) == "1760000000123"
    assert new_task_id().isdigit()


@pytest.mark.parametrize("title", ["", "   ", None])
def test_empty_title_is_rejected(title) -> None:
    with pytest.raises(TaskValidationError, match="Title cannot be empty"):
        build_task(title=title)


def test_build_task_normalizes_input() -> None:
    task = build_task(title="  Buy milk ", description=" 2l ", priority="high", task_id="42")
    assert (task.id, task.title, task.description, task.priority) == ("42", "Buy milk", "2l", Priority.HIGH)
    assert task.category == "Personal"
    assert task.completed is False


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2026-10-20", datetime(2026, 10, 20, 9, 0)),
        ("2026-10-20T18:30", datetime(2026, 10, 20, 18, 30)),
        ("2026-10-20 18:30", datetime(2026, 10, 20, 18, 30)),
        ("none", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_due(raw, expected) -> None:
    assert parse_due(raw) == expected


def test_parse_due_rejects_garbage() -> None:
    with pytest.raises(TaskValidationError):
        parse_due("tomorrow-ish")


@pytest.mark.asyncio
async def test_create_task_assigns_unique_ids(store: TodoStore) -> None:
    a = create_task(store, title="One")
    b = create_task(store, title="Two", category="Work", priority=Priority.LOW)

    assert a.id != b.id
    assert [t.title for t in store.tasks] == ["One", "Two"]
    assert store.get(b.id).category == "Work"
    assert store.get(a.id).category == store.default_category


@pytest.mark.asyncio
async def test_edit_task_applies_only_given_fields(store: TodoStore) -> None:
    task = create_task(store, title="Dentist", due_at=datetime(2030, 1, 1, 9, 0), category="Health")

    updated = edit_task(store, task.id, title="Dentist (moved)", due_at=None)

    assert updated is not None
    assert updated.title == "Dentist (moved)"
    assert updated.due_at is None
    assert updated.category == "Health"
    assert store.get(task.id) == updated


@pytest.mark.asyncio
async def test_edit_task_unknown_id_and_empty_title(store: TodoStore) -> None:
    assert edit_task(store, "missing", title="x") is None

    task = create_task(store, title="Keep me")
    with pytest.raises(TaskValidationError):
        edit_task(store, task.id, title=" ")
    assert store.get(task.id).title == "Keep me"
