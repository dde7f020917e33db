# src/modern_todo/tasks/task_filters.py

"""
Visible-list predicates.

Each predicate is a pure keep/drop test over a single task, so the surviving
set does not depend on the order they are combined in. apply_filters() runs
them in a fixed order (search -> category -> completion) and never reorders.
"""

from __future__ import annotations

from collections.abc import Iterable

from .task_models import ALL_CATEGORIES, CompletionFilter, SelectionState, Task


def matches_search(task: Task, query: str) -> bool:
    if not query:
        return True
    q = query.casefold()
    return q in task.title.casefold() or q in task.description.casefold()


def matches_category(task: Task, category: str) -> bool:
    if category == ALL_CATEGORIES:
        return True
    return task.category == category


def matches_completion(task: Task, completion: CompletionFilter) -> bool:
    if completion == CompletionFilter.ACTIVE:
        return not task.completed
    if completion == CompletionFilter.COMPLETED:
        return task.completed
    return True


def apply_filters(tasks: Iterable[Task], selection: SelectionState) -> list[Task]:
    out = list(tasks)

    if selection.search_query:
        out = [t for t in out if matches_search(t, selection.search_query)]

    if selection.category_filter != ALL_CATEGORIES:
        out = [t for t in out if matches_category(t, selection.category_filter)]

    if selection.completion_filter != CompletionFilter.ALL:
        out = [t for t in out if matches_completion(t, selection.completion_filter)]

    return out
