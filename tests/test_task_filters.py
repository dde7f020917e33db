# tests/test_task_filters.py

from __future__ import annotations

import itertools

from modern_todo.tasks.task_filters import (
    apply_filters,
    matches_category,
    matches_completion,
    matches_search,
)
from modern_todo.tasks.task_models import ALL_CATEGORIES, CompletionFilter, SelectionState, Task

TASKS = [
    Task(id="1", title="Buy milk", category="Shopping"),
    Task(id="2", title="Write report", description="Quarterly MILK sales", category="Work", completed=True),
    Task(id="3", title="Gym", category="Health"),
    Task(id="4", title="Buy shoes", category="Shopping", completed=True),
    Task(id="5", title="Plan trip", description="book hotel", category="Personal"),
]


def test_search_is_case_insensitive_over_title_and_description() -> None:
    assert [t.id for t in TASKS if matches_search(t, "milk")] == ["1", "2"]
    assert [t.id for t in TASKS if matches_search(t, "HOTEL")] == ["5"]
    assert all(matches_search(t, "") for t in TASKS)


def test_category_is_exact_match() -> None:
    assert [t.id for t in TASKS if matches_category(t, "Shopping")] == ["1", "4"]
    assert not any(matches_category(t, "shopping") for t in TASKS)
    assert all(matches_category(t, ALL_CATEGORIES) for t in TASKS)


def test_completion_filter() -> None:
    assert [t.id for t in TASKS if matches_completion(t, CompletionFilter.ACTIVE)] == ["1", "3", "5"]
    assert [t.id for t in TASKS if matches_completion(t, CompletionFilter.COMPLETED)] == ["2", "4"]
    assert all(matches_completion(t, CompletionFilter.ALL) for t in TASKS)


def test_apply_filters_combines_all_three_and_keeps_order() -> None:
    sel = SelectionState(
        completion_filter=CompletionFilter.COMPLETED,
        search_query="buy",
        category_filter="Shopping",
    )
    assert [t.id for t in apply_filters(TASKS, sel)] == ["4"]

    sel = SelectionState(search_query="b")
    assert [t.id for t in apply_filters(TASKS, sel)] == ["1", "4", "5"]


def test_filter_result_does_not_depend_on_predicate_order() -> None:
    for query, category, completion in itertools.product(
        ["", "buy", "milk"],
        [ALL_CATEGORIES, "Shopping", "Work"],
        list(CompletionFilter),
    ):
        predicates = [
            lambda t: matches_search(t, query),
            lambda t: matches_category(t, category),
            lambda t: matches_completion(t, completion),
        ]
        expected = apply_filters(TASKS, SelectionState(completion, query, category))

        for order in itertools.permutations(predicates):
            out = list(TASKS)
            for pred in order:
                out = [t for t in out if pred(t)]
            assert out == expected
