# src/modern_todo/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import shlex
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import TaskValidationError, create_task, edit_task, parse_due
from ..tasks.task_models import ALL_CATEGORIES, CompletionFilter, Priority, Task, is_reserved_category

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like '/command args "quoted arg"'.
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskValidationError as e:
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _split_options(args: list[str], allowed: set[str]) -> tuple[list[str], dict[str, str]]:
    """
    ["Buy", "milk", "--cat", "Shopping"] -> (["Buy", "milk"], {"cat": "Shopping"})
    """
    positional: list[str] = []
    opts: dict[str, str] = {}
    it = iter(args)
    for arg in it:
        if arg.startswith("--"):
            name = arg[2:].lower()
            if name not in allowed:
                raise TaskValidationError(f"Unknown option: {arg}")
            value = next(it, None)
            if value is None:
                raise TaskValidationError(f"Option {arg} needs a value")
            opts[name] = value
        else:
            positional.append(arg)
    return positional, opts


def _resolve(state: AppState, ref: str) -> Task | None:
    """A task id, or a 1-based position in the current visible list."""
    task = state.store.get(ref)
    if task is not None:
        return task
    if ref.isdigit():
        visible = state.store.visible_tasks()
        idx = int(ref)
        if 1 <= idx <= len(visible):
            return visible[idx - 1]
    return None


def _check_category(state: AppState, category: str) -> str:
    if category not in state.store.categories:
        known = ", ".join(state.store.categories)
        raise TaskValidationError(f"Unknown category: {category}. Known: {known}")
    return category


def _format_task(task: Task, position: int | None = None) -> str:
    mark = "x" if task.completed else " "
    prefix = f"{position}. " if position is not None else ""
    details = [task.category, task.priority.label]
    if task.due_at is not None:
        details.append(f"due {task.due_at:%Y-%m-%d %H:%M}")
    return f"{prefix}[{mark}] {task.title} ({', '.join(details)}) #{task.id}"


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.store
    sel = store.selection
    done = sum(1 for t in store.tasks if t.completed)
    write = "FAILED (changes kept in memory)" if store.last_write_failed else "OK"
    return (
        "Status:\n"
        f"  Tasks: {len(store.tasks)} total, {done} completed, {len(store.visible_tasks())} visible\n"
        f"  Filter: {sel.completion_filter.value} | category: {sel.category_filter} "
        f"| search: {sel.search_query or '-'}\n"
        f"  Theme: {'dark' if store.dark_mode else 'light'}\n"
        f"  Pending reminders: {len(state.reminders)}\n"
        f"  Last save: {write}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    visible = state.store.visible_tasks()
    if not visible:
        if not state.store.tasks:
            return "No todos yet! Add one with /add <title>."
        return "Nothing matches the current filters."
    return "\n".join(_format_task(t, i) for i, t in enumerate(visible, start=1))


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <title> [--desc text] [--due YYYY-MM-DD[THH:MM]] [--cat name] [--pri low|medium|high]
    """
    words, opts = _split_options(args, {"desc", "due", "cat", "pri"})
    category = _check_category(state, opts["cat"]) if "cat" in opts else None

    task = create_task(
        state.store,
        title=" ".join(words),
        description=opts.get("desc", ""),
        due_at=parse_due(opts.get("due")),
        category=category,
        priority=opts.get("pri", Priority.MEDIUM),
    )

    if emit and task.due_at is not None and state.reminders.get(task.id) is None:
        with contextlib.suppress(Exception):
            emit("[TODO] Due date is in the past; no reminder scheduled.")

    return f"Added: {_format_task(task)}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id|#> [--title t] [--desc d] [--due when|none] [--cat name] [--pri level]
    """
    positional, opts = _split_options(args, {"title", "desc", "due", "cat", "pri"})
    if len(positional) != 1 or not opts:
        return "Usage: /edit <id|#> [--title t] [--desc d] [--due when|none] [--cat name] [--pri level]"

    task = _resolve(state, positional[0])
    if task is None:
        return f"No such task: {positional[0]}"

    changes: dict[str, object] = {}
    if "title" in opts:
        changes["title"] = opts["title"]
    if "desc" in opts:
        changes["description"] = opts["desc"]
    if "due" in opts:
        changes["due_at"] = parse_due(opts["due"])
    if "cat" in opts:
        changes["category"] = _check_category(state, opts["cat"])
    if "pri" in opts:
        changes["priority"] = opts["pri"]

    updated = edit_task(state.store, task.id, **changes)
    if updated is None:
        return f"No such task: {positional[0]}"
    return f"Updated: {_format_task(updated)}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id|#>"
    task = _resolve(state, args[0])
    if task is None or not state.store.toggle_completed(task.id):
        return f"No such task: {args[0]}"
    return f"{'Re-opened' if task.completed else 'Completed'}: {task.title}"


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <id|#>"
    task = _resolve(state, args[0])
    if task is None or not state.store.delete(task.id):
        return f"No such task: {args[0]}"
    return f"Deleted: {task.title}"


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <id|#>"
    task = _resolve(state, args[0])
    if task is None:
        return f"No such task: {args[0]}"
    due = f"{task.due_at:%Y-%m-%d %H:%M}" if task.due_at is not None else "-"
    return (
        f"{task.title}\n"
        f"  id: {task.id}\n"
        f"  status: {'completed' if task.completed else 'active'}\n"
        f"  category: {task.category}\n"
        f"  priority: {task.priority.label}\n"
        f"  due: {due}\n"
        f"  description: {task.description or '-'}"
    )


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter            -> show current completion filter
    /filter all|active|completed
    """
    if not args:
        return f"Completion filter: {state.store.selection.completion_filter.value}"
    try:
        completion = CompletionFilter(args[0].lower())
    except ValueError:
        return "Usage: /filter all|active|completed"
    state.store.set_completion_filter(completion)
    return f"Completion filter: {completion.value}"


def cmd_search(state: AppState, args: list[str]) -> str:
    query = " ".join(args).strip()
    state.store.set_search_query(query)
    if not query:
        return "Search cleared."
    return f"Searching for: {query} ({len(state.store.visible_tasks())} match(es))"


def cmd_category(state: AppState, args: list[str]) -> str:
    """
    /category          -> show current category filter
    /category all      -> every category
    /category <name>   -> only that category
    """
    if not args:
        return f"Category filter: {state.store.selection.category_filter}"
    name = " ".join(args)
    if name.lower() == ALL_CATEGORIES:
        state.store.set_category_filter(ALL_CATEGORIES)
        return "Category filter: all"
    state.store.set_category_filter(_check_category(state, name))
    return f"Category filter: {name}"


def cmd_categories(state: AppState, args: list[str]) -> str:
    """
    /categories             -> list
    /categories add <name>
    /categories rm <name>   (tasks move to the default category)
    """
    store = state.store
    if not args:
        return "Categories: " + ", ".join(store.categories)

    sub = args[0].lower()
    name = " ".join(args[1:]).strip()
    if sub in ("add", "rm", "del") and not name:
        return f"Usage: /categories {sub} <name>"

    if sub == "add":
        if is_reserved_category(name):
            return f"Reserved name, pick another category: {name}"
        if not store.add_category(name):
            return f"Category already exists: {name}"
        return f"Category added: {name}"

    if sub in ("rm", "del"):
        if name not in store.categories:
            return f"Unknown category: {name}"
        if not store.remove_category(name):
            return f"Built-in category cannot be removed: {name}"
        return f"Category removed: {name} (its tasks moved to {store.default_category})"

    return "Usage: /categories [add|rm] <name>"


def cmd_theme(state: AppState, args: list[str]) -> str:
    dark = state.store.toggle_theme()
    return f"Theme: {'dark' if dark else 'light'}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show counts, filters, theme and save status.")
registry.register("list", cmd_list, help_text="List tasks matching the current filters.", aliases=["ls"])
registry.register(
    "add", cmd_add, help_text="Add a task: /add <title> [--desc d] [--due when] [--cat c] [--pri p]."
)
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id|#> [--title ...] [--due none] ...")
registry.register("done", cmd_done, help_text="Toggle a task completed/active: /done <id|#>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id|#>.", aliases=["del"])
registry.register("show", cmd_show, help_text="Show task details: /show <id|#>.")
registry.register("filter", cmd_filter, help_text="Completion filter: /filter all | active | completed.")
registry.register("search", cmd_search, help_text="Search title/description: /search <text> (empty clears).")
registry.register("category", cmd_category, help_text="Category filter: /category <name> | all.")
registry.register(
    "categories", cmd_categories, help_text="Manage categories: /categories [add|rm] <name>."
)
registry.register("theme", cmd_theme, help_text="Toggle dark/light theme.")
