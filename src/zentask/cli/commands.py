# src/zentask/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..client.state import ClientState
from ..client.store import TaskClientStore
from ..tasks.task_models import Task, TaskFilter

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[TaskClientStore, list[str]], CommandResult]
CommandHandler3 = Callable[[TaskClientStore, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

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

    async def handle(
        self,
        store: TaskClientStore,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Handlers may be plain functions or coroutines.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
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

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(store, args, emit)
        else:
            result = cast(CommandHandler2, handler)(store, args)

        if inspect.isawaitable(result):
            result = await result
        return cast(str, result)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def render_task(pos: int, task: Task) -> str:
    mark = "x" if task.is_completed else " "
    return f"{pos:>3}. [{mark}] {task.content}"


def render_tasks(state: ClientState) -> str:
    visible = state.visible_tasks
    header = f"Tasks ({state.filter.value}): {state.active_count} left"
    if not visible:
        return f"{header}\n  (nothing here)"
    return "\n".join([header, *(render_task(i, t) for i, t in enumerate(visible, start=1))])


def _render_outcome(store: TaskClientStore, ok: bool) -> str:
    state = store.state
    if not ok and state.error:
        return f"[error] {state.error}\n{render_tasks(state)}"
    return render_tasks(state)


def _pick(store: TaskClientStore, raw: str) -> Task | None:
    """Resolve a 1-based position in the current (filtered) view."""
    try:
        pos = int(raw)
    except ValueError:
        return None
    visible = store.state.visible_tasks
    if 1 <= pos <= len(visible):
        return visible[pos - 1]
    return None


# ---- commands ----


def cmd_help(store: TaskClientStore, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(store: TaskClientStore, args: list[str]) -> str:
    return render_tasks(store.state)


async def cmd_refresh(store: TaskClientStore, args: list[str]) -> str:
    ok = await store.fetch_tasks()
    return _render_outcome(store, ok)


async def cmd_add(store: TaskClientStore, args: list[str]) -> str:
    content = " ".join(args).strip()
    if not content:
        return "Usage: /add <text>"
    ok = await store.add_task(content)
    return _render_outcome(store, ok)


async def cmd_toggle(store: TaskClientStore, args: list[str]) -> str:
    task = _pick(store, args[0]) if args else None
    if task is None:
        return "Usage: /toggle <n> (position in the current list)"
    ok = await store.toggle_task(task.id)
    return _render_outcome(store, ok)


async def cmd_edit(store: TaskClientStore, args: list[str]) -> str:
    task = _pick(store, args[0]) if args else None
    content = " ".join(args[1:]).strip()
    if task is None or not content:
        return "Usage: /edit <n> <new text>"
    ok = await store.edit_task(task.id, content)
    return _render_outcome(store, ok)


async def cmd_rm(store: TaskClientStore, args: list[str]) -> str:
    task = _pick(store, args[0]) if args else None
    if task is None:
        return "Usage: /rm <n>"
    ok = await store.delete_task(task.id)
    return _render_outcome(store, ok)


async def cmd_move(store: TaskClientStore, args: list[str]) -> str:
    """
    /move 3 1  -> drop item 3 onto item 1 (positions in the current view)
    """
    if len(args) != 2:
        return "Usage: /move <from> <to>"
    active = _pick(store, args[0])
    over = _pick(store, args[1])
    if active is None or over is None:
        return "Usage: /move <from> <to> (positions in the current list)"
    if active.id == over.id:
        return render_tasks(store.state)
    ok = await store.reorder_tasks(active.id, over.id)
    return _render_outcome(store, ok)


def cmd_filter(store: TaskClientStore, args: list[str]) -> str:
    if not args:
        return f"Filter is {store.state.filter.value}. Use /filter all | active | completed."
    try:
        store.set_filter(TaskFilter.parse(args[0]))
    except ValueError as e:
        return str(e)
    return render_tasks(store.state)


async def cmd_clear(
    store: TaskClientStore,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    done = sum(1 for t in store.state.tasks if t.is_completed)
    if done == 0:
        return "No completed tasks to clear."
    if emit:
        emit(f"Clearing {done} completed task(s)...")
    ok = await store.clear_completed()
    return _render_outcome(store, ok)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks under the current filter.", aliases=["ls"])
registry.register("refresh", cmd_refresh, help_text="Reload tasks from the server.")
registry.register("add", cmd_add, help_text="Add a task: /add <text>.", aliases=["a"])
registry.register("toggle", cmd_toggle, help_text="Complete/reopen a task: /toggle <n>.", aliases=["t", "done"])
registry.register("edit", cmd_edit, help_text="Change task text: /edit <n> <text>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <n>.", aliases=["del"])
registry.register("move", cmd_move, help_text="Reorder: /move <from> <to>.", aliases=["mv"])
registry.register("filter", cmd_filter, help_text="Filter view: /filter all | active | completed.", aliases=["f"])
registry.register("clear", cmd_clear, help_text="Remove all completed tasks.")
