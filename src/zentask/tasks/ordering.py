# src/zentask/tasks/ordering.py

"""
Ordering rules shared by the server-side TaskStore and the client state store.

All functions are pure: they take a sequence of Task values and return a new
list, never mutating their input.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace

from .task_models import Task, TaskFilter


def sort_by_order(tasks: Iterable[Task]) -> list[Task]:
    # sorted() is stable, so equal orders keep their stored position.
    return sorted(tasks, key=lambda t: t.order)


def next_order(tasks: Sequence[Task]) -> int:
    """max(order) + 1, or 0 for an empty collection."""
    if not tasks:
        return 0
    return max(t.order for t in tasks) + 1


def append_task(tasks: Sequence[Task], task: Task) -> list[Task]:
    """Append `task` at the end; its order is always reassigned."""
    return [*tasks, replace(task, order=next_order(tasks))]


def merge_task(tasks: Sequence[Task], task_id: str, updates: dict) -> list[Task]:
    """Apply `updates` to the task with `task_id`; unknown ids leave the list as-is."""
    return [replace(t, **updates) if t.id == task_id else t for t in tasks]


def remove_task(tasks: Sequence[Task], task_id: str) -> list[Task]:
    return [t for t in tasks if t.id != task_id]


def remove_completed(tasks: Sequence[Task]) -> list[Task]:
    """Drop completed tasks; survivors keep their order values (gaps allowed)."""
    return [t for t in tasks if not t.is_completed]


def apply_id_sequence(tasks: Sequence[Task], ids: Iterable[str]) -> list[Task]:
    """
    Renumber `tasks` to follow `ids`.

    - each known id, in sequence order, gets order = its position
    - ids that match no task are skipped, as are repeats
    - tasks missing from `ids` are appended after, sorted by their prior
      order, continuing the index sequence

    The result always carries dense orders 0..N-1.
    """
    by_id = {t.id: t for t in tasks}
    out: list[Task] = []

    for task_id in ids:
        task = by_id.pop(task_id, None)
        if task is None:
            continue
        out.append(replace(task, order=len(out)))

    for task in sort_by_order(by_id.values()):
        out.append(replace(task, order=len(out)))

    return out


def move_task(tasks: Sequence[Task], active_id: str, over_id: str) -> list[Task] | None:
    """
    Move `active_id` to the position currently held by `over_id`.

    Positions are looked up in the full list, so callers working from a
    filtered view still move the task relative to the whole collection.
    Everything else keeps its relative order and orders are renumbered from 0.

    Returns None when either id is unknown.
    """
    ids = [t.id for t in tasks]
    try:
        old_index = ids.index(active_id)
        new_index = ids.index(over_id)
    except ValueError:
        return None

    moved = list(tasks)
    moved.insert(new_index, moved.pop(old_index))
    return [replace(t, order=i) for i, t in enumerate(moved)]


def filter_tasks(tasks: Iterable[Task], task_filter: TaskFilter) -> list[Task]:
    if task_filter == TaskFilter.ACTIVE:
        return [t for t in tasks if not t.is_completed]
    if task_filter == TaskFilter.COMPLETED:
        return [t for t in tasks if t.is_completed]
    return list(tasks)
