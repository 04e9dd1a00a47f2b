# src/zentask/client/state.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from ..tasks.ordering import filter_tasks
from ..tasks.task_models import Task, TaskFilter


@dataclass(frozen=True, slots=True)
class ClientState:
    """
    Client-side mirror of the task collection.

    A non-authoritative cache: it is replaced wholesale by every successful
    server response. Instances are immutable; the reducers below return new ones.
    """

    tasks: tuple[Task, ...] = ()
    is_loading: bool = False
    error: str | None = None
    filter: TaskFilter = TaskFilter.ALL

    @property
    def visible_tasks(self) -> list[Task]:
        """Tasks shown under the active filter (view only, never persisted)."""
        return filter_tasks(self.tasks, self.filter)

    @property
    def active_count(self) -> int:
        return sum(1 for t in self.tasks if not t.is_completed)

    def find(self, task_id: str) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None


def with_tasks(state: ClientState, tasks: Iterable[Task]) -> ClientState:
    return replace(state, tasks=tuple(tasks))


def with_error(state: ClientState, error: str | None) -> ClientState:
    return replace(state, error=error)


def with_loading(state: ClientState, is_loading: bool) -> ClientState:
    return replace(state, is_loading=is_loading)


def with_filter(state: ClientState, task_filter: TaskFilter) -> ClientState:
    return replace(state, filter=task_filter)
