# src/zentask/client/store.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence

from ..core.ports import TaskApi
from ..tasks import ordering
from ..tasks.task_models import Task, TaskFilter, now_ms
from .state import ClientState, with_error, with_filter, with_loading, with_tasks
from .sync import attempt

logger = logging.getLogger(__name__)

Listener = Callable[[ClientState], None]


class TaskClientStore:
    """
    Client state store owned by the UI root.

    Mutating actions are optimistic: the local list changes immediately, the
    request goes out, and then either the server's canonical list replaces the
    local one (server wins) or the pre-action snapshot is restored and the
    error recorded.

    Listeners are called with the new ClientState after every transition.
    """

    def __init__(
        self,
        api: TaskApi,
        *,
        state: ClientState | None = None,
        id_factory: Callable[[], str] | None = None,
        clock_ms: Callable[[], int] | None = None,
    ) -> None:
        self._api = api
        self._state = state or ClientState()
        self._listeners: list[Listener] = []
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))
        self._now_ms = clock_ms or now_ms

    # ---- state plumbing ----

    @property
    def state(self) -> ClientState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, state: ClientState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener failed")

    def _reconcile(self, tasks: Sequence[Task]) -> None:
        self._set(with_tasks(self._state, ordering.sort_by_order(tasks)))

    async def _optimistic(
        self,
        action: str,
        new_tasks: Sequence[Task],
        remote_call,
        failure_message: str,
    ) -> bool:
        snapshot = self._state.tasks

        def apply() -> None:
            self._set(with_tasks(self._state, new_tasks))

        def compensate(message: str) -> None:
            self._set(with_error(with_tasks(self._state, snapshot), message))

        ok = await attempt(
            apply,
            compensate,
            remote_call,
            commit=self._reconcile,
            failure_message=failure_message,
        )
        if not ok:
            logger.info("%s rolled back: %s", action, self._state.error)
        return ok

    # ---- actions ----

    async def fetch_tasks(self) -> bool:
        def apply() -> None:
            self._set(with_error(with_loading(self._state, True), None))

        def compensate(message: str) -> None:
            self._set(with_error(with_loading(self._state, False), message))

        def commit(tasks: list[Task]) -> None:
            self._set(with_tasks(with_loading(self._state, False), ordering.sort_by_order(tasks)))

        return await attempt(
            apply,
            compensate,
            self._api.list_tasks,
            commit=commit,
            failure_message="Failed to fetch tasks",
        )

    async def add_task(self, content: str) -> bool:
        content = (content or "").strip()
        if not content:
            return False

        current = self._state.tasks
        task = Task(
            id=self._new_id(),
            content=content,
            is_completed=False,
            created_at=self._now_ms(),
            order=ordering.next_order(current),
        )
        return await self._optimistic(
            "add_task",
            [*current, task],
            lambda: self._api.add_task(task),
            "Failed to add task",
        )

    async def toggle_task(self, task_id: str) -> bool:
        task = self._state.find(task_id)
        if task is None:
            return False

        flipped = not task.is_completed
        return await self._optimistic(
            "toggle_task",
            ordering.merge_task(self._state.tasks, task_id, {"is_completed": flipped}),
            lambda: self._api.update_task(task_id, {"isCompleted": flipped}),
            "Failed to update task",
        )

    async def edit_task(self, task_id: str, content: str) -> bool:
        content = (content or "").strip()
        if not content or self._state.find(task_id) is None:
            return False

        return await self._optimistic(
            "edit_task",
            ordering.merge_task(self._state.tasks, task_id, {"content": content}),
            lambda: self._api.update_task(task_id, {"content": content}),
            "Failed to update task",
        )

    async def delete_task(self, task_id: str) -> bool:
        return await self._optimistic(
            "delete_task",
            ordering.remove_task(self._state.tasks, task_id),
            lambda: self._api.delete_task(task_id),
            "Failed to delete task",
        )

    async def reorder_tasks(self, active_id: str, over_id: str) -> bool:
        """
        Drop `active_id` onto `over_id`.

        Positions come from the full list, not the filtered view.
        """
        moved = ordering.move_task(self._state.tasks, active_id, over_id)
        if moved is None:
            return False

        ids = [t.id for t in moved]
        return await self._optimistic(
            "reorder_tasks",
            moved,
            lambda: self._api.reorder_tasks(ids),
            "Failed to reorder tasks",
        )

    async def clear_completed(self) -> bool:
        return await self._optimistic(
            "clear_completed",
            ordering.remove_completed(self._state.tasks),
            self._api.clear_completed,
            "Failed to clear completed tasks",
        )

    def set_filter(self, task_filter: TaskFilter | str) -> None:
        self._set(with_filter(self._state, TaskFilter.parse(str(task_filter))))

    def clear_error(self) -> None:
        if self._state.error is not None:
            self._set(with_error(self._state, None))
