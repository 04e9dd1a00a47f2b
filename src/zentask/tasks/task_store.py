# src/zentask/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from ..core.errors import ContractViolation, DuplicateTaskError, StorageError
from ..core.ports import KeyValueStore
from . import ordering
from .task_models import EDITABLE_FIELDS, Task

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_KEY = "tasks"


class TaskStore:
    """
    Ordered task collection persisted as one record in a key-value store.

    Every operation is a single read-modify-write:
    - read the whole collection under `collection_key`
    - apply a pure transform (see ordering.py)
    - put the whole result back and return it

    There is no locking: two concurrent writers can clobber each other
    (single interactive user).
    """

    def __init__(self, kv: KeyValueStore, *, collection_key: str = DEFAULT_COLLECTION_KEY) -> None:
        self._kv = kv
        self._key = collection_key
        logger.info("TaskStore ready key=%s backend=%s", self._key, type(kv).__name__)

    # ---- low-level helpers ----

    def _read(self) -> list[Task] | None:
        raw = self._kv.get(self._key)
        if raw is None:
            return None
        if not isinstance(raw, list):
            raise StorageError(f"Record {self._key!r} is not a task list")
        try:
            return [Task.from_dict(item) for item in raw]
        except ContractViolation as e:
            raise StorageError(f"Record {self._key!r} holds a malformed task: {e}") from e

    def _write(self, tasks: list[Task]) -> None:
        self._kv.put(self._key, [t.to_dict() for t in tasks])

    def _mutate(self, op: str, transform: Callable[[list[Task]], list[Task]]) -> list[Task]:
        current = self._read() or []
        updated = transform(current)
        self._write(updated)
        logger.debug("TaskStore %s: %d -> %d tasks", op, len(current), len(updated))
        return updated

    # ---- public API ----

    def list_tasks(self) -> list[Task]:
        """Return the collection, creating an empty one on first access."""
        tasks = self._read()
        if tasks is None:
            tasks = []
            self._write(tasks)
            logger.info("TaskStore initialized empty collection key=%s", self._key)
        return tasks

    def add_task(self, task: Task) -> list[Task]:
        """
        Append `task` as the last item.

        The caller's order is ignored: the store assigns max(order) + 1.
        """

        def transform(tasks: list[Task]) -> list[Task]:
            if any(t.id == task.id for t in tasks):
                raise DuplicateTaskError(task.id)
            return ordering.append_task(tasks, task)

        return self._mutate("add", transform)

    def update_task(self, task_id: str, updates: dict[str, Any]) -> list[Task]:
        """Merge `updates` into the matching task; unknown id is a no-op."""
        if "id" in updates:
            raise ContractViolation("Task id is immutable")
        unknown = set(updates) - set(EDITABLE_FIELDS.values())
        if unknown:
            raise ContractViolation(f"Fields cannot be updated: {sorted(unknown)}")
        return self._mutate("update", lambda tasks: ordering.merge_task(tasks, task_id, updates))

    def delete_task(self, task_id: str) -> list[Task]:
        return self._mutate("delete", lambda tasks: ordering.remove_task(tasks, task_id))

    def reorder_tasks(self, ids: Sequence[str]) -> list[Task]:
        """
        Renumber the collection to follow `ids`.

        Existing tasks missing from `ids` are appended after the listed ones,
        keeping their previous relative order.
        """
        return self._mutate("reorder", lambda tasks: ordering.apply_id_sequence(tasks, ids))

    def clear_completed(self) -> list[Task]:
        return self._mutate("clear_completed", ordering.remove_completed)
