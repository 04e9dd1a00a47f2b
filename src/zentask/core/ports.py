# src/zentask/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used across the app.

Server and client code depend on Protocols instead of concrete implementations.
This keeps storage backends and transports swappable and makes testing easier.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from ..tasks.task_models import Task

TaskDict = dict[str, Any]
# Wire-form task: {"id", "content", "isCompleted", "createdAt", "order"}.


class KeyValueStore(Protocol):
    """get/put primitive holding JSON-compatible values under string keys."""

    def get(self, key: str) -> Any | None: ...
    def put(self, key: str, value: Any) -> None: ...


class TaskRepo(Protocol):
    """Server-side task collection; every call returns the full collection."""

    def list_tasks(self) -> list[Task]: ...
    def add_task(self, task: Task) -> list[Task]: ...
    def update_task(self, task_id: str, updates: dict[str, Any]) -> list[Task]: ...
    def delete_task(self, task_id: str) -> list[Task]: ...
    def reorder_tasks(self, ids: Sequence[str]) -> list[Task]: ...
    def clear_completed(self) -> list[Task]: ...


class TaskApi(Protocol):
    """
    Client-side port: remote calls made by the client state store.

    Each call returns the server's canonical list or raises
    TransportError / ApiError.
    """

    async def list_tasks(self) -> list[Task]: ...
    async def add_task(self, task: Task) -> list[Task]: ...
    async def update_task(self, task_id: str, updates: TaskDict) -> list[Task]: ...
    async def delete_task(self, task_id: str) -> list[Task]: ...
    async def reorder_tasks(self, ids: Sequence[str]) -> list[Task]: ...
    async def clear_completed(self) -> list[Task]: ...
