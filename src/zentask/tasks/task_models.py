# src/zentask/tasks/task_models.py

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, TypeVar

from ..core.errors import ContractViolation

T = TypeVar("T")

# Fields a client may change through update(); id, order and createdAt are owned by the store.
EDITABLE_FIELDS = {"content": "content", "isCompleted": "is_completed"}


def now_ms() -> int:
    return int(time.time() * 1000)


class TaskFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None) -> TaskFilter:
        if not raw:
            return cls.ALL
        try:
            return cls(raw.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown filter: {raw!r} (expected all, active or completed)") from None


@dataclass(frozen=True, slots=True)
class Task:
    """
    One to-do item.

    Attribute names are snake_case; the wire and persisted form is camelCase
    (see to_dict / from_dict).
    """

    id: str
    content: str
    is_completed: bool = False
    created_at: int = field(default_factory=now_ms)  # epoch milliseconds
    order: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "isCompleted": self.is_completed,
            "createdAt": self.created_at,
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> Task:
        """
        Build a Task from its wire form.

        `id` and `content` are required; `isCompleted` and `createdAt` fall back
        to defaults; `order` defaults to 0 but must be an integer when present.
        """
        if not isinstance(raw, dict):
            raise ContractViolation("Task must be a JSON object")

        task_id = raw.get("id")
        if not isinstance(task_id, str) or not task_id.strip():
            raise ContractViolation("Task field 'id' is required")

        content = raw.get("content")
        if not isinstance(content, str):
            raise ContractViolation("Task field 'content' is required")

        is_completed = raw.get("isCompleted", False)
        if not isinstance(is_completed, bool):
            raise ContractViolation("Task field 'isCompleted' must be a boolean")

        created_at = raw.get("createdAt")
        if created_at is None:
            created_at = now_ms()
        elif (
            isinstance(created_at, bool)
            or not isinstance(created_at, (int, float))
            or not math.isfinite(created_at)
        ):
            raise ContractViolation("Task field 'createdAt' must be a finite number")

        order = raw.get("order", 0)
        if isinstance(order, bool) or not isinstance(order, int):
            raise ContractViolation("Task field 'order' must be an integer")

        return cls(
            id=task_id,
            content=content,
            is_completed=is_completed,
            created_at=int(created_at),
            order=order,
        )


def parse_task_updates(raw: Any) -> dict[str, Any]:
    """
    Translate a partial wire-form update into Task attribute names.

    Only content and isCompleted are editable. Unknown or store-owned fields are
    rejected instead of being dropped.
    """
    if not isinstance(raw, dict):
        raise ContractViolation("Update body must be a JSON object")

    updates: dict[str, Any] = {}
    for key, value in raw.items():
        attr = EDITABLE_FIELDS.get(key)
        if attr is None:
            raise ContractViolation(f"Field {key!r} cannot be updated")
        if attr == "content" and not isinstance(value, str):
            raise ContractViolation("Task field 'content' must be a string")
        if attr == "is_completed" and not isinstance(value, bool):
            raise ContractViolation("Task field 'isCompleted' must be a boolean")
        updates[attr] = value
    return updates


@dataclass(frozen=True, slots=True)
class ApiResponse(Generic[T]):
    """Uniform envelope: {"success": bool, "data"?: T, "error"?: str}."""

    success: bool
    data: T | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: T) -> ApiResponse[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> ApiResponse[T]:
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            out["data"] = self.data
        if self.error is not None:
            out["error"] = self.error
        return out
