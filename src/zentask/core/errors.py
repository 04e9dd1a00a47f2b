# src/zentask/core/errors.py

"""
Exception hierarchy shared by the server and the client.

Server side:
- StorageError: key-value backend failed to read or write
- ContractViolation: caller sent malformed input (HTTP 400)
- DuplicateTaskError: add() with an id that already exists (HTTP 409)

Client side:
- TransportError: request never reached the server or the reply is undecodable
- ApiError: server answered with {"success": false, "error": ...}

Operations on a missing task id are not errors (silent no-op).
"""

from __future__ import annotations


class ZenTaskError(Exception):
    """Base class for all application errors."""


class StorageError(ZenTaskError):
    pass


class ContractViolation(ZenTaskError):
    status_code = 400


class DuplicateTaskError(ContractViolation):
    status_code = 409

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task already exists: {task_id}")
        self.task_id = task_id


class TransportError(ZenTaskError):
    pass


class ApiError(ZenTaskError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
