# src/zentask/client/api_client.py

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import httpx

from ..core.errors import ApiError, ContractViolation, TransportError
from ..core.ports import TaskDict
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


def _make_timeout_obj(timeout_s: float) -> httpx.Timeout:
    connect_s = min(5.0, float(timeout_s))
    return httpx.Timeout(timeout_s, connect=connect_s, pool=connect_s)


def decode_task_list(payload: Any, *, status_code: int | None = None) -> list[Task]:
    """
    Unwrap a {"success", "data"?, "error"?} envelope holding a task list.

    - success false -> ApiError (message may be empty; callers pick a default)
    - anything that is not a well-formed envelope -> TransportError
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("success"), bool):
        raise TransportError("Malformed response envelope")

    if not payload["success"]:
        error = payload.get("error")
        raise ApiError(error if isinstance(error, str) else "", status_code=status_code)

    data = payload.get("data")
    if not isinstance(data, list):
        raise TransportError("Response envelope carries no task list")
    try:
        tasks = [Task.from_dict(item) for item in data]
    except ContractViolation as e:
        raise TransportError(f"Malformed task in response: {e}") from e
    return sorted(tasks, key=lambda t: t.order)


class HttpTaskApi:
    """
    Async client for the task API (httpx).

    Every method returns the server's canonical task list, sorted by order.
    Network problems and undecodable replies raise TransportError;
    {"success": false} replies raise ApiError. No retries.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self._base_url,
            timeout=_make_timeout_obj(timeout_seconds),
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpTaskApi:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _call(self, method: str, path: str, body: Any | None = None) -> list[Task]:
        try:
            if body is None:
                resp = await self._client.request(method, path)
            else:
                resp = await self._client.request(method, path, json=body)
        except httpx.HTTPError as e:
            logger.info("HTTP %s %s failed: %s", method, path, e.__class__.__name__)
            raise TransportError(f"Network error: {e.__class__.__name__}") from e

        try:
            payload = resp.json()
        except ValueError as e:
            logger.info("HTTP %s %s returned non-JSON (status=%s)", method, path, resp.status_code)
            raise TransportError(f"Undecodable response (HTTP {resp.status_code})") from e

        tasks = decode_task_list(payload, status_code=resp.status_code)
        logger.debug("HTTP %s %s -> %d tasks", method, path, len(tasks))
        return tasks

    async def list_tasks(self) -> list[Task]:
        return await self._call("GET", "/api/tasks")

    async def add_task(self, task: Task) -> list[Task]:
        return await self._call("POST", "/api/tasks", task.to_dict())

    async def update_task(self, task_id: str, updates: TaskDict) -> list[Task]:
        return await self._call("PUT", f"/api/tasks/{quote(task_id, safe='')}", updates)

    async def delete_task(self, task_id: str) -> list[Task]:
        return await self._call("DELETE", f"/api/tasks/{quote(task_id, safe='')}")

    async def reorder_tasks(self, ids: Sequence[str]) -> list[Task]:
        return await self._call("POST", "/api/tasks/reorder", {"ids": list(ids)})

    async def clear_completed(self) -> list[Task]:
        return await self._call("POST", "/api/tasks/clear-completed")
