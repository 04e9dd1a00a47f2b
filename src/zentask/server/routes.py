# src/zentask/server/routes.py

"""
Task API routes.

One endpoint per TaskStore operation. Handlers only extract parameters,
call the store and wrap the returned collection in the envelope:
{"success": true, "data": [...]}.

Error mapping lives in app.py.
"""

from __future__ import annotations

import logging
from typing import Any

from flask import Blueprint, current_app, jsonify, request

from .. import __version__
from ..core.errors import ContractViolation
from ..core.ports import TaskRepo
from ..tasks.task_models import ApiResponse, Task, parse_task_updates

logger = logging.getLogger(__name__)

tasks_bp = Blueprint("tasks", __name__, url_prefix="/api")

TASK_STORE_EXTENSION = "zentask.task_store"


def _store() -> TaskRepo:
    return current_app.extensions[TASK_STORE_EXTENSION]


def _json_body() -> Any:
    body = request.get_json(silent=True)
    if body is None:
        raise ContractViolation("Request body must be JSON")
    return body


def _tasks_response(tasks: list[Task]):
    return jsonify(ApiResponse.ok([t.to_dict() for t in tasks]).to_dict())


@tasks_bp.get("/health")
def health():
    name = current_app.config.get("ZENTASK_APP_NAME", "zentask")
    return jsonify(ApiResponse.ok({"name": name, "version": __version__}).to_dict())


@tasks_bp.get("/tasks")
def list_tasks():
    return _tasks_response(_store().list_tasks())


@tasks_bp.post("/tasks")
def add_task():
    task = Task.from_dict(_json_body())
    tasks = _store().add_task(task)
    logger.info("Task added id=%s total=%d", task.id, len(tasks))
    return _tasks_response(tasks)


@tasks_bp.put("/tasks/<path:task_id>")
def update_task(task_id: str):
    updates = parse_task_updates(_json_body())
    tasks = _store().update_task(task_id, updates)
    logger.info("Task updated id=%s fields=%s", task_id, sorted(updates))
    return _tasks_response(tasks)


@tasks_bp.delete("/tasks/<path:task_id>")
def delete_task(task_id: str):
    tasks = _store().delete_task(task_id)
    logger.info("Task deleted id=%s total=%d", task_id, len(tasks))
    return _tasks_response(tasks)


@tasks_bp.post("/tasks/reorder")
def reorder_tasks():
    body = _json_body()
    ids = body.get("ids") if isinstance(body, dict) else None
    if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
        raise ContractViolation("Field 'ids' must be a list of task ids")
    tasks = _store().reorder_tasks(ids)
    logger.info("Tasks reordered requested=%d total=%d", len(ids), len(tasks))
    return _tasks_response(tasks)


@tasks_bp.post("/tasks/clear-completed")
def clear_completed():
    tasks = _store().clear_completed()
    logger.info("Completed tasks cleared remaining=%d", len(tasks))
    return _tasks_response(tasks)
