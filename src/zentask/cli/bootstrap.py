# src/zentask/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations (storage backend, TaskStore, Flask app,
  HTTP client, client store).
"""

from __future__ import annotations

import logging

from ..client.api_client import HttpTaskApi
from ..client.store import TaskClientStore
from ..config import get_settings
from ..core.ports import KeyValueStore
from ..server.app import create_app
from ..storage.kv_store import InMemoryKeyValueStore, SqliteKeyValueStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    if settings.storage_backend == "sqlite":
        settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_kv_store(settings) -> KeyValueStore:
    if settings.storage_backend == "memory":
        logger.warning("Using in-memory storage: tasks are lost on exit.")
        return InMemoryKeyValueStore()
    return SqliteKeyValueStore(settings.tasks_db_path)


def create_task_store(*, settings=None) -> TaskStore:
    """
    Build the server-side TaskStore from settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)
    return TaskStore(create_kv_store(settings), collection_key=settings.collection_key)


def create_server_app(*, settings=None):
    if settings is None:
        settings = get_settings()
    return create_app(create_task_store(settings=settings), settings=settings)


def create_client_store(*, settings=None, api_url: str | None = None) -> tuple[HttpTaskApi, TaskClientStore]:
    """
    Build the HTTP client and the client store that owns it.

    The caller is responsible for closing the returned HttpTaskApi.
    """
    if settings is None:
        settings = get_settings()

    api = HttpTaskApi(
        api_url or settings.api_url,
        timeout_seconds=settings.http_timeout_seconds,
    )
    return api, TaskClientStore(api)
