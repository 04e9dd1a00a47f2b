# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from zentask.server.app import create_app
from zentask.storage.kv_store import InMemoryKeyValueStore
from zentask.tasks.task_store import TaskStore

from .fakes import FakeTaskApi, FlaskTaskApi


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the Flask app.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="zentask-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        storage_backend="sqlite",
        tasks_db_path=tmp_path / "data" / "tasks.sqlite3",
        collection_key="tasks",
        host="127.0.0.1",
        port=8787,
        api_url="http://testserver",
        http_timeout_seconds=2.0,
    )


@pytest.fixture()
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def task_store(kv: InMemoryKeyValueStore) -> TaskStore:
    return TaskStore(kv)


@pytest.fixture()
def app(task_store: TaskStore, settings: SimpleNamespace):
    app = create_app(task_store, settings=settings)
    app.config.update(TESTING=True)
    return app


@pytest.fixture()
def http(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture()
def fake_api(task_store: TaskStore) -> FakeTaskApi:
    return FakeTaskApi(task_store)


@pytest.fixture()
def flask_api(http) -> FlaskTaskApi:
    return FlaskTaskApi(http)
