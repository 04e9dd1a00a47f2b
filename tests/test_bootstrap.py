# tests/test_bootstrap.py

from __future__ import annotations

from dataclasses import replace
from types import SimpleNamespace

import pytest

from zentask.cli.bootstrap import create_client_store, create_server_app, create_task_store
from zentask.config import Settings
from zentask.storage.kv_store import InMemoryKeyValueStore, SqliteKeyValueStore


def test_sqlite_task_store_creates_local_dirs(settings: SimpleNamespace) -> None:
    store = create_task_store(settings=settings)
    assert settings.data_dir.is_dir()
    assert isinstance(store._kv, SqliteKeyValueStore)
    assert store.list_tasks() == []
    assert settings.tasks_db_path.exists()


def test_memory_backend(settings: SimpleNamespace) -> None:
    settings.storage_backend = "memory"
    store = create_task_store(settings=settings)
    assert isinstance(store._kv, InMemoryKeyValueStore)
    assert not settings.tasks_db_path.exists()


def test_server_app_serves_configured_store(settings: SimpleNamespace) -> None:
    http = create_server_app(settings=settings).test_client()
    resp = http.post("/api/tasks", json={"id": "a", "content": "A"})
    assert resp.get_json()["data"][0]["order"] == 0


@pytest.mark.asyncio
async def test_client_store_uses_override_url(settings: SimpleNamespace) -> None:
    api, store = create_client_store(settings=settings, api_url="http://elsewhere:9000/")
    try:
        assert store.state.tasks == ()
        assert str(api._client.base_url).startswith("http://elsewhere:9000")
    finally:
        await api.aclose()


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("ZENTASK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("ZENTASK_PORT", "9999")
    monkeypatch.setenv("ZENTASK_STORAGE", "bogus")
    monkeypatch.delenv("ZENTASK_API_URL", raising=False)
    monkeypatch.delenv("ZENTASK_TASKS_DB_PATH", raising=False)

    s = Settings.from_env()
    assert s.port == 9999
    assert s.storage_backend == "sqlite"
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"
    assert s.api_url.endswith(":9999")

    # frozen, but replace() still works for overrides
    assert replace(s, port=1).port == 1
