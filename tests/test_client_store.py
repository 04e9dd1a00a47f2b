# tests/test_client_store.py

from __future__ import annotations

import asyncio
import itertools

import pytest

from zentask.client.state import ClientState
from zentask.client.store import TaskClientStore
from zentask.core.errors import ApiError, TransportError
from zentask.tasks.task_models import Task, TaskFilter

from .fakes import FakeTaskApi


def _store(api: FakeTaskApi) -> TaskClientStore:
    counter = itertools.count(1)
    return TaskClientStore(api, id_factory=lambda: f"t{next(counter)}", clock_ms=lambda: 1_000)


async def _seed(store: TaskClientStore, *contents: str) -> None:
    for content in contents:
        assert await store.add_task(content)


@pytest.mark.asyncio
async def test_fetch_sorts_and_clears_loading(fake_api: FakeTaskApi) -> None:
    fake_api.store.add_task(Task(id="x", content="X"))
    fake_api.store.add_task(Task(id="y", content="Y"))
    fake_api.store.reorder_tasks(["y", "x"])
    store = _store(fake_api)

    seen: list[bool] = []
    store.subscribe(lambda s: seen.append(s.is_loading))

    assert await store.fetch_tasks()
    assert [t.id for t in store.state.tasks] == ["y", "x"]
    assert store.state.is_loading is False
    assert seen == [True, False]


@pytest.mark.asyncio
async def test_fetch_failure_keeps_tasks_and_records_error(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    await _seed(store, "A")
    before = store.state.tasks

    fake_api.fail_with = TransportError("boom")
    assert not await store.fetch_tasks()
    assert store.state.tasks == before
    assert store.state.error == "Network error"
    assert store.state.is_loading is False


@pytest.mark.asyncio
async def test_add_is_applied_before_server_answers(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    fake_api.gate = asyncio.Event()

    pending = asyncio.create_task(store.add_task("Buy milk"))
    await asyncio.sleep(0)

    assert [t.content for t in store.state.tasks] == ["Buy milk"]
    assert fake_api.store.list_tasks() == []

    fake_api.gate.set()
    assert await pending
    assert store.state.tasks == tuple(fake_api.store.list_tasks())


@pytest.mark.asyncio
async def test_add_blank_content_is_ignored(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    assert not await store.add_task("   ")
    assert fake_api.calls == []


@pytest.mark.asyncio
async def test_add_failure_rolls_back_to_exact_snapshot(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    await _seed(store, "Walk dog")
    snapshot = store.state.tasks

    fake_api.fail_with = ApiError("")
    assert not await store.add_task("Buy milk")

    assert store.state.tasks == snapshot
    assert len(store.state.tasks) == 1
    assert all(t.content != "Buy milk" for t in store.state.tasks)
    assert store.state.error == "Failed to add task"


@pytest.mark.asyncio
async def test_network_failure_message(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    await _seed(store, "A")

    fake_api.fail_with = TransportError("connection refused")
    assert not await store.delete_task("t1")
    assert [t.id for t in store.state.tasks] == ["t1"]
    assert store.state.error == "Network error"


@pytest.mark.asyncio
async def test_server_error_message_wins_over_default(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    await _seed(store, "A")

    fake_api.fail_with = ApiError("Storage failure", status_code=500)
    assert not await store.toggle_task("t1")
    assert store.state.tasks[0].is_completed is False
    assert store.state.error == "Storage failure"


@pytest.mark.asyncio
async def test_success_replaces_local_list_with_server_list(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    await _seed(store, "A")
    # Another client added a task directly on the server.
    fake_api.store.add_task(Task(id="other", content="From elsewhere"))

    assert await store.add_task("B")
    assert [t.id for t in store.state.tasks] == ["t1", "other", "t2"]
    assert [t.order for t in store.state.tasks] == [0, 1, 2]


@pytest.mark.asyncio
async def test_toggle_twice_restores_original(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    await _seed(store, "A", "B")
    original = store.state.tasks

    assert await store.toggle_task("t2")
    assert store.state.find("t2").is_completed is True
    assert await store.toggle_task("t2")

    assert store.state.tasks == original
    assert fake_api.calls[-1] == ("update_task", ("t2", {"isCompleted": False}))


@pytest.mark.asyncio
async def test_unknown_ids_are_local_noops(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    await _seed(store, "A")
    calls = len(fake_api.calls)

    assert not await store.toggle_task("nope")
    assert not await store.edit_task("nope", "x")
    assert not await store.reorder_tasks("t1", "nope")
    assert len(fake_api.calls) == calls


@pytest.mark.asyncio
async def test_edit_task(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    await _seed(store, "A")

    assert await store.edit_task("t1", "  A, but better ")
    assert store.state.tasks[0].content == "A, but better"
    assert fake_api.store.list_tasks()[0].content == "A, but better"


@pytest.mark.asyncio
async def test_reorder_within_filtered_view_uses_full_list(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    await _seed(store, "A", "B", "C", "D")
    assert await store.toggle_task("t2")
    store.set_filter(TaskFilter.ACTIVE)
    assert [t.id for t in store.state.visible_tasks] == ["t1", "t3", "t4"]

    # drag D onto A while B (completed) is hidden
    assert await store.reorder_tasks("t4", "t1")

    assert [t.id for t in store.state.tasks] == ["t4", "t1", "t2", "t3"]
    assert [t.order for t in store.state.tasks] == [0, 1, 2, 3]
    assert fake_api.calls[-1] == ("reorder_tasks", (["t4", "t1", "t2", "t3"],))
    assert [t.id for t in store.state.visible_tasks] == ["t4", "t1", "t3"]


@pytest.mark.asyncio
async def test_reorder_failure_restores_previous_order(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    await _seed(store, "A", "B", "C")
    snapshot = store.state.tasks

    fake_api.fail_with = ApiError("")
    assert not await store.reorder_tasks("t1", "t3")
    assert store.state.tasks == snapshot
    assert store.state.error == "Failed to reorder tasks"


@pytest.mark.asyncio
async def test_clear_completed(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    await _seed(store, "A", "B", "C")
    await store.toggle_task("t1")

    assert await store.clear_completed()
    assert [(t.id, t.order) for t in store.state.tasks] == [("t2", 1), ("t3", 2)]


@pytest.mark.asyncio
async def test_clear_completed_failure_rolls_back(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    await _seed(store, "A", "B")
    await store.toggle_task("t1")
    snapshot = store.state.tasks

    fake_api.fail_with = TransportError("timeout")
    assert not await store.clear_completed()
    assert store.state.tasks == snapshot


@pytest.mark.asyncio
async def test_filter_never_touches_collection(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    await _seed(store, "A", "B")
    await store.toggle_task("t1")
    tasks = store.state.tasks
    calls = len(fake_api.calls)

    store.set_filter("completed")
    assert [t.id for t in store.state.visible_tasks] == ["t1"]
    store.set_filter(TaskFilter.ALL)
    assert store.state.tasks == tasks
    assert store.state.active_count == 1
    assert len(fake_api.calls) == calls

    with pytest.raises(ValueError):
        store.set_filter("weird")


@pytest.mark.asyncio
async def test_listeners_and_unsubscribe(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    states: list[ClientState] = []
    unsubscribe = store.subscribe(states.append)

    await store.add_task("A")
    assert len(states) == 2  # optimistic apply + server reconcile

    unsubscribe()
    await store.add_task("B")
    assert len(states) == 2


@pytest.mark.asyncio
async def test_clear_error(fake_api: FakeTaskApi) -> None:
    store = _store(fake_api)
    fake_api.fail_with = TransportError("x")
    await store.add_task("A")
    assert store.state.error == "Network error"

    store.clear_error()
    assert store.state.error is None
