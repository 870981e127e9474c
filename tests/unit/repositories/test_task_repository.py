"""Unit tests for TaskRepository."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from core.exceptions import StoreUnavailableError, TaskNotFoundError
from core.models.task import TaskFields, TaskPatch
from core.repositories.task import TaskRepository, task_index_key, task_key


@pytest.fixture
def repo(fake_redis) -> TaskRepository:
    return TaskRepository(redis_client=fake_redis)


def _fields(**overrides) -> TaskFields:
    data = {"category": "home", "text": "vacuum", "due": 1714564800}
    data.update(overrides)
    return TaskFields(**data)


@pytest.mark.unit
class TestTaskRepository:
    async def test_create_stores_record_and_index(self, repo, fake_redis):
        task = await repo.create("alice", _fields())

        assert task.completed is False
        assert await fake_redis.exists(task_key("alice", task.id)) == 1
        assert await fake_redis.smembers(task_index_key("alice")) == {str(task.id)}

    async def test_create_always_assigns_new_id(self, repo):
        first = await repo.create("alice", _fields())
        second = await repo.create("alice", _fields())

        assert first.id != second.id

    async def test_list_returns_tasks_sorted_by_id(self, repo):
        created = [await repo.create("alice", _fields(text=f"task {n}")) for n in range(3)]

        tasks = await repo.list("alice")

        assert [t.id for t in tasks] == sorted((t.id for t in created), key=str)

    async def test_list_empty_for_unknown_owner(self, repo):
        assert await repo.list("nobody") == []

    async def test_list_skips_dangling_index_entries(self, repo, fake_redis):
        task = await repo.create("alice", _fields())
        await fake_redis.sadd(task_index_key("alice"), str(uuid4()))

        assert await repo.list("alice") == [task]

    async def test_list_skips_unreadable_records(self, repo, fake_redis):
        task = await repo.create("alice", _fields())
        broken_id = str(uuid4())
        await fake_redis.set(task_key("alice", broken_id), "{broken")
        await fake_redis.sadd(task_index_key("alice"), broken_id)

        assert await repo.list("alice") == [task]

    async def test_get_returns_stored_task(self, repo):
        task = await repo.create("alice", _fields())

        assert await repo.get("alice", task.id) == task

    async def test_get_is_scoped_to_owner(self, repo):
        task = await repo.create("alice", _fields())

        with pytest.raises(TaskNotFoundError):
            await repo.get("bob", task.id)

    async def test_update_merges_only_sent_fields(self, repo):
        task = await repo.create("alice", _fields())

        updated = await repo.update("alice", task.id, TaskPatch.model_validate({"completed": True}))

        assert updated.completed is True
        assert updated.text == "vacuum"
        assert updated.due == 1714564800
        assert await repo.get("alice", task.id) == updated

    async def test_update_null_due_keeps_stored_value(self, repo):
        task = await repo.create("alice", _fields())

        updated = await repo.update("alice", task.id, TaskPatch.model_validate({"completed": True, "due": None}))

        assert updated.completed is True
        assert updated.due == 1714564800
        assert await repo.get("alice", task.id) == updated

    async def test_update_missing_task(self, repo):
        with pytest.raises(TaskNotFoundError):
            await repo.update("alice", uuid4(), TaskPatch.model_validate({"completed": True}))

    async def test_delete_removes_record_and_index_entry(self, repo, fake_redis):
        task = await repo.create("alice", _fields())

        await repo.delete("alice", task.id)

        assert await fake_redis.exists(task_key("alice", task.id)) == 0
        assert await repo.list("alice") == []

    async def test_delete_missing_task(self, repo):
        with pytest.raises(TaskNotFoundError):
            await repo.delete("alice", uuid4())

    async def test_store_failure_is_translated(self):
        redis = AsyncMock()
        redis.smembers.side_effect = RedisConnectionError("Connection refused")

        with pytest.raises(StoreUnavailableError):
            await TaskRepository(redis_client=redis).list("alice")
