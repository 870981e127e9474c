"""Repository for per-user tasks and their id index."""

from __future__ import annotations

import logging
from uuid import UUID, uuid4

from pydantic import ValidationError
from redis import asyncio as redis_async

from .base import BaseRepository, as_str
from ..exceptions import TaskNotFoundError
from ..models.task import Task, TaskFields, TaskPatch, apply_patch
from ..utils.decorators import translate_store_errors

logger = logging.getLogger(__name__)


def task_key(owner: str, task_id: UUID | str) -> str:
    return f"task:{owner}:{task_id}"


def task_index_key(owner: str) -> str:
    return f"task_ids:{owner}"


class TaskRepository(BaseRepository[Task]):
    """
    CRUD over ``task:<owner>:<id>`` records plus the ``task_ids:<owner>`` set.

    Record and index writes are two independent commands. A crash between
    them can leave a dangling index entry, which ``list`` skips.
    """

    def __init__(self, redis_client: redis_async.Redis):
        super().__init__(Task, redis_client)

    @translate_store_errors("task.list")
    async def list(self, owner: str) -> list[Task]:
        task_ids = sorted(as_str(raw) for raw in await self.redis.smembers(task_index_key(owner)))
        tasks: list[Task] = []
        for task_id in task_ids:
            try:
                task = await self._load(task_key(owner, task_id))
            except ValidationError as exc:
                logger.warning("Skipping unreadable task record | owner=%s | task_id=%s | error=%s", owner, task_id, exc)
                continue
            if task is None:
                logger.warning("Task index references missing record | owner=%s | task_id=%s", owner, task_id)
                continue
            tasks.append(task)
        return tasks

    @translate_store_errors("task.create")
    async def create(self, owner: str, fields: TaskFields) -> Task:
        task = Task(id=uuid4(), **fields.model_dump())
        await self._save(task_key(owner, task.id), task)
        await self.redis.sadd(task_index_key(owner), str(task.id))
        logger.debug("Task stored | owner=%s | task_id=%s", owner, task.id)
        return task

    @translate_store_errors("task.get")
    async def get(self, owner: str, task_id: UUID) -> Task:
        task = await self._load(task_key(owner, task_id))
        if task is None:
            raise TaskNotFoundError()
        return task

    @translate_store_errors("task.update")
    async def update(self, owner: str, task_id: UUID, patch: TaskPatch) -> Task:
        current = await self._load(task_key(owner, task_id))
        if current is None:
            raise TaskNotFoundError()
        merged = apply_patch(current, patch)
        await self._save(task_key(owner, task_id), merged)
        logger.debug("Task updated | owner=%s | task_id=%s | fields=%s", owner, task_id, sorted(patch.changes()))
        return merged

    @translate_store_errors("task.delete")
    async def delete(self, owner: str, task_id: UUID) -> None:
        key = task_key(owner, task_id)
        if not await self._exists(key):
            raise TaskNotFoundError()
        await self.redis.delete(key)
        await self.redis.srem(task_index_key(owner), str(task_id))
        logger.debug("Task deleted | owner=%s | task_id=%s", owner, task_id)
