"""Create task use case - store a task and announce it."""

import logging

from ..interfaces.repositories import ITaskRepository
from ..interfaces.services import INotificationBus
from ..models.events import TaskCreated
from ..models.task import Task, TaskFields

logger = logging.getLogger(__name__)


class CreateTaskUseCase:
    """Not idempotent: every call stores a new task under a fresh id."""

    def __init__(self, task_repository: ITaskRepository, notification_bus: INotificationBus):
        self.task_repo = task_repository
        self.notification_bus = notification_bus

    async def execute(self, owner: str, fields: TaskFields) -> Task:
        task = await self.task_repo.create(owner, fields)
        await self.notification_bus.publish(owner, TaskCreated(task=task))
        logger.info("Task created | owner=%s | task_id=%s | category=%s", owner, task.id, task.category)
        return task
