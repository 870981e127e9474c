"""Update task use case - merge-patch a task and announce the result."""

import logging
from uuid import UUID

from ..interfaces.repositories import ITaskRepository
from ..interfaces.services import INotificationBus
from ..models.events import TaskUpdated
from ..models.task import Task, TaskPatch

logger = logging.getLogger(__name__)


class UpdateTaskUseCase:
    def __init__(self, task_repository: ITaskRepository, notification_bus: INotificationBus):
        self.task_repo = task_repository
        self.notification_bus = notification_bus

    async def execute(self, owner: str, task_id: UUID, patch: TaskPatch) -> Task:
        task = await self.task_repo.update(owner, task_id, patch)
        await self.notification_bus.publish(owner, TaskUpdated(task=task))
        logger.info("Task updated | owner=%s | task_id=%s", owner, task_id)
        return task
