"""Delete task use case - remove a task and announce its id."""

import logging
from uuid import UUID

from ..interfaces.repositories import ITaskRepository
from ..interfaces.services import INotificationBus
from ..models.events import TaskDeleted

logger = logging.getLogger(__name__)


class DeleteTaskUseCase:
    def __init__(self, task_repository: ITaskRepository, notification_bus: INotificationBus):
        self.task_repo = task_repository
        self.notification_bus = notification_bus

    async def execute(self, owner: str, task_id: UUID) -> None:
        await self.task_repo.delete(owner, task_id)
        await self.notification_bus.publish(owner, TaskDeleted(task_id=task_id))
        logger.info("Task deleted | owner=%s | task_id=%s", owner, task_id)
