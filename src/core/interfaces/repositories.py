"""
Repository protocol definitions to decouple use cases from the Redis-backed implementations.
"""

from __future__ import annotations

from typing import Optional, Protocol, TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from core.models.task import Task, TaskFields, TaskPatch
    from core.models.user import User


class IUserRepository(Protocol):
    async def get(self, username: str) -> Optional["User"]:
        ...

    async def exists(self, username: str) -> bool:
        ...

    async def create(self, user: "User") -> bool:
        ...


class ITaskRepository(Protocol):
    async def list(self, owner: str) -> list["Task"]:
        ...

    async def create(self, owner: str, fields: "TaskFields") -> "Task":
        ...

    async def get(self, owner: str, task_id: UUID) -> "Task":
        ...

    async def update(self, owner: str, task_id: UUID, patch: "TaskPatch") -> "Task":
        ...

    async def delete(self, owner: str, task_id: UUID) -> None:
        ...
