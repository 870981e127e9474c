"""Task record as stored under ``task:<username>:<id>``."""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class Task(BaseModel):
    """A single to-do item.

    The owner is implicit in the storage key and is never serialized.
    ``due`` is a UNIX timestamp in seconds.
    """

    model_config = ConfigDict(extra="ignore")

    id: UUID = Field(default_factory=uuid4)
    category: str
    text: str
    completed: bool = False
    due: Optional[int] = None


class TaskFields(BaseModel):
    """Client-supplied fields for a new task."""

    category: str
    text: str
    completed: bool = False
    due: Optional[int] = None


class TaskPatch(BaseModel):
    """Merge-patch for an existing task.

    Only fields the client actually sent are applied; see ``changes()``.
    """

    category: Optional[str] = None
    text: Optional[str] = None
    completed: Optional[bool] = None
    due: Optional[int] = None

    def changes(self) -> dict:
        # a null leaves the stored value untouched
        return {key: value for key, value in self.model_dump(exclude_unset=True).items() if value is not None}


def apply_patch(task: Task, patch: TaskPatch) -> Task:
    return task.model_copy(update=patch.changes())
