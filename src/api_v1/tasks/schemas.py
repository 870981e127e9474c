"""Pydantic schemas for the task endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from api_v1.schemas import SimpleMeta
from core.models.task import Task, TaskFields, TaskPatch


class TaskCreateRequest(TaskFields):
    jwt: Optional[str] = Field(default=None, description="Session token (alternative to Authorization header)")

    def to_fields(self) -> TaskFields:
        return TaskFields.model_validate(self.model_dump(exclude={"jwt"}))


class TaskUpdateRequest(TaskPatch):
    jwt: Optional[str] = Field(default=None, description="Session token (alternative to Authorization header)")

    @model_validator(mode="after")
    def at_least_one_field(self) -> "TaskUpdateRequest":
        if not self.model_fields_set - {"jwt"}:
            raise ValueError("At least one of category, text, completed, due must be provided")
        return self

    def to_patch(self) -> TaskPatch:
        # keep only explicitly sent fields so the merge-patch can tell "absent" from "null"
        return TaskPatch.model_validate(self.model_dump(exclude_unset=True, exclude={"jwt"}))


class TokenBody(BaseModel):
    jwt: Optional[str] = None


class TaskResponse(BaseModel):
    meta: SimpleMeta
    payload: Task


class TaskListResponse(BaseModel):
    meta: SimpleMeta
    payload: list[Task]
