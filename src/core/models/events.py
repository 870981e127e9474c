"""Change events and live-connection wire messages.

Both directions are closed tagged unions discriminated by ``type`` so that the
connection bridge can dispatch on them exhaustively.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, Field, TypeAdapter

from .task import Task


class TaskCreated(BaseModel):
    type: Literal["task_created"] = "task_created"
    task: Task


class TaskUpdated(BaseModel):
    type: Literal["task_updated"] = "task_updated"
    task: Task


class TaskDeleted(BaseModel):
    type: Literal["task_deleted"] = "task_deleted"
    task_id: UUID


ChangeEvent = Annotated[
    Union[TaskCreated, TaskUpdated, TaskDeleted],
    Field(discriminator="type"),
]


class RefreshJwt(BaseModel):
    type: Literal["refresh_jwt"] = "refresh_jwt"
    jwt: str


# TODO: widen to Annotated[Union[...], Field(discriminator="type")] once a
# second inbound kind exists; pydantic rejects a one-member discriminated union.
ClientMessage = RefreshJwt


class ErrorMessage(BaseModel):
    type: Literal["error"] = "error"
    message: str


change_event_adapter: TypeAdapter[ChangeEvent] = TypeAdapter(ChangeEvent)
client_message_adapter: TypeAdapter[ClientMessage] = TypeAdapter(ClientMessage)


def encode_event(event: TaskCreated | TaskUpdated | TaskDeleted) -> str:
    return event.model_dump_json()


def decode_event(raw: str | bytes) -> TaskCreated | TaskUpdated | TaskDeleted:
    return change_event_adapter.validate_json(raw)


def decode_client_message(raw: str | bytes) -> RefreshJwt:
    return client_message_adapter.validate_json(raw)
