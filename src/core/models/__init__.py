__all__ = (
    "Task",
    "TaskFields",
    "TaskPatch",
    "apply_patch",
    "User",
    "TokenClaims",
    "IssuedToken",
    "ChangeEvent",
    "TaskCreated",
    "TaskUpdated",
    "TaskDeleted",
    "ClientMessage",
    "RefreshJwt",
    "ErrorMessage",
)

from .task import Task, TaskFields, TaskPatch, apply_patch
from .user import User
from .token import TokenClaims, IssuedToken
from .events import (
    ChangeEvent,
    TaskCreated,
    TaskUpdated,
    TaskDeleted,
    ClientMessage,
    RefreshJwt,
    ErrorMessage,
)
