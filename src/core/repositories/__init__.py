"""Repository pattern implementations for clean data access."""

from .base import BaseRepository
from .task import TaskRepository
from .user import UserRepository

__all__ = [
    "BaseRepository",
    "TaskRepository",
    "UserRepository",
]
