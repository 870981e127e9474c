"""
Service interfaces/protocols for dependency injection.

This module defines abstract protocols that services must implement,
following the Dependency Inversion Principle (DIP).
"""

from .repositories import ITaskRepository, IUserRepository
from .services import (
    INotificationBus,
    IPasswordHasher,
    IRevocationLedger,
    ISubscription,
    ITokenAuthority,
)

__all__ = [
    "ITaskRepository",
    "IUserRepository",
    "INotificationBus",
    "IPasswordHasher",
    "IRevocationLedger",
    "ISubscription",
    "ITokenAuthority",
]
