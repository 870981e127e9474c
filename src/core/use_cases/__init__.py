"""Use case layer for business logic (Clean Architecture)."""

from .authenticate import AuthenticateUseCase
from .register_user import RegisterUserUseCase
from .login import LoginUseCase
from .logout import LogoutUseCase
from .create_task import CreateTaskUseCase
from .update_task import UpdateTaskUseCase
from .delete_task import DeleteTaskUseCase

__all__ = [
    "AuthenticateUseCase",
    "RegisterUserUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "CreateTaskUseCase",
    "UpdateTaskUseCase",
    "DeleteTaskUseCase",
]
