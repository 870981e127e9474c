"""
FastAPI dependencies for dependency injection.

Provides easy integration between FastAPI's dependency system
and the application's DI container.
"""

from typing import Optional

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .container import Container, get_container
from .models.token import TokenClaims
from .repositories.task import TaskRepository
from .use_cases.authenticate import AuthenticateUseCase
from .use_cases.create_task import CreateTaskUseCase
from .use_cases.delete_task import DeleteTaskUseCase
from .use_cases.login import LoginUseCase
from .use_cases.logout import LogoutUseCase
from .use_cases.register_user import RegisterUserUseCase
from .use_cases.update_task import UpdateTaskUseCase

_bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================================
# Token resolution
# ============================================================================


def get_request_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    jwt: Optional[str] = Query(default=None, description="Session token (alternative to Authorization header)"),
) -> Optional[str]:
    """Token from ``Authorization: Bearer`` or the ``jwt`` query parameter."""
    if credentials and credentials.scheme.lower() == "bearer" and credentials.credentials.strip():
        return credentials.credentials.strip()
    if jwt and jwt.strip():
        return jwt.strip()
    return None


async def get_current_claims(
    token: Optional[str] = Depends(get_request_token),
    container: Container = Depends(get_container),
) -> TokenClaims:
    """
    Verified claims for requests without a JSON body.

    Usage in endpoint:
        async def my_endpoint(claims: TokenClaims = Depends(get_current_claims)):
            owner = claims.subject
    """
    return await container.authenticate_use_case().execute(token)


# ============================================================================
# Repository Dependencies
# ============================================================================


def get_task_repository(container: Container = Depends(get_container)) -> TaskRepository:
    """Provide TaskRepository bound to the shared store."""
    return container.task_repository()


# ============================================================================
# Use Case Dependencies
# ============================================================================


def get_authenticate_use_case(container: Container = Depends(get_container)) -> AuthenticateUseCase:
    return container.authenticate_use_case()


def get_register_user_use_case(container: Container = Depends(get_container)) -> RegisterUserUseCase:
    return container.register_user_use_case()


def get_login_use_case(container: Container = Depends(get_container)) -> LoginUseCase:
    return container.login_use_case()


def get_logout_use_case(container: Container = Depends(get_container)) -> LogoutUseCase:
    return container.logout_use_case()


def get_create_task_use_case(container: Container = Depends(get_container)) -> CreateTaskUseCase:
    return container.create_task_use_case()


def get_update_task_use_case(container: Container = Depends(get_container)) -> UpdateTaskUseCase:
    return container.update_task_use_case()


def get_delete_task_use_case(container: Container = Depends(get_container)) -> DeleteTaskUseCase:
    return container.delete_task_use_case()
