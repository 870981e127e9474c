"""
Dependency Injection Container.

Centralizes all dependency configuration following the Dependency Inversion Principle.
This makes the application more testable and maintainable.
"""

from datetime import timedelta

from dependency_injector import containers, providers
from redis import asyncio as redis_async

from .config import settings

# Services
from .services.token_authority import TokenAuthority
from .services.revocation_ledger import RevocationLedger
from .services.notification_bus import NotificationBus
from .services.password_hasher import BcryptPasswordHasher

# Repositories
from .repositories.task import TaskRepository
from .repositories.user import UserRepository

# Use cases
from .use_cases.authenticate import AuthenticateUseCase
from .use_cases.register_user import RegisterUserUseCase
from .use_cases.login import LoginUseCase
from .use_cases.logout import LogoutUseCase
from .use_cases.create_task import CreateTaskUseCase
from .use_cases.update_task import UpdateTaskUseCase
from .use_cases.delete_task import DeleteTaskUseCase


class Container(containers.DeclarativeContainer):
    """
    Application DI container.

    Provides centralized configuration for all dependencies.
    Services are created as singletons or factories as appropriate.
    """


    # Infrastructure - Singleton
    # Bounded pool: when exhausted, callers wait for a free connection instead of failing.
    redis_pool = providers.Singleton(
        redis_async.BlockingConnectionPool.from_url,
        settings.redis.url,
        max_connections=settings.redis.max_connections,
        timeout=settings.redis.pool_timeout,
        decode_responses=True,
    )

    redis_client = providers.Singleton(
        redis_async.Redis,
        connection_pool=redis_pool,
    )

    # Live subscriptions hold a connection each; keep them off the command pool.
    pubsub_redis = providers.Singleton(
        redis_async.Redis.from_url,
        settings.redis.url,
        decode_responses=True,
    )

    # Services - Singleton (stateless or read-only after startup)
    token_authority = providers.Singleton(
        TokenAuthority,
        secret_key=settings.jwt.secret_key,
        algorithm=settings.jwt.algorithm,
        lifetime=timedelta(minutes=settings.jwt.expire_minutes),
    )

    revocation_ledger = providers.Singleton(
        RevocationLedger,
        redis_client=redis_client,
    )

    notification_bus = providers.Singleton(
        NotificationBus,
        redis_client=redis_client,
        pubsub_client=pubsub_redis,
    )

    password_hasher = providers.Singleton(BcryptPasswordHasher)

    # Repository factories
    user_repository = providers.Factory(UserRepository, redis_client=redis_client)
    task_repository = providers.Factory(TaskRepository, redis_client=redis_client)

    # Use cases - Factory (new instance per request)
    authenticate_use_case = providers.Factory(
        AuthenticateUseCase,
        token_authority=token_authority,
        revocation_ledger=revocation_ledger,
    )

    register_user_use_case = providers.Factory(
        RegisterUserUseCase,
        user_repository=user_repository,
        password_hasher=password_hasher,
        token_authority=token_authority,
    )

    login_use_case = providers.Factory(
        LoginUseCase,
        user_repository=user_repository,
        password_hasher=password_hasher,
        token_authority=token_authority,
        revocation_ledger=revocation_ledger,
    )

    logout_use_case = providers.Factory(
        LogoutUseCase,
        token_authority=token_authority,
        revocation_ledger=revocation_ledger,
    )

    create_task_use_case = providers.Factory(
        CreateTaskUseCase,
        task_repository=task_repository,
        notification_bus=notification_bus,
    )

    update_task_use_case = providers.Factory(
        UpdateTaskUseCase,
        task_repository=task_repository,
        notification_bus=notification_bus,
    )

    delete_task_use_case = providers.Factory(
        DeleteTaskUseCase,
        task_repository=task_repository,
        notification_bus=notification_bus,
    )


# Global container instance
container = Container()


def get_container() -> Container:
    """
    Get the global container instance.

    Used as a FastAPI dependency:
        container: Container = Depends(get_container)
    """
    return container


def reset_container():
    """
    Reset container for testing.

    Clears all singletons and allows fresh initialization.
    """
    container.reset_singletons()


async def close_container_resources() -> None:
    """Release Redis connections held by the container's singletons."""
    for provider in (container.pubsub_redis, container.redis_client):
        client = provider()
        aclose = getattr(client, "aclose", None)
        if callable(aclose):
            await aclose()
        else:
            await client.close()
    pool = container.redis_pool()
    await pool.disconnect()
