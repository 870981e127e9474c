from typing import Any, Dict

import pytest
from dependency_injector import providers
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis
from httpx import ASGITransport, AsyncClient

from core.container import get_container, reset_container
from core.logging_config import configure_logging
from core.services.password_hasher import BcryptPasswordHasher
from main import app


def override_store(container, redis_client, pubsub_client) -> None:
    """Point every store-backed provider at the given clients."""
    container.redis_client.override(providers.Object(redis_client))
    container.pubsub_redis.override(providers.Object(pubsub_client))
    # cheap bcrypt cost keeps the suite fast
    container.password_hasher.override(providers.Object(BcryptPasswordHasher(rounds=4)))


def reset_store(container) -> None:
    container.redis_client.reset_override()
    container.pubsub_redis.reset_override()
    container.password_hasher.reset_override()


@pytest.fixture
async def integration_environment():
    """Run the real app against an in-memory store shared by all container services."""
    server = FakeServer()
    redis_client = FakeRedis(server=server, decode_responses=True)
    pubsub_client = FakeRedis(server=server, decode_responses=True)

    reset_container()
    container = get_container()
    override_store(container, redis_client, pubsub_client)

    try:
        configure_logging()
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield {
                "client": client,
                "container": container,
                "redis": redis_client,
                "server": server,
            }
    finally:
        reset_store(container)
        reset_container()
        await redis_client.aclose()
        await pubsub_client.aclose()


@pytest.fixture
def register_user(integration_environment):
    """Register a user through the API and return its session payload."""

    async def _register(username: str, password: str = "s3cret-pass") -> Dict[str, Any]:
        response = await integration_environment["client"].post(
            "/api/v1/auth/register", json={"username": username, "password": password}
        )
        assert response.status_code == 201, response.text
        return response.json()["payload"]

    return _register
