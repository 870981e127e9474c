"""
Pytest configuration and shared fixtures for all tests.

This file provides:
- In-memory Redis (fakeredis) shared between command and pub/sub clients
- A deterministic token authority
- A scripted WebSocket double for the connection bridge
- A fresh DI container
"""

import asyncio
import json
import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncGenerator, Optional

import pytest

# Prepopulate required env vars for settings before imports
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-with-at-least-32-bytes")
os.environ.setdefault("REDIS_URL", "redis://127.0.0.1:6379/15")

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis
from faker import Faker

from core.config import settings
from core.container import Container, reset_container
from core.services.notification_bus import NotificationBus
from core.services.revocation_ledger import RevocationLedger
from core.services.token_authority import TokenAuthority

fake = Faker()

FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# STORE FIXTURES
# ============================================================================


@pytest.fixture
def fake_server() -> FakeServer:
    """One isolated in-memory Redis server per test."""
    return FakeServer()


@pytest.fixture
async def fake_redis(fake_server) -> AsyncGenerator[FakeRedis, None]:
    client = FakeRedis(server=fake_server, decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
async def fake_pubsub_redis(fake_server) -> AsyncGenerator[FakeRedis, None]:
    """Second client on the same server, used for subscriptions."""
    client = FakeRedis(server=fake_server, decode_responses=True)
    yield client
    await client.aclose()


# ============================================================================
# SERVICE FIXTURES
# ============================================================================


class MutableClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock()


@pytest.fixture
def token_authority(clock) -> TokenAuthority:
    return TokenAuthority(secret_key=settings.jwt.secret_key, lifetime=timedelta(hours=1), clock=clock)


@pytest.fixture
def revocation_ledger(fake_redis, clock) -> RevocationLedger:
    return RevocationLedger(redis_client=fake_redis, clock=clock)


@pytest.fixture
def notification_bus(fake_redis, fake_pubsub_redis) -> NotificationBus:
    return NotificationBus(redis_client=fake_redis, pubsub_client=fake_pubsub_redis)


# ============================================================================
# WEBSOCKET DOUBLE
# ============================================================================


class FakeWebSocket:
    """Scripted stand-in for starlette's WebSocket.

    Inbound frames are queued with ``push_text``/``push_bytes``/``disconnect``;
    outbound text frames are collected in ``sent`` and can be awaited with
    ``next_frame``.
    """

    def __init__(self, fail_send: bool = False):
        self.accepted = False
        self.closed = False
        self.close_code: Optional[int] = None
        self.close_reason: Optional[str] = None
        self.sent: list[str] = []
        self.fail_send = fail_send
        self._inbound: asyncio.Queue = asyncio.Queue()
        self._outbound: asyncio.Queue = asyncio.Queue()

    async def accept(self) -> None:
        self.accepted = True

    async def receive(self) -> dict[str, Any]:
        return await self._inbound.get()

    async def send_text(self, data: str) -> None:
        if self.fail_send:
            raise RuntimeError("Cannot call send once a close message has been sent.")
        self.sent.append(data)
        self._outbound.put_nowait(data)

    async def close(self, code: int = 1000, reason: Optional[str] = None) -> None:
        self.closed = True
        self.close_code = code
        self.close_reason = reason

    def push_text(self, text: str) -> None:
        self._inbound.put_nowait({"type": "websocket.receive", "text": text})

    def push_bytes(self, data: bytes) -> None:
        self._inbound.put_nowait({"type": "websocket.receive", "bytes": data})

    def disconnect(self, code: int = 1000) -> None:
        self._inbound.put_nowait({"type": "websocket.disconnect", "code": code})

    async def next_frame(self, timeout: float = 2.0) -> dict[str, Any]:
        return json.loads(await asyncio.wait_for(self._outbound.get(), timeout))


@pytest.fixture
def fake_websocket() -> FakeWebSocket:
    return FakeWebSocket()


# ============================================================================
# CONTAINER FIXTURES
# ============================================================================


@pytest.fixture
def test_container():
    """Fresh DI container, reset before and after the test."""
    reset_container()
    container = Container()

    yield container

    reset_container()


@pytest.fixture
def username() -> str:
    return fake.user_name()
