"""Base repository pattern for data access abstraction (Clean Architecture)."""

import logging
from typing import Generic, Optional, Type, TypeVar

from pydantic import BaseModel
from redis import asyncio as redis_async

T = TypeVar("T", bound=BaseModel)
logger = logging.getLogger(__name__)


def as_str(value: str | bytes) -> str:
    """Normalize a Redis reply regardless of the client's decode_responses flag."""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


class BaseRepository(Generic[T]):
    """
    Generic repository over a shared key-value store.

    Records are pydantic models stored as JSON strings. Subclasses own their
    key scheme; this class only handles (de)serialization.
    """

    def __init__(self, model: Type[T], redis_client: redis_async.Redis):
        self.model = model
        self.redis = redis_client

    async def _load(self, key: str) -> Optional[T]:
        raw = await self.redis.get(key)
        if raw is None:
            return None
        return self.model.model_validate_json(raw)

    async def _save(self, key: str, entity: T, *, only_if_absent: bool = False) -> bool:
        """Write entity; returns False when ``only_if_absent`` and the key existed."""
        result = await self.redis.set(key, entity.model_dump_json(), nx=only_if_absent)
        return bool(result)

    async def _exists(self, key: str) -> bool:
        return await self.redis.exists(key) > 0
