"""Repository for user accounts."""

from __future__ import annotations

from typing import Optional

from redis import asyncio as redis_async

from .base import BaseRepository
from ..models.user import User
from ..utils.decorators import translate_store_errors


def user_key(username: str) -> str:
    return f"user:{username}"


class UserRepository(BaseRepository[User]):
    """Data access layer for ``user:<username>`` records."""

    def __init__(self, redis_client: redis_async.Redis):
        super().__init__(User, redis_client)

    @translate_store_errors("user.get")
    async def get(self, username: str) -> Optional[User]:
        return await self._load(user_key(username))

    @translate_store_errors("user.exists")
    async def exists(self, username: str) -> bool:
        return await self._exists(user_key(username))

    @translate_store_errors("user.create")
    async def create(self, user: User) -> bool:
        """Store a new user; False if the username is already taken."""
        return await self._save(user_key(user.username), user, only_if_absent=True)
