"""Per-user publish/subscribe channel for task change events."""

from __future__ import annotations

import logging
from typing import AsyncIterator, Optional

from pydantic import ValidationError
from redis import asyncio as redis_async

from ..exceptions import NotificationDecodeError, NotificationStreamClosed
from ..models.events import ChangeEvent, decode_event, encode_event
from ..utils.decorators import STORE_UNAVAILABLE_ERRORS, translate_store_errors

logger = logging.getLogger(__name__)


def notification_channel(owner: str) -> str:
    return f"notifications:{owner}"


class Subscription:
    """
    One live subscription to an owner's channel.

    Owns a dedicated pub/sub connection. Use as an async context manager;
    ``events()`` yields ChangeEvents in publication order until ``close()``
    is called (normal end) or the store connection drops
    (NotificationStreamClosed).
    """

    def __init__(self, redis_client: redis_async.Redis, owner: str):
        self.owner = owner
        self.channel = notification_channel(owner)
        self._pubsub = redis_client.pubsub(ignore_subscribe_messages=True)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @translate_store_errors("notifications.subscribe")
    async def open(self) -> "Subscription":
        await self._pubsub.subscribe(self.channel)
        logger.debug("Subscribed | channel=%s", self.channel)
        return self

    async def __aenter__(self) -> "Subscription":
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.close()
        return False

    async def events(self) -> AsyncIterator[ChangeEvent]:
        try:
            async for message in self._pubsub.listen():
                if message.get("type") != "message":
                    continue
                try:
                    yield decode_event(message["data"])
                except ValidationError as exc:
                    raise NotificationDecodeError(f"Failed to parse notification: {exc}") from exc
        except STORE_UNAVAILABLE_ERRORS as exc:
            if self._closed:
                return
            raise NotificationStreamClosed(f"Notification stream closed: {exc}") from exc
        if not self._closed:
            raise NotificationStreamClosed("Notification stream closed")

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._pubsub.unsubscribe(self.channel)
        except STORE_UNAVAILABLE_ERRORS as exc:
            logger.debug("Unsubscribe failed during close | channel=%s | error=%s", self.channel, exc)
        try:
            aclose = getattr(self._pubsub, "aclose", None)
            if callable(aclose):
                await aclose()
            else:
                await self._pubsub.reset()
        except STORE_UNAVAILABLE_ERRORS as exc:
            logger.warning("Subscription release failed | channel=%s | error=%s", self.channel, exc)
            return
        logger.debug("Subscription closed | channel=%s", self.channel)


class NotificationBus:
    """
    Best-effort fan-out of ChangeEvents over Redis pub/sub.

    No persistence and no backlog: a subscriber that connects after an event
    was published never sees it. Every concurrent subscription for the same
    owner receives every event.

    Subscriptions hold a connection for as long as the live connection stays
    open, so they can be pointed at a separate client to keep them out of the
    bounded command pool.
    """

    def __init__(self, redis_client: redis_async.Redis, pubsub_client: Optional[redis_async.Redis] = None):
        self._redis = redis_client
        self._pubsub_client = pubsub_client or redis_client

    @translate_store_errors("notifications.publish")
    async def publish(self, owner: str, event: ChangeEvent) -> int:
        receivers = await self._redis.publish(notification_channel(owner), encode_event(event))
        logger.debug("Change event published | owner=%s | type=%s | receivers=%s", owner, event.type, receivers)
        return receivers

    def subscribe(self, owner: str) -> Subscription:
        return Subscription(self._pubsub_client, owner)
