"""Redis-backed ledger of revoked session tokens."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from redis import asyncio as redis_async

from ..utils.decorators import token_fingerprint, translate_store_errors
from ..utils.time import now_utc, seconds_until

logger = logging.getLogger(__name__)

REVOKED_SENTINEL = "1"


def revocation_key(token: str) -> str:
    return f"blacklist:{token}"


class RevocationLedger:
    """
    Records revoked tokens under ``blacklist:<token>``.

    Each entry expires exactly when the token it revokes would have, so the
    ledger never grows past the set of live tokens. Store failures raise
    StoreUnavailableError and are never read as "not revoked".
    """

    def __init__(self, redis_client: redis_async.Redis, clock: Callable[[], datetime] = now_utc):
        self._redis = redis_client
        self._clock = clock

    @translate_store_errors("revocation.check")
    async def is_revoked(self, token: str) -> bool:
        return await self._redis.exists(revocation_key(token)) > 0

    @translate_store_errors("revocation.revoke")
    async def revoke(self, token: str, expires_at: datetime) -> bool:
        """Revoke ``token`` until ``expires_at``; returns False if it is already dead."""
        ttl = seconds_until(expires_at, self._clock())
        if ttl <= 0:
            logger.debug("Skipping revocation of expired token | token=%s", token_fingerprint(token))
            return False
        await self._redis.set(revocation_key(token), REVOKED_SENTINEL, ex=ttl)
        logger.info("Token revoked | token=%s | ttl=%s", token_fingerprint(token), ttl)
        return True
