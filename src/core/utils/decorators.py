"""Common decorators for error handling and logging (DRY principle)."""

import hashlib
import logging
from functools import wraps
from typing import Any, Callable

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from ..exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

STORE_UNAVAILABLE_ERRORS = (RedisConnectionError, RedisTimeoutError, OSError)


def translate_store_errors(operation: str):
    """
    Decorator mapping Redis connectivity failures to StoreUnavailableError.

    Keeps every store-facing component fail-closed: callers never see a raw
    redis exception and never mistake an outage for an empty result.

    Args:
        operation: Short name used in the log line and error message
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)
            except STORE_UNAVAILABLE_ERRORS as exc:
                logger.error("Store unavailable | operation=%s | error=%s", operation, exc)
                raise StoreUnavailableError(f"Shared store unavailable during {operation}") from exc

        return wrapper

    return decorator


def token_fingerprint(token: str) -> str:
    """Short, non-reversible token identifier safe to put in logs."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]
