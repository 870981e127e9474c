import logging

from fastapi import APIRouter, Depends

from core.container import Container, get_container
from core.exceptions import StoreUnavailableError
from core.utils.decorators import STORE_UNAVAILABLE_ERRORS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health(container: Container = Depends(get_container)):
    try:
        await container.redis_client().ping()
    except STORE_UNAVAILABLE_ERRORS as exc:
        logger.warning("Health check failed | redis=%s", exc)
        raise StoreUnavailableError(details={"status": "degraded", "redis": "unavailable"}) from exc
    return {"status": "ok", "redis": "ok"}
