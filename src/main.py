from contextlib import asynccontextmanager
import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from api_v1 import router as router_v1
from api_v1.errors import service_error_handler, validation_error_handler
from core.config import settings
from core.exceptions import ServiceError
from core.logging_config import configure_logging, trace_id_ctx

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Application starting up...")
    logger.info(
        "CORS configuration | origins=%s | allow_credentials=%s",
        settings.cors_allowed_origins,
        settings.cors_allow_credentials,
    )
    logger.info(
        "Store configuration | max_connections=%s | pool_timeout=%s",
        settings.redis.max_connections,
        settings.redis.pool_timeout,
    )

    yield

    logger.info("Application shutting down...")
    from core.container import close_container_resources

    await close_container_resources()
    logger.info("Redis connections closed")


app = FastAPI(lifespan=lifespan, title="Task list service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router=router_v1, prefix=settings.api_v1_prefix)
app.add_exception_handler(ServiceError, service_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)


@app.middleware("http")
async def assign_trace_id(request: Request, call_next):
    # Assign/propagate a trace id for each request
    incoming_trace = request.headers.get("X-Trace-Id")
    trace_id = incoming_trace or str(uuid.uuid4())
    token = trace_id_ctx.set(trace_id)
    try:
        response = await call_next(request)
    finally:
        trace_id_ctx.reset(token)
    # Include trace id in response for clients to propagate
    response.headers["X-Trace-Id"] = trace_id
    return response


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.host, port=settings.port)
