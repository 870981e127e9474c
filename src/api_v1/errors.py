"""Map domain errors and validation failures onto the JSON error envelope."""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.exceptions import InfrastructureError, ServiceError

from .schemas import ErrorDetail, ErrorResponse, SimpleMeta

logger = logging.getLogger(__name__)


def error_response(status_code: int, code: int, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(meta=SimpleMeta(error=ErrorDetail(code=code, message=message, details=details)))
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def service_error_handler(request: Request, exc: ServiceError):
    if isinstance(exc, InfrastructureError):
        logger.error("Request failed on infrastructure | path=%s | error=%s", request.url.path, exc.message)
    else:
        logger.info(
            "Request rejected | path=%s | status=%s | code=%s | message=%s",
            request.url.path,
            exc.status_code,
            exc.code,
            exc.message,
        )
    return error_response(exc.status_code, exc.code, exc.message, exc.details)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.debug("Validation error | path=%s | errors=%s", request.url.path, exc.errors())
    return error_response(422, 4000, "Validation error", jsonable_encoder(exc.errors()))
