"""Response envelope shared by every JSON endpoint."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    code: int
    message: str
    details: Optional[Any] = None


class SimpleMeta(BaseModel):
    error: Optional[ErrorDetail] = None


class ErrorResponse(BaseModel):
    meta: SimpleMeta
    payload: None = None


class EmptyResponse(BaseModel):
    meta: SimpleMeta
    payload: None = None
