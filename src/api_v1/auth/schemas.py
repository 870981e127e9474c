"""Pydantic schemas for the session endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from api_v1.schemas import SimpleMeta

USERNAME_PATTERN = r"^[A-Za-z0-9_.\-]{1,64}$"
# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def _check_password(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class RegisterRequest(BaseModel):
    username: str = Field(..., pattern=USERNAME_PATTERN, description="Unique account name")
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def _password_length(cls, value: str) -> str:
        return _check_password(value)


class LoginRequest(BaseModel):
    """Either ``username`` + ``password`` or ``jwt`` (token rotation)."""

    username: Optional[str] = None
    password: Optional[str] = None
    jwt: Optional[str] = Field(default=None, description="Token to exchange for a fresh one")

    @field_validator("password")
    @classmethod
    def _password_length(cls, value: Optional[str]) -> Optional[str]:
        return _check_password(value) if value is not None else value


class LogoutRequest(BaseModel):
    jwt: Optional[str] = None


class SessionDTO(BaseModel):
    jwt: str
    username: str


class SessionResponse(BaseModel):
    meta: SimpleMeta
    payload: SessionDTO
